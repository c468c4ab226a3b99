"""Analysis wrapper around the metrics engine.

An analysis is either Enriched (produced by a remote summarizer) or a
LocalFallback (produced by compute_metrics). The summarizer is injected as a
plain callable so this module never does I/O itself; any exception it raises,
or any payload that does not parse, results in the local fallback.
"""

import json
import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from budgetlens.domain.metrics import FinancialMetrics, compute_metrics, metrics_from_dict
from budgetlens.domain.models import Period
from budgetlens.domain.transactions import Transaction, format_amount

logger = logging.getLogger(__name__)

ENRICHED_CONFIDENCE = 0.95
LOCAL_CONFIDENCE = 0.8

Summarizer = Callable[[str], str]

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class AnalysisMetadata:
    processing_time: str
    analysis_date: str
    transactions_analyzed: int


@dataclass(frozen=True)
class FinancialAnalysis:
    """Engine output plus trust level and metadata."""

    result: FinancialMetrics
    confidence: float
    metadata: AnalysisMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": self.result.to_dict(),
            "confidence": self.confidence,
            "metadata": {
                "processing_time": self.metadata.processing_time,
                "analysis_date": self.metadata.analysis_date,
                "transactions_analyzed": self.metadata.transactions_analyzed,
            },
        }


@dataclass(frozen=True)
class Enriched:
    """Analysis produced by the remote summarizer."""

    analysis: FinancialAnalysis


@dataclass(frozen=True)
class LocalFallback:
    """Analysis produced locally, with the reason the summarizer was not used."""

    analysis: FinancialAnalysis
    reason: str


AnalysisOutcome = Enriched | LocalFallback


def extract_json(text: str, default: Any = None) -> Any:
    """Extract a JSON value from model output.

    Tries, in order: the whole text, the contents of fenced code blocks, and
    the first decodable object or array embedded in surrounding prose.

    Args:
        text: Raw response text.
        default: Value returned when nothing decodes.

    Returns:
        Decoded JSON value, or default.
    """
    if not isinstance(text, str):
        return default

    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    for block in _FENCE_RE.findall(stripped):
        try:
            return json.loads(block.strip())
        except json.JSONDecodeError:
            continue

    decoder = json.JSONDecoder()
    for match in re.finditer(r"[\[{]", stripped):
        try:
            value, _ = decoder.raw_decode(stripped, match.start())
            return value
        except json.JSONDecodeError:
            continue

    return default


def build_prompt(transactions: Sequence[Transaction], budget: float) -> str:
    """Summarize transactions and budget as a request to the summarizer.

    Args:
        transactions: Transactions to describe.
        budget: Monthly budget.

    Returns:
        Prompt text asking for a FinancialMetrics JSON object.
    """
    lines = [
        "Analyze the following personal finance data and respond with a single JSON object",
        "with keys summary, budget_analysis, category_breakdown, chart_data,",
        "transactions_processed, valid_transactions and invalid_transactions.",
        "",
        f"Monthly budget: {format_amount(budget)}",
        f"Transactions ({len(transactions)}):",
    ]
    for txn in transactions:
        line = f"- {txn.date.isoformat()} {txn.type.value} {txn.category} {format_amount(txn.amount)}"
        if txn.notes:
            line += f" ({txn.notes})"
        lines.append(line)
    return "\n".join(lines)


def wrap_metrics(
    metrics: FinancialMetrics,
    confidence: float,
    elapsed: float,
    transactions_analyzed: int,
    today: date | None = None,
) -> FinancialAnalysis:
    """Attach confidence and metadata to engine output."""
    if today is None:
        today = date.today()
    return FinancialAnalysis(
        result=metrics,
        confidence=confidence,
        metadata=AnalysisMetadata(
            processing_time=f"{elapsed:.3f}s",
            analysis_date=today.isoformat(),
            transactions_analyzed=transactions_analyzed,
        ),
    )


def analyze(
    transactions: Sequence[Transaction],
    budget: float,
    summarizer: Summarizer | None = None,
    period: Period | None = None,
) -> AnalysisOutcome:
    """Run an analysis, preferring the summarizer and falling back locally.

    Never raises for summarizer failures.

    Args:
        transactions: Transactions to analyze.
        budget: Monthly budget.
        summarizer: Callable taking a prompt and returning response text.
        period: Period label for the local engine.

    Returns:
        Enriched when the summarizer produced a usable payload, otherwise
        LocalFallback.
    """
    started = time.perf_counter()

    if summarizer is None:
        reason = "no summarizer configured"
    else:
        try:
            payload = extract_json(summarizer(build_prompt(transactions, budget)))
            if payload is None:
                raise ValueError("response contained no JSON")
            metrics = metrics_from_dict(payload)
            analysis = wrap_metrics(
                metrics,
                ENRICHED_CONFIDENCE,
                time.perf_counter() - started,
                len(transactions),
            )
            return Enriched(analysis)
        except Exception as e:
            reason = f"summarizer failed: {e}"
            logger.info("Falling back to local analysis: %s", e)

    metrics = compute_metrics(transactions, budget, period)
    analysis = wrap_metrics(metrics, LOCAL_CONFIDENCE, time.perf_counter() - started, len(transactions))
    return LocalFallback(analysis, reason)
