"""Import and export of transactions as JSON or CSV files.

A file that cannot be read as a whole (bad JSON, not an array, missing CSV
header, unsupported extension) raises ImportFormatError and nothing is
imported. Individual malformed records are skipped and counted.
"""

import csv
import io
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from budgetlens.domain.transactions import (
    CSV_HEADER,
    Transaction,
    parse_csv_transaction,
    transaction_from_dict,
    transaction_to_csv_row,
    transaction_to_dict,
)

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv")
REQUIRED_CSV_COLUMNS = ("Date", "Type", "Category", "Amount")


class ImportFormatError(ValueError):
    """Raised when an import file cannot be parsed at all."""


@dataclass
class ImportResult:
    """Transactions read from an import file."""

    transactions: list[Transaction] = field(default_factory=list)
    skipped: int = 0


def parse_json_import(text: str) -> ImportResult:
    """Parse a JSON array of transactions.

    Raises:
        ImportFormatError: If the text is not a JSON array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"File is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ImportFormatError("JSON file must contain an array of transactions")

    result = ImportResult()
    for index, record in enumerate(data):
        try:
            result.transactions.append(transaction_from_dict(record))
        except ValueError as e:
            logger.debug("Skipping JSON record %d: %s", index, e)
            result.skipped += 1
    return result


def parse_csv_import(text: str) -> ImportResult:
    """Parse CSV text with a Date,Type,Category,Amount,Notes header.

    Raises:
        ImportFormatError: If the header is missing required columns.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    try:
        headers = [h.strip() for h in reader.fieldnames or []]
        missing = [col for col in REQUIRED_CSV_COLUMNS if col not in headers]
        if missing:
            raise ImportFormatError(f"CSV file is missing columns: {', '.join(missing)}")
        reader.fieldnames = headers

        result = ImportResult()
        for row in reader:
            txn = parse_csv_transaction(row)
            if txn is None:
                logger.debug("Skipping CSV line %d: %r", reader.line_num, row)
                result.skipped += 1
            else:
                result.transactions.append(txn)
    except csv.Error as e:
        raise ImportFormatError(f"CSV file could not be read: {e}") from e
    return result


def detect_format(path: Path) -> str:
    """Determine the import/export format from a file extension.

    Raises:
        ImportFormatError: If the extension is not .json or .csv.
    """
    fmt = path.suffix.lower().lstrip(".")
    if fmt not in SUPPORTED_FORMATS:
        raise ImportFormatError(f"Unsupported file type '{path.suffix}'. Use .json or .csv")
    return fmt


def read_import_file(path: Path) -> ImportResult:
    """Read transactions from a JSON or CSV file.

    Raises:
        ImportFormatError: If the file cannot be read or parsed.
    """
    fmt = detect_format(path)
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFormatError(f"Could not read {path}: {e}") from e

    if fmt == "json":
        return parse_json_import(text)
    return parse_csv_import(text)


def export_json(transactions: Iterable[Transaction]) -> str:
    """Render transactions as a pretty-printed JSON array."""
    return json.dumps([transaction_to_dict(txn) for txn in transactions], indent=2)


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for txn in transactions:
        writer.writerow(transaction_to_csv_row(txn))
    return buffer.getvalue()


def default_export_name(fmt: str, today: date | None = None) -> str:
    """Default export file name, e.g. budget-tracker-2025-01-15.json."""
    if today is None:
        today = date.today()
    return f"budget-tracker-{today.isoformat()}.{fmt}"


def write_export(path: Path, transactions: Iterable[Transaction], fmt: str | None = None) -> None:
    """Write transactions to a file.

    Args:
        path: Destination file.
        transactions: Transactions to export.
        fmt: "json" or "csv". If None, taken from the file extension.

    Raises:
        ImportFormatError: If the format is unsupported.
        OSError: If the file cannot be written.
    """
    if fmt is None:
        fmt = detect_format(path)
    if fmt not in SUPPORTED_FORMATS:
        raise ImportFormatError(f"Unsupported export format '{fmt}'")

    content = export_json(transactions) if fmt == "json" else export_csv(transactions)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
