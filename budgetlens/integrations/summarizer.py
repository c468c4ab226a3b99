"""Remote summarizer API interactions."""

import requests

from budgetlens.config import AnalysisSettings
from budgetlens.domain.analysis import Summarizer


def request_summary(settings: AnalysisSettings, prompt: str) -> str:
    """Send a prompt to the summarizer endpoint.

    The endpoint receives ``{"prompt": ...}`` and may answer with either a
    JSON body carrying the text under "response" (or "content"), or with the
    text itself.

    Args:
        settings: Endpoint, timeout, and optional bearer token.
        prompt: Prompt text.

    Returns:
        Response text to be parsed by the caller.

    Raises:
        requests.RequestException: If the request fails.
    """
    headers = {"Accept": "application/json"}
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"

    response = requests.post(
        settings.endpoint,
        json={"prompt": prompt},
        headers=headers,
        timeout=settings.timeout,
    )
    response.raise_for_status()

    try:
        body = response.json()
    except ValueError:
        return response.text

    if isinstance(body, dict):
        for key in ("response", "content"):
            if isinstance(body.get(key), str):
                return body[key]
    return response.text


def make_summarizer(settings: AnalysisSettings) -> Summarizer:
    """Bind settings into a prompt -> text callable."""

    def summarize(prompt: str) -> str:
        return request_summary(settings, prompt)

    return summarize
