"""Recover structured data and clean markup from free-text model responses."""
import json
import re
from typing import Any

from sitesmith.core.errors import MalformedResponseError

FENCE_OPENER = re.compile(r"^```[\w+-]*[ \t]*\n?")
FENCE_CLOSER = re.compile(r"\n?```$")


def extract_json(text: str) -> Any:
    """
    Parse the substring between the first ``{`` and the last ``}`` as JSON.

    Leading and trailing prose (including markdown fences) is ignored. No
    bracket matching is attempted beyond first/last, so:

    - two independent objects in one response (``{"a":1} and {"b":2}``) span
      the prose between them and fail to parse;
    - a stray ``}`` inside trailing prose extends the candidate and fails;
    - braces inside string literals of a single object are fine, because the
      outermost braces still bound the object.

    Raises:
        MalformedResponseError: no brace pair exists, or the candidate is not valid JSON
    """
    if not text:
        raise MalformedResponseError("No JSON object found in model response: response was empty")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponseError("No JSON object found in model response")

    candidate = text[start:end + 1]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Failed to parse JSON from model response: {e}") from e


def clean_markup(text: str) -> str:
    """Strip surrounding markdown code fences and whitespace from raw markup."""
    cleaned = (text or "").strip()
    while True:
        stripped = FENCE_OPENER.sub("", cleaned, count=1)
        stripped = FENCE_CLOSER.sub("", stripped, count=1).strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped
