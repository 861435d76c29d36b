"""Checks for the self-contained page constraint."""
import re
from typing import List

EXTERNAL_REFERENCE_PATTERNS = [
    ("stylesheet link", re.compile(r"<link\b[^>]*\brel\s*=\s*[\"']?stylesheet", re.IGNORECASE)),
    ("external script", re.compile(r"<script\b[^>]*\bsrc\s*=", re.IGNORECASE)),
]


def external_references(html: str) -> List[str]:
    """Return a description for every external asset reference found in ``html``."""
    found = []
    for label, pattern in EXTERNAL_REFERENCE_PATTERNS:
        for match in pattern.finditer(html or ""):
            found.append(f"{label}: {match.group(0)}")
    return found


def is_self_contained(html: str) -> bool:
    return not external_references(html)
