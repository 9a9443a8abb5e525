from __future__ import annotations

import re
from typing import Any


_PATTERNS = [
    (re.compile(r"(Authorization\s*:\s*(?:Bearer\s+)?)[^\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(token\s*[:=])\s*[^\s]+", re.IGNORECASE), r"\1 [REDACTED]"),
    (re.compile(r"(secret\s*[:=])\s*[^\s]+", re.IGNORECASE), r"\1 [REDACTED]"),
]


def redact_text(value: str, secrets: tuple[str, ...] = ()) -> str:
    """Strip credentials from registry output before it is logged or reported.

    Args:
        value (str): Raw text, typically cargo stderr.
        secrets (tuple[str, ...]): Literal values that must never appear.
    """
    redacted = value
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, "[REDACTED]")
    for pattern, repl in _PATTERNS:
        redacted = pattern.sub(repl, redacted)
    return redacted


def redact_data(value: Any, secrets: tuple[str, ...] = ()) -> Any:
    """Recursively redact strings inside a summary payload."""
    if isinstance(value, str):
        return redact_text(value, secrets)
    if isinstance(value, list):
        return [redact_data(item, secrets) for item in value]
    if isinstance(value, dict):
        return {key: redact_data(val, secrets) for key, val in value.items()}
    return value
