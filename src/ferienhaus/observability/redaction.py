"""Redaction helpers for safe logging. Credentials and e-mail addresses never reach logs."""

import re
from typing import Any

_EMAIL_PATTERN = re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
_SECRET_KEYS = frozenset({"password", "token", "access_token", "authorization", "secret"})

_REDACTED = "[REDACTED]"


def mask_email(value: str) -> str:
    """Keep the first character of the local part and the domain: m***@example.com."""
    return _EMAIL_PATTERN.sub(lambda m: f"{m.group(1)[0]}***@{m.group(2)}", value)


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return mask_email(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple, set)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging. Secret-named keys are dropped to [REDACTED]."""
    return {
        k: _REDACTED if k.lower() in _SECRET_KEYS else redact_value(v)
        for k, v in kwargs.items()
    }


def redact_secrets(fields: dict[str, Any]) -> dict[str, Any]:
    """Copy of a log field dict with secret-named values replaced. Other values are kept as is."""
    return {
        k: _REDACTED if k.lower() in _SECRET_KEYS else v
        for k, v in fields.items()
    }
