"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def safe_log_email(value: str | None) -> str:
    """Mask the local part of an email address, keeping the domain for triage."""
    text = (value or "").strip()
    local, sep, domain = text.partition("@")
    if not sep or not local:
        return safe_log_identifier(text, prefix="email")
    return f"{local[0]}***@{domain}"
