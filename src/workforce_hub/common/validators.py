from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def _text(value, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip()


def require_non_empty(value: Optional[str], field_name: str) -> str:
    v = _text(value, field_name)
    if not v:
        raise ValidationError(f"{field_name} is required")
    return v


def optional_text(value: Optional[str], field_name: str = "Text") -> Optional[str]:
    return _text(value, field_name) or None
