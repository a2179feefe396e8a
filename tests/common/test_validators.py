from __future__ import annotations

import pytest

from workforce_hub.common.validators import optional_text, require_non_empty
from workforce_hub.common.web import parse_date, parse_datetime, parse_text
from workforce_hub.core.exceptions import ValidationError


def test_optional_text_strips_and_blanks_to_none():
    assert optional_text("  hi ") == "hi"
    assert optional_text("   ") is None
    assert optional_text(None) is None


def test_require_non_empty():
    assert require_non_empty(" annual ", "Leave type") == "annual"
    with pytest.raises(ValidationError, match="Leave type is required"):
        require_non_empty("  ", "Leave type")


@pytest.mark.parametrize("value", [12, 1.5, ["a"], {"a": 1}, True])
def test_non_string_text_is_a_validation_error(value):
    with pytest.raises(ValidationError, match="must be text"):
        optional_text(value, "Reason")
    with pytest.raises(ValidationError, match="must be text"):
        require_non_empty(value, "Title")
    with pytest.raises(ValidationError, match="must be text"):
        parse_text(value, "Title")


def test_date_parsers_reject_non_strings():
    with pytest.raises(ValidationError, match="Date must be text"):
        parse_date(20240610)
    with pytest.raises(ValidationError, match="Date/time must be text"):
        parse_datetime(1718000000)
    assert parse_date(None) is None
    assert parse_datetime("") is None
