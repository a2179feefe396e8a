from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_action(failure_message: str):
    """Map domain errors to JSON responses.

    Anything else is a failed remote operation: logged, reported generically.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ConflictError as e:
                return jsonify({"error": str(e)}), 409
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except AuthorizationError as e:
                return jsonify({"error": str(e)}), 403
            except Exception:
                logger.exception("%s (endpoint=%s)", failure_message, view.__name__)
                return jsonify({"error": failure_message}), 500

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_text(value, field_name: str) -> str:
    """JSON text field; missing or null becomes an empty string."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def parse_date(value: Optional[str]) -> Optional[date]:
    v = parse_text(value, "Date").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    v = parse_text(value, "Date/time").strip()
    if not v:
        return None
    try:
        return parse_iso_datetime(v)
    except ValueError:
        raise ValidationError("Invalid date/time (YYYY-MM-DDTHH:MM)")


def parse_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
