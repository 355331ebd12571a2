"""Small helpers shared by the JSON blueprints."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from flask import jsonify
from flask_wtf import FlaskForm


def form_error_response(form: FlaskForm) -> Tuple[Any, int]:
    errors: Dict[str, Any] = {name: list(messages) for name, messages in form.errors.items()}
    first = next((messages[0] for messages in errors.values() if messages), "Invalid request.")
    return jsonify({"error": first, "errors": errors}), 400


def optional_bool(payload: Mapping[str, Any], key: str, default: Optional[bool] = None) -> Optional[bool]:
    """Read a JSON flag that may be absent, ``null``, a bool or a "true"/"false" string."""

    if key not in payload:
        return default
    value = payload[key]
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    return default
