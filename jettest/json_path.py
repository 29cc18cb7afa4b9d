"""Value extraction from JSON documents using GJSON path syntax."""

import json
import logging
from decimal import Decimal
from typing import Any

import gjson

log = logging.getLogger(__name__)


def render(value: Any) -> str:
    """Render a JSON value as the string compared against expectations.

    Strings are returned bare, null renders empty and containers render as
    compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def get_value(body: str | bytes, path: str) -> str:
    """Return the string value found at ``path`` in a JSON body.

    Missing paths, an empty path and bodies that are not valid JSON all yield
    an empty string.
    """
    if not path:
        return ""
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        log.debug("Response body is not usable JSON: %s", type(exc).__name__)
        return ""

    try:
        value = gjson.get(document, path)
    except gjson.GJSONError as exc:
        log.debug("No value at %r: %s", path, exc)
        return ""

    try:
        return render(value)
    except RecursionError:
        return ""
