"""
Request payload validation for the JSON API.

Validators return a new dict holding only the known fields, stripped and
type-checked.  Unknown fields are dropped.  With ``partial=True`` (PATCH
bodies) only the fields present in the payload are checked.
"""
from urllib.parse import urlparse

from flask import request

from cliptube.errors import ValidationError


def get_json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def query_flag(name: str) -> bool:
    return request.args.get(name, "").lower() in ("true", "1", "yes")


def query_list(name: str) -> list[str]:
    """Read ``?name=a,b&name=c`` as ``["a", "b", "c"]``."""
    values = []
    for raw in request.args.getlist(name):
        values.extend(part.strip() for part in raw.split(",") if part.strip())
    return values


def _text(payload: dict, field: str) -> str:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' must be a non-empty string")
    return value.strip()


def _url(payload: dict, field: str) -> str:
    value = _text(payload, field)
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"'{field}' must be an http(s) URL")
    return value


def _integer(payload: dict, field: str, minimum: int | None = None) -> int:
    value = payload.get(field)
    # bool is an int subclass, reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"'{field}' must be an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(f"'{field}' must be at least {minimum}")
    return value


def _optional_text(payload: dict, field: str) -> str | None:
    value = payload.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{field}' must be a string")
    return value.strip() or None


def _string_list(payload: dict, field: str) -> list[str]:
    value = payload.get(field)
    if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
        raise ValidationError(f"'{field}' must be a list of ids")
    return value


def _collect(payload: dict, rules: dict, partial: bool) -> dict:
    data = {}
    for field, check in rules.items():
        if partial and field not in payload:
            continue
        data[field] = check(payload, field)
    if partial and not data:
        raise ValidationError(f"Nothing to update, expected one of: {', '.join(rules)}")
    return data


AUTHOR_RULES = {
    "name": _text,
    "icon_url": _url,
    "bio": _optional_text,
}

VIDEO_RULES = {
    "title": _text,
    "url": _url,
    "start": lambda payload, field: _integer(payload, field, minimum=0),
    "end": lambda payload, field: _integer(payload, field, minimum=1),
    "author_id": _text,
}

PLAYLIST_RULES = {
    "title": _text,
    "author_id": _text,
}

TAG_RULES = {
    "name": _text,
}


def validate_author(payload: dict, partial: bool = False) -> dict:
    return _collect(payload, AUTHOR_RULES, partial)


def validate_video(payload: dict, partial: bool = False) -> dict:
    data = _collect(payload, VIDEO_RULES, partial)
    if "start" in data and "end" in data and data["end"] <= data["start"]:
        raise ValidationError("'end' must be greater than 'start'")
    return data


def validate_playlist(payload: dict, partial: bool = False) -> dict:
    return _collect(payload, PLAYLIST_RULES, partial)


def validate_tag(payload: dict, partial: bool = False) -> dict:
    return _collect(payload, TAG_RULES, partial)


def validate_tag_ids(payload: dict, field: str = "tags", required: bool = True) -> list[str]:
    if field not in payload and not required:
        return []
    return _string_list(payload, field)


def validate_playlist_entry(payload: dict) -> tuple[str, int]:
    return _text(payload, "video_id"), _integer(payload, "order")


def validate_order(payload: dict) -> int:
    return _integer(payload, "order")
