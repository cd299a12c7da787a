"""Conversion between Python values and Firestore REST `Value` objects.

Only the value kinds the repositories write are supported: scalars,
timestamps, bytes, arrays and maps. Enums are stored as their value and
dates as midnight UTC timestamps. References and geo points are read back
as plain strings and dicts.
"""

import base64
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable

from kinext.shared.utils.datetime import ensure_utc

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _encode_value(value: Any) -> dict:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, date):
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        return {"timestampValue": ensure_utc(value).strftime(_TIMESTAMP_FORMAT)}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(item) for item in value]}}
    if isinstance(value, dict):
        return {"mapValue": encode_document(value)}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def encode_document(data: dict[str, Any]) -> dict:
    """Document body for create/patch calls: {"fields": {name: Value}}."""
    return {"fields": {key: _encode_value(item) for key, item in data.items()}}


def _parse_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "nullValue": lambda _raw: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "referenceValue": str,
    "timestampValue": _parse_timestamp,
    "bytesValue": base64.b64decode,
    "geoPointValue": dict,
    "arrayValue": lambda raw: [_decode_value(item) for item in raw.get("values") or []],
    "mapValue": lambda raw: decode_fields(raw.get("fields")),
}


def _decode_value(value: dict) -> Any:
    for kind, raw in value.items():
        decoder = _DECODERS.get(kind)
        if decoder is not None:
            return decoder(raw)
    return None


def decode_fields(fields: dict | None) -> dict:
    """Python dict from a document's `fields` mapping (empty for a field-less document)."""
    return {key: _decode_value(item) for key, item in (fields or {}).items()}


def document_id(name: str) -> str:
    """Last segment of a resource name such as `projects/p/databases/d/documents/c/ID`."""
    return name.rsplit("/", 1)[-1] if name else ""
