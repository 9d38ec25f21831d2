"""Encode/decode Python values and writes to/from Firestore REST API format."""

from __future__ import annotations

import base64
import re
from datetime import datetime
from typing import Any

from propdesk.application.dtos.store import SERVER_TIMESTAMP, Write, WriteKind
from propdesk.shared.utils.datetime import ensure_utc

_SIMPLE_FIELD = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")
_FRACTION = re.compile(r"\.(\d+)")


def format_timestamp(value: datetime) -> str:
    """RFC 3339 UTC timestamp with microseconds, as Firestore expects."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(value: str) -> datetime:
    """Parse a Firestore timestamp; fractions beyond microseconds are dropped."""
    value = value.replace("Z", "+00:00")
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    return datetime.fromisoformat(value)


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": None}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": format_timestamp(v)}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: _encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_document(data: dict[str, Any]) -> dict:
    """Convert a Python dict to Firestore REST Document.fields format."""
    return {"fields": {k: _encode_value(v) for k, v in data.items()}}


def _decode_value(obj: dict) -> Any:
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        return parse_timestamp(obj["timestampValue"])
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [_decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: _decode_value(x) for k, x in fields.items()}
    return None


def decode_document(fields: dict | None) -> dict:
    """Convert Firestore REST Document.fields (the inner map) to a Python dict."""
    if not fields:
        return {}
    return {k: _decode_value(v) for k, v in fields.items()}


def field_path(name: str) -> str:
    """Quote a top-level field name for updateMask / transforms when needed."""
    if _SIMPLE_FIELD.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def encode_write(write: Write, prefix: str) -> dict:
    """Convert a Write to a Firestore commit 'writes' entry.

    SERVER_TIMESTAMP values become REQUEST_TIME transforms; upsert and update
    carry an updateMask so fields not in the data are left untouched.
    """
    name = f"{prefix}/{write.path}"
    if write.kind == WriteKind.DELETE:
        out: dict[str, Any] = {"delete": name}
    else:
        fields = {k: v for k, v in write.data.items() if v is not SERVER_TIMESTAMP}
        transforms = [k for k, v in write.data.items() if v is SERVER_TIMESTAMP]
        out = {"update": {"name": name, **encode_document(fields)}}
        if write.kind in (WriteKind.UPSERT, WriteKind.UPDATE):
            out["updateMask"] = {"fieldPaths": [field_path(k) for k in fields]}
        if transforms:
            out["updateTransforms"] = [
                {"fieldPath": field_path(k), "setToServerValue": "REQUEST_TIME"}
                for k in transforms
            ]
    precondition = write.effective_precondition()
    if precondition is not None:
        if precondition.update_time is not None:
            out["currentDocument"] = {"updateTime": format_timestamp(precondition.update_time)}
        elif precondition.exists is not None:
            out["currentDocument"] = {"exists": precondition.exists}
    return out
