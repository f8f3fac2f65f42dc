# ABOUTME: Encodes and decodes Firestore REST typed values for book records.
# ABOUTME: Maps Python None/bool/int/float/str/list/dict to and from Firestore's Value JSON.

from typing import Any


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value as a Firestore Value.

    bool is checked before int because bool is an int subclass. Integers are
    sent as strings, as the REST API expects for int64.

    Raises:
        TypeError: For values with no Firestore representation.
    """
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, list | tuple):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def encode_fields(fields: dict[str, Any]) -> dict[str, dict[str, Any]]:
    return {name: encode_value(value) for name, value in fields.items()}


def decode_value(value: dict[str, Any]) -> Any:
    """Decode a Firestore Value into a plain Python value.

    Timestamps are returned as their RFC 3339 string, which is how the mobile
    client stores createdAt/updatedAt anyway. Unknown kinds decode to None.
    """
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    return None


def decode_fields(fields: dict[str, dict[str, Any]]) -> dict[str, Any]:
    return {name: decode_value(value) for name, value in fields.items()}


def document_id(document: dict[str, Any]) -> str:
    """The last path segment of a document's resource name."""
    return str(document["name"]).rsplit("/", 1)[-1]
