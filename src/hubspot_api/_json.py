"""Small helpers shared by the hand-written JSON decoders."""

from __future__ import annotations

from typing import Any

from .errors import DecodeError

_MISSING = object()


def expect_object(value: Any, type_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(type_name, f"expected object, got {_kind(value)}")
    return value


def expect_str(value: Any, type_name: str, key: str | None = None) -> str:
    if not isinstance(value, str):
        raise DecodeError(type_name, _wrong_kind("string", value, key))
    return value


def expect_int(value: Any, type_name: str, key: str | None = None) -> int:
    # bool is an int subclass but never a valid JSON number here
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(type_name, _wrong_kind("integer", value, key))
    return value


def expect_bool(value: Any, type_name: str, key: str | None = None) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(type_name, _wrong_kind("boolean", value, key))
    return value


def expect_list(value: Any, type_name: str, key: str | None = None) -> list[Any]:
    if not isinstance(value, list):
        raise DecodeError(type_name, _wrong_kind("array", value, key))
    return value


def field(obj: dict[str, Any], key: str, type_name: str) -> Any:
    """Return ``obj[key]`` or raise a DecodeError naming the missing field."""
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        raise DecodeError(type_name, f"missing required field {key!r}")
    return value


def str_field(obj: dict[str, Any], key: str, type_name: str) -> str:
    return expect_str(field(obj, key, type_name), type_name, key)


def int_field(obj: dict[str, Any], key: str, type_name: str) -> int:
    return expect_int(field(obj, key, type_name), type_name, key)


def bool_field(obj: dict[str, Any], key: str, type_name: str) -> bool:
    return expect_bool(field(obj, key, type_name), type_name, key)


def list_field(obj: dict[str, Any], key: str, type_name: str) -> list[Any]:
    return expect_list(field(obj, key, type_name), type_name, key)


def _wrong_kind(expected: str, value: Any, key: str | None) -> str:
    where = f"field {key!r}: " if key else ""
    return f"{where}expected {expected}, got {_kind(value)}"


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
