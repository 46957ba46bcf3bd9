"""
Request and response body codecs.

JSON request bodies come from `encode_json`, responses are decoded by
`decode_json` and stored into caller-provided targets by `decode_into`, and form posts are
built by `encode_form`.
"""
import dataclasses
import json
from typing import Any, Dict, Iterable, Mapping
from urllib.parse import urlencode


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(value: Any) -> bytes:
    return json.dumps(value, default=_json_default, ensure_ascii=False).encode("utf-8")


def decode_json(body: bytes) -> Any:
    """
    Decode the first JSON value in a UTF-8 body. Anything after that value is
    ignored; an empty body is an error.
    """
    value, _ = json.JSONDecoder().raw_decode(body.decode("utf-8").lstrip())
    return value


def _field_map(cls_or_obj) -> Dict[str, str]:
    # lower-cased JSON key -> dataclass field name
    return {f.name.lower(): f.name for f in dataclasses.fields(cls_or_obj)}


def _known_fields(cls_or_obj, value: Mapping[str, Any]) -> Dict[str, Any]:
    fields = _field_map(cls_or_obj)
    return {fields[k.lower()]: v for k, v in value.items() if k.lower() in fields}


def _require(value: Any, kind: type, target: Any):
    if not isinstance(value, kind):
        raise TypeError(
            f"cannot decode JSON {type(value).__name__} into {type(target).__name__}"
        )


def decode_into(target: Any, value: Any) -> Any:
    """
    Store a decoded JSON `value` into `target` and return the result.

    - dict: updated in place, `value` must be an object
    - list: contents replaced in place, `value` must be an array
    - dataclass instance: matching fields are set, unknown keys ignored
    - any other instance: one attribute per key
    - a class: a new instance is built from `value` and returned

    Raises TypeError when `value` does not fit the target.
    """
    if isinstance(target, type):
        if dataclasses.is_dataclass(target):
            _require(value, dict, target)
            return target(**_known_fields(target, value))
        if isinstance(value, dict) and target is not dict:
            return target(**value)
        return target(value)

    if isinstance(target, dict):
        _require(value, dict, target)
        target.update(value)
        return target

    if isinstance(target, list):
        _require(value, list, target)
        target[:] = value
        return target

    if dataclasses.is_dataclass(target):
        _require(value, dict, target)
        for name, item in _known_fields(target, value).items():
            setattr(target, name, item)
        return target

    if hasattr(target, "__dict__"):
        _require(value, dict, target)
        for key, item in value.items():
            setattr(target, key, item)
        return target

    raise TypeError(f"unsupported decode target {type(target).__name__}")


def encode_form(values: Mapping[str, Any]) -> str:
    """
    Encode form values as application/x-www-form-urlencoded, sorted by key.
    A value may be a single item or a list of items; each item becomes its
    own key=value pair.
    """
    pairs = []
    for key in sorted(values):
        items = values[key]
        if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            items = [items]
        for item in items:
            pairs.append((key, item))
    return urlencode(pairs)
