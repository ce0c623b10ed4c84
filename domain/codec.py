"""Byte codec used by the cache.

Values travel as a plain tree of null, bool, int, float, str, list and
str-keyed dict. Richer objects are flattened with their `to_dict()` before
encoding and rebuilt by a *shape* when decoding, e.g. `Recipe.from_dict`.

Decoding tries the shapes in a fixed order (null, bool, int, float, str,
sequence, mapping) and the first one that fits wins. Keep that order: bool
has to be tried before int and int before float.
"""
import json
from typing import Any, Callable

from domain.errors import DecodeError, EncodeError


type Value = None | bool | int | float | str | list[Value] | dict[str, Value]
type Shape = Callable[[Value], Any]


class _NoMatch(Exception):
    pass


def _null(raw: Any) -> None:
    if raw is not None:
        raise _NoMatch
    return None


def _boolean(raw: Any) -> bool:
    if not isinstance(raw, bool):
        raise _NoMatch
    return raw


def _integer(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise _NoMatch
    return raw


def _floating(raw: Any) -> float:
    if not isinstance(raw, float):
        raise _NoMatch
    return raw


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise _NoMatch
    return raw


def _sequence(raw: Any) -> list[Value]:
    if not isinstance(raw, (list, tuple)):
        raise _NoMatch
    return [interpret(item) for item in raw]


def _mapping(raw: Any) -> dict[str, Value]:
    if not isinstance(raw, dict) or not all(isinstance(k, str) for k in raw):
        raise _NoMatch
    return {k: interpret(v) for k, v in raw.items()}


SHAPES: tuple[Callable[[Any], Value], ...] = (
    _null,
    _boolean,
    _integer,
    _floating,
    _string,
    _sequence,
    _mapping,
)


def interpret(raw: Any) -> Value:
    """Narrow `raw` to the first value shape that accepts it."""
    for shape in SHAPES:
        try:
            return shape(raw)
        except _NoMatch:
            continue
    raise DecodeError("unrecognized shape")


def to_value(obj: Any) -> Value:
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    try:
        return interpret(obj)
    except DecodeError as e:
        raise EncodeError(f"Cannot encode {type(obj).__name__}.") from e


def encode(obj: Any) -> bytes:
    tree = to_value(obj)
    try:
        text = json.dumps(tree, separators=(",", ":"), allow_nan=False)
    except ValueError as e:
        raise EncodeError(str(e)) from e
    return text.encode("utf-8")


def decode(data: bytes, shape: Shape | None = None) -> Any:
    try:
        raw = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"invalid payload: {e}") from e

    tree = interpret(raw)
    if shape is None:
        return tree

    try:
        return shape(tree)
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"value does not fit {getattr(shape, '__qualname__', shape)}: {e}") from e
