"""JSON value <-> SQLite storage class bridge.

Inbound values (None/bool/int/float/str/list/dict) become one of the native
cases below before binding; column values read back from SQLite go the other
way. Both directions are total: anything that cannot be represented turns into
``Null`` instead of raising.

Text is parsed opportunistically on the way out, so a stored string that is
itself valid JSON (``"42"``, ``"null"``) comes back as the parsed value.
Booleans come back as 1 / 0.
"""
import base64
import json
import math
from dataclasses import dataclass
from typing import Any, Union

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Real:
    value: float


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Blob:
    value: bytes


NativeValue = Union[Null, Integer, Real, Text, Blob]

NULL = Null()


def _real_or_null(n) -> NativeValue:
    try:
        f = float(n)
    except (OverflowError, ValueError):
        return NULL
    if not math.isfinite(f):
        return NULL
    return Real(f)


def dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), sort_keys=True, allow_nan=False)


def to_native(value: Any) -> NativeValue:
    if value is None:
        return NULL
    # bool 은 int 의 하위 타입이라 먼저 검사
    if isinstance(value, bool):
        return Integer(1 if value else 0)
    if isinstance(value, int):
        if I64_MIN <= value <= I64_MAX:
            return Integer(value)
        return _real_or_null(value)
    if isinstance(value, float):
        return _real_or_null(value)
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, (list, tuple, dict)):
        try:
            return Text(dumps(value))
        except (TypeError, ValueError, RecursionError):
            return NULL
    return NULL


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(s: str) -> float:
    f = float(s)
    if not math.isfinite(f):
        raise ValueError(f"number out of range: {s}")
    return f


def _parse_text(s: str) -> Any:
    try:
        return json.loads(s, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, RecursionError):
        return s


def from_native(native: NativeValue) -> Any:
    if isinstance(native, Integer):
        return native.value
    if isinstance(native, Real):
        # inf 는 JSON 숫자가 아님
        return native.value if math.isfinite(native.value) else None
    if isinstance(native, Text):
        return _parse_text(native.value)
    if isinstance(native, Blob):
        return base64.b64encode(native.value).decode("ascii")
    return None


def native_of(raw: Any) -> NativeValue:
    """Tag a value as returned by the sqlite3 module."""
    if raw is None:
        return NULL
    if isinstance(raw, int):
        return Integer(raw)
    if isinstance(raw, float):
        return Real(raw)
    if isinstance(raw, str):
        return Text(raw)
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return Blob(bytes(raw))
    return NULL


def to_sqlite(native: NativeValue):
    if isinstance(native, Null):
        return None
    return native.value


def bind(value: Any):
    return to_sqlite(to_native(value))


def read(raw: Any) -> Any:
    return from_native(native_of(raw))
