"""JavaScript value semantics over Python values.

The built-in operator actions must behave like the native operators of the
language being rewritten. Values are modelled as:

- `UNDEFINED` -> undefined
- `None` -> null
- `bool` -> boolean
- `int` / `float` -> number (ints stay exact where the result is exact)
- `str` -> string
- callables (functions, classes) -> function
- anything else (dict, list, instances) -> object
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Final, Literal, TypeAlias

from typing_extensions import override

Number: TypeAlias = int | float
TypeofResult: TypeAlias = Literal[
	"undefined", "object", "boolean", "number", "string", "function"
]


class Undefined:
	"""The JS `undefined` value. Use the UNDEFINED singleton."""

	__slots__: tuple[str, ...] = ()
	_instance: Undefined | None = None

	def __new__(cls) -> Undefined:
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	@override
	def __repr__(self) -> str:
		return "undefined"

	def __bool__(self) -> bool:
		return False


UNDEFINED: Final = Undefined()

NAN: Final = math.nan
INFINITY: Final = math.inf

_MAX_SAFE = 2**53
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_RADIX = {"x": 16, "o": 8, "b": 2}
# Whitespace and line terminators trimmed by StringToNumber
_JS_WHITESPACE = " \t\n\v\f\r\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"


# =============================================================================
# Type inspection
# =============================================================================


def is_number(value: object) -> bool:
	return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_primitive(value: object) -> bool:
	return value is UNDEFINED or value is None or isinstance(value, (bool, int, float, str))


def typeof_(value: object) -> TypeofResult:
	if value is UNDEFINED:
		return "undefined"
	if value is None:
		return "object"
	if isinstance(value, bool):
		return "boolean"
	if isinstance(value, (int, float)):
		return "number"
	if isinstance(value, str):
		return "string"
	if callable(value):
		return "function"
	return "object"


def truthy(value: object) -> bool:
	"""ToBoolean. Objects are always truthy, including empty lists and dicts."""
	if value is UNDEFINED or value is None:
		return False
	if isinstance(value, bool):
		return value
	if isinstance(value, (int, float)):
		return not (value == 0 or math.isnan(value))
	if isinstance(value, str):
		return value != ""
	return True


# =============================================================================
# Conversions
# =============================================================================


def _normalize(value: float) -> Number:
	"""Collapse integral floats to ints so results compare and print cleanly."""
	if value.is_integer() and abs(value) < _MAX_SAFE and not (
		value == 0 and math.copysign(1.0, value) < 0
	):
		return int(value)
	return value


def to_primitive(value: Any) -> Any:
	"""ToPrimitive with the default hint."""
	if is_primitive(value):
		return value
	if isinstance(value, (list, tuple)):
		return ",".join(
			"" if v is None or v is UNDEFINED else to_string(v)
			for v in value  # pyright: ignore[reportUnknownVariableType]
		)
	if callable(value):
		name = getattr(value, "__name__", "")
		return f"function {name}() {{ [native code] }}"
	return "[object Object]"


def string_to_number(text: str) -> Number:
	s = text.strip(_JS_WHITESPACE)
	if s == "":
		return 0
	if s in {"Infinity", "+Infinity"}:
		return math.inf
	if s == "-Infinity":
		return -math.inf
	match = _RADIX_RE.match(s)
	if match is not None:
		try:
			return int(match.group(2), _RADIX[match.group(1).lower()])
		except ValueError:
			return math.nan
	if _DECIMAL_RE.match(s) is None:
		return math.nan
	try:
		return _normalize(float(s))
	except OverflowError:
		return -math.inf if s.startswith("-") else math.inf


def to_number(value: Any) -> Number:
	if value is UNDEFINED:
		return math.nan
	if value is None:
		return 0
	if isinstance(value, bool):
		return 1 if value else 0
	if isinstance(value, (int, float)):
		return value
	if isinstance(value, str):
		return string_to_number(value)
	return to_number(to_primitive(value))


def number_to_string(value: Number) -> str:
	if isinstance(value, int):
		return str(value)
	if math.isnan(value):
		return "NaN"
	if math.isinf(value):
		return "Infinity" if value > 0 else "-Infinity"
	if value == 0:
		return "0"
	if value.is_integer() and abs(value) < _MAX_SAFE:
		return str(int(value))
	text = repr(value)
	if "e" not in text:
		return text.removesuffix(".0")
	magnitude = abs(value)
	if 1e-6 <= magnitude < 1e21:
		return format(Decimal(text), "f")
	mantissa, exponent = text.split("e")
	sign = "-" if exponent.startswith("-") else "+"
	return f"{mantissa}e{sign}{exponent.lstrip('+-').lstrip('0') or '0'}"


def to_string(value: Any) -> str:
	if value is UNDEFINED:
		return "undefined"
	if value is None:
		return "null"
	if isinstance(value, bool):
		return "true" if value else "false"
	if isinstance(value, (int, float)):
		return number_to_string(value)
	if isinstance(value, str):
		return value
	return to_string(to_primitive(value))


def to_int32(value: Any) -> int:
	n = to_number(value)
	if isinstance(n, float):
		if math.isnan(n) or math.isinf(n):
			return 0
		n = math.trunc(n)
	n %= 2**32
	return n - 2**32 if n >= 2**31 else n


def to_uint32(value: Any) -> int:
	return to_int32(value) % 2**32


# =============================================================================
# Unary actions
# =============================================================================


def pos(a: Any) -> Number:
	return to_number(a)


def neg(a: Any) -> Number:
	n = to_number(a)
	if n == 0 and isinstance(n, int):
		return -0.0
	return -n


def not_(a: Any) -> bool:
	return not truthy(a)


def invert(a: Any) -> int:
	return ~to_int32(a)


# =============================================================================
# Arithmetic
# =============================================================================


def add(a: Any, b: Any) -> Any:
	pa, pb = to_primitive(a), to_primitive(b)
	if isinstance(pa, str) or isinstance(pb, str):
		return to_string(pa) + to_string(pb)
	return to_number(pa) + to_number(pb)


def sub(a: Any, b: Any) -> Number:
	return to_number(a) - to_number(b)


def mul(a: Any, b: Any) -> Number:
	x, y = to_number(a), to_number(b)
	if isinstance(x, int) and isinstance(y, int):
		return x * y
	return float(x) * float(y)


def div(a: Any, b: Any) -> Number:
	x, y = to_number(a), to_number(b)
	if y == 0:
		if x == 0 or math.isnan(x):
			return math.nan
		sign = math.copysign(1.0, x) * math.copysign(1.0, y)
		return math.copysign(math.inf, sign)
	if isinstance(x, int) and isinstance(y, int) and x % y == 0:
		return x // y
	return x / y


def mod(a: Any, b: Any) -> Number:
	x, y = to_number(a), to_number(b)
	if isinstance(x, int) and isinstance(y, int):
		if y == 0:
			return math.nan
		r = abs(x) % abs(y)
		return -r if x < 0 else r
	if math.isnan(x) or math.isnan(y) or math.isinf(x) or y == 0:
		return math.nan
	if math.isinf(y):
		return x
	return math.fmod(x, y)


def pow_(a: Any, b: Any) -> Number:
	x, y = to_number(a), to_number(b)
	if isinstance(y, float) and math.isnan(y):
		return math.nan
	if y == 0:
		return 1
	if isinstance(x, float) and math.isnan(x):
		return math.nan
	if abs(x) == 1 and math.isinf(y):
		return math.nan
	if isinstance(x, int) and isinstance(y, int) and y >= 0:
		if abs(x) <= 1 or y * math.log2(abs(x)) < 1024:
			return x**y
		return -math.inf if x < 0 and y % 2 == 1 else math.inf
	if x == 0 and y < 0:
		negative_zero = isinstance(x, float) and math.copysign(1.0, x) < 0
		odd = float(y).is_integer() and int(y) % 2 == 1
		return -math.inf if negative_zero and odd else math.inf
	try:
		return _normalize(math.pow(x, y))
	except OverflowError:
		if x < 0 and float(y).is_integer() and y % 2 == 1:
			return -math.inf
		return math.inf
	except ValueError:
		return math.nan


# =============================================================================
# Bitwise
# =============================================================================


def lshift(a: Any, b: Any) -> int:
	return to_int32(to_int32(a) << (to_uint32(b) & 31))


def rshift(a: Any, b: Any) -> int:
	return to_int32(a) >> (to_uint32(b) & 31)


def urshift(a: Any, b: Any) -> int:
	return to_uint32(a) >> (to_uint32(b) & 31)


def bit_and(a: Any, b: Any) -> int:
	return to_int32(a) & to_int32(b)


def bit_or(a: Any, b: Any) -> int:
	return to_int32(a) | to_int32(b)


def bit_xor(a: Any, b: Any) -> int:
	return to_int32(a) ^ to_int32(b)


# =============================================================================
# Equality and relational comparison
# =============================================================================


def _kind(value: object) -> str:
	t = typeof_(value)
	if t == "function":
		return "object"
	if value is None:
		return "null"
	return t


def strict_equals(a: Any, b: Any) -> bool:
	ka, kb = _kind(a), _kind(b)
	if ka != kb:
		return False
	if ka in {"undefined", "null"}:
		return True
	if ka == "number":
		return a == b  # NaN compares unequal to itself
	if ka in {"string", "boolean"}:
		return a == b
	return a is b


def loose_equals(a: Any, b: Any) -> bool:
	ka, kb = _kind(a), _kind(b)
	if ka == kb:
		return strict_equals(a, b)
	nullish = {"undefined", "null"}
	if ka in nullish or kb in nullish:
		return ka in nullish and kb in nullish
	if ka == "number" and kb == "string":
		return a == string_to_number(b)
	if ka == "string" and kb == "number":
		return string_to_number(a) == b
	if ka == "boolean":
		return loose_equals(to_number(a), b)
	if kb == "boolean":
		return loose_equals(a, to_number(b))
	if ka == "object" and kb in {"number", "string"}:
		return loose_equals(to_primitive(a), b)
	if kb == "object" and ka in {"number", "string"}:
		return loose_equals(a, to_primitive(b))
	return False


def _compare(a: Any, b: Any) -> tuple[Any, Any] | None:
	"""Shared part of the relational operators.

	Returns comparable keys, or None when the comparison is undefined (NaN).
	"""
	pa, pb = to_primitive(a), to_primitive(b)
	if isinstance(pa, str) and isinstance(pb, str):
		# Order by UTF-16 code units
		return pa.encode("utf-16-be"), pb.encode("utf-16-be")
	x, y = to_number(pa), to_number(pb)
	if math.isnan(x) or math.isnan(y):
		return None
	return x, y


def less_than(a: Any, b: Any) -> bool:
	keys = _compare(a, b)
	return keys is not None and keys[0] < keys[1]


def less_equal(a: Any, b: Any) -> bool:
	keys = _compare(a, b)
	return keys is not None and keys[0] <= keys[1]


def greater_than(a: Any, b: Any) -> bool:
	keys = _compare(a, b)
	return keys is not None and keys[0] > keys[1]


def greater_equal(a: Any, b: Any) -> bool:
	keys = _compare(a, b)
	return keys is not None and keys[0] >= keys[1]


# =============================================================================
# `in` / `instanceof`
# =============================================================================


def has_property(key: Any, obj: Any) -> bool:
	if is_primitive(obj):
		raise TypeError(
			f"Cannot use 'in' operator to search for '{to_string(key)}' in {to_string(obj)}"
		)
	name = to_string(key)
	if isinstance(obj, Mapping):
		return name in obj or key in obj
	if isinstance(obj, (list, tuple)):
		if name == "length":
			return True
		return name.isdigit() and str(int(name)) == name and int(name) < len(obj)  # pyright: ignore[reportUnknownArgumentType]
	return name.isidentifier() and hasattr(obj, name)


def instance_of(value: Any, cls: Any) -> bool:
	if not callable(cls):
		raise TypeError("Right-hand side of 'instanceof' is not callable")
	if not isinstance(cls, type):
		return False
	if is_primitive(value):
		return False
	return isinstance(value, cls)


# =============================================================================
# Logical
# =============================================================================


def logical_and(a: Any, b: Any) -> Any:
	return b if truthy(a) else a


def logical_or(a: Any, b: Any) -> Any:
	return a if truthy(a) else b


def nullish(a: Any, b: Any) -> Any:
	return b if a is None or a is UNDEFINED else a


__all__ = [
	"INFINITY",
	"NAN",
	"UNDEFINED",
	"Number",
	"Undefined",
	"add",
	"bit_and",
	"bit_or",
	"bit_xor",
	"div",
	"greater_equal",
	"greater_than",
	"has_property",
	"instance_of",
	"invert",
	"is_number",
	"is_primitive",
	"less_equal",
	"less_than",
	"logical_and",
	"logical_or",
	"loose_equals",
	"lshift",
	"mod",
	"mul",
	"neg",
	"not_",
	"nullish",
	"number_to_string",
	"pos",
	"pow_",
	"rshift",
	"strict_equals",
	"string_to_number",
	"sub",
	"to_int32",
	"to_number",
	"to_primitive",
	"to_string",
	"to_uint32",
	"truthy",
	"typeof_",
	"urshift",
]
