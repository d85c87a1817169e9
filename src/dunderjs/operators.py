"""Operator symbol tables.

Every overloadable operator token maps to a protocol member name that operands
may implement (`op_add`, `op_radd`, ...). Binary members also have a reversed
counterpart tried on the right operand, and most belong to a shorthand family
(`op_arithmetic`, `op_bitwise`, `op_logical`, `op_cmp`) that covers a whole
class of operators with one hook.

All tables are built once at import time and are read-only.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Final, TypeAlias

from dunderjs import values

UnaryAction: TypeAlias = Callable[[Any], Any]
BinaryAction: TypeAlias = Callable[[Any, Any], Any]


class Py:
	"""Protocol member names probed on operands."""

	# Unary
	POS: Final = "op_pos"
	NEG: Final = "op_neg"
	NOT: Final = "op_not"
	INVERT: Final = "op_invert"
	TYPEOF: Final = "op_typeof"

	# Arithmetic
	ADD: Final = "op_add"
	SUB: Final = "op_sub"
	MUL: Final = "op_mul"
	DIV: Final = "op_div"
	MOD: Final = "op_mod"
	POW: Final = "op_pow"
	LSHIFT: Final = "op_lshift"
	RSHIFT: Final = "op_rshift"
	URSHIFT: Final = "op_urshift"
	ARITHMETIC: Final = "op_arithmetic"

	# Bitwise
	XOR: Final = "op_xor"
	BITWISE_AND: Final = "op_bitwise_and"
	BITWISE_OR: Final = "op_bitwise_or"
	BITWISE: Final = "op_bitwise"

	# Comparison
	EQ: Final = "op_eq"
	NE: Final = "op_ne"
	SEQ: Final = "op_seq"
	SNE: Final = "op_sne"
	LT: Final = "op_lt"
	LE: Final = "op_le"
	GT: Final = "op_gt"
	GE: Final = "op_ge"
	CMP: Final = "op_cmp"

	# Logical
	AND: Final = "op_and"
	OR: Final = "op_or"
	NULLISH: Final = "op_nullish"
	LOGICAL: Final = "op_logical"

	# Other
	IN: Final = "op_in"
	INSTANCEOF: Final = "op_instanceof"

	# Reversed
	RADD: Final = "op_radd"
	RSUB: Final = "op_rsub"
	RMUL: Final = "op_rmul"
	RDIV: Final = "op_rdiv"
	RMOD: Final = "op_rmod"
	RPOW: Final = "op_rpow"
	RLSHIFT: Final = "op_rlshift"
	RRSHIFT: Final = "op_rrshift"
	RURSHIFT: Final = "op_rurshift"
	RXOR: Final = "op_rxor"
	RBITWISE_AND: Final = "op_rbitwise_and"
	RBITWISE_OR: Final = "op_rbitwise_or"
	RIN: Final = "op_rin"
	RINSTANCEOF: Final = "op_rinstanceof"
	RAND: Final = "op_rand"
	ROR: Final = "op_ror"
	RNULLISH: Final = "op_rnullish"


UNARY_OPERATORS: Mapping[str, str] = MappingProxyType(
	{
		"+": Py.POS,
		"-": Py.NEG,
		"!": Py.NOT,
		"~": Py.INVERT,
		"typeof": Py.TYPEOF,
	}
)

BINARY_OPERATORS: Mapping[str, str] = MappingProxyType(
	{
		"+": Py.ADD,
		"-": Py.SUB,
		"*": Py.MUL,
		"/": Py.DIV,
		"%": Py.MOD,
		"**": Py.POW,
		"<<": Py.LSHIFT,
		">>": Py.RSHIFT,
		">>>": Py.URSHIFT,
		"^": Py.XOR,
		"&": Py.BITWISE_AND,
		"|": Py.BITWISE_OR,
		"==": Py.EQ,
		"!=": Py.NE,
		"===": Py.SEQ,
		"!==": Py.SNE,
		"<": Py.LT,
		"<=": Py.LE,
		">": Py.GT,
		">=": Py.GE,
		"in": Py.IN,
		"instanceof": Py.INSTANCEOF,
		"&&": Py.AND,
		"||": Py.OR,
		"??": Py.NULLISH,
	}
)

# Equality is symmetric, relations mirror.
REVERSED: Mapping[str, str] = MappingProxyType(
	{
		Py.ADD: Py.RADD,
		Py.SUB: Py.RSUB,
		Py.MUL: Py.RMUL,
		Py.DIV: Py.RDIV,
		Py.MOD: Py.RMOD,
		Py.POW: Py.RPOW,
		Py.LSHIFT: Py.RLSHIFT,
		Py.RSHIFT: Py.RRSHIFT,
		Py.URSHIFT: Py.RURSHIFT,
		Py.XOR: Py.RXOR,
		Py.BITWISE_AND: Py.RBITWISE_AND,
		Py.BITWISE_OR: Py.RBITWISE_OR,
		Py.EQ: Py.EQ,
		Py.NE: Py.NE,
		Py.SEQ: Py.SEQ,
		Py.SNE: Py.SNE,
		Py.LT: Py.GT,
		Py.LE: Py.GE,
		Py.GT: Py.LT,
		Py.GE: Py.LE,
		Py.IN: Py.RIN,
		Py.INSTANCEOF: Py.RINSTANCEOF,
		Py.AND: Py.RAND,
		Py.OR: Py.ROR,
		Py.NULLISH: Py.RNULLISH,
	}
)


def _family(family: str, *members: str) -> dict[str, str]:
	return {member: family for member in members}


SHORTHAND_FAMILY: Mapping[str, str] = MappingProxyType(
	{
		**_family(
			Py.ARITHMETIC,
			Py.ADD,
			Py.SUB,
			Py.MUL,
			Py.DIV,
			Py.MOD,
			Py.POW,
			Py.LSHIFT,
			Py.RSHIFT,
			Py.URSHIFT,
			Py.RADD,
			Py.RSUB,
			Py.RMUL,
			Py.RDIV,
			Py.RMOD,
			Py.RPOW,
			Py.RLSHIFT,
			Py.RRSHIFT,
			Py.RURSHIFT,
		),
		**_family(
			Py.BITWISE,
			Py.XOR,
			Py.BITWISE_AND,
			Py.BITWISE_OR,
			Py.RXOR,
			Py.RBITWISE_AND,
			Py.RBITWISE_OR,
		),
		**_family(
			Py.LOGICAL,
			Py.AND,
			Py.OR,
			Py.NULLISH,
			Py.RAND,
			Py.ROR,
			Py.RNULLISH,
		),
		**_family(Py.CMP, Py.EQ, Py.NE, Py.LT, Py.LE, Py.GT, Py.GE),
	}
)

# How a three-way comparison result answers each comparison member
CMP_PREDICATES: Mapping[str, Callable[[Any, int], bool]] = MappingProxyType(
	{
		Py.EQ: operator.eq,
		Py.NE: operator.ne,
		Py.LT: operator.lt,
		Py.LE: operator.le,
		Py.GT: operator.gt,
		Py.GE: operator.ge,
	}
)


def compare_result(member: str, result: Any) -> bool:
	"""Derive a comparison member from a three-way comparison result."""
	return bool(CMP_PREDICATES[member](result, 0))


UNARY_DEFAULTS: Mapping[str, UnaryAction] = MappingProxyType(
	{
		Py.POS: values.pos,
		Py.NEG: values.neg,
		Py.NOT: values.not_,
		Py.INVERT: values.invert,
		Py.TYPEOF: values.typeof_,
	}
)

_PRIMARY_DEFAULTS: dict[str, BinaryAction] = {
	Py.ADD: values.add,
	Py.SUB: values.sub,
	Py.MUL: values.mul,
	Py.DIV: values.div,
	Py.MOD: values.mod,
	Py.POW: values.pow_,
	Py.LSHIFT: values.lshift,
	Py.RSHIFT: values.rshift,
	Py.URSHIFT: values.urshift,
	Py.XOR: values.bit_xor,
	Py.BITWISE_AND: values.bit_and,
	Py.BITWISE_OR: values.bit_or,
	Py.EQ: values.loose_equals,
	Py.NE: lambda a, b: not values.loose_equals(a, b),
	Py.SEQ: values.strict_equals,
	Py.SNE: lambda a, b: not values.strict_equals(a, b),
	Py.LT: values.less_than,
	Py.LE: values.less_equal,
	Py.GT: values.greater_than,
	Py.GE: values.greater_equal,
	# `a in b` tests whether key `a` is in object `b`
	Py.IN: values.has_property,
	Py.INSTANCEOF: values.instance_of,
	Py.AND: values.logical_and,
	Py.OR: values.logical_or,
	Py.NULLISH: values.nullish,
}


def _swapped(action: BinaryAction) -> BinaryAction:
	def reversed_action(a: Any, b: Any) -> Any:
		return action(b, a)

	reversed_action.__name__ = f"reversed_{getattr(action, '__name__', 'action')}"
	return reversed_action


def _build_binary_defaults() -> dict[str, BinaryAction]:
	defaults = dict(_PRIMARY_DEFAULTS)
	for member, reversed_member in REVERSED.items():
		# Symmetric and mirrored members already have their own primary action
		if reversed_member not in defaults:
			defaults[reversed_member] = _swapped(_PRIMARY_DEFAULTS[member])
	return defaults


BINARY_DEFAULTS: Mapping[str, BinaryAction] = MappingProxyType(_build_binary_defaults())


__all__ = [
	"BINARY_DEFAULTS",
	"BINARY_OPERATORS",
	"CMP_PREDICATES",
	"REVERSED",
	"SHORTHAND_FAMILY",
	"UNARY_DEFAULTS",
	"UNARY_OPERATORS",
	"BinaryAction",
	"Py",
	"UnaryAction",
	"compare_result",
]
