"""Runtime operator dispatch.

Rewritten programs call `unary_dispatch(token, operand)` and
`binary_dispatch(left, token, right)` in place of native operators. Operands opt
into overloading by exposing protocol members (see `dunderjs.operators.Py`):

```python
class Vec:
	def op_add(self, other):
		return Vec(self.x + other.x)

	def op_cmp(self, other):
		return self.x - other.x
```

Mappings take part too: a callable stored under a member key is called with the
mapping as its first argument.

A member returning `NotImplemented` declines, like Python's own binary
operators, and dispatch moves on to the next candidate.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final, TypeAlias, final

from typing_extensions import override

from dunderjs.operators import (
	BINARY_DEFAULTS,
	BINARY_OPERATORS,
	REVERSED,
	SHORTHAND_FAMILY,
	UNARY_DEFAULTS,
	UNARY_OPERATORS,
	Py,
	compare_result,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Candidate outcomes
# =============================================================================


@dataclass(slots=True, frozen=True)
class Applied:
	"""The candidate handled the operation."""

	value: Any


@final
class _NotApplicable:
	__slots__: tuple[str, ...] = ()

	@override
	def __repr__(self) -> str:
		return "NOT_APPLICABLE"


NOT_APPLICABLE: Final = _NotApplicable()


@dataclass(slots=True, frozen=True)
class Failed:
	"""The candidate raised a real error, which must surface to the caller."""

	error: Exception


Outcome: TypeAlias = Applied | _NotApplicable | Failed


def lookup(operand: Any, member: str) -> Callable[..., Any] | None:
	"""Return `operand`'s implementation of `member`, bound to the operand.

	Mappings are probed by key first, then like any other object, so a Mapping
	class can define members as methods. None when the operand does not provide
	a callable under that name.
	"""
	if isinstance(operand, Mapping):
		fn = operand.get(member)
		if callable(fn):
			return functools.partial(fn, operand)
	fn = getattr(operand, member, None)
	if not callable(fn):
		return None
	# Instance methods looked up on the class itself are unbound
	if isinstance(operand, type) and inspect.isfunction(fn):
		return None
	return fn


def attempt(fn: Callable[..., Any] | None, *args: Any) -> Outcome:
	"""Run one candidate and classify its result."""
	if fn is None:
		return NOT_APPLICABLE
	try:
		result = fn(*args)
	except Exception as error:
		return Failed(error)
	if result is NotImplemented:
		return NOT_APPLICABLE
	return Applied(result)


def _shorthand(operand: Any, member: str, other: Any) -> Outcome:
	family = SHORTHAND_FAMILY.get(member)
	if family is None:
		return NOT_APPLICABLE
	fn = lookup(operand, family)
	if family == Py.CMP:
		outcome = attempt(fn, other)
		if isinstance(outcome, Applied):
			return Applied(compare_result(member, outcome.value))
		return outcome
	return attempt(fn, other, BINARY_DEFAULTS[member])


# =============================================================================
# Dispatchers
# =============================================================================


def unary_dispatch(token: str, operand: Any) -> Any:
	"""Apply a unary operator, preferring the operand's own member.

	Falls back to the built-in action when the member is missing, declines, or
	raises.
	"""
	member = UNARY_OPERATORS.get(token)
	if member is None:
		raise ValueError(f"Unsupported unary operator: {token!r}")
	fn = lookup(operand, member)
	if fn is not None:
		try:
			result = fn()
		except Exception:
			logger.debug(
				"%s raised on %r, using the built-in %r", member, operand, token, exc_info=True
			)
		else:
			if result is not NotImplemented:
				return result
	return UNARY_DEFAULTS[member](operand)


def binary_candidates(left: Any, token: str, right: Any) -> list[Callable[[], Outcome]]:
	"""The ordered resolution chain for `left <token> right`, lazily evaluated."""
	member = BINARY_OPERATORS.get(token)
	if member is None:
		raise ValueError(f"Unsupported binary operator: {token!r}")
	reversed_member = REVERSED[member]
	return [
		lambda: attempt(lookup(left, member), right),
		lambda: attempt(lookup(right, reversed_member), left),
		lambda: _shorthand(left, member, right),
		lambda: _shorthand(right, reversed_member, left),
		lambda: Applied(BINARY_DEFAULTS[member](left, right)),
	]


def binary_dispatch(left: Any, token: str, right: Any) -> Any:
	"""Apply a binary or logical operator through the resolution chain.

	Candidates, in order: `left.member(right)`, `right.reversed(left)`,
	`left.family(right, default)`, `right.family(left, reversed_default)`, and
	finally the built-in action. Only a declining candidate moves the chain on;
	an exception raised by a member propagates immediately.
	"""
	for candidate in binary_candidates(left, token, right):
		outcome = candidate()
		if isinstance(outcome, Applied):
			return outcome.value
		if isinstance(outcome, Failed):
			raise outcome.error
	# The built-in candidate always applies
	raise AssertionError("unreachable")


__all__ = [
	"NOT_APPLICABLE",
	"Applied",
	"Failed",
	"Outcome",
	"attempt",
	"binary_candidates",
	"binary_dispatch",
	"lookup",
	"unary_dispatch",
]
