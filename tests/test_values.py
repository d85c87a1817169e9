"""Tests for the built-in operator semantics over Python values."""

from __future__ import annotations

import math

import pytest
from dunderjs import values
from dunderjs.values import UNDEFINED

# =============================================================================
# Type inspection
# =============================================================================


class TestTypeof:
	"""typeof over the value model."""

	@pytest.mark.parametrize(
		"value,expected",
		[
			(UNDEFINED, "undefined"),
			(None, "object"),
			(True, "boolean"),
			(1, "number"),
			(1.5, "number"),
			("s", "string"),
			(len, "function"),
			(int, "function"),
			({}, "object"),
			([], "object"),
		],
	)
	def test_typeof(self, value: object, expected: str) -> None:
		assert values.typeof_(value) == expected

	def test_undefined_is_a_singleton(self) -> None:
		assert values.Undefined() is UNDEFINED
		assert repr(UNDEFINED) == "undefined"


class TestTruthy:
	@pytest.mark.parametrize("value", [0, 0.0, math.nan, "", None, UNDEFINED, False])
	def test_falsy(self, value: object) -> None:
		assert values.truthy(value) is False

	@pytest.mark.parametrize("value", [1, -1, "0", " ", [], {}, True, len])
	def test_truthy(self, value: object) -> None:
		assert values.truthy(value) is True


# =============================================================================
# Conversions
# =============================================================================


class TestToNumber:
	@pytest.mark.parametrize(
		"value,expected",
		[
			("5", 5),
			("  42\n", 42),
			("", 0),
			("1.5", 1.5),
			("1e3", 1000),
			("010", 10),
			("0x1F", 31),
			("0b101", 5),
			("0o17", 15),
			(None, 0),
			(True, 1),
			(False, 0),
			("Infinity", math.inf),
			("-Infinity", -math.inf),
			([], 0),
			([7], 7),
		],
	)
	def test_conversions(self, value: object, expected: float) -> None:
		assert values.to_number(value) == expected

	@pytest.mark.parametrize("value", [UNDEFINED, "abc", "-0x10", "1 2", {}, [1, 2]])
	def test_nan(self, value: object) -> None:
		assert math.isnan(values.to_number(value))


class TestToString:
	@pytest.mark.parametrize(
		"value,expected",
		[
			(None, "null"),
			(UNDEFINED, "undefined"),
			(True, "true"),
			(1, "1"),
			(1.0, "1"),
			(1.5, "1.5"),
			(-0.0, "0"),
			(0.1 + 0.2, "0.30000000000000004"),
			(1e21, "1e+21"),
			(1e16, "10000000000000000"),
			(0.000001, "0.000001"),
			(1.5e-7, "1.5e-7"),
			(math.nan, "NaN"),
			(-math.inf, "-Infinity"),
			([1, None, 2], "1,,2"),
			({}, "[object Object]"),
		],
	)
	def test_to_string(self, value: object, expected: str) -> None:
		assert values.to_string(value) == expected


class TestInt32:
	def test_wraps_around(self) -> None:
		assert values.to_int32(2**31) == -(2**31)
		assert values.to_int32(2**32 + 5) == 5
		assert values.to_int32(-1.9) == -1
		assert values.to_int32(math.nan) == 0
		assert values.to_int32(math.inf) == 0

	def test_uint32(self) -> None:
		assert values.to_uint32(-1) == 2**32 - 1


# =============================================================================
# Operators
# =============================================================================


class TestArithmetic:
	def test_add_concatenates_when_a_side_is_a_string(self) -> None:
		assert values.add(1, "2") == "12"
		assert values.add("a", None) == "anull"
		assert values.add([1, 2], 3) == "1,23"

	def test_add_numbers(self) -> None:
		assert values.add(1, 2) == 3
		assert values.add(True, 1) == 2
		assert values.add(None, 1) == 1
		assert math.isnan(values.add(UNDEFINED, 1))

	def test_sub_and_mul_coerce(self) -> None:
		assert values.sub("5", 2) == 3
		assert values.mul("3", 4) == 12
		assert values.mul(2, 0.5) == 1

	def test_division(self) -> None:
		assert values.div(6, 3) == 2
		assert isinstance(values.div(6, 3), int)
		assert values.div(1, 2) == 0.5
		assert values.div(1, 0) == math.inf
		assert values.div(-1, 0) == -math.inf
		assert values.div(1, -0.0) == -math.inf
		assert math.isnan(values.div(0, 0))

	def test_remainder_takes_the_dividend_sign(self) -> None:
		assert values.mod(-5, 3) == -2
		assert values.mod(5, -3) == 2
		assert values.mod(5.5, 2) == 1.5
		assert values.mod(3, math.inf) == 3
		assert math.isnan(values.mod(1, 0))
		assert math.isnan(values.mod(math.inf, 2))

	def test_exponent(self) -> None:
		assert values.pow_(2, 3) == 8
		assert values.pow_("2", 10) == 1024
		assert values.pow_(2, -1) == 0.5
		assert values.pow_(math.nan, 0) == 1
		assert values.pow_(0, -1) == math.inf
		assert values.pow_(-0.0, -1) == -math.inf
		assert values.pow_(10, 400) == math.inf
		assert values.pow_(10.0, 400) == math.inf
		assert math.isnan(values.pow_(1, math.inf))
		assert math.isnan(values.pow_(-8, 1 / 3))
		assert math.isnan(values.pow_(2, math.nan))

	def test_negation(self) -> None:
		assert values.neg("5") == -5
		neg_zero = values.neg(0)
		assert neg_zero == 0 and math.copysign(1.0, neg_zero) < 0
		assert values.pos("  7 ") == 7


class TestBitwise:
	def test_shifts(self) -> None:
		assert values.lshift(1, 31) == -(2**31)
		assert values.lshift(1, 32) == 1
		assert values.rshift(-8, 1) == -4
		assert values.urshift(-1, 0) == 2**32 - 1
		assert values.urshift(-1, 28) == 15

	def test_logic(self) -> None:
		assert values.bit_and(5, 3) == 1
		assert values.bit_or(5, 3) == 7
		assert values.bit_xor(5, 3) == 6
		assert values.invert(5) == -6
		assert values.invert("1") == -2


class TestEquality:
	@pytest.mark.parametrize(
		"a,b",
		[(1, "1"), (None, UNDEFINED), (0, False), ("", 0), ([], ""), ("1", True), (1, 1.0)],
	)
	def test_loose_equal(self, a: object, b: object) -> None:
		assert values.loose_equals(a, b)
		assert values.loose_equals(b, a)

	@pytest.mark.parametrize("a,b", [(None, 0), (UNDEFINED, 0), (math.nan, math.nan), ({}, {})])
	def test_loose_not_equal(self, a: object, b: object) -> None:
		assert not values.loose_equals(a, b)

	def test_strict(self) -> None:
		obj = {}
		assert values.strict_equals(1, 1.0)
		assert values.strict_equals(obj, obj)
		assert not values.strict_equals(1, "1")
		assert not values.strict_equals(True, 1)
		assert not values.strict_equals(None, UNDEFINED)
		assert not values.strict_equals({}, {})


class TestRelational:
	def test_strings_compare_lexicographically(self) -> None:
		assert values.less_than("a", "b")
		assert values.less_than("10", "9")
		assert values.greater_than("b", "a")

	def test_mixed_compare_numerically(self) -> None:
		assert not values.less_than(10, "9")
		assert values.less_equal(None, 0)
		assert values.greater_equal("3", 3)

	def test_nan_is_unordered(self) -> None:
		assert not values.less_than(math.nan, 1)
		assert not values.greater_equal(math.nan, 1)
		assert not values.less_than(UNDEFINED, 0)


class TestInAndInstanceof:
	def test_has_property(self) -> None:
		assert values.has_property("a", {"a": 1})
		assert not values.has_property("b", {"a": 1})
		assert values.has_property(0, [1])
		assert values.has_property("length", [])
		assert not values.has_property(1, [1])

	def test_in_against_primitive_raises(self) -> None:
		with pytest.raises(TypeError, match="'in' operator"):
			values.has_property("a", "abc")

	def test_instance_of(self) -> None:
		class Foo:
			pass

		assert values.instance_of(Foo(), Foo)
		assert not values.instance_of(1, int)
		assert not values.instance_of(Foo(), dict)

	def test_instance_of_requires_callable(self) -> None:
		with pytest.raises(TypeError, match="not callable"):
			values.instance_of({}, 5)


class TestLogical:
	def test_short_forms_return_operands(self) -> None:
		assert values.logical_and(0, 5) == 0
		assert values.logical_and(1, 5) == 5
		assert values.logical_or(0, 5) == 5
		assert values.logical_or("x", 5) == "x"
		assert values.nullish(None, 5) == 5
		assert values.nullish(UNDEFINED, 5) == 5
		assert values.nullish(0, 5) == 0
