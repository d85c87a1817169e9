"""Tests for transformation state and helper naming."""

from __future__ import annotations

from typing import Any

from dunderjs.dispatch import binary_dispatch, unary_dispatch
from dunderjs.nodes import Node
from dunderjs.options import RunOptions
from dunderjs.state import (
	NameGenerator,
	TransformState,
	collect_identifier_names,
	importer_is_async,
)


def _sync_importer(source: str) -> dict[str, Any]:
	return {"source": source}


async def _async_importer(source: str) -> dict[str, Any]:
	return {"source": source}


def _program(*names: str) -> Node:
	return Node.from_dict(
		{
			"type": "Program",
			"body": [
				{"type": "ExpressionStatement", "expression": {"type": "Identifier", "name": name}}
				for name in names
			],
		}
	)


class TestNameGenerator:
	def test_base_when_free(self) -> None:
		assert NameGenerator().fresh("$tmp") == "$tmp"

	def test_suffixes_avoid_reserved_and_previous_names(self) -> None:
		names = NameGenerator({"$tmp", "$tmp2"})
		assert names.fresh("$tmp") == "$tmp1"
		assert names.fresh("$tmp") == "$tmp3"
		assert "$tmp3" in names

	def test_reserve(self) -> None:
		names = NameGenerator()
		names.reserve("x")
		assert names.fresh("x") == "x1"


class TestCollect:
	def test_collects_every_identifier(self) -> None:
		assert collect_identifier_names(_program("a", "b", "a")) == {"a", "b"}


class TestHelperNames:
	def test_default_names(self) -> None:
		state = TransformState.for_tree(_program("x"), RunOptions(importer=_sync_importer))
		assert state.use_unary_fn() == "$__"
		assert state.use_binary_fn() == "__$__"
		assert state.use_import_fn() == "$import"

	def test_names_avoid_user_identifiers(self) -> None:
		state = TransformState.for_tree(_program("__$__", "$__"), RunOptions())
		assert state.use_binary_fn() == "__$__1"
		assert state.use_unary_fn() == "$__1"

	def test_binding_is_stable(self) -> None:
		state = TransformState.for_tree(_program(), RunOptions())
		assert state.use_binary_fn() == state.use_binary_fn()
		assert state.binary_fn_used is True
		assert state.unary_fn_used is False

	def test_temporaries_are_unique(self) -> None:
		state = TransformState.for_tree(_program("$tmp"), RunOptions())
		assert state.fresh_temp() == "$tmp1"
		assert state.fresh_temp() == "$tmp2"


class TestAsyncImporter:
	def test_detected_from_coroutine_function(self) -> None:
		assert importer_is_async(RunOptions(importer=_async_importer)) is True
		assert importer_is_async(RunOptions(importer=_sync_importer)) is False
		assert importer_is_async(RunOptions()) is False

	def test_explicit_flag_wins(self) -> None:
		options = RunOptions(importer=_sync_importer, import_is_async=True)
		assert importer_is_async(options) is True

	def test_async_import_sets_has_await(self) -> None:
		state = TransformState.for_tree(_program(), RunOptions(importer=_async_importer))
		assert state.has_await is False
		state.use_import_fn()
		assert state.has_await is True

	def test_sync_import_leaves_has_await(self) -> None:
		state = TransformState.for_tree(_program(), RunOptions(importer=_sync_importer))
		state.use_import_fn()
		assert state.has_await is False


class TestHelperBindings:
	def test_only_used_helpers_in_stable_order(self) -> None:
		state = TransformState.for_tree(_program(), RunOptions(importer=_sync_importer))
		assert state.helper_bindings() == []

		state.use_import_fn()
		state.use_binary_fn()
		state.use_unary_fn()
		assert state.helper_bindings() == [
			("$__", unary_dispatch),
			("__$__", binary_dispatch),
			("$import", _sync_importer),
		]
