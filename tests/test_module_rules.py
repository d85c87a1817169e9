"""Tests for import/export lowering."""

from __future__ import annotations

from typing import Any

import pytest
from dunderjs.codegen import emit
from dunderjs.errors import ConfigurationError, MalformedInputError
from dunderjs.nodes import Node
from dunderjs.options import RunOptions
from dunderjs.rules.generic import exports_object
from dunderjs.state import ExportRecord, TransformState
from dunderjs.transformer import transform

Json = dict[str, Any]


def _sync_importer(source: str) -> dict[str, Any]:
	return {}


async def _async_importer(source: str) -> dict[str, Any]:
	return {}


# =============================================================================
# ESTree helpers (acorn output shapes)
# =============================================================================


def _id(name: str) -> Json:
	return {"type": "Identifier", "name": name}


def _lit(value: Any) -> Json:
	return {"type": "Literal", "value": value, "raw": repr(value)}


def _const(id: Json, init: Json | None) -> Json:
	return {
		"type": "VariableDeclaration",
		"kind": "const",
		"declarations": [{"type": "VariableDeclarator", "id": id, "init": init}],
	}


def _import(source: str, *specifiers: Json) -> Json:
	return {"type": "ImportDeclaration", "specifiers": list(specifiers), "source": _lit(source)}


def _export_named(
	declaration: Json | None = None,
	specifiers: list[Json] | None = None,
	source: str | None = None,
) -> Json:
	return {
		"type": "ExportNamedDeclaration",
		"declaration": declaration,
		"specifiers": specifiers or [],
		"source": _lit(source) if source is not None else None,
	}


def _export_specifier(local: str, exported: str | None = None) -> Json:
	return {"type": "ExportSpecifier", "local": _id(local), "exported": _id(exported or local)}


def _lower(*body: Json, **options: Any) -> tuple[str, TransformState]:
	tree = Node.from_dict({"type": "Program", "sourceType": "module", "body": list(body)})
	options.setdefault("importer", _sync_importer)
	state = transform(tree, RunOptions(**options))
	return emit(tree), state


# =============================================================================
# Imports
# =============================================================================


class TestImport:
	def test_namespace(self) -> None:
		code, state = _lower(_import("m", {"type": "ImportNamespaceSpecifier", "local": _id("ns")}))
		assert code == '{\nconst ns = $import("m");\nreturn {};\n}'
		assert state.import_fn_used is True
		assert state.has_await is False

	def test_default_and_named(self) -> None:
		code, _ = _lower(
			_import(
				"m",
				{"type": "ImportDefaultSpecifier", "local": _id("d")},
				{"type": "ImportSpecifier", "imported": _id("a"), "local": _id("a")},
				{"type": "ImportSpecifier", "imported": _id("b"), "local": _id("c")},
			)
		)
		assert code == '{\nconst { "default": d, a: a, b: c } = $import("m");\nreturn {};\n}'

	def test_async_importer_is_awaited(self) -> None:
		code, state = _lower(
			_import("m", {"type": "ImportNamespaceSpecifier", "local": _id("ns")}),
			importer=_async_importer,
		)
		assert 'const ns = await $import("m");' in code
		assert state.has_await is True

	def test_explicit_async_flag(self) -> None:
		code, state = _lower(
			_import("m", {"type": "ImportNamespaceSpecifier", "local": _id("ns")}),
			import_is_async=True,
		)
		assert "await $import" in code
		assert state.has_await is True

	def test_requires_importer(self) -> None:
		with pytest.raises(ConfigurationError, match="no importer"):
			_lower(
				_import("m", {"type": "ImportNamespaceSpecifier", "local": _id("ns")}),
				importer=None,
			)

	def test_empty_import_rejected(self) -> None:
		with pytest.raises(MalformedInputError, match="Empty import"):
			_lower(_import("m"))

	def test_unknown_specifier_rejected(self) -> None:
		with pytest.raises(MalformedInputError, match="Unknown import specifier"):
			_lower(_import("m", {"type": "ImportFancySpecifier", "local": _id("x")}))

	def test_allowed_in_return_mode(self) -> None:
		code, _ = _lower(
			_import("m", {"type": "ImportNamespaceSpecifier", "local": _id("ns")}),
			returns="return",
		)
		assert code == '{\nconst ns = $import("m");\n}'


# =============================================================================
# Exports
# =============================================================================


class TestExportDeclaration:
	def test_variable(self) -> None:
		code, state = _lower(_export_named(_const(_id("x"), _lit(1))))
		assert code == "{\nconst x = 1;\nreturn { x };\n}"
		assert len(state.exports) == 1

	def test_array_pattern(self) -> None:
		pattern = {
			"type": "ArrayPattern",
			"elements": [
				{"type": "AssignmentPattern", "left": _id("a"), "right": _lit(1)},
				_id("b"),
				None,
				{"type": "RestElement", "argument": _id("c")},
			],
		}
		code, state = _lower(_export_named(_const(pattern, _id("arr"))))
		assert [record.exported.name for record in state.exports] == ["a", "b", "c"]
		assert code == "{\nconst [a = 1, b, , ...c] = arr;\nreturn { a, b, c };\n}"

	def test_object_pattern(self) -> None:
		pattern = {
			"type": "ObjectPattern",
			"properties": [
				{"type": "Property", "key": _id("p"), "value": _id("p"), "shorthand": True, "computed": False, "kind": "init"},
				{"type": "Property", "key": _id("q"), "value": _id("r"), "shorthand": False, "computed": False, "kind": "init"},
				{"type": "RestElement", "argument": _id("rest")},
			],
		}
		code, state = _lower(_export_named(_const(pattern, _id("o"))))
		assert [record.exported.name for record in state.exports] == ["p", "r", "rest"]
		assert code == "{\nconst { p, q: r, ...rest } = o;\nreturn { p, r, rest };\n}"

	def test_nested_patterns(self) -> None:
		pattern = {
			"type": "ArrayPattern",
			"elements": [{"type": "ArrayPattern", "elements": [_id("x"), _id("y")]}],
		}
		_, state = _lower(_export_named(_const(pattern, _id("grid"))))
		assert [record.exported.name for record in state.exports] == ["x", "y"]

	def test_unknown_pattern_element(self) -> None:
		pattern = {
			"type": "ArrayPattern",
			"elements": [{"type": "MemberExpression", "object": _id("a"), "property": _id("b"), "computed": False}],
		}
		with pytest.raises(MalformedInputError, match="Unknown destructuring element"):
			_lower(_export_named(_const(pattern, _id("arr"))))

	def test_function_and_class(self) -> None:
		function = {
			"type": "FunctionDeclaration",
			"id": _id("f"),
			"params": [],
			"body": {"type": "BlockStatement", "body": []},
			"async": False,
			"generator": False,
		}
		klass = {"type": "ClassDeclaration", "id": _id("K"), "superClass": None, "body": {"type": "ClassBody", "body": []}}
		code, _ = _lower(_export_named(function), _export_named(klass))
		assert code == "{\nfunction f() {\n}\nclass K {\n}\nreturn { f, K };\n}"

	def test_export_nodes_have_one_owner(self) -> None:
		tree = Node.from_dict({"type": "Program", "body": [_export_named(_const(_id("x"), _lit(1)))]})
		transform(tree, RunOptions(importer=_sync_importer))
		declared = tree.body[0].declarations[0].id
		prop = tree.body[-1].argument.properties[0]
		assert prop.shorthand is True
		assert len({id(declared), id(prop.key), id(prop.value)}) == 3

	def test_shared_record_node_is_copied_for_the_key(self) -> None:
		name = Node.from_dict(_id("a"))
		(prop,) = exports_object([ExportRecord(name, exported=name)]).properties
		assert prop.value is name
		assert prop.key is not name
		assert prop.key == name

	def test_unknown_declaration(self) -> None:
		with pytest.raises(MalformedInputError, match="Unknown export declaration"):
			_lower(_export_named({"type": "TSEnumDeclaration", "id": _id("E")}))


class TestExportSpecifiers:
	def test_local_specifiers(self) -> None:
		code, _ = _lower(
			_const(_id("a"), _lit(1)),
			_const(_id("b"), _lit(2)),
			_export_named(specifiers=[_export_specifier("a"), _export_specifier("b", "c")]),
		)
		assert code == "{\nconst a = 1;\nconst b = 2;\n;\nreturn { a, c: b };\n}"

	def test_reexport_from_source(self) -> None:
		code, state = _lower(
			_export_named(specifiers=[_export_specifier("a", "b"), _export_specifier("c")], source="m")
		)
		assert code == (
			'{\nconst { a: $tmp, c: $tmp1 } = $import("m");\nreturn { b: $tmp, c: $tmp1 };\n}'
		)
		assert state.import_fn_used is True

	def test_reexport_requires_importer(self) -> None:
		with pytest.raises(ConfigurationError):
			_lower(_export_named(specifiers=[_export_specifier("a")], source="m"), importer=None)


class TestExportDefaultAndAll:
	def test_default(self) -> None:
		code, _ = _lower({"type": "ExportDefaultDeclaration", "declaration": _lit(42)})
		assert code == "{\n;\nreturn { default: 42 };\n}"

	def test_named_function_stays_declared(self) -> None:
		function = {
			"type": "FunctionDeclaration",
			"id": _id("f"),
			"params": [],
			"body": {"type": "BlockStatement", "body": []},
			"async": False,
			"generator": False,
		}
		code, _ = _lower({"type": "ExportDefaultDeclaration", "declaration": function})
		assert code == "{\nfunction f() {\n}\nreturn { default: f };\n}"

	def test_named_class_stays_declared(self) -> None:
		klass = {"type": "ClassDeclaration", "id": _id("C"), "superClass": None, "body": {"type": "ClassBody", "body": []}}
		code, _ = _lower({"type": "ExportDefaultDeclaration", "declaration": klass})
		assert code == "{\nclass C {\n}\nreturn { default: C };\n}"

	def test_anonymous_function_is_the_value(self) -> None:
		function = {
			"type": "FunctionDeclaration",
			"id": None,
			"params": [],
			"body": {"type": "BlockStatement", "body": []},
			"async": False,
			"generator": False,
		}
		code, _ = _lower({"type": "ExportDefaultDeclaration", "declaration": function})
		assert code == "{\n;\nreturn { default: function() {\n} };\n}"

	def test_star_spreads(self) -> None:
		code, _ = _lower({"type": "ExportAllDeclaration", "source": _lit("m"), "exported": None})
		assert code == '{\n;\nreturn { ...$import("m") };\n}'

	def test_star_as_namespace(self) -> None:
		code, _ = _lower({"type": "ExportAllDeclaration", "source": _lit("m"), "exported": _id("ns")})
		assert code == '{\n;\nreturn { ns: $import("m") };\n}'

	def test_async_star(self) -> None:
		code, state = _lower(
			{"type": "ExportAllDeclaration", "source": _lit("m"), "exported": None},
			importer=_async_importer,
		)
		assert 'return { ...await $import("m") };' in code
		assert state.has_await is True


class TestExportConfiguration:
	@pytest.mark.parametrize(
		"statement",
		[
			_export_named(_const(_id("x"), _lit(1))),
			{"type": "ExportDefaultDeclaration", "declaration": _lit(1)},
			{"type": "ExportAllDeclaration", "source": _lit("m"), "exported": None},
		],
	)
	def test_exports_rejected_in_return_mode(self, statement: Json) -> None:
		with pytest.raises(ConfigurationError, match="returns='exports'"):
			_lower(statement, returns="return")

	def test_exports_keep_program_order(self) -> None:
		code, _ = _lower(
			{"type": "ExportDefaultDeclaration", "declaration": _lit(0)},
			_export_named(_const(_id("z"), _lit(1))),
			{"type": "ExportAllDeclaration", "source": _lit("m"), "exported": None},
			_export_named(_const(_id("a"), _lit(2))),
		)
		assert code.endswith('return { default: 0, z, ...$import("m"), a };\n}')

	def test_exports_combine_with_operators(self) -> None:
		code, state = _lower(
			_export_named(
				_const(_id("y"), {"type": "BinaryExpression", "operator": "+", "left": _id("x"), "right": _lit(1)})
			)
		)
		assert code == '{\nconst y = __$__(x, "+", 1);\nreturn { y };\n}'
		assert state.binary_fn_used is True
