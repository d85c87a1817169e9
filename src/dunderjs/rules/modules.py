"""Lower import and export declarations into plain calls.

```js
import * as ns from "m"         ->  const ns = $import("m")
import d, { a, b as c } from "m"  ->  const { default: d, a: a, b: c } = $import("m")
export const x = 1              ->  const x = 1          (records x)
export default expr             ->  ;                    (records default: expr)
export default function f() {}  ->  function f() {}       (records default: f)
export * from "m"               ->  ;                    (records ...$import("m"))
export { a as b } from "m"      ->  const { a: $tmp } = $import("m")   (records b: $tmp)
```

Recorded exports are turned into the program's return value by the Program
rule. When the importer is a coroutine function every `$import(...)` call is
awaited.
"""

from __future__ import annotations

import logging

from dunderjs.errors import ConfigurationError, MalformedInputError
from dunderjs.nodes import (
	Node,
	await_expression,
	call_expression,
	empty_statement,
	identifier,
	literal,
	object_pattern,
	object_property,
	variable_declaration,
	variable_declarator,
)
from dunderjs.state import ExportRecord, TransformState
from dunderjs.walker import RuleTable, Step

logger = logging.getLogger(__name__)


def import_call(source: Node, state: TransformState) -> Node:
	"""`$import(source)`, awaited when the importer is asynchronous."""
	if state.importer is None:
		raise ConfigurationError(
			f"Cannot import {source.get('value')!r}: no importer is configured"
		)
	call = call_expression(identifier(state.use_import_fn()), [source])
	if state.import_is_async:
		return await_expression(call)
	return call


def _require_exports_mode(state: TransformState) -> None:
	if state.options.returns != "exports":
		raise ConfigurationError(
			"export declarations are only allowed when returns='exports' "
			f"(got returns={state.options.returns!r})"
		)


def _const(id: Node, init: Node) -> Node:
	return variable_declaration("const", [variable_declarator(id, init)])


# =============================================================================
# Imports
# =============================================================================


def import_declaration(step: Step[TransformState]) -> None:
	node = step.node
	specifiers: list[Node] = node.specifiers
	if not specifiers:
		raise MalformedInputError(
			f"Empty import from {node.source.get('value')!r} is not allowed"
		)
	call = import_call(node.source, step.state)

	if len(specifiers) == 1 and specifiers[0].type == "ImportNamespaceSpecifier":
		step.replace_with(_const(identifier(specifiers[0].local.name), call))
		return

	properties: list[Node] = []
	for specifier in specifiers:
		match specifier.type:
			case "ImportDefaultSpecifier":
				properties.append(object_property(literal("default"), specifier.local))
			case "ImportSpecifier":
				properties.append(object_property(specifier.imported, specifier.local))
			case _:
				raise MalformedInputError(f"Unknown import specifier: {specifier.type}")
	step.replace_with(_const(object_pattern(properties), call))


# =============================================================================
# Exports
# =============================================================================


def _bound_names(pattern: Node) -> list[Node]:
	"""The identifier nodes a declaration pattern binds, in source order."""
	match pattern.type:
		case "Identifier":
			return [pattern]
		case "AssignmentPattern":
			return _bound_names(pattern.left)
		case "RestElement":
			return _bound_names(pattern.argument)
		case "ObjectPattern":
			names: list[Node] = []
			for prop in pattern.properties:
				if prop.type == "Property":
					names.extend(_bound_names(prop.value))
				else:
					names.extend(_bound_names(prop.argument))
			return names
		case "ArrayPattern":
			names = []
			for element in pattern.elements:
				# Holes bind nothing
				if element is not None:
					names.extend(_bound_names(element))
			return names
		case _:
			raise MalformedInputError(f"Unknown destructuring element: {pattern.type}")


def _declared_names(declaration: Node) -> list[Node]:
	match declaration.type:
		case "VariableDeclaration":
			names: list[Node] = []
			for declarator in declaration.declarations:
				names.extend(_bound_names(declarator.id))
			return names
		case "FunctionDeclaration" | "ClassDeclaration":
			return [declaration.id]
		case _:
			raise MalformedInputError(f"Unknown export declaration: {declaration.type}")


def _export_from(step: Step[TransformState]) -> None:
	"""`export { a, b as c } from "m"`"""
	state = step.state
	node = step.node
	call = import_call(node.source, state)
	properties: list[Node] = []
	for specifier in node.specifiers:
		temp = state.fresh_temp()
		properties.append(object_property(specifier.local, identifier(temp)))
		state.exports.append(ExportRecord(identifier(temp), exported=specifier.exported))
	# `export {} from "m"` still loads the module
	step.replace_with(_const(object_pattern(properties), call))


def export_named_declaration(step: Step[TransformState]) -> None:
	state = step.state
	_require_exports_mode(state)
	node = step.node

	if node.get("source") is not None:
		_export_from(step)
		return

	declaration = node.get("declaration")
	if declaration is not None:
		for name in _declared_names(declaration):
			# The declaration keeps its own id nodes
			state.exports.append(
				ExportRecord(identifier(name.name), exported=identifier(name.name))
			)
		step.replace_with(declaration)
		return

	# `export { a, b as c }`
	for specifier in node.get("specifiers") or []:
		state.exports.append(ExportRecord(specifier.local, exported=specifier.exported))
	step.replace_with(empty_statement())


def export_default_declaration(step: Step[TransformState]) -> None:
	"""`export default expr`, or a named function or class that stays declared."""
	state = step.state
	_require_exports_mode(state)
	declaration = step.node.declaration
	name = declaration.get("id")
	if declaration.type in {"FunctionDeclaration", "ClassDeclaration"} and name is not None:
		state.exports.append(
			ExportRecord(identifier(name.name), exported=identifier("default"))
		)
		step.replace_with(declaration)
		return
	state.exports.append(ExportRecord(declaration, exported=identifier("default")))
	step.replace_with(empty_statement())


def export_all_declaration(step: Step[TransformState]) -> None:
	state = step.state
	_require_exports_mode(state)
	node = step.node
	call = import_call(node.source, state)
	exported = node.get("exported")
	if exported is not None:
		state.exports.append(ExportRecord(call, exported=exported))
	else:
		state.exports.append(ExportRecord(call, spread=True))
	logger.debug("Re-exporting everything from %r", node.source.get("value"))
	step.replace_with(empty_statement())


MODULE_RULES: RuleTable[TransformState] = {
	"ImportDeclaration": import_declaration,
	"ExportNamedDeclaration": export_named_declaration,
	"ExportDefaultDeclaration": export_default_declaration,
	"ExportAllDeclaration": export_all_declaration,
}

__all__ = ["MODULE_RULES", "import_call"]
