"""Whole-program finalisation and bookkeeping rules."""

from __future__ import annotations

from dunderjs.nodes import (
	Node,
	object_expression,
	object_property,
	return_statement,
	spread_element,
)
from dunderjs.state import ExportRecord, TransformState
from dunderjs.walker import RuleTable, Step


def _same_name(key: Node | None, value: Node) -> bool:
	return (
		key is not None
		and key.type == "Identifier"
		and value.type == "Identifier"
		and key.name == value.name
	)


def exports_object(records: list[ExportRecord]) -> Node:
	"""Build the object literal the program returns, in registration order."""
	properties: list[Node] = []
	for record in records:
		if record.spread:
			properties.append(spread_element(record.declaration))
			continue
		key = record.exported
		value = record.declaration
		assert key is not None, "keyed export record without a key"
		if key is value:
			# A node may only fill one slot of the tree
			key = Node(key.type, **dict(key.fields()))
		properties.append(
			object_property(key, value, shorthand=_same_name(key, value))
		)
	return object_expression(properties)


def program(step: Step[TransformState]) -> None:
	"""Turn the program into a block, ending in `return {...exports}`.

	Only the root program is finalised. In "return" mode the block is left to
	produce its own result.
	"""
	if not step.is_root:
		return
	node = step.node
	node.type = "BlockStatement"
	vars(node).pop("sourceType", None)
	if step.state.options.returns == "exports":
		node.body.append(return_statement(exports_object(step.state.exports)))


def await_expression(step: Step[TransformState]) -> None:
	step.state.has_await = True


def for_of_statement(step: Step[TransformState]) -> None:
	# `for await (...)` suspends like `await`
	if step.node.get("await"):
		step.state.has_await = True


def identifier(step: Step[TransformState]) -> None:
	step.state.identifiers.add(step.node.name)


GENERIC_RULES: RuleTable[TransformState] = {
	"Program": program,
	"AwaitExpression": await_expression,
	"ForOfStatement": for_of_statement,
	"Identifier": identifier,
}

__all__ = ["GENERIC_RULES", "exports_object"]
