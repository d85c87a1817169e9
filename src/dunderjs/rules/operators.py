"""Rewrite operator expressions into dispatch calls.

```js
-x        ->  $__("-", x)
a + b     ->  __$__(a, "+", b)
x += v    ->  (() => { x = __$__(x, "+", v); return x; })()
x += await p  ->  await (async () => { x = __$__(x, "+", await p); return x; })()
x += yield v  ->  x = __$__(x, "+", yield v)
++x       ->  (() => { x = __$__(x, "+", 1); return x; })()
x++       ->  (() => { try { return x; } finally { x = __$__(x, "+", 1); } })()
```

Updates and compound assignments are only rewritten when their target is a
plain identifier. Member targets (`a.b += 1`) are left untouched. A `yield`
cannot cross a function boundary, so values containing one skip the wrapper;
the assignment expression already evaluates to the new value.
"""

from __future__ import annotations

from typing import Any

from dunderjs.nodes import (
	Node,
	arrow_function,
	assignment_expression,
	await_expression,
	block_statement,
	call_expression,
	child_keys,
	expression_statement,
	identifier,
	literal,
	return_statement,
	try_statement,
)
from dunderjs.operators import BINARY_OPERATORS, UNARY_OPERATORS
from dunderjs.state import TransformState
from dunderjs.walker import RuleTable, Step

_FUNCTION_KINDS = frozenset(
	{"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
)


def _contains(root: Node, kind: str) -> bool:
	"""True if a `kind` node occurs in `root` outside nested functions."""
	stack: list[Node] = [root]
	while stack:
		node = stack.pop()
		if node.type == kind:
			return True
		if node.type in _FUNCTION_KINDS:
			continue
		for key in child_keys(node):
			value: Any = node.get(key)
			if isinstance(value, Node):
				stack.append(value)
			elif isinstance(value, list):
				stack.extend(v for v in value if isinstance(v, Node))  # pyright: ignore[reportUnknownVariableType]
	return False


def _iife(*body: Node, is_async: bool = False) -> Node:
	"""`(() => { ...body })()`, or `await (async () => { ...body })()`"""
	call = call_expression(
		arrow_function([], block_statement(*body), is_async=is_async), []
	)
	if is_async:
		return await_expression(call)
	return call


def _binary_call(state: TransformState, left: Node, token: str, right: Node) -> Node:
	return call_expression(
		identifier(state.use_binary_fn()),
		[left, literal(token), right],
	)


def _assign_then_return(
	state: TransformState, target: Node, token: str, value: Node
) -> Node:
	assignment = assignment_expression(
		identifier(target.name),
		"=",
		_binary_call(state, identifier(target.name), token, value),
	)
	if _contains(value, "YieldExpression"):
		return assignment
	return _iife(
		expression_statement(assignment),
		return_statement(identifier(target.name)),
		is_async=_contains(value, "AwaitExpression"),
	)


def _return_then_assign(state: TransformState, target: Node, token: str) -> Node:
	assignment = assignment_expression(
		identifier(target.name),
		"=",
		_binary_call(state, identifier(target.name), token, literal(1)),
	)
	return _iife(
		try_statement(
			block_statement(return_statement(identifier(target.name))),
			finalizer=block_statement(expression_statement(assignment)),
		)
	)


# =============================================================================
# Rules
# =============================================================================


def unary_expression(step: Step[TransformState]) -> None:
	state = step.state
	if not state.options.operator_overloading:
		return
	node = step.node
	if node.operator not in UNARY_OPERATORS:
		return
	step.replace_with(
		call_expression(
			identifier(state.use_unary_fn()),
			[literal(node.operator), node.argument],
		)
	)


def binary_expression(step: Step[TransformState]) -> None:
	"""Also used for LogicalExpression; both operands are always evaluated."""
	state = step.state
	if not state.options.operator_overloading:
		return
	node = step.node
	if node.operator not in BINARY_OPERATORS:
		return
	step.replace_with(_binary_call(state, node.left, node.operator, node.right))


def update_expression(step: Step[TransformState]) -> None:
	state = step.state
	if not state.options.operator_overloading:
		return
	node = step.node
	token = node.operator[0]
	if token not in BINARY_OPERATORS:
		return
	if node.argument.type != "Identifier":
		return
	if node.prefix:
		step.replace_with(_assign_then_return(state, node.argument, token, literal(1)))
	else:
		step.replace_with(_return_then_assign(state, node.argument, token))


def assignment(step: Step[TransformState]) -> None:
	state = step.state
	if not state.options.operator_overloading:
		return
	node = step.node
	if node.operator == "=":
		return
	token = node.operator[:-1]
	if token not in BINARY_OPERATORS:
		return
	if node.left.type != "Identifier":
		return
	step.replace_with(_assign_then_return(state, node.left, token, node.right))


OPERATOR_RULES: RuleTable[TransformState] = {
	"UnaryExpression": unary_expression,
	"BinaryExpression": binary_expression,
	"LogicalExpression": binary_expression,
	"UpdateExpression": update_expression,
	"AssignmentExpression": assignment,
}

__all__ = ["OPERATOR_RULES"]
