"""ESTree syntax tree model.

Nodes are tagged records: `type` holds the ESTree kind ("BinaryExpression",
"Identifier", ...) and every other field is a plain attribute. Trees usually
come from an external ESTree parser as JSON and enter through
`Node.from_dict()`; the rewrite rules build new nodes with the builders at the
bottom of this module.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Literal as Lit, TypeAlias

from typing_extensions import override

JsonValue: TypeAlias = Any


class Node:
	"""A single ESTree node.

	Fields are stored as instance attributes so rules read them naturally
	(`node.left`, `node.operator`). Source ranges, when the parser provides them,
	live in the ordinary `start` / `end` fields.
	"""

	type: str

	def __init__(self, type: str, **fields: Any) -> None:
		self.type = type
		for name, value in fields.items():
			setattr(self, name, value)

	# -------------------------------------------------------------------------
	# Field access
	# -------------------------------------------------------------------------

	def fields(self) -> Iterator[tuple[str, Any]]:
		"""Iterate over (name, value) pairs, excluding the kind tag."""
		for name, value in vars(self).items():
			if name != "type":
				yield name, value

	def get(self, name: str, default: Any = None) -> Any:
		return vars(self).get(name, default)

	def overwrite(self, other: Node) -> None:
		"""Replace this node's kind and fields with those of `other`."""
		replacement = dict(vars(other))
		state = vars(self)
		state.clear()
		state.update(replacement)

	# -------------------------------------------------------------------------
	# JSON interop
	# -------------------------------------------------------------------------

	@staticmethod
	def from_dict(data: Mapping[str, Any]) -> Node:
		"""Build a tree from ESTree JSON (acorn, esprima, meriyah output)."""
		if "type" not in data:
			raise ValueError("ESTree node dict is missing its 'type' field")
		root = Node(data["type"])
		pending: list[tuple[Node, Mapping[str, Any]]] = [(root, data)]
		while pending:
			node, source = pending.pop()
			for key, value in source.items():
				if key != "type":
					setattr(node, key, _from_json(value, pending))
		return root

	def to_dict(self) -> dict[str, JsonValue]:
		root: dict[str, JsonValue] = {"type": self.type}
		pending: list[tuple[Node, dict[str, JsonValue]]] = [(self, root)]
		while pending:
			node, out = pending.pop()
			for name, value in node.fields():
				out[name] = _to_json(value, pending)
		return root

	# -------------------------------------------------------------------------
	# Dunder helpers
	# -------------------------------------------------------------------------

	@override
	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Node):
			return NotImplemented
		return vars(self) == vars(other)

	__hash__ = None  # pyright: ignore[reportAssignmentType]

	@override
	def __repr__(self) -> str:
		parts = [repr(self.type)]
		parts.extend(
			f"{name}={value!r}"
			for name, value in self.fields()
			if name not in {"start", "end", "loc", "range"}
		)
		return f"Node({', '.join(parts)})"


def _from_json(value: Any, pending: list[tuple[Node, Mapping[str, Any]]]) -> Any:
	"""Convert one field value; nested nodes are created empty and queued."""
	if isinstance(value, Mapping) and "type" in value:
		node = Node(value["type"])
		pending.append((node, value))  # pyright: ignore[reportUnknownArgumentType]
		return node
	if isinstance(value, list):
		return [_from_json(v, pending) for v in value]  # pyright: ignore[reportUnknownVariableType]
	return value


def _to_json(value: Any, pending: list[tuple[Node, dict[str, Any]]]) -> Any:
	if isinstance(value, Node):
		out: dict[str, Any] = {"type": value.type}
		pending.append((value, out))
		return out
	if isinstance(value, list):
		return [_to_json(v, pending) for v in value]  # pyright: ignore[reportUnknownVariableType]
	return value


def is_node(value: object, kind: str | None = None) -> bool:
	"""True if `value` is a Node (of the given kind, when one is passed)."""
	if not isinstance(value, Node):
		return False
	return kind is None or value.type == kind


# =============================================================================
# Structural child fields per node kind
# =============================================================================

VISITOR_KEYS: Mapping[str, tuple[str, ...]] = {
	"Program": ("body",),
	"ExpressionStatement": ("expression",),
	"BlockStatement": ("body",),
	"StaticBlock": ("body",),
	"EmptyStatement": (),
	"DebuggerStatement": (),
	"WithStatement": ("object", "body"),
	"ReturnStatement": ("argument",),
	"LabeledStatement": ("label", "body"),
	"BreakStatement": ("label",),
	"ContinueStatement": ("label",),
	"IfStatement": ("test", "consequent", "alternate"),
	"SwitchStatement": ("discriminant", "cases"),
	"SwitchCase": ("test", "consequent"),
	"ThrowStatement": ("argument",),
	"TryStatement": ("block", "handler", "finalizer"),
	"CatchClause": ("param", "body"),
	"WhileStatement": ("test", "body"),
	"DoWhileStatement": ("body", "test"),
	"ForStatement": ("init", "test", "update", "body"),
	"ForInStatement": ("left", "right", "body"),
	"ForOfStatement": ("left", "right", "body"),
	"FunctionDeclaration": ("id", "params", "body"),
	"VariableDeclaration": ("declarations",),
	"VariableDeclarator": ("id", "init"),
	"Identifier": (),
	"PrivateIdentifier": (),
	"Literal": (),
	"ThisExpression": (),
	"Super": (),
	"ArrayExpression": ("elements",),
	"ObjectExpression": ("properties",),
	"Property": ("key", "value"),
	"FunctionExpression": ("id", "params", "body"),
	"ArrowFunctionExpression": ("params", "body"),
	"UnaryExpression": ("argument",),
	"UpdateExpression": ("argument",),
	"BinaryExpression": ("left", "right"),
	"AssignmentExpression": ("left", "right"),
	"LogicalExpression": ("left", "right"),
	"MemberExpression": ("object", "property"),
	"ConditionalExpression": ("test", "consequent", "alternate"),
	"CallExpression": ("callee", "arguments"),
	"NewExpression": ("callee", "arguments"),
	"SequenceExpression": ("expressions",),
	"SpreadElement": ("argument",),
	"YieldExpression": ("argument",),
	"AwaitExpression": ("argument",),
	"TemplateLiteral": ("quasis", "expressions"),
	"TemplateElement": (),
	"TaggedTemplateExpression": ("tag", "quasi"),
	"ObjectPattern": ("properties",),
	"ArrayPattern": ("elements",),
	"RestElement": ("argument",),
	"AssignmentPattern": ("left", "right"),
	"ClassBody": ("body",),
	"MethodDefinition": ("key", "value"),
	"PropertyDefinition": ("key", "value"),
	"ClassDeclaration": ("id", "superClass", "body"),
	"ClassExpression": ("id", "superClass", "body"),
	"MetaProperty": ("meta", "property"),
	"ImportDeclaration": ("specifiers", "source"),
	"ImportSpecifier": ("imported", "local"),
	"ImportDefaultSpecifier": ("local",),
	"ImportNamespaceSpecifier": ("local",),
	"ImportExpression": ("source",),
	"ExportNamedDeclaration": ("declaration", "specifiers", "source"),
	"ExportSpecifier": ("local", "exported"),
	"ExportDefaultDeclaration": ("declaration",),
	"ExportAllDeclaration": ("source", "exported"),
	"ChainExpression": ("expression",),
	"ParenthesizedExpression": ("expression",),
}


def child_keys(node: Node) -> Sequence[str]:
	"""Names of the fields of `node` that may hold child nodes.

	Known kinds use VISITOR_KEYS; unknown kinds fall back to every field that
	currently holds a node or a list containing nodes.
	"""
	keys = VISITOR_KEYS.get(node.type)
	if keys is not None:
		return keys
	found: list[str] = []
	for name, value in node.fields():
		if isinstance(value, Node):
			found.append(name)
		elif isinstance(value, list) and any(isinstance(v, Node) for v in value):  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
			found.append(name)
	return found


# =============================================================================
# Builders
# =============================================================================

Expression: TypeAlias = Node
Statement: TypeAlias = Node
Pattern: TypeAlias = Node


def identifier(name: str) -> Node:
	return Node("Identifier", name=name)


def literal(value: str | int | float | bool | None) -> Node:
	return Node("Literal", value=value)


def call_expression(callee: Expression, arguments: Sequence[Expression]) -> Node:
	return Node("CallExpression", callee=callee, arguments=list(arguments), optional=False)


def arrow_function(
	params: Sequence[Pattern],
	body: Node,
	*,
	is_async: bool = False,
) -> Node:
	return Node(
		"ArrowFunctionExpression",
		id=None,
		params=list(params),
		body=body,
		expression=body.type != "BlockStatement",
		generator=False,
		**{"async": is_async},
	)


def block_statement(*body: Statement) -> Node:
	return Node("BlockStatement", body=list(body))


def return_statement(argument: Expression | None = None) -> Node:
	return Node("ReturnStatement", argument=argument)


def expression_statement(expression: Expression) -> Node:
	return Node("ExpressionStatement", expression=expression)


def assignment_expression(left: Pattern, operator: str, right: Expression) -> Node:
	return Node("AssignmentExpression", operator=operator, left=left, right=right)


def try_statement(
	block: Node,
	handler: Node | None = None,
	finalizer: Node | None = None,
) -> Node:
	return Node("TryStatement", block=block, handler=handler, finalizer=finalizer)


def await_expression(argument: Expression) -> Node:
	return Node("AwaitExpression", argument=argument)


def parenthesized_expression(expression: Expression) -> Node:
	return Node("ParenthesizedExpression", expression=expression)


def variable_declarator(id: Pattern, init: Expression | None = None) -> Node:
	return Node("VariableDeclarator", id=id, init=init)


def variable_declaration(
	kind: Lit["const", "let", "var"],
	declarations: Sequence[Node],
) -> Node:
	return Node("VariableDeclaration", kind=kind, declarations=list(declarations))


def object_property(
	key: Expression,
	value: Node,
	*,
	shorthand: bool = False,
	computed: bool = False,
) -> Node:
	return Node(
		"Property",
		key=key,
		value=value,
		kind="init",
		method=False,
		shorthand=shorthand,
		computed=computed,
	)


def object_pattern(properties: Sequence[Node]) -> Node:
	return Node("ObjectPattern", properties=list(properties))


def object_expression(properties: Sequence[Node]) -> Node:
	return Node("ObjectExpression", properties=list(properties))


def spread_element(argument: Expression) -> Node:
	return Node("SpreadElement", argument=argument)


def empty_statement() -> Node:
	return Node("EmptyStatement")


def is_async_function(node: Node) -> bool:
	"""Read the `async` flag of a function node (a Python keyword, so no attribute access)."""
	return bool(node.get("async", False))


__all__ = [
	"VISITOR_KEYS",
	"Expression",
	"Node",
	"Pattern",
	"Statement",
	"arrow_function",
	"assignment_expression",
	"await_expression",
	"block_statement",
	"call_expression",
	"child_keys",
	"empty_statement",
	"expression_statement",
	"identifier",
	"is_async_function",
	"is_node",
	"literal",
	"object_expression",
	"object_pattern",
	"parenthesized_expression",
	"object_property",
	"return_statement",
	"spread_element",
	"try_statement",
	"variable_declaration",
	"variable_declarator",
]
