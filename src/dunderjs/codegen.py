"""
ESTree -> JavaScript source text.

A compact emitter for rewritten trees. Output is not indented; statements are
separated by newlines and blocks open with `{` followed by a newline:

```js
const x = __$__(a, "+", 1);
if (x) {
return x;
}
```

Module declarations must have been lowered before emission.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from dunderjs.errors import CodegenError
from dunderjs.nodes import Node, is_async_function
from dunderjs.values import number_to_string

# Emitters write text and child nodes; emit() expands the nodes in order
Output: TypeAlias = list[str | Node]
Emitter = Callable[[Node, Output], None]

_PRECEDENCE: dict[str, int] = {
	# Comma
	",": 1,
	# Assignment, arrow, yield (right-assoc)
	"=": 3,
	# Ternary
	"?:": 4,
	# Logical
	"??": 5,
	"||": 6,
	"&&": 7,
	# Bitwise
	"|": 8,
	"^": 9,
	"&": 10,
	# Equality
	"==": 11,
	"!=": 11,
	"===": 11,
	"!==": 11,
	# Relational
	"<": 12,
	"<=": 12,
	">": 12,
	">=": 12,
	"in": 12,
	"instanceof": 12,
	# Shift
	"<<": 13,
	">>": 13,
	">>>": 13,
	# Additive
	"+": 14,
	"-": 14,
	# Multiplicative
	"*": 15,
	"/": 15,
	"%": 15,
	# Exponentiation (right-assoc)
	"**": 16,
	# Unary / await
	"unary": 17,
	# Postfix update
	"postfix": 18,
	# Member, call, new
	"member": 20,
	"primary": 21,
}

_MODULE_KINDS = frozenset(
	{
		"ImportDeclaration",
		"ExportNamedDeclaration",
		"ExportDefaultDeclaration",
		"ExportAllDeclaration",
	}
)


def precedence(node: Node) -> int:
	"""Binding strength of an expression node (higher binds tighter)."""
	match node.type:
		case "SequenceExpression":
			return _PRECEDENCE[","]
		case "AssignmentExpression" | "ArrowFunctionExpression" | "YieldExpression":
			return _PRECEDENCE["="]
		case "ConditionalExpression":
			return _PRECEDENCE["?:"]
		case "BinaryExpression" | "LogicalExpression":
			return _PRECEDENCE[node.operator]
		case "UnaryExpression" | "AwaitExpression":
			return _PRECEDENCE["unary"]
		case "UpdateExpression":
			return _PRECEDENCE["unary"] if node.prefix else _PRECEDENCE["postfix"]
		case (
			"CallExpression"
			| "NewExpression"
			| "MemberExpression"
			| "ChainExpression"
			| "TaggedTemplateExpression"
		):
			return _PRECEDENCE["member"]
		case _:
			return _PRECEDENCE["primary"]


def emit(node: Node) -> str:
	"""Serialize a tree to JavaScript source text."""
	text: list[str] = []
	stack: Output = [node]
	while stack:
		item = stack.pop()
		if isinstance(item, str):
			text.append(item)
			continue
		emitter = _EMITTERS.get(item.type)
		if emitter is None:
			if item.type in _MODULE_KINDS:
				raise CodegenError(f"{item.type} must be lowered before code generation")
			raise CodegenError(f"Cannot emit node of kind {item.type!r}")
		parts: Output = []
		emitter(item, parts)
		stack.extend(reversed(parts))
	return "".join(text)


def _emit(node: Node, out: Output) -> None:
	out.append(node)


def _emit_operand(node: Node, min_prec: int, out: Output) -> None:
	"""Emit child with parens if it binds looser than `min_prec`."""
	if precedence(node) < min_prec:
		out.append("(")
		_emit(node, out)
		out.append(")")
	else:
		_emit(node, out)


def _emit_list(nodes: Sequence[Node | None], out: Output, min_prec: int = 3) -> None:
	for i, node in enumerate(nodes):
		if i > 0:
			out.append(", ")
		if node is not None:
			_emit_operand(node, min_prec, out)
	# A trailing hole needs its own comma
	if nodes and nodes[-1] is None:
		out.append(",")


def _emit_body(statements: Sequence[Node], out: Output) -> None:
	out.append("{\n")
	for stmt in statements:
		_emit(stmt, out)
		out.append("\n")
	out.append("}")


def _escape_string(s: str) -> str:
	"""Escape for double-quoted JS string literals."""
	return (
		s.replace("\\", "\\\\")
		.replace('"', '\\"')
		.replace("\n", "\\n")
		.replace("\r", "\\r")
		.replace("\t", "\\t")
		.replace("\b", "\\b")
		.replace("\f", "\\f")
		.replace("\v", "\\v")
		.replace("\x00", "\\x00")
		.replace("\u2028", "\\u2028")
		.replace("\u2029", "\\u2029")
	)


# =============================================================================
# Literals and names
# =============================================================================


def _literal(node: Node, out: Output) -> None:
	regex: Any = node.get("regex")
	if regex is not None:
		out.append(f"/{regex['pattern']}/{regex['flags']}")
		return
	bigint = node.get("bigint")
	if bigint is not None:
		out.append(f"{bigint}n")
		return
	value = node.get("value")
	if value is None:
		out.append("null")
	elif isinstance(value, bool):
		out.append("true" if value else "false")
	elif isinstance(value, str):
		out.append('"')
		out.append(_escape_string(value))
		out.append('"')
	elif isinstance(value, (int, float)):
		out.append(number_to_string(value))
	else:
		raise CodegenError(f"Cannot emit literal value {value!r}")


def _identifier(node: Node, out: Output) -> None:
	out.append(node.name)


def _private_identifier(node: Node, out: Output) -> None:
	out.append("#")
	out.append(node.name)


def _this(node: Node, out: Output) -> None:
	out.append("this")


def _super(node: Node, out: Output) -> None:
	out.append("super")


def _meta_property(node: Node, out: Output) -> None:
	_emit(node.meta, out)
	out.append(".")
	_emit(node.property, out)


def _template_literal(node: Node, out: Output) -> None:
	out.append("`")
	quasis: list[Node] = node.quasis
	expressions: list[Node] = node.expressions
	for i, quasi in enumerate(quasis):
		out.append(quasi.value["raw"])
		if i < len(expressions):
			out.append("${")
			_emit(expressions[i], out)
			out.append("}")
	out.append("`")


def _tagged_template(node: Node, out: Output) -> None:
	_emit_operand(node.tag, _PRECEDENCE["member"], out)
	_emit(node.quasi, out)


# =============================================================================
# Arrays, objects, patterns
# =============================================================================


def _array(node: Node, out: Output) -> None:
	out.append("[")
	_emit_list(node.elements, out)
	out.append("]")


def _property_key(node: Node, out: Output) -> None:
	if node.get("computed"):
		out.append("[")
		_emit_operand(node.key, 3, out)
		out.append("]")
	else:
		_emit(node.key, out)


def _function_tail(node: Node, out: Output) -> None:
	"""`(params) { body }` shared by functions, methods and accessors."""
	out.append("(")
	_emit_list(node.params, out)
	out.append(") ")
	_emit(node.body, out)


def _property(node: Node, out: Output) -> None:
	kind = node.get("kind", "init")
	value: Node = node.value
	if kind in {"get", "set"} or node.get("method"):
		if kind in {"get", "set"}:
			out.append(f"{kind} ")
		if is_async_function(value):
			out.append("async ")
		if value.get("generator"):
			out.append("*")
		_property_key(node, out)
		_function_tail(value, out)
		return
	if node.get("shorthand") and not node.get("computed"):
		# `{ a }` or, inside patterns, `{ a = 1 }`
		_emit(value, out)
		return
	_property_key(node, out)
	out.append(": ")
	_emit_operand(value, 3, out)


def _object(node: Node, out: Output) -> None:
	properties: list[Node] = node.properties
	if not properties:
		out.append("{}")
		return
	out.append("{ ")
	_emit_list(properties, out)
	out.append(" }")


def _spread(node: Node, out: Output) -> None:
	out.append("...")
	_emit_operand(node.argument, 3, out)


def _assignment_pattern(node: Node, out: Output) -> None:
	_emit(node.left, out)
	out.append(" = ")
	_emit_operand(node.right, 3, out)


# =============================================================================
# Operators
# =============================================================================


def _unary(node: Node, out: Output) -> None:
	op: str = node.operator
	argument: Node = node.argument
	out.append(op)
	if op.isalpha():
		out.append(" ")
	elif op in {"+", "-"} and argument.type in {"UnaryExpression", "UpdateExpression"}:
		# Keep `- -x` from becoming `--x`
		if argument.operator[0] == op and (
			argument.type == "UnaryExpression" or argument.prefix
		):
			out.append(" ")
	_emit_operand(argument, _PRECEDENCE["unary"], out)


def _update(node: Node, out: Output) -> None:
	if node.prefix:
		out.append(node.operator)
		_emit_operand(node.argument, _PRECEDENCE["unary"], out)
	else:
		_emit_operand(node.argument, _PRECEDENCE["member"], out)
		out.append(node.operator)


def _mixes_nullish(parent_op: str, child: Node) -> bool:
	# `a ?? b || c` is a SyntaxError without parens
	if child.type != "LogicalExpression":
		return False
	return (parent_op == "??") != (child.operator == "??")


def _binary(node: Node, out: Output) -> None:
	op: str = node.operator
	prec = _PRECEDENCE[op]
	left: Node = node.left
	right: Node = node.right
	if op == "**":
		# Unary operands of ** must be parenthesised
		left_min, right_min = prec + 2, prec
	else:
		left_min, right_min = prec, prec + 1
	if op in {"??", "&&", "||"} and _mixes_nullish(op, left):
		left_min = _PRECEDENCE["primary"]
	if op in {"??", "&&", "||"} and _mixes_nullish(op, right):
		right_min = _PRECEDENCE["primary"]
	_emit_operand(left, left_min, out)
	out.append(f" {op} ")
	_emit_operand(right, right_min, out)


def _assignment(node: Node, out: Output) -> None:
	_emit(node.left, out)
	out.append(f" {node.operator} ")
	_emit_operand(node.right, _PRECEDENCE["="], out)


def _conditional(node: Node, out: Output) -> None:
	_emit_operand(node.test, _PRECEDENCE["?:"] + 1, out)
	out.append(" ? ")
	_emit_operand(node.consequent, _PRECEDENCE["="], out)
	out.append(" : ")
	_emit_operand(node.alternate, _PRECEDENCE["="], out)


def _sequence(node: Node, out: Output) -> None:
	_emit_list(node.expressions, out)


def _await(node: Node, out: Output) -> None:
	out.append("await ")
	_emit_operand(node.argument, _PRECEDENCE["unary"], out)


def _yield(node: Node, out: Output) -> None:
	out.append("yield*" if node.get("delegate") else "yield")
	if node.get("argument") is not None:
		out.append(" ")
		_emit_operand(node.argument, _PRECEDENCE["="], out)


# =============================================================================
# Calls and members
# =============================================================================


def _emit_object_operand(node: Node, out: Output) -> None:
	"""Emit the object of a member access or the callee of a call."""
	if node.type == "Literal" and isinstance(node.get("value"), (int, float)) and not isinstance(
		node.get("value"), bool
	):
		# `1.toString()` is a syntax error
		out.append("(")
		_emit(node, out)
		out.append(")")
		return
	_emit_operand(node, _PRECEDENCE["member"], out)


def _call(node: Node, out: Output) -> None:
	_emit_object_operand(node.callee, out)
	if node.get("optional"):
		out.append("?.")
	out.append("(")
	_emit_list(node.arguments, out)
	out.append(")")


def _new(node: Node, out: Output) -> None:
	out.append("new ")
	callee: Node = node.callee
	# `new (f())()` differs from `new f()()`
	if callee.type in {"CallExpression", "ChainExpression"} or precedence(callee) < _PRECEDENCE["member"]:
		out.append("(")
		_emit(callee, out)
		out.append(")")
	else:
		_emit(callee, out)
	out.append("(")
	_emit_list(node.arguments, out)
	out.append(")")


def _member(node: Node, out: Output) -> None:
	_emit_object_operand(node.object, out)
	optional = node.get("optional")
	if node.get("computed"):
		out.append("?.[" if optional else "[")
		_emit_operand(node.property, 1, out)
		out.append("]")
	else:
		out.append("?." if optional else ".")
		_emit(node.property, out)


def _chain(node: Node, out: Output) -> None:
	_emit(node.expression, out)


def _parenthesized(node: Node, out: Output) -> None:
	out.append("(")
	_emit(node.expression, out)
	out.append(")")


def _import_expression(node: Node, out: Output) -> None:
	out.append("import(")
	_emit_operand(node.source, 3, out)
	out.append(")")


# =============================================================================
# Functions and classes
# =============================================================================


def _function(node: Node, out: Output) -> None:
	if is_async_function(node):
		out.append("async ")
	out.append("function")
	if node.get("generator"):
		out.append("*")
	if node.get("id") is not None:
		out.append(" ")
		_emit(node.id, out)
	_function_tail(node, out)


def _arrow(node: Node, out: Output) -> None:
	if is_async_function(node):
		out.append("async ")
	out.append("(")
	_emit_list(node.params, out)
	out.append(") => ")
	body: Node = node.body
	if body.type == "BlockStatement":
		_emit(body, out)
	elif _leftmost(body).type == "ObjectExpression" or precedence(body) < _PRECEDENCE["="]:
		# A leading `{` would open a block body
		out.append("(")
		_emit(body, out)
		out.append(")")
	else:
		_emit(body, out)


def _class(node: Node, out: Output) -> None:
	out.append("class")
	if node.get("id") is not None:
		out.append(" ")
		_emit(node.id, out)
	if node.get("superClass") is not None:
		out.append(" extends ")
		_emit_operand(node.superClass, _PRECEDENCE["member"], out)
	out.append(" ")
	_emit(node.body, out)


def _class_body(node: Node, out: Output) -> None:
	_emit_body(node.body, out)


def _method(node: Node, out: Output) -> None:
	if node.get("static"):
		out.append("static ")
	value: Node = node.value
	if is_async_function(value):
		out.append("async ")
	kind = node.get("kind", "method")
	if kind in {"get", "set"}:
		out.append(f"{kind} ")
	if value.get("generator"):
		out.append("*")
	_property_key(node, out)
	_function_tail(value, out)


def _class_property(node: Node, out: Output) -> None:
	if node.get("static"):
		out.append("static ")
	_property_key(node, out)
	if node.get("value") is not None:
		out.append(" = ")
		_emit_operand(node.value, _PRECEDENCE["="], out)
	out.append(";")


def _static_block(node: Node, out: Output) -> None:
	out.append("static ")
	_emit_body(node.body, out)


# =============================================================================
# Statements
# =============================================================================


def _program(node: Node, out: Output) -> None:
	for i, stmt in enumerate(node.body):
		if i > 0:
			out.append("\n")
		_emit(stmt, out)


def _block(node: Node, out: Output) -> None:
	_emit_body(node.body, out)


def _leftmost(node: Node) -> Node:
	"""The expression that starts the printed text of `node`."""
	while True:
		match node.type:
			case "BinaryExpression" | "LogicalExpression" | "AssignmentExpression":
				node = node.left
			case "ConditionalExpression":
				node = node.test
			case "CallExpression" | "TaggedTemplateExpression":
				node = node.callee if node.type == "CallExpression" else node.tag
			case "MemberExpression":
				node = node.object
			case "SequenceExpression":
				node = node.expressions[0]
			case "ChainExpression":
				node = node.expression
			case "UpdateExpression" if not node.prefix:
				node = node.argument
			case _:
				return node


def _expression_statement(node: Node, out: Output) -> None:
	expression: Node = node.expression
	start = _leftmost(expression)
	# `{`, `function` and `class` at statement start would parse as declarations
	if start.type in {"ObjectExpression", "FunctionExpression", "ClassExpression"} or (
		start.type == "ObjectPattern"
	):
		out.append("(")
		_emit(expression, out)
		out.append(");")
		return
	_emit(expression, out)
	out.append(";")


def _empty(node: Node, out: Output) -> None:
	out.append(";")


def _declaration_head(node: Node, out: Output) -> None:
	"""A variable declaration without its semicolon, as used in `for` heads."""
	out.append(node.kind)
	out.append(" ")
	_emit_list(node.declarations, out)


def _variable_declaration(node: Node, out: Output) -> None:
	_declaration_head(node, out)
	out.append(";")


def _variable_declarator(node: Node, out: Output) -> None:
	_emit(node.id, out)
	if node.get("init") is not None:
		out.append(" = ")
		_emit_operand(node.init, _PRECEDENCE["="], out)


def _for_head(node: Node | None, out: Output) -> None:
	if node is None:
		return
	if node.type == "VariableDeclaration":
		_declaration_head(node, out)
	else:
		_emit(node, out)


def _return(node: Node, out: Output) -> None:
	out.append("return")
	if node.get("argument") is not None:
		out.append(" ")
		_emit(node.argument, out)
	out.append(";")


def _throw(node: Node, out: Output) -> None:
	out.append("throw ")
	_emit(node.argument, out)
	out.append(";")


def _if(node: Node, out: Output) -> None:
	out.append("if (")
	_emit(node.test, out)
	out.append(") ")
	consequent: Node = node.consequent
	alternate: Node | None = node.get("alternate")
	if alternate is not None and consequent.type != "BlockStatement":
		# Braces keep a nested `if` from capturing the else
		_emit_body([consequent], out)
	else:
		_emit(consequent, out)
	if alternate is not None:
		out.append(" else ")
		_emit(alternate, out)


def _for(node: Node, out: Output) -> None:
	out.append("for (")
	_for_head(node.get("init"), out)
	out.append("; ")
	if node.get("test") is not None:
		_emit(node.test, out)
	out.append("; ")
	if node.get("update") is not None:
		_emit(node.update, out)
	out.append(") ")
	_emit(node.body, out)


def _for_in_of(node: Node, out: Output) -> None:
	out.append("for ")
	if node.get("await"):
		out.append("await ")
	out.append("(")
	_for_head(node.left, out)
	out.append(" in " if node.type == "ForInStatement" else " of ")
	_emit_operand(node.right, _PRECEDENCE["="], out)
	out.append(") ")
	_emit(node.body, out)


def _while(node: Node, out: Output) -> None:
	out.append("while (")
	_emit(node.test, out)
	out.append(") ")
	_emit(node.body, out)


def _do_while(node: Node, out: Output) -> None:
	out.append("do ")
	_emit(node.body, out)
	out.append(" while (")
	_emit(node.test, out)
	out.append(");")


def _jump(keyword: str) -> Emitter:
	def emit_jump(node: Node, out: Output) -> None:
		out.append(keyword)
		if node.get("label") is not None:
			out.append(" ")
			_emit(node.label, out)
		out.append(";")

	return emit_jump


def _labeled(node: Node, out: Output) -> None:
	_emit(node.label, out)
	out.append(": ")
	_emit(node.body, out)


def _try(node: Node, out: Output) -> None:
	out.append("try ")
	_emit(node.block, out)
	handler: Node | None = node.get("handler")
	if handler is not None:
		out.append(" catch ")
		if handler.get("param") is not None:
			out.append("(")
			_emit(handler.param, out)
			out.append(") ")
		_emit(handler.body, out)
	if node.get("finalizer") is not None:
		out.append(" finally ")
		_emit(node.finalizer, out)


def _switch(node: Node, out: Output) -> None:
	out.append("switch (")
	_emit(node.discriminant, out)
	out.append(") {\n")
	for case in node.cases:
		if case.get("test") is not None:
			out.append("case ")
			_emit(case.test, out)
			out.append(":\n")
		else:
			out.append("default:\n")
		for stmt in case.consequent:
			_emit(stmt, out)
			out.append("\n")
	out.append("}")


def _with(node: Node, out: Output) -> None:
	out.append("with (")
	_emit(node.object, out)
	out.append(") ")
	_emit(node.body, out)


def _debugger(node: Node, out: Output) -> None:
	out.append("debugger;")


_EMITTERS: dict[str, Emitter] = {
	# Expressions
	"Identifier": _identifier,
	"PrivateIdentifier": _private_identifier,
	"Literal": _literal,
	"ThisExpression": _this,
	"Super": _super,
	"MetaProperty": _meta_property,
	"TemplateLiteral": _template_literal,
	"TaggedTemplateExpression": _tagged_template,
	"ArrayExpression": _array,
	"ObjectExpression": _object,
	"Property": _property,
	"SpreadElement": _spread,
	"UnaryExpression": _unary,
	"UpdateExpression": _update,
	"BinaryExpression": _binary,
	"LogicalExpression": _binary,
	"AssignmentExpression": _assignment,
	"ConditionalExpression": _conditional,
	"SequenceExpression": _sequence,
	"AwaitExpression": _await,
	"YieldExpression": _yield,
	"CallExpression": _call,
	"NewExpression": _new,
	"MemberExpression": _member,
	"ChainExpression": _chain,
	"ParenthesizedExpression": _parenthesized,
	"ImportExpression": _import_expression,
	"FunctionExpression": _function,
	"ArrowFunctionExpression": _arrow,
	"ClassExpression": _class,
	# Patterns
	"ObjectPattern": _object,
	"ArrayPattern": _array,
	"RestElement": _spread,
	"AssignmentPattern": _assignment_pattern,
	# Classes
	"ClassBody": _class_body,
	"MethodDefinition": _method,
	"PropertyDefinition": _class_property,
	"StaticBlock": _static_block,
	# Statements
	"Program": _program,
	"BlockStatement": _block,
	"ExpressionStatement": _expression_statement,
	"EmptyStatement": _empty,
	"VariableDeclaration": _variable_declaration,
	"VariableDeclarator": _variable_declarator,
	"FunctionDeclaration": _function,
	"ClassDeclaration": _class,
	"ReturnStatement": _return,
	"ThrowStatement": _throw,
	"IfStatement": _if,
	"ForStatement": _for,
	"ForInStatement": _for_in_of,
	"ForOfStatement": _for_in_of,
	"WhileStatement": _while,
	"DoWhileStatement": _do_while,
	"BreakStatement": _jump("break"),
	"ContinueStatement": _jump("continue"),
	"LabeledStatement": _labeled,
	"TryStatement": _try,
	"SwitchStatement": _switch,
	"WithStatement": _with,
	"DebuggerStatement": _debugger,
}


__all__ = ["emit", "precedence"]
