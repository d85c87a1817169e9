"""
Compile driver: tree -> generated source -> callable.

Parsing and function synthesis happen outside this package. Callers pass an
ESTree tree (or its JSON form) and, to get something runnable, a synthesizer
that turns parameter names plus body text into a callable:

```python
def synthesize(params, body, is_async):
	return js_runtime.make_function(params, body, is_async=is_async)

compiled = compile(tree, {"print": print}, synthesize=synthesize)
compiled.run()
```

The callable's parameters are the globals the program references, in the
order of `globals`, followed by the helpers the rewritten code needs (unary
dispatcher, binary dispatcher, importer).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from dunderjs.codegen import emit
from dunderjs.errors import CompileError
from dunderjs.nodes import Node
from dunderjs.options import RunOptions
from dunderjs.state import TransformState
from dunderjs.transformer import Transformer

logger = logging.getLogger(__name__)

Generator: TypeAlias = Callable[[Node], str]
Synthesizer: TypeAlias = Callable[[Sequence[str], str, bool], Callable[..., Any]]


@dataclass(slots=True)
class CompiledCode:
	"""A rewritten program and, when a synthesizer was supplied, its callable."""

	tree: Node
	gen_code: str
	params: list[str]
	args: list[Any]
	is_async: bool
	state: TransformState
	fn: Callable[..., Any] | None = field(default=None, repr=False)

	@property
	def scope(self) -> dict[str, Any]:
		"""Parameter name -> bound value."""
		return dict(zip(self.params, self.args, strict=True))

	def run(self) -> Any:
		"""Call the synthesized function with its bound arguments.

		Asynchronous programs return whatever the synthesizer's async callables
		return (usually an awaitable).
		"""
		if self.fn is None:
			raise CompileError("No synthesizer was given; only the generated code is available")
		return self.fn(*self.args)


def _as_tree(tree: Node | Mapping[str, Any]) -> Node:
	if isinstance(tree, Node):
		return tree
	return Node.from_dict(tree)


def compile(
	tree: Node | Mapping[str, Any],
	globals: Mapping[str, Any] | None = None,
	options: RunOptions | None = None,
	*,
	generate: Generator = emit,
	synthesize: Synthesizer | None = None,
) -> CompiledCode:
	"""Rewrite `tree`, generate its source and optionally synthesize a callable.

	A Node is rewritten in place; a JSON mapping is converted first and left
	untouched.
	"""
	options = options if options is not None else RunOptions()
	globals = globals if globals is not None else {}
	root = _as_tree(tree)

	state = Transformer(options).transform(root)
	gen_code = generate(root)

	params: list[str] = []
	args: list[Any] = []
	for name, value in globals.items():
		if name in state.identifiers:
			params.append(name)
			args.append(value)
	for name, value in state.helper_bindings():
		params.append(name)
		args.append(value)

	is_async = options.is_async or state.has_await
	fn = synthesize(params, gen_code, is_async) if synthesize is not None else None
	logger.debug("Compiled program with params=%s (async=%s)", params, is_async)
	return CompiledCode(
		tree=root,
		gen_code=gen_code,
		params=params,
		args=args,
		is_async=is_async,
		state=state,
		fn=fn,
	)


def evaluate(
	tree: Node | Mapping[str, Any],
	globals: Mapping[str, Any] | None = None,
	options: RunOptions | None = None,
	*,
	generate: Generator = emit,
	synthesize: Synthesizer | None = None,
) -> Any:
	"""compile() then run()."""
	return compile(tree, globals, options, generate=generate, synthesize=synthesize).run()


class Executor:
	"""Reusable compile/evaluate with preset options, globals and synthesizer.

	Per-call globals are layered over the preset ones.
	"""

	options: RunOptions
	globals: dict[str, Any]
	generate: Generator
	synthesize: Synthesizer | None

	def __init__(
		self,
		options: RunOptions | None = None,
		globals: Mapping[str, Any] | None = None,
		*,
		generate: Generator = emit,
		synthesize: Synthesizer | None = None,
	) -> None:
		self.options = options if options is not None else RunOptions()
		self.globals = dict(globals or {})
		self.generate = generate
		self.synthesize = synthesize

	def compile(
		self, tree: Node | Mapping[str, Any], globals: Mapping[str, Any] | None = None
	) -> CompiledCode:
		return compile(
			tree,
			{**self.globals, **(globals or {})},
			self.options,
			generate=self.generate,
			synthesize=self.synthesize,
		)

	def run(self, tree: Node | Mapping[str, Any], globals: Mapping[str, Any] | None = None) -> Any:
		return self.compile(tree, globals).run()


__all__ = [
	"CompiledCode",
	"Executor",
	"Generator",
	"Synthesizer",
	"compile",
	"evaluate",
]
