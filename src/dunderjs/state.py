"""Mutable state shared by every rule during one transformation."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from dunderjs.dispatch import binary_dispatch, unary_dispatch
from dunderjs.nodes import Node, child_keys
from dunderjs.options import Importer, RunOptions

logger = logging.getLogger(__name__)

IMPORT_FN_BASE = "$import"
UNARY_FN_BASE = "$__"
BINARY_FN_BASE = "__$__"
TEMP_BASE = "$tmp"


@dataclass(slots=True, frozen=True)
class ExportRecord:
	"""One contribution to the object returned by the program.

	Keyed records add `exported: declaration`; spread records add every own
	property of `declaration`'s value.
	"""

	declaration: Node
	exported: Node | None = None
	spread: bool = False


class NameGenerator:
	"""Hands out names that collide with neither user identifiers nor each other."""

	__slots__: tuple[str, ...] = ("_reserved", "_counters")
	_reserved: set[str]
	_counters: dict[str, int]

	def __init__(self, reserved: Iterable[str] = ()) -> None:
		self._reserved = set(reserved)
		self._counters = {}

	def fresh(self, base: str) -> str:
		"""Return `base` if free, else the first free `base1`, `base2`, ..."""
		name = base
		counter = self._counters.get(base, 0)
		while name in self._reserved:
			counter += 1
			name = f"{base}{counter}"
		self._counters[base] = counter
		self._reserved.add(name)
		return name

	def reserve(self, name: str) -> None:
		self._reserved.add(name)

	def __contains__(self, name: object) -> bool:
		return name in self._reserved


def collect_identifier_names(root: Node) -> set[str]:
	"""Every Identifier name reachable from `root`."""
	names: set[str] = set()
	stack: list[Node] = [root]
	while stack:
		node = stack.pop()
		if node.type == "Identifier":
			names.add(node.name)
		for key in child_keys(node):
			value: Any = node.get(key)
			if isinstance(value, Node):
				stack.append(value)
			elif isinstance(value, list):
				stack.extend(v for v in value if isinstance(v, Node))  # pyright: ignore[reportUnknownVariableType]
	return names


def importer_is_async(options: RunOptions) -> bool:
	if options.import_is_async is not None:
		return options.import_is_async
	importer = options.importer
	return importer is not None and inspect.iscoroutinefunction(importer)


@dataclass(slots=True)
class TransformState:
	"""Accumulated results of a transformation, consumed by the compile driver.

	Helper names are bound lazily by the use_*_fn() methods, which also flip
	the matching usage flag. `has_await` tells the driver the callable must be
	asynchronous.
	"""

	options: RunOptions
	names: NameGenerator = field(default_factory=NameGenerator)
	exports: list[ExportRecord] = field(default_factory=list)
	identifiers: set[str] = field(default_factory=set)
	import_fn_name: str | None = None
	unary_fn_name: str | None = None
	binary_fn_name: str | None = None
	import_fn_used: bool = False
	unary_fn_used: bool = False
	binary_fn_used: bool = False
	has_await: bool = False
	import_is_async: bool = False

	@staticmethod
	def for_tree(root: Node, options: RunOptions) -> TransformState:
		return TransformState(
			options=options,
			names=NameGenerator(collect_identifier_names(root)),
			import_is_async=importer_is_async(options),
		)

	# -------------------------------------------------------------------------
	# Helpers used by the rules
	# -------------------------------------------------------------------------

	def use_import_fn(self) -> str:
		if self.import_fn_name is None:
			self.import_fn_name = self.names.fresh(IMPORT_FN_BASE)
			logger.debug("Bound importer helper to %s", self.import_fn_name)
		self.import_fn_used = True
		if self.import_is_async:
			self.has_await = True
		return self.import_fn_name

	def use_unary_fn(self) -> str:
		if self.unary_fn_name is None:
			self.unary_fn_name = self.names.fresh(UNARY_FN_BASE)
			logger.debug("Bound unary dispatcher to %s", self.unary_fn_name)
		self.unary_fn_used = True
		return self.unary_fn_name

	def use_binary_fn(self) -> str:
		if self.binary_fn_name is None:
			self.binary_fn_name = self.names.fresh(BINARY_FN_BASE)
			logger.debug("Bound binary dispatcher to %s", self.binary_fn_name)
		self.binary_fn_used = True
		return self.binary_fn_name

	def fresh_temp(self) -> str:
		return self.names.fresh(TEMP_BASE)

	@property
	def importer(self) -> Importer | None:
		return self.options.importer

	def helper_bindings(self) -> list[tuple[str, Any]]:
		"""The (name, value) pairs the generated code needs in scope."""
		bindings: list[tuple[str, Any]] = []
		if self.unary_fn_used and self.unary_fn_name is not None:
			bindings.append((self.unary_fn_name, unary_dispatch))
		if self.binary_fn_used and self.binary_fn_name is not None:
			bindings.append((self.binary_fn_name, binary_dispatch))
		if self.import_fn_used and self.import_fn_name is not None:
			bindings.append((self.import_fn_name, self.options.importer))
		return bindings


__all__ = [
	"ExportRecord",
	"NameGenerator",
	"TransformState",
	"collect_identifier_names",
	"importer_is_async",
]
