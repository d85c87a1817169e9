"""Bottom-up tree walker with per-kind rules and in-place replacement."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from dunderjs.nodes import Node, child_keys

S = TypeVar("S")


@dataclass(slots=True)
class Step(Generic[S]):
	"""What a rule sees for the node it is visiting.

	`parent`, `key` and `index` identify the slot holding the node: either
	`parent.<key>` or `parent.<key>[index]`. The root has no parent.
	"""

	node: Node
	state: S
	parent: Node | None = None
	key: str | None = None
	index: int | None = None
	replaced: bool = False

	@property
	def is_root(self) -> bool:
		return self.parent is None

	def replace_with(self, new_node: Node) -> None:
		"""Swap the visited node for `new_node` in the parent's slot.

		The new node is not walked. Replacing the root overwrites it in place so
		the caller's reference sees the result.
		"""
		if self.parent is None:
			self.node.overwrite(new_node)
		else:
			if self.index is not None:
				getattr(self.parent, self.key)[self.index] = new_node  # pyright: ignore[reportArgumentType]
			else:
				setattr(self.parent, self.key, new_node)  # pyright: ignore[reportArgumentType]
			self.node = new_node
		self.replaced = True


Rule: TypeAlias = Callable[[Step[S]], None]
RuleSpec: TypeAlias = Rule[S] | Sequence[Rule[S]]
RuleTable: TypeAlias = Mapping[str, RuleSpec[S]]


def _as_rules(spec: RuleSpec[S]) -> Sequence[Rule[S]]:
	if callable(spec):
		return (spec,)
	return tuple(spec)


def merge_rules(*tables: RuleTable[S]) -> dict[str, tuple[Rule[S], ...]]:
	"""Combine rule tables; rules for the same kind run in table order."""
	merged: dict[str, tuple[Rule[S], ...]] = {}
	for table in tables:
		for kind, spec in table.items():
			merged[kind] = merged.get(kind, ()) + tuple(_as_rules(spec))
	return merged


def walk(root: Node, rules: RuleTable[S], state: S) -> S:
	"""Visit every node under `root` children-first and apply its rules.

	Each rule receives a Step for the node. Once a rule replaces the node, the
	remaining rules for that node are skipped. Exceptions raised by rules are
	not caught.
	"""
	table: dict[str, Sequence[Rule[S]]] = {
		kind: _as_rules(spec) for kind, spec in rules.items()
	}
	root_step = Step(root, state)
	# Frames of (step, pending children); nesting depth is not bounded by recursion
	stack: list[tuple[Step[S], Iterator[Step[S]]]] = [(root_step, _children(root_step))]
	while stack:
		step, children = stack[-1]
		child = next(children, None)
		if child is not None:
			stack.append((child, _children(child)))
			continue
		stack.pop()
		for rule in table.get(step.node.type, ()):
			rule(step)
			if step.replaced:
				break
	return state


def _children(step: Step[S]) -> Iterator[Step[S]]:
	"""Steps for the children of `step.node`, read lazily in field order."""
	node = step.node
	for key in child_keys(node):
		value: Any = node.get(key)
		if isinstance(value, Node):
			yield Step(value, step.state, node, key)
		elif isinstance(value, list):
			# Slots are re-read by index so replacements made while visiting
			# earlier siblings are respected.
			for i in range(len(value)):  # pyright: ignore[reportUnknownArgumentType]
				child = value[i]
				if isinstance(child, Node):
					yield Step(child, step.state, node, key, i)


__all__ = ["Rule", "RuleSpec", "RuleTable", "Step", "merge_rules", "walk"]
