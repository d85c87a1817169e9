"""
ESTree -> ESTree rewriting.

Runs the built-in operator and module rules (plus any user rules) over a tree
in one bottom-up pass and returns the state the compile driver needs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from dunderjs.nodes import Node
from dunderjs.options import RunOptions
from dunderjs.rules import BUILTIN_RULES
from dunderjs.state import TransformState
from dunderjs.walker import Rule, merge_rules, walk

logger = logging.getLogger(__name__)


class Transformer:
	"""Rewrite trees according to one set of RunOptions.

	The rule table is composed once; each transform() call gets a fresh
	TransformState, so a Transformer can be reused across programs. User rules
	from `options.custom_rules` run before the built-in rule for the same kind.
	"""

	options: RunOptions
	rules: Mapping[str, tuple[Rule[TransformState], ...]]

	def __init__(self, options: RunOptions | None = None) -> None:
		self.options = options if options is not None else RunOptions()
		self.rules = merge_rules(self.options.custom_rules, BUILTIN_RULES)

	def transform(self, tree: Node) -> TransformState:
		"""Rewrite `tree` in place and return the populated state.

		Errors raised by rules propagate unchanged.
		"""
		state = TransformState.for_tree(tree, self.options)
		logger.debug(
			"Transforming %s (operator_overloading=%s, returns=%s)",
			tree.type,
			self.options.operator_overloading,
			self.options.returns,
		)
		walk(tree, self.rules, state)
		logger.debug(
			"Transformed: %d export(s), helpers=%s, async=%s",
			len(state.exports),
			[name for name, _ in state.helper_bindings()],
			state.has_await,
		)
		return state


def transform(tree: Node, options: RunOptions | None = None, **overrides: Any) -> TransformState:
	"""Rewrite `tree` in place with a one-off Transformer."""
	if options is None:
		options = RunOptions()
	if overrides:
		options = options.merged(**overrides)
	return Transformer(options).transform(tree)


__all__ = ["Transformer", "transform"]
