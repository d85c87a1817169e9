from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

if TYPE_CHECKING:
	from dunderjs.walker import RuleSpec

Returns: TypeAlias = Literal["exports", "return"]
Importer: TypeAlias = Callable[[str], Any]


@dataclass(slots=True)
class RunOptions:
	"""Configuration for one transformation.

	- returns: "exports" turns the program into a function returning its exports
	  object; "return" leaves top-level `return` to produce the result and
	  rejects export declarations.
	- operator_overloading: when False the operator rules leave every node alone.
	- importer: resolves a module source string to its value. May be a plain
	  function or a coroutine function.
	- import_is_async: explicit asynchrony of the importer. None means detect it
	  once, when the transformation state is created.
	- is_async: force the compiled callable to be asynchronous.
	- custom_rules: extra rules keyed by node kind, run before the built-in rule
	  for the same kind.
	"""

	returns: Returns = "exports"
	operator_overloading: bool = True
	importer: Importer | None = None
	import_is_async: bool | None = None
	is_async: bool = False
	custom_rules: Mapping[str, RuleSpec[Any]] = field(default_factory=dict)

	def merged(self, **overrides: Any) -> RunOptions:
		"""Return a copy with the given fields replaced."""
		return dataclasses.replace(self, **overrides)


__all__ = ["Importer", "Returns", "RunOptions"]
