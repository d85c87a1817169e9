from __future__ import annotations


class TransformError(Exception):
	"""Error raised while rewriting a syntax tree."""


class ConfigurationError(TransformError):
	"""The source uses a form the current RunOptions do not allow.

	Raised for export declarations when `returns` is not "exports", and for
	imports or re-exports when no importer is configured.
	"""


class MalformedInputError(TransformError):
	"""The tree contains a declaration shape that cannot be lowered."""


class CodegenError(TransformError):
	"""The emitter met a node it cannot print."""


class CompileError(TransformError):
	"""The compile driver cannot build or run the callable."""


__all__ = [
	"CodegenError",
	"CompileError",
	"ConfigurationError",
	"MalformedInputError",
	"TransformError",
]
