"""Operator overloading and module lowering for ESTree JavaScript trees."""

# Compile driver
from dunderjs.codegen import emit as emit
from dunderjs.compiler import CompiledCode as CompiledCode
from dunderjs.compiler import Executor as Executor
from dunderjs.compiler import Synthesizer as Synthesizer
from dunderjs.compiler import compile as compile
from dunderjs.compiler import evaluate as evaluate

# Runtime dispatch
from dunderjs.dispatch import binary_dispatch as binary_dispatch
from dunderjs.dispatch import unary_dispatch as unary_dispatch

# Errors
from dunderjs.errors import CodegenError as CodegenError
from dunderjs.errors import CompileError as CompileError
from dunderjs.errors import ConfigurationError as ConfigurationError
from dunderjs.errors import MalformedInputError as MalformedInputError
from dunderjs.errors import TransformError as TransformError

# Tree
from dunderjs.nodes import Node as Node

# Protocol
from dunderjs.operators import Py as Py

# Configuration
from dunderjs.options import RunOptions as RunOptions

# Transformation
from dunderjs.state import ExportRecord as ExportRecord
from dunderjs.state import TransformState as TransformState
from dunderjs.transformer import Transformer as Transformer
from dunderjs.transformer import transform as transform
from dunderjs.values import UNDEFINED as UNDEFINED
from dunderjs.walker import Step as Step
from dunderjs.walker import walk as walk
