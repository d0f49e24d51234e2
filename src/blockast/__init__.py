"""Compile block/entity/inline document ASTs into flat rich-text blocks."""

from .core.compiler import CompileOptions, compile
from .core.model import CompiledBlock, CompiledDocument

__version__ = "0.3.0"

__all__ = [
    "compile",
    "CompileOptions",
    "CompiledBlock",
    "CompiledDocument",
    "__version__",
]
