"""Tern: a small tree-walking interpreter."""
from .interpreter import Interpreter
from .natives import NativeRegistry, default_registry
from .tern import Tern, RuntimeOptions, main

__all__ = ["Interpreter", "NativeRegistry", "default_registry", "Tern", "RuntimeOptions", "main"]
