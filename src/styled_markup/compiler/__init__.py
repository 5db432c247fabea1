"""Recursive descent compiler for styled markup."""

from .compiler import MarkupCompiler, compile_markup

__all__ = ["MarkupCompiler", "compile_markup"]
