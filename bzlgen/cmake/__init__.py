"""CMake language front end: lexer, parser, AST evaluation and the directory evaluator."""

from bzlgen.cmake.bindings import Bindings
from bzlgen.cmake.evaluator import Evaluator, matching
from bzlgen.cmake.parser import parse, parse_file

__all__ = ["Bindings", "Evaluator", "matching", "parse", "parse_file"]
