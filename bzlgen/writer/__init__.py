"""Output sinks for translated build descriptions."""

from bzlgen.writer.marshal import Properties, marshal
from bzlgen.writer.protocols import CommandSink
from bzlgen.writer.starlark import StarlarkWriter

__all__ = ["CommandSink", "StarlarkWriter", "Properties", "marshal"]
