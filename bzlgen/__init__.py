"""bzlgen: translate CMakeLists.txt and LLVMBuild.txt trees into Starlark macros."""

__version__ = "0.1.0"
