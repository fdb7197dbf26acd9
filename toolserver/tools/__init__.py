"""Tool system — registry, dispatcher, builtin tools."""
from .registry import ToolDescriptor, ToolRegistry
from .dispatcher import Dispatcher, ToolOutcome
from .errors import ErrorKind, ToolError, ToolFailure
from .builtin import register_builtin_tools
