"""Tool error taxonomy and registry exceptions."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_INPUT = "invalid_input"
    HANDLER_FAILED = "handler_failed"
    INVALID_OUTPUT = "invalid_output"


@dataclass(frozen=True)
class ToolError:
    """Why an invocation failed. ``message`` is what the caller sees."""
    kind: ErrorKind
    tool: str
    message: str
    field: Optional[str] = None
    expected: Optional[str] = None
    got: Optional[str] = None


class ToolFailure(Exception):
    """Raised by handlers for expected business/upstream failures (human-readable text)."""


class RegistryError(Exception):
    pass


class DuplicateToolError(RegistryError):
    pass


class RegistryFrozenError(RegistryError):
    pass


class RegistryNotFrozenError(RegistryError):
    pass


class UnknownResourceError(LookupError):
    pass


class ServerNotReadyError(RuntimeError):
    """Dispatch or resource access attempted before the server started serving."""
