"""Tool dispatcher — validates arguments, runs the handler, validates and wraps its result.

``invoke`` never raises for tool-level problems; it returns a ToolOutcome carrying
either an Envelope or a ToolError tagged with one of the four ErrorKinds.
"""
import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import TypeAdapter

from ..contracts import ValidationError, validate
from ..protocol import ContentItem, Envelope, ImageContent, StructuredContent, TextContent
from .errors import ErrorKind, RegistryNotFrozenError, ToolError, ToolFailure
from .registry import ToolDescriptor, ToolRegistry

logger = logging.getLogger(__name__)

_content_item = TypeAdapter(ContentItem)


@dataclass(frozen=True)
class ToolOutcome:
    tool: str
    envelope: Optional[Envelope] = None
    error: Optional[ToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Dispatcher:
    def __init__(self, registry: ToolRegistry, tool_timeout: Optional[float] = None):
        if not registry.frozen:
            raise RegistryNotFrozenError("Dispatcher requires a frozen registry")
        self._registry = registry
        self._tool_timeout = tool_timeout

    async def invoke(self, name: str, args: Any) -> ToolOutcome:
        tool = self._registry.lookup(name)
        if tool is None:
            logger.warning(f"Unknown tool: {name}")
            return _failed(ErrorKind.UNKNOWN_TOOL, name, f"Unknown tool: {name}")

        try:
            validated = validate(tool.params, args)
        except ValidationError as e:
            logger.warning(f"Tool {name} rejected input: {e}")
            return ToolOutcome(tool=name, error=ToolError(
                kind=ErrorKind.INVALID_INPUT,
                tool=name,
                message=f"Invalid arguments for {name}: {e}",
                field=e.field,
                expected=e.expected,
                got=e.got,
            ))

        arg_str = ", ".join(f"{k}={v!r}" for k, v in validated.items())
        logger.info(f"Executing tool: {name}({arg_str})")
        t0 = time.monotonic()

        try:
            raw = await self._run(tool, validated)
        except ToolFailure as e:
            logger.warning(f"Tool {name} failed: {e}")
            return _failed(ErrorKind.HANDLER_FAILED, name, str(e))
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            return _failed(ErrorKind.HANDLER_FAILED, name, str(e) or type(e).__name__)

        try:
            envelope = _wrap(tool, raw)
        except (ValidationError, TypeError, ValueError) as e:
            logger.error(f"Tool {name} produced invalid output: {e}")
            return _failed(ErrorKind.INVALID_OUTPUT, name, f"Tool {name} produced an invalid result")

        elapsed = time.monotonic() - t0
        logger.info(f"Tool {name}: {elapsed:.1f}s -> {len(envelope.content)} item(s)")
        return ToolOutcome(tool=name, envelope=envelope)

    async def _run(self, tool: ToolDescriptor, validated: dict) -> Any:
        if self._tool_timeout is None:
            return await tool.handler(**validated)
        try:
            return await asyncio.wait_for(tool.handler(**validated), timeout=self._tool_timeout)
        except asyncio.TimeoutError:
            raise ToolFailure(f"timed out after {self._tool_timeout}s") from None


def _failed(kind: ErrorKind, name: str, message: str) -> ToolOutcome:
    return ToolOutcome(tool=name, error=ToolError(kind=kind, tool=name, message=message))


def _wrap(tool: ToolDescriptor, raw: Any) -> Envelope:
    items = _to_items(raw)
    if not items:
        raise ValueError("handler returned no content")

    if tool.output is None:
        return Envelope(content=items)

    validate(tool.output, {"content": [item.model_dump(by_alias=True) for item in items]})
    mirrored = [item.model_copy() for item in items]
    return Envelope(content=items, structured_content=StructuredContent(content=mirrored))


def _to_items(raw: Any) -> List[Any]:
    if isinstance(raw, (str, TextContent, ImageContent, Mapping)):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise TypeError(f"unsupported handler result type {type(raw).__name__}")

    items = []
    for entry in raw:
        if isinstance(entry, str):
            items.append(TextContent(text=entry))
        elif isinstance(entry, (TextContent, ImageContent)):
            items.append(entry)
        elif isinstance(entry, Mapping):
            items.append(_content_item.validate_python(entry))
        else:
            raise TypeError(f"unsupported content item type {type(entry).__name__}")
    return items
