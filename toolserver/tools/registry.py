"""Tool registry — name -> descriptor table, populated at startup and frozen before serving."""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence

from ..contracts import Param, to_json_schema
from ..protocol import ToolSummary
from .errors import DuplicateToolError, RegistryFrozenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    params: Sequence[Param]
    handler: Callable[..., Awaitable[Any]]
    output: Optional[Sequence[Param]] = None

    def input_schema(self) -> Dict[str, Any]:
        return to_json_schema(self.params)

    def output_schema(self) -> Optional[Dict[str, Any]]:
        if self.output is None:
            return None
        return to_json_schema(self.output)


class ToolRegistry:
    """Registration order is kept so listings are deterministic."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, tool: ToolDescriptor) -> ToolDescriptor:
        if self._frozen:
            raise RegistryFrozenError(f"Registry is frozen; cannot register {tool.name!r}")
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")
        return tool

    def tool(
        self,
        name: str,
        description: str = "",
        params: Optional[List[Param]] = None,
        output: Optional[List[Param]] = None,
    ):
        """Decorator to register a tool function."""
        def decorator(func):
            self.register(ToolDescriptor(
                name=name,
                description=description or func.__doc__ or "",
                params=tuple(params or ()),
                handler=func,
                output=tuple(output) if output is not None else None,
            ))
            return func
        return decorator

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def list(self) -> List[ToolSummary]:
        return [ToolSummary(name=t.name, description=t.description) for t in self._tools.values()]

    def descriptors(self) -> Iterator[ToolDescriptor]:
        return iter(list(self._tools.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
