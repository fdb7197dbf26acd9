"""Composition root — builds the registry, freezes it, and wires dispatcher + resources."""
import logging
from enum import Enum
from typing import Any, Iterator, List, Optional

from .config import Settings, settings as default_settings
from .protocol import ResourceContents, ResourceSummary, ServerIdentity
from .resources import ProcessClock, ResourceProvider
from .tools import Dispatcher, ToolDescriptor, ToolOutcome, ToolRegistry, register_builtin_tools
from .tools.errors import ServerNotReadyError

logger = logging.getLogger(__name__)


class ServerState(str, Enum):
    INITIALIZING = "initializing"
    SERVING = "serving"


def build_registry(cfg: Settings) -> ToolRegistry:
    registry = ToolRegistry()
    register_builtin_tools(registry, cfg)
    return registry


class ToolServer:
    def __init__(
        self,
        cfg: Settings,
        registry: Optional[ToolRegistry] = None,
        clock: Optional[ProcessClock] = None,
    ):
        self.settings = cfg
        self.registry = registry if registry is not None else build_registry(cfg)
        self.clock = clock or ProcessClock()
        self.state = ServerState.INITIALIZING
        self._dispatcher: Optional[Dispatcher] = None
        self._resources: Optional[ResourceProvider] = None

    def start(self) -> "ToolServer":
        """Freeze the registry and begin serving. Idempotent."""
        if self.state is ServerState.SERVING:
            return self
        self.registry.freeze()
        self._dispatcher = Dispatcher(self.registry, tool_timeout=self.settings.tool_timeout)
        self._resources = ResourceProvider(
            self.registry,
            ServerIdentity(name=self.settings.server_name, version=self.settings.server_version),
            self.clock,
        )
        self.state = ServerState.SERVING
        logger.info(f"Serving {len(self.registry)} tools as {self.settings.server_name} v{self.settings.server_version}")
        return self

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise ServerNotReadyError("Server is still initializing")
        return self._dispatcher

    @property
    def resources(self) -> ResourceProvider:
        if self._resources is None:
            raise ServerNotReadyError("Server is still initializing")
        return self._resources

    def tools(self) -> Iterator[ToolDescriptor]:
        return self.registry.descriptors()

    async def call_tool(self, name: str, arguments: Any) -> ToolOutcome:
        return await self.dispatcher.invoke(name, arguments)

    def list_resources(self) -> List[ResourceSummary]:
        return self.resources.resources()

    async def read_resource(self, uri: str) -> ResourceContents:
        return await self.resources.describe(uri)


def create_server(cfg: Optional[Settings] = None) -> ToolServer:
    return ToolServer(cfg or default_settings).start()
