"""Read-only introspection resources (server identity, uptime, catalog)."""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List

from .protocol import ResourceContents, ResourceSummary, ServerIdentity, ServerInfo
from .tools.errors import UnknownResourceError
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_INFO_URI = "server://info"

SERVER_INFO_RESOURCE = ResourceSummary(
    uri=SERVER_INFO_URI,
    name="server-info",
    description="Current server information and the list of available tools",
    mime_type="application/json",
)


@dataclass(frozen=True)
class ProcessClock:
    """Process start instant, captured once at startup."""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_monotonic: float = field(default_factory=time.monotonic)


def format_uptime(seconds: float) -> str:
    """1d 2h 3m 4s; zero components are skipped, "0s" when under a second."""
    total = int(seconds)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


class ResourceProvider:
    def __init__(
        self,
        registry: ToolRegistry,
        identity: ServerIdentity,
        clock: ProcessClock,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._registry = registry
        self._identity = identity
        self._clock = clock
        self._monotonic = monotonic

    def resources(self) -> List[ResourceSummary]:
        return [SERVER_INFO_RESOURCE]

    def server_info(self) -> ServerInfo:
        uptime = max(0.0, self._monotonic() - self._clock.started_monotonic)
        return ServerInfo(
            identity=self._identity,
            start_time=self._clock.started_at,
            uptime_seconds=uptime,
            uptime_formatted=format_uptime(uptime),
            tools=self._registry.list(),
            resources=self.resources(),
            generated_at=datetime.now(timezone.utc),
        )

    async def describe(self, uri: str) -> ResourceContents:
        uri = str(uri).rstrip("/")
        if uri != SERVER_INFO_URI:
            logger.warning(f"Unknown resource: {uri}")
            raise UnknownResourceError(f"Unknown resource: {uri}")
        info = self.server_info()
        return ResourceContents(
            uri=SERVER_INFO_URI,
            mime_type=SERVER_INFO_RESOURCE.mime_type,
            text=info.model_dump_json(by_alias=True, indent=2),
        )
