"""Time tool — current wall-clock time in an IANA timezone."""
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...config import Settings
from ...contracts import Param, text_output_contract
from ..errors import ToolFailure
from ..registry import ToolDescriptor

DESCRIPTION = "Returns the current time in the given timezone."


def _now(tz: ZoneInfo) -> datetime:
    return datetime.now(tz)


def resolve_timezone(timezone: str) -> ZoneInfo:
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ToolFailure(f"invalid timezone: {timezone}") from e


async def current_time(timezone: str) -> str:
    if not timezone:
        raise ToolFailure("invalid timezone: (empty)")
    tz = resolve_timezone(timezone)
    local = _now(tz).astimezone(tz)
    return f"Current time in {timezone}: {local:%Y-%m-%d %H:%M:%S}"


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="time",
        description=DESCRIPTION,
        params=(
            Param("timezone", description="IANA timezone (e.g. Asia/Seoul, America/New_York, Europe/London)"),
        ),
        handler=current_time,
        output=tuple(text_output_contract("current time")),
    )
