"""Geocoding tool — address to coordinates via Nominatim (OpenStreetMap)."""
import functools
import logging

import httpx

from ...config import Settings
from ...contracts import Param, text_output_contract
from ..errors import ToolFailure
from ..registry import ToolDescriptor

logger = logging.getLogger(__name__)

DESCRIPTION = "Takes a city name or address and returns its latitude and longitude."


def _new_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.nominatim_user_agent},
    )


async def geocode(address: str, *, settings: Settings) -> str:
    try:
        async with _new_client(settings) as client:
            resp = await client.get(
                settings.nominatim_url,
                params={"q": address, "format": "json", "limit": "1"},
            )
            if not resp.is_success:
                raise ToolFailure(f"upstream status code {resp.status_code}")
            data = resp.json()
        if not data:
            raise ToolFailure(f"address not found: {address}")
        first = data[0]
        return (
            f"Address: {first['display_name']}\n"
            f"Latitude: {first['lat']}\n"
            f"Longitude: {first['lon']}"
        )
    except ToolFailure as e:
        raise ToolFailure(f"geocoding failed: {e}") from e
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Nominatim error: {e}")
        raise ToolFailure(f"geocoding failed: {e}") from e


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="geocode",
        description=DESCRIPTION,
        params=(
            Param("address", description="city name or address (e.g. Seoul, New York, Paris)"),
        ),
        handler=functools.partial(geocode, settings=settings),
        output=tuple(text_output_contract("latitude and longitude")),
    )
