"""Shared fixtures: settings, a started tool server, a mock upstream HTTP transport."""
import httpx
import pytest

from toolserver.config import Settings
from toolserver.server import create_server


@pytest.fixture
def settings():
    return Settings(
        server_name="test-server",
        server_version="9.9.9",
        hf_token="",
        tool_timeout=None,
        nominatim_url="https://geo.test/search",
        open_meteo_url="https://meteo.test/v1/forecast",
        hf_inference_url="https://hf.test/models",
    )


@pytest.fixture
def tool_server(settings):
    return create_server(settings)


@pytest.fixture
def mock_http():
    """Build a ``_new_client`` replacement that routes requests to ``handler``.

    Requests seen by the transport are appended to the returned list.
    """
    def factory(handler):
        seen = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        def new_client(settings):
            return httpx.AsyncClient(transport=httpx.MockTransport(record))

        return new_client, seen

    return factory
