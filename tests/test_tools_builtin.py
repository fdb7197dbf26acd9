"""Tests for builtin tools — greet, calculator, time, geocode, weather, code review, image."""
import base64
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from toolserver.tools.errors import ErrorKind, ToolFailure


# ──────────────────────────────────────────────────────────
# Greet
# ──────────────────────────────────────────────────────────

class TestGreet:
    @pytest.mark.asyncio
    async def test_korean(self, tool_server):
        outcome = await tool_server.call_tool("greet", {"name": "Dana", "language": "ko"})
        assert outcome.envelope.content[0].text == "안녕하세요, Dana님!"

    @pytest.mark.asyncio
    async def test_default_language(self, tool_server):
        outcome = await tool_server.call_tool("greet", {"name": "Dana"})
        assert "Hey there, Dana!" in outcome.envelope.content[0].text

    @pytest.mark.asyncio
    async def test_unlisted_language_falls_back_to_english(self, tool_server):
        outcome = await tool_server.call_tool("greet", {"name": "Dana", "language": "fr"})
        assert "Hey there, Dana!" in outcome.envelope.content[0].text

    @pytest.mark.asyncio
    async def test_missing_name(self, tool_server):
        outcome = await tool_server.call_tool("greet", {})
        assert outcome.error.kind is ErrorKind.INVALID_INPUT


# ──────────────────────────────────────────────────────────
# Calculator
# ──────────────────────────────────────────────────────────

class TestCalculator:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("a,b,op,expected", [
        (1, 2, "+", "1 + 2 = 3"),
        (5, 7, "-", "5 - 7 = -2"),
        (1.5, 4, "*", "1.5 * 4 = 6"),
        (1, 4, "/", "1 / 4 = 0.25"),
        (0.1, 0.2, "+", "0.1 + 0.2 = 0.30000000000000004"),
        (-3, 0, "*", "-3 * 0 = 0"),
    ])
    async def test_equation_text(self, tool_server, a, b, op, expected):
        outcome = await tool_server.call_tool("calculator", {"a": a, "b": b, "operator": op})
        assert outcome.envelope.content[0].text == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("a", [0, 1, -2.5, 1e9])
    async def test_division_by_zero(self, tool_server, a):
        outcome = await tool_server.call_tool("calculator", {"a": a, "b": 0, "operator": "/"})
        assert outcome.error.kind is ErrorKind.HANDLER_FAILED
        assert "division by zero" in outcome.error.message

    @pytest.mark.asyncio
    async def test_bad_operator(self, tool_server):
        outcome = await tool_server.call_tool("calculator", {"a": 1, "b": 2, "operator": "%"})
        assert outcome.error.kind is ErrorKind.INVALID_INPUT
        assert outcome.error.field == "operator"

    def test_format_number(self):
        from toolserver.tools.builtin.calculator import format_number
        assert format_number(3.0) == "3"
        assert format_number(-0.5) == "-0.5"
        assert format_number(7) == "7"
        assert format_number(float("inf")) == "Infinity"

    @pytest.mark.parametrize("value,expected", [
        (1e-7, "1e-7"),
        (1.23e-18, "1.23e-18"),
        (0.000001, "0.000001"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.5e21, "1.5e+21"),
        (1e40, "1e+40"),
        (-0.0, "0"),
        (123.456, "123.456"),
    ])
    def test_format_number_js_notation(self, value, expected):
        from toolserver.tools.builtin.calculator import format_number
        assert format_number(value) == expected

    @pytest.mark.asyncio
    async def test_integers_use_double_arithmetic(self, tool_server):
        outcome = await tool_server.call_tool("calculator", {"a": 9007199254740993, "b": 0, "operator": "+"})
        assert outcome.envelope.content[0].text == "9007199254740992 + 0 = 9007199254740992"

    @pytest.mark.asyncio
    async def test_large_product_rounds(self, tool_server):
        outcome = await tool_server.call_tool("calculator", {"a": 10**20, "b": 10**20, "operator": "*"})
        assert outcome.envelope.content[0].text == "100000000000000000000 * 100000000000000000000 = 1e+40"

    @pytest.mark.asyncio
    async def test_operand_beyond_double_range(self, tool_server):
        outcome = await tool_server.call_tool("calculator", {"a": 10**400, "b": 1, "operator": "+"})
        assert outcome.error.kind is ErrorKind.HANDLER_FAILED
        assert outcome.error.message == "number out of range"


# ──────────────────────────────────────────────────────────
# Time
# ──────────────────────────────────────────────────────────

class TestTime:
    @pytest.mark.asyncio
    async def test_fixed_instant(self):
        from toolserver.tools.builtin.clock import current_time
        now = datetime(2024, 1, 15, 3, 4, 5, tzinfo=timezone.utc)
        with patch("toolserver.tools.builtin.clock._now", return_value=now):
            text = await current_time("Asia/Seoul")
        assert text == "Current time in Asia/Seoul: 2024-01-15 12:04:05"

    @pytest.mark.asyncio
    async def test_valid_timezone(self, tool_server):
        outcome = await tool_server.call_tool("time", {"timezone": "Europe/London"})
        assert outcome.envelope.content[0].text.startswith("Current time in Europe/London: ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tz", ["Mars/Olympus", "", "../etc/passwd"])
    async def test_invalid_timezone(self, tool_server, tz):
        outcome = await tool_server.call_tool("time", {"timezone": tz})
        assert outcome.error.kind is ErrorKind.HANDLER_FAILED
        assert "invalid timezone" in outcome.error.message


# ──────────────────────────────────────────────────────────
# Geocode
# ──────────────────────────────────────────────────────────

class TestGeocode:
    @pytest.mark.asyncio
    async def test_found(self, settings, mock_http):
        from toolserver.tools.builtin.geocode import geocode
        new_client, seen = mock_http(lambda req: httpx.Response(200, json=[
            {"display_name": "Seoul, South Korea", "lat": "37.5666791", "lon": "126.9782914"},
        ]))
        with patch("toolserver.tools.builtin.geocode._new_client", new_client):
            text = await geocode("Seoul", settings=settings)
        assert text == "Address: Seoul, South Korea\nLatitude: 37.5666791\nLongitude: 126.9782914"
        params = seen[0].url.params
        assert params["q"] == "Seoul"
        assert params["format"] == "json"
        assert params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_not_found(self, settings, mock_http):
        from toolserver.tools.builtin.geocode import geocode
        new_client, _ = mock_http(lambda req: httpx.Response(200, json=[]))
        with patch("toolserver.tools.builtin.geocode._new_client", new_client):
            with pytest.raises(ToolFailure, match="address not found: Atlantis"):
                await geocode("Atlantis", settings=settings)

    @pytest.mark.asyncio
    async def test_upstream_status(self, settings, mock_http):
        from toolserver.tools.builtin.geocode import geocode
        new_client, _ = mock_http(lambda req: httpx.Response(503))
        with patch("toolserver.tools.builtin.geocode._new_client", new_client):
            with pytest.raises(ToolFailure, match="upstream status code 503"):
                await geocode("Seoul", settings=settings)

    @pytest.mark.asyncio
    async def test_network_error(self, settings, mock_http):
        from toolserver.tools.builtin.geocode import geocode

        def fail(req):
            raise httpx.ConnectError("connection refused", request=req)

        new_client, _ = mock_http(fail)
        with patch("toolserver.tools.builtin.geocode._new_client", new_client):
            with pytest.raises(ToolFailure, match="geocoding failed"):
                await geocode("Seoul", settings=settings)

    def test_user_agent_header(self, settings):
        from toolserver.tools.builtin.geocode import _new_client
        client = _new_client(settings)
        assert client.headers["User-Agent"] == settings.nominatim_user_agent


# ──────────────────────────────────────────────────────────
# Weather
# ──────────────────────────────────────────────────────────

FORECAST = {
    "daily": {
        "time": ["2024-01-15", "2024-01-16"],
        "temperature_2m_max": [3.24, 5.0],
        "temperature_2m_min": [-4.0, -2.55],
        "precipitation_sum": [0.0, 1.2],
        "weathercode": [0, 42],
    },
}


class TestWeather:
    @pytest.mark.parametrize("days,expected", [(30, 16), (0, 1), (-5, 1), (7, 7), (16, 16), (1, 1)])
    def test_clamp(self, days, expected):
        from toolserver.tools.builtin.weather import clamp_forecast_days
        assert clamp_forecast_days(days) == expected

    def test_weather_code_table(self):
        from toolserver.tools.builtin.weather import describe_weather_code
        assert describe_weather_code(0) == "Clear sky"
        assert describe_weather_code(95) == "Thunderstorm"
        assert describe_weather_code(42) == "code 42"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("requested,sent", [(30, "16"), (0, "1")])
    async def test_days_clamped_upstream(self, tool_server, mock_http, requested, sent):
        new_client, seen = mock_http(lambda req: httpx.Response(200, json=FORECAST))
        with patch("toolserver.tools.builtin.weather._new_client", new_client):
            outcome = await tool_server.call_tool(
                "weather", {"latitude": 37.5, "longitude": 127.0, "forecastDays": requested},
            )
        assert outcome.ok
        assert seen[0].url.params["forecast_days"] == sent

    @pytest.mark.asyncio
    async def test_defaults_and_text(self, tool_server, mock_http):
        new_client, seen = mock_http(lambda req: httpx.Response(200, json=FORECAST))
        with patch("toolserver.tools.builtin.weather._new_client", new_client):
            outcome = await tool_server.call_tool("weather", {"latitude": 37.5, "longitude": 127.0})
        params = seen[0].url.params
        assert params["timezone"] == "auto"
        assert params["forecast_days"] == "7"
        assert params["daily"] == "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode"

        text = outcome.envelope.content[0].text
        assert "Latitude: 37.5, Longitude: 127.0" in text
        assert "Jan 15 (Mon)" in text
        assert "Weather: Clear sky" in text
        assert "High: 3.2°C" in text
        assert "Low: -2.5°C" in text or "Low: -2.6°C" in text
        assert "Weather: code 42" in text

    @pytest.mark.asyncio
    async def test_no_daily_data(self, tool_server, mock_http):
        new_client, _ = mock_http(lambda req: httpx.Response(200, json={"error": True}))
        with patch("toolserver.tools.builtin.weather._new_client", new_client):
            outcome = await tool_server.call_tool("weather", {"latitude": 0, "longitude": 0})
        assert outcome.error.kind is ErrorKind.HANDLER_FAILED
        assert "no forecast data" in outcome.error.message

    @pytest.mark.asyncio
    async def test_upstream_status(self, tool_server, mock_http):
        new_client, _ = mock_http(lambda req: httpx.Response(400, json={"reason": "bad"}))
        with patch("toolserver.tools.builtin.weather._new_client", new_client):
            outcome = await tool_server.call_tool("weather", {"latitude": 0, "longitude": 0})
        assert outcome.error.message == "weather lookup failed: upstream status code 400"

    def test_missing_values_rendered(self):
        from toolserver.tools.builtin.weather import format_forecast
        text = format_forecast(1, 2, "auto", 1, {"time": ["2024-01-15"], "weathercode": [None]})
        assert "Weather: unknown" in text
        assert "High: n/a" in text


# ──────────────────────────────────────────────────────────
# Code review prompt
# ──────────────────────────────────────────────────────────

class TestCodeReviewPrompt:
    @pytest.mark.asyncio
    async def test_idempotent(self, tool_server):
        args = {"code": "print(1)", "language": "Python", "focusAreas": ["performance", "security"]}
        first = await tool_server.call_tool("code-review-prompt", args)
        second = await tool_server.call_tool("code-review-prompt", dict(args))
        assert first.envelope.content[0].text == second.envelope.content[0].text

    def test_template_with_focus(self):
        from toolserver.tools.builtin.code_review import build_review_prompt
        text = build_review_prompt("x = 1", "Python", ["performance", "security"])
        assert "```Python\nx = 1\n```" in text
        assert "## Focus areas\n1. performance\n2. security\n" in text

    def test_template_without_optional_fields(self):
        from toolserver.tools.builtin.code_review import build_review_prompt
        text = build_review_prompt("x = 1")
        assert "```\nx = 1\n```" in text
        assert "Focus areas" not in text
        assert build_review_prompt("x = 1", None, []) == text

    @pytest.mark.asyncio
    async def test_bad_focus_area_type(self, tool_server):
        outcome = await tool_server.call_tool("code-review-prompt", {"code": "x", "focusAreas": ["a", 1]})
        assert outcome.error.kind is ErrorKind.INVALID_INPUT
        assert outcome.error.field == "focusAreas[1]"


# ──────────────────────────────────────────────────────────
# Image generation
# ──────────────────────────────────────────────────────────

class TestGenerateImage:
    @pytest.mark.asyncio
    async def test_missing_token(self, tool_server):
        outcome = await tool_server.call_tool("generate-image", {"prompt": "a cat"})
        assert outcome.error.kind is ErrorKind.HANDLER_FAILED
        assert "HF_TOKEN" in outcome.error.message

    @pytest.mark.asyncio
    async def test_image_envelope(self, settings, mock_http):
        from toolserver.server import create_server
        png = b"\x89PNG\r\n\x1a\nfake"
        new_client, seen = mock_http(
            lambda req: httpx.Response(200, content=png, headers={"content-type": "image/jpeg"}),
        )
        server = create_server(settings.model_copy(update={"hf_token": "hf_test"}))
        with patch("toolserver.tools.builtin.image._new_client", new_client):
            outcome = await server.call_tool("generate-image", {"prompt": "a cat"})

        wire = outcome.envelope.to_wire()
        assert "structuredContent" not in wire
        assert wire["content"] == [
            {"type": "image", "data": base64.b64encode(png).decode("ascii"), "mimeType": "image/jpeg"},
        ]
        request = seen[0]
        assert str(request.url) == "https://hf.test/models/black-forest-labs/FLUX.1-schnell"
        assert request.headers["Authorization"] == "Bearer hf_test"

    @pytest.mark.asyncio
    async def test_upstream_status(self, settings, mock_http):
        from toolserver.tools.builtin.image import generate_image
        new_client, _ = mock_http(lambda req: httpx.Response(429))
        cfg = settings.model_copy(update={"hf_token": "hf_test"})
        with patch("toolserver.tools.builtin.image._new_client", new_client):
            with pytest.raises(ToolFailure, match="upstream status code 429"):
                await generate_image("a cat", settings=cfg)

    @pytest.mark.asyncio
    async def test_non_image_content_type_defaults_to_png(self, settings, mock_http):
        from toolserver.tools.builtin.image import generate_image
        new_client, _ = mock_http(lambda req: httpx.Response(200, content=b"bytes"))
        cfg = settings.model_copy(update={"hf_token": "hf_test"})
        with patch("toolserver.tools.builtin.image._new_client", new_client):
            item = await generate_image("a cat", settings=cfg)
        assert item.mime_type == "image/png"
