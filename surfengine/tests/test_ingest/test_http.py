"""Tests for the shared async JSON GET helper with mocked httpx."""

import asyncio
from unittest.mock import patch

import httpx
import pytest
import respx

from surfengine.ingest.errors import InvalidParameterError, ProviderError, UpstreamFetchError
from surfengine.ingest.http import find_invalid_parameter, get_json, strip_parameter

URL = "https://test-provider.example.com/v1/marine"
REJECTED = (
    "Cannot initialize ForecastVariable from invalid String value "
    "swell_wave_peak_period for key hourly"
)


def _get(params: dict[str, str] | None = None, **kwargs):
    async def run():
        async with httpx.AsyncClient() as client:
            return await get_json(
                client, URL, params or {"hourly": "wave_height"}, provider="test", **kwargs
            )

    return asyncio.run(run())


class TestGetJson:
    @respx.mock
    def test_success(self):
        route = respx.get(URL).mock(return_value=httpx.Response(200, json={"ok": True}))
        assert _get() == {"ok": True}
        assert route.calls[0].request.url.params["hourly"] == "wave_height"

    @respx.mock
    def test_retry_on_503(self):
        route = respx.get(URL).mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={"ok": True})]
        )
        with patch("surfengine.ingest.http.asyncio.sleep") as sleep:
            result = _get(retry_base_delay=0.5)
        assert result == {"ok": True}
        assert route.call_count == 2
        sleep.assert_awaited_once_with(0.5)

    @respx.mock
    def test_retry_on_network_error(self):
        route = respx.get(URL).mock(
            side_effect=[httpx.ConnectError("refused"), httpx.Response(200, json=[])]
        )
        with patch("surfengine.ingest.http.asyncio.sleep"):
            assert _get() == []
        assert route.call_count == 2

    @respx.mock
    def test_exhausted_retries(self):
        route = respx.get(URL).mock(return_value=httpx.Response(503, text="busy"))
        with patch("surfengine.ingest.http.asyncio.sleep"), pytest.raises(
            UpstreamFetchError
        ) as exc_info:
            _get(max_attempts=3)
        assert route.call_count == 3
        assert exc_info.value.status_code == 503
        assert exc_info.value.body == "busy"

    @respx.mock
    def test_backoff_doubles(self):
        respx.get(URL).mock(return_value=httpx.Response(429))
        with patch("surfengine.ingest.http.asyncio.sleep") as sleep, pytest.raises(
            UpstreamFetchError
        ):
            _get(max_attempts=3, retry_base_delay=0.25)
        assert [c.args[0] for c in sleep.await_args_list] == [0.25, 0.5]

    @respx.mock
    def test_not_found_is_not_retried(self):
        route = respx.get(URL).mock(return_value=httpx.Response(404, text="nope"))
        with pytest.raises(ProviderError) as exc_info:
            _get()
        assert route.call_count == 1
        assert exc_info.value.status_code == 404
        assert not isinstance(exc_info.value, UpstreamFetchError)

    @respx.mock
    def test_strips_rejected_list_item_and_retries(self):
        route = respx.get(URL).mock(
            side_effect=[
                httpx.Response(400, json={"error": True, "reason": REJECTED}),
                httpx.Response(200, json={"ok": True}),
            ]
        )
        result = _get({"hourly": "wave_height,swell_wave_peak_period"})
        assert result == {"ok": True}
        assert route.call_count == 2
        assert route.calls[1].request.url.params["hourly"] == "wave_height"

    @respx.mock
    def test_second_rejection_raises(self):
        route = respx.get(URL).mock(
            side_effect=[
                httpx.Response(400, json={"error": True, "reason": REJECTED}),
                httpx.Response(400, text="still bad"),
            ]
        )
        with pytest.raises(InvalidParameterError) as exc_info:
            _get({"hourly": "wave_height,swell_wave_peak_period"})
        assert route.call_count == 2
        assert exc_info.value.parameter == "hourly=swell_wave_peak_period"

    @respx.mock
    def test_unrecognised_rejection_raises(self):
        respx.get(URL).mock(return_value=httpx.Response(422, text="bad request"))
        with pytest.raises(InvalidParameterError) as exc_info:
            _get()
        assert exc_info.value.parameter is None
        assert exc_info.value.status_code == 422


class TestFindInvalidParameter:
    def test_open_meteo_message(self):
        params = {"hourly": "wave_height,swell_wave_peak_period"}
        assert find_invalid_parameter(REJECTED, params) == ("hourly", "swell_wave_peak_period")

    def test_open_meteo_unknown_key(self):
        assert find_invalid_parameter(REJECTED, {"daily": "x"}) is None

    def test_stormglass_errors_object(self):
        body = '{"errors": {"end": "Invalid end date"}}'
        assert find_invalid_parameter(body, {"start": "a", "end": "b"}) == ("end", None)

    def test_plain_text(self):
        assert find_invalid_parameter("Bad Request", {"hourly": "x"}) is None


class TestStripParameter:
    def test_drop_list_item(self):
        out = strip_parameter({"hourly": "a,b,c"}, "hourly", "b")
        assert out == {"hourly": "a,c"}

    def test_drop_last_item_removes_key(self):
        assert strip_parameter({"hourly": "a", "lat": "1"}, "hourly", "a") == {"lat": "1"}

    def test_drop_whole_key(self):
        params = {"start": "a", "end": "b"}
        assert strip_parameter(params, "end", None) == {"start": "a"}
        assert params == {"start": "a", "end": "b"}
