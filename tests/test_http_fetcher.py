from unittest.mock import MagicMock, patch

import pytest
import requests

from common.errors import NotFoundError, RateLimitedError, UpstreamError
from common.http import UpstreamFetcher

URL = "https://swapi.dev/api/people/"


def _response(status_code=200, body=None, headers=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.json.return_value = body if body is not None else {}
    return resp


@pytest.mark.asyncio
async def test_fetch_returns_decoded_body_and_passes_params():
    fetcher = UpstreamFetcher(timeout_sec=5)
    with patch("requests.get") as mock_get:
        mock_get.return_value = _response(body={"count": 1, "results": [{"name": "Luke"}]})
        data = await fetcher.fetch(URL, {"page": 2, "search": "lu"})

    assert data["results"][0]["name"] == "Luke"
    mock_get.assert_called_once_with(URL, params={"page": 2, "search": "lu"}, timeout=5.0)


@pytest.mark.asyncio
async def test_fetch_without_params_sends_none():
    fetcher = UpstreamFetcher()
    with patch("requests.get") as mock_get:
        mock_get.return_value = _response(body={"name": "Tatooine"})
        await fetcher.fetch(URL)
    assert mock_get.call_args.kwargs["params"] is None


@pytest.mark.asyncio
async def test_404_is_not_found():
    fetcher = UpstreamFetcher()
    with patch("requests.get", return_value=_response(404)):
        with pytest.raises(NotFoundError) as exc:
            await fetcher.fetch(URL + "999/", endpoint="/people/999/")
    assert exc.value.endpoint == "/people/999/"


@pytest.mark.asyncio
async def test_429_is_rate_limited_with_hint():
    fetcher = UpstreamFetcher()
    with patch("requests.get", return_value=_response(429, headers={"Retry-After": "7"})):
        with pytest.raises(RateLimitedError) as exc:
            await fetcher.fetch(URL)
    assert exc.value.retry_after == 7.0


@pytest.mark.asyncio
async def test_429_with_http_date_hint_has_no_retry_after():
    fetcher = UpstreamFetcher()
    headers = {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}
    with patch("requests.get", return_value=_response(429, headers=headers)):
        with pytest.raises(RateLimitedError) as exc:
            await fetcher.fetch(URL)
    assert exc.value.retry_after is None


@pytest.mark.asyncio
async def test_other_status_is_upstream_error():
    fetcher = UpstreamFetcher()
    with patch("requests.get", return_value=_response(503)):
        with pytest.raises(UpstreamError) as exc:
            await fetcher.fetch(URL, endpoint="/people/")
    assert exc.value.data["status_code"] == 503
    assert "503" in exc.value.message


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_error():
    fetcher = UpstreamFetcher()
    with patch("requests.get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(UpstreamError) as exc:
            await fetcher.fetch(URL)
    assert exc.value.data["transport"] == "ConnectionError"


@pytest.mark.asyncio
async def test_invalid_json_is_upstream_error():
    fetcher = UpstreamFetcher()
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    with patch("requests.get", return_value=resp):
        with pytest.raises(UpstreamError):
            await fetcher.fetch(URL)
