"""Tests for the Sapience GraphQL and quoter API client."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import json

import httpx
import pytest

from sapience_bot.clients.sapience.client import MARKET_GROUPS_QUERY, SapienceClient
from sapience_bot.clients.sapience.exceptions import SapienceAPIError
from sapience_bot.clients.sapience.models import Market, MarketGroup

_STATUS_OK = 200
_STATUS_BAD_REQUEST = 400
_STATUS_SERVER_ERROR = 500
_CHAIN_ID = 8453
_GROUP_ADDRESS = "0x1111111111111111111111111111111111111111"
_COLLATERAL = "0x5875eEE11Cf8398102FdAd704C9E96607675467a"
_NOW = 1_700_000_000
_WAGER = 10**18
_MAX_SIZE = 500000000000000000


def _response(status_code: int, body: Any = None, text: str = "") -> MagicMock:
    """Build a mocked httpx response.

    Args:
        status_code: HTTP status code.
        body: JSON body returned by ``json()``.
        text: Raw response text.

    Returns:
        MagicMock standing in for ``httpx.Response``.

    """
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = text
    return response


class TestSapienceClient:
    """Test suite for SapienceClient construction and lifecycle."""

    def test_initialization(self) -> None:
        """Test client initializes with default base URL."""
        client = SapienceClient()
        assert client.base_url == "https://api.sapience.xyz"

    def test_trailing_slash_stripped(self) -> None:
        """Test trailing slash is stripped from base URL."""
        client = SapienceClient(base_url="https://api.sapience.xyz/")
        assert client.base_url == "https://api.sapience.xyz"

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        """Test client can be used as async context manager."""
        async with SapienceClient() as client:
            assert client is not None

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        """Test closing the client."""
        client = SapienceClient()
        with patch.object(client._http_client, "aclose", new=AsyncMock()) as mock_close:
            await client.close()
            mock_close.assert_called_once()


class TestGetMarketGroups:
    """Test suite for the GraphQL market group query."""

    @pytest.fixture
    def client(self) -> SapienceClient:
        """Create a SapienceClient instance for testing."""
        return SapienceClient(base_url="https://api.sapience.xyz")

    async def _fetch(self, client: SapienceClient, response: MagicMock) -> tuple[Any, AsyncMock]:
        mock_request = AsyncMock(return_value=response)
        with patch.object(client._http_client, "request", new=mock_request):
            result = await client.get_market_groups(
                chain_id=_CHAIN_ID,
                collateral_asset=_COLLATERAL,
                base_token_name="Yes",
                current_time=_NOW,
            )
        return result, mock_request

    @pytest.mark.asyncio
    async def test_parses_groups_and_markets(self, client: SapienceClient) -> None:
        """Convert the nested response into typed groups with group addresses."""
        body = {
            "data": {
                "marketGroups": [
                    {
                        "address": _GROUP_ADDRESS,
                        "markets": [
                            {
                                "question": "Will it rain?",
                                "marketId": 3,
                                "endTimestamp": "1700000500",
                                "public": True,
                            },
                            {
                                "question": "Hidden",
                                "marketId": 4,
                                "endTimestamp": None,
                                "public": False,
                            },
                        ],
                    },
                ],
            },
        }

        result, _ = await self._fetch(client, _response(_STATUS_OK, body))

        assert result == [
            MarketGroup(
                address=_GROUP_ADDRESS,
                markets=(
                    Market(
                        market_id=3,
                        question="Will it rain?",
                        end_timestamp=1700000500,
                        public=True,
                        market_group_address=_GROUP_ADDRESS,
                    ),
                    Market(
                        market_id=4,
                        question="Hidden",
                        end_timestamp=None,
                        public=False,
                        market_group_address=_GROUP_ADDRESS,
                    ),
                ),
            ),
        ]

    @pytest.mark.asyncio
    async def test_sends_query_and_variables(self, client: SapienceClient) -> None:
        """POST the query with current time as a decimal string."""
        body = {"data": {"marketGroups": []}}

        result, mock_request = await self._fetch(client, _response(_STATUS_OK, body))

        assert result == []
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.sapience.xyz/graphql")
        assert kwargs["json"]["query"] == MARKET_GROUPS_QUERY
        assert kwargs["json"]["variables"] == {
            "chainId": _CHAIN_ID,
            "collateralAsset": _COLLATERAL,
            "baseTokenName": "Yes",
            "currentTime": str(_NOW),
        }

    @pytest.mark.asyncio
    async def test_null_markets_treated_as_empty(self, client: SapienceClient) -> None:
        """Accept groups whose markets field is null."""
        body = {"data": {"marketGroups": [{"address": _GROUP_ADDRESS, "markets": None}]}}

        result, _ = await self._fetch(client, _response(_STATUS_OK, body))

        assert result == [MarketGroup(address=_GROUP_ADDRESS, markets=())]

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self, client: SapienceClient) -> None:
        """Raise SapienceAPIError when the body carries GraphQL errors."""
        body = {"errors": [{"message": "Unknown argument"}], "data": None}

        with pytest.raises(SapienceAPIError, match="Unknown argument"):
            await self._fetch(client, _response(_STATUS_OK, body))

    @pytest.mark.asyncio
    async def test_error_response(self, client: SapienceClient) -> None:
        """Test that HTTP error responses raise SapienceAPIError."""
        response = _response(_STATUS_SERVER_ERROR, {"message": "Internal error"})

        with pytest.raises(SapienceAPIError, match="Internal error"):
            await self._fetch(client, response)

    @pytest.mark.asyncio
    async def test_error_non_json_body(self, client: SapienceClient) -> None:
        """Test error handling when response body is not JSON."""
        response = _response(_STATUS_SERVER_ERROR)
        response.json.side_effect = ValueError("not json")

        with pytest.raises(SapienceAPIError, match="HTTP 500"):
            await self._fetch(client, response)

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self, client: SapienceClient) -> None:
        """Wrap an undecodable 200 body, such as a proxy HTML page."""
        response = _response(_STATUS_OK, text="<html>gateway</html>")
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(SapienceAPIError, match="not valid JSON"):
            await self._fetch(client, response)

    @pytest.mark.asyncio
    async def test_list_body_raises(self, client: SapienceClient) -> None:
        """Reject a JSON body that is not an object."""
        with pytest.raises(SapienceAPIError, match="not an object"):
            await self._fetch(client, _response(_STATUS_OK, [], text="[]"))

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, client: SapienceClient) -> None:
        """Wrap httpx transport failures in SapienceAPIError."""
        mock_request = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with (
            patch.object(client._http_client, "request", new=mock_request),
            pytest.raises(SapienceAPIError, match="HTTP request failed"),
        ):
            await client.get_market_groups(
                chain_id=_CHAIN_ID,
                collateral_asset=_COLLATERAL,
                base_token_name="Yes",
                current_time=_NOW,
            )


class TestGetQuote:
    """Test suite for the REST quoter call."""

    @pytest.fixture
    def client(self) -> SapienceClient:
        """Create a SapienceClient instance for testing."""
        return SapienceClient(base_url="https://api.sapience.xyz")

    async def _quote(self, client: SapienceClient, response: MagicMock) -> tuple[Any, AsyncMock]:
        mock_request = AsyncMock(return_value=response)
        with patch.object(client._http_client, "request", new=mock_request):
            result = await client.get_quote(
                chain_id=_CHAIN_ID,
                market_address=_GROUP_ADDRESS,
                market_id=3,
                collateral_available=_WAGER,
                expected_price="1.0",
            )
        return result, mock_request

    @pytest.mark.asyncio
    async def test_parses_max_size(self, client: SapienceClient) -> None:
        """Parse the maxSize string into an integer position size."""
        response = _response(_STATUS_OK, {"maxSize": "500000000000000000"})

        result, _ = await self._quote(client, response)

        assert result.position_size == _MAX_SIZE
        assert result.collateral_available == _WAGER
        assert result.expected_price == "1.0"

    @pytest.mark.asyncio
    async def test_request_url_and_params(self, client: SapienceClient) -> None:
        """GET the templated quoter path with wager and price parameters."""
        response = _response(_STATUS_OK, {"maxSize": "1"})

        _, mock_request = await self._quote(client, response)

        args, kwargs = mock_request.call_args
        assert args == (
            "GET",
            f"https://api.sapience.xyz/quoter/{_CHAIN_ID}/{_GROUP_ADDRESS}/3",
        )
        assert kwargs["params"] == {
            "collateralAvailable": str(_WAGER),
            "expectedPrice": "1.0",
        }

    @pytest.mark.asyncio
    async def test_error_includes_status_and_body(self, client: SapienceClient) -> None:
        """Raise with the HTTP status and raw body on a failed quote."""
        response = _response(_STATUS_BAD_REQUEST, text="expectedPrice must be > 0")

        with pytest.raises(SapienceAPIError) as exc_info:
            await self._quote(client, response)

        assert exc_info.value.status_code == _STATUS_BAD_REQUEST
        assert "status 400" in str(exc_info.value)
        assert "expectedPrice must be > 0" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"maxSize": "1.5"}, {"maxSize": None}, {"maxSize": "1_000"}, {"maxSize": " 5 "}, []],
    )
    async def test_malformed_body_raises(self, client: SapienceClient, body: Any) -> None:
        """Raise when maxSize is missing or not an integer."""
        with pytest.raises(SapienceAPIError, match="maxSize"):
            await self._quote(client, _response(_STATUS_OK, body))

    @pytest.mark.asyncio
    async def test_non_json_quote_body_raises(self, client: SapienceClient) -> None:
        """Wrap an undecodable 200 body in SapienceAPIError."""
        response = _response(_STATUS_OK, text="<html>gateway</html>")
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(SapienceAPIError, match="not valid JSON") as exc_info:
            await self._quote(client, response)

        assert exc_info.value.status_code == _STATUS_OK

    @pytest.mark.asyncio
    async def test_negative_max_size_kept(self, client: SapienceClient) -> None:
        """Keep the sign of a short position size."""
        result, _ = await self._quote(client, _response(_STATUS_OK, {"maxSize": "-42"}))

        assert result.position_size == -42
