"""Async HTTP client for the Sapience GraphQL and quoter APIs.

The Sapience API (``https://api.sapience.xyz``) serves market metadata over
GraphQL at ``/graphql`` and position-size quotes over REST at ``/quoter``.
This client is an async context manager with structured error handling;
every failure surfaces as a ``SapienceAPIError``.
"""

import logging
import re
from typing import Any

import httpx

from sapience_bot.clients.sapience._constants import HTTP_BAD_REQUEST
from sapience_bot.clients.sapience.exceptions import SapienceAPIError
from sapience_bot.clients.sapience.models import Market, MarketGroup, Quote

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"-?\d+")

MARKET_GROUPS_QUERY = """
query GetNextMarkets(
  $collateralAsset: String!
  $chainId: Int!
  $currentTime: String!
  $baseTokenName: String!
) {
  marketGroups(
    chainId: $chainId
    collateralAsset: $collateralAsset
    baseTokenName: $baseTokenName
  ) {
    address
    markets(filter: { endTimestamp_gt: $currentTime }) {
      question
      marketId
      endTimestamp
      public
    }
  }
}
"""


class SapienceClient:
    """Async HTTP client for Sapience market data and quotes.

    Args:
        base_url: Base URL for the Sapience API.
        timeout: Request timeout in seconds.

    """

    BASE_URL = "https://api.sapience.xyz"

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the Sapience API client.

        Args:
            base_url: Base URL for the Sapience API.
            timeout: Request timeout in seconds.

        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout)

    async def get_market_groups(
        self,
        *,
        chain_id: int,
        collateral_asset: str,
        base_token_name: str,
        current_time: int,
    ) -> list[MarketGroup]:
        """Fetch market groups with the markets that end after ``current_time``.

        Args:
            chain_id: Chain the market groups are deployed on.
            collateral_asset: Collateral token address.
            base_token_name: Base token name of the groups (e.g. ``"Yes"``).
            current_time: Unix seconds; only markets ending later are returned.

        Returns:
            Typed market groups in API order.

        Raises:
            SapienceAPIError: When the API returns an error response.

        """
        variables: dict[str, Any] = {
            "chainId": chain_id,
            "collateralAsset": collateral_asset,
            "baseTokenName": base_token_name,
            "currentTime": str(current_time),
        }
        data = await self._graphql(MARKET_GROUPS_QUERY, variables)
        raw_groups: list[dict[str, Any]] = data.get("marketGroups") or []
        groups = [self._parse_market_group(raw) for raw in raw_groups]
        logger.info("Fetched %d market groups", len(groups))
        return groups

    async def get_quote(
        self,
        *,
        chain_id: int,
        market_address: str,
        market_id: int,
        collateral_available: int,
        expected_price: str,
    ) -> Quote:
        """Request the maximum position size for a wager at an expected price.

        Args:
            chain_id: Chain the market group is deployed on.
            market_address: Market group contract address.
            market_id: Market identifier within the group.
            collateral_available: Wager amount in collateral base units.
            expected_price: Decimal price string, strictly positive.

        Returns:
            Quote carrying the parsed ``maxSize``.

        Raises:
            SapienceAPIError: On a non-success response or a malformed body.

        """
        url = f"{self.base_url}/quoter/{chain_id}/{market_address}/{market_id}"
        params = {
            "collateralAvailable": str(collateral_available),
            "expectedPrice": expected_price,
        }
        try:
            response = await self._http_client.request("GET", url, params=params)
        except httpx.HTTPError as exc:
            raise SapienceAPIError(
                msg=f"HTTP request failed: {exc}",
                status_code=HTTP_BAD_REQUEST,
            ) from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            logger.error(
                "Quoter API request failed with status %d: %s",
                response.status_code,
                response.text,
            )
            raise SapienceAPIError(
                msg=f"Quoter API request failed with status {response.status_code}: "
                f"{response.text}",
                status_code=response.status_code,
            )

        body = self._parse_json(response)
        max_size = body.get("maxSize") if isinstance(body, dict) else None
        if not isinstance(max_size, str) or not _INTEGER_RE.fullmatch(max_size):
            raise SapienceAPIError(
                msg=f"Quoter response has no integer maxSize: {body}",
                status_code=response.status_code,
            )
        position_size = int(max_size)

        return Quote(
            position_size=position_size,
            collateral_available=collateral_available,
            expected_price=expected_price,
        )

    async def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL query and return its ``data`` object.

        Args:
            query: GraphQL document.
            variables: Query variables.

        Returns:
            The ``data`` member of the response.

        Raises:
            SapienceAPIError: When the request fails or the body carries errors.

        """
        url = f"{self.base_url}/graphql"
        payload = {"query": query, "variables": variables}
        try:
            response = await self._http_client.request("POST", url, json=payload)
        except httpx.HTTPError as exc:
            raise SapienceAPIError(
                msg=f"HTTP request failed: {exc}",
                status_code=HTTP_BAD_REQUEST,
            ) from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            self._handle_error(response)

        result = self._parse_json(response)
        if not isinstance(result, dict):
            raise SapienceAPIError(
                msg=f"GraphQL response is not an object: {response.text[:200]}",
                status_code=response.status_code,
            )
        errors = result.get("errors")
        if errors:
            msg = "; ".join(str(err.get("message", err)) for err in errors)
            raise SapienceAPIError(msg=f"GraphQL error: {msg}", status_code=response.status_code)
        data: dict[str, Any] = result.get("data") or {}
        return data

    @staticmethod
    def _parse_market_group(raw: dict[str, Any]) -> MarketGroup:
        """Convert a raw ``marketGroups`` entry into a ``MarketGroup``.

        Each market records the group address so it can be traded on its own.
        """
        address: str = raw.get("address") or ""
        markets = tuple(
            Market(
                market_id=int(m["marketId"]),
                question=m.get("question") or "",
                end_timestamp=(
                    int(m["endTimestamp"]) if m.get("endTimestamp") is not None else None
                ),
                public=m.get("public") is True,
                market_group_address=address,
            )
            for m in raw.get("markets") or []
        )
        return MarketGroup(address=address, markets=markets)

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        """Decode a success body, raising SapienceAPIError when it is not JSON.

        Args:
            response: HTTP response with a 2xx status code.

        Returns:
            Parsed JSON body.

        Raises:
            SapienceAPIError: When the body cannot be decoded.

        """
        try:
            return response.json()
        except ValueError as exc:
            raise SapienceAPIError(
                msg=f"Response is not valid JSON: {response.text[:200]}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _handle_error(response: httpx.Response) -> None:
        """Raise a SapienceAPIError from an error response.

        Args:
            response: HTTP response with a non-2xx status code.

        Raises:
            SapienceAPIError: Always raised with status code and message.

        """
        try:
            data = response.json()
            msg: str = data.get("message", f"HTTP {response.status_code}")
        except Exception:
            msg = f"HTTP {response.status_code}"
        raise SapienceAPIError(msg=msg, status_code=response.status_code)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self) -> "SapienceClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
