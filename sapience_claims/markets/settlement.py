"""
Settlement index reader.
Pages through a wallet's active positions on the Sapience GraphQL API.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from sapience_claims.config import settings
from sapience_claims.markets.base import PositionStatus, SettlementQueryError
from sapience_claims.schemas.positions import PositionSchema, PositionsPage

logger = logging.getLogger(__name__)

CLAIMABLE_POSITIONS_QUERY = """
  query ClaimablePositions($address: String!, $chainId: Int, $status: String, $take: Int, $skip: Int) {
    positions(
      address: $address
      chainId: $chainId
      status: $status
      take: $take
      skip: $skip
    ) {
      id
      chainId
      marketAddress
      predictor
      counterparty
      predictorNftTokenId
      counterpartyNftTokenId
      totalCollateral
      predictorCollateral
      counterpartyCollateral
      refCode
      status
      predictorWon
      settledAt
      predictions {
        conditionId
        outcomeYes
        chainId
        condition {
          id
          question
          shortName
          endTime
          resolver
          settled
          resolvedToYes
        }
      }
    }
  }
"""


class SettlementReader:
    name = "Sapience"

    def __init__(self, graphql_url: Optional[str] = None, page_size: Optional[int] = None):
        self._http: Optional[httpx.AsyncClient] = None
        self._graphql_url = graphql_url or settings.graphql_url
        self._page_size = page_size if page_size is not None else settings.positions_page_size
        if self._page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self._page_size}")

    @property
    def page_size(self) -> int:
        return self._page_size

    async def initialize(self, client: Optional[httpx.AsyncClient] = None) -> None:
        if client is not None:
            self._http = client
            return
        self._http = httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def _graphql(self, query: str, variables: dict[str, Any]) -> dict:
        if self._http is None:
            await self.initialize()
        try:
            resp = await self._http.post(self._graphql_url, json={"query": query, "variables": variables})
        except httpx.HTTPError as e:
            raise SettlementQueryError(f"GraphQL request failed: {e}") from e

        if resp.status_code == 429:
            raise SettlementQueryError("Rate limit exceeded", "429")
        if resp.is_error:
            raise SettlementQueryError(
                f"GraphQL request failed: {resp.status_code} {resp.reason_phrase}", str(resp.status_code)
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise SettlementQueryError("GraphQL response is not valid JSON") from e
        if not isinstance(body, dict):
            raise SettlementQueryError("GraphQL response is not an object")

        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else {}
            message = first.get("message") if isinstance(first, dict) else None
            raise SettlementQueryError(f"GraphQL error: {message or 'Unknown error'}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise SettlementQueryError("GraphQL response has no data")
        return data

    async def fetch_page(self, wallet_address: str, chain_id: int, skip: int) -> list[PositionSchema]:
        data = await self._graphql(
            CLAIMABLE_POSITIONS_QUERY,
            {
                "address": wallet_address,
                "chainId": chain_id,
                "status": PositionStatus.ACTIVE.value,
                "take": self._page_size,
                "skip": skip,
            },
        )
        try:
            page = PositionsPage.model_validate(data)
        except ValidationError as e:
            raise SettlementQueryError(f"Malformed positions payload: {e.error_count()} validation error(s)") from e
        return page.positions or []

    async def get_active_positions(self, wallet_address: str, chain_id: int) -> list[PositionSchema]:
        """Fetch every active position for the wallet, one page at a time.

        Paging stops on the first page shorter than the page size, so a final
        full page costs one extra (empty) request.
        """
        positions: list[PositionSchema] = []
        skip = 0
        while True:
            page = await self.fetch_page(wallet_address, chain_id, skip)
            positions.extend(page)
            logger.debug(f"Fetched {len(page)} positions at skip={skip}")
            if len(page) < self._page_size:
                break
            skip += self._page_size
        return positions


settlement_reader = SettlementReader()
