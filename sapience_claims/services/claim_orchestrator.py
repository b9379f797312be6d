"""Claim orchestrator: burn winning position NFTs one at a time."""

import logging
from typing import Iterable, Optional

from sapience_claims.markets.base import (
    ClaimablePosition,
    ClaimResult,
    ClaimsError,
    PreparedTransaction,
    get_explorer_url,
)
from sapience_claims.markets.submitter import BaseSubmitter, encode_burn_call

logger = logging.getLogger(__name__)


class ClaimOrchestrator:
    def __init__(
        self,
        submitter: Optional[BaseSubmitter],
        rpc_url: str,
        chain_id: int,
        private_key: str,
        market_address: str,
        explorer_tx_url: str = "",
    ):
        self._submitter = submitter
        self._rpc_url = rpc_url
        self._chain_id = chain_id
        self._private_key = private_key
        self._market_address = market_address
        self._explorer_tx_url = explorer_tx_url

    def prepare_claim(self, candidate: ClaimablePosition) -> PreparedTransaction:
        info = candidate.info
        data = encode_burn_call(info.token_id, candidate.position.ref_code)
        return PreparedTransaction(
            to=self._market_address,
            data=data,
            value="0",
            gas=None,
            chain_id=self._chain_id,
            description=f"Burn tokenId={info.token_id} ({info.market_name})",
        )

    def prepare_all(
        self, winners: Iterable[ClaimablePosition]
    ) -> tuple[list[PreparedTransaction], list[ClaimResult]]:
        """Prepare every winner; an item that cannot be encoded is returned as a failed result."""
        transactions: list[PreparedTransaction] = []
        failures: list[ClaimResult] = []
        for candidate in winners:
            try:
                transactions.append(self.prepare_claim(candidate))
            except ClaimsError as e:
                logger.warning(f"Failed to prepare tokenId={candidate.info.token_id}: {e}")
                failures.append(self._failure(candidate, e.message))
        return transactions, failures

    async def claim(self, candidate: ClaimablePosition) -> ClaimResult:
        """Attempt one claim. Failures are returned as results, never raised."""
        info = candidate.info
        logger.info(f"Claiming tokenId={info.token_id}, winnings={info.winnings}")
        try:
            tx = self.prepare_claim(candidate)
            tx_hash = await self._submitter.submit(self._rpc_url, self._private_key, tx)
        except ClaimsError as e:
            logger.warning(f"Failed to claim tokenId={info.token_id}: {e}")
            return self._failure(candidate, e.message)
        except Exception as e:
            logger.warning(f"Failed to claim tokenId={info.token_id}: {e!r}")
            return self._failure(candidate, str(e) or e.__class__.__name__)

        logger.info(f"Claimed tokenId={info.token_id}, tx={tx_hash}")
        return ClaimResult(
            token_id=info.token_id,
            market_name=info.market_name,
            winnings=info.winnings,
            tx_hash=tx_hash,
            explorer_url=get_explorer_url(self._explorer_tx_url, tx_hash),
        )

    async def claim_all(self, winners: Iterable[ClaimablePosition]) -> list[ClaimResult]:
        results = []
        for candidate in winners:
            results.append(await self.claim(candidate))
        return results

    @staticmethod
    def _failure(candidate: ClaimablePosition, error: str) -> ClaimResult:
        return ClaimResult(
            token_id=candidate.info.token_id,
            market_name=candidate.info.market_name,
            winnings=candidate.info.winnings,
            error=error,
        )
