"""One reconciliation pass: read positions, pick winners, burn, summarize."""

import logging
from typing import Optional

from eth_account import Account

from sapience_claims.config import Settings
from sapience_claims.markets.base import ClaimsError, ConfigurationError, PreparedTransaction
from sapience_claims.markets.settlement import SettlementReader
from sapience_claims.markets.submitter import BaseSubmitter
from sapience_claims.schemas.positions import PositionSchema
from sapience_claims.services.claim_orchestrator import ClaimOrchestrator
from sapience_claims.services.eligibility import find_claimable_positions, split_winners
from sapience_claims.services.reporter import ClaimSummary, build_summary, failed_summary

logger = logging.getLogger(__name__)


def resolve_wallet_address(config: Settings) -> str:
    if config.wallet_address:
        return config.wallet_address
    if not config.private_key:
        raise ConfigurationError("No wallet configured: set WALLET_ADDRESS or PRIVATE_KEY")
    try:
        return Account.from_key(config.private_key).address
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid private key: {e}") from e


def _build_orchestrator(submitter: Optional[BaseSubmitter], config: Settings) -> ClaimOrchestrator:
    if not config.prediction_market_address:
        raise ConfigurationError("PREDICTION_MARKET_ADDRESS is not set")
    if submitter is not None and not config.private_key:
        raise ConfigurationError("PRIVATE_KEY is not set")
    return ClaimOrchestrator(
        submitter=submitter,
        rpc_url=config.rpc_url,
        chain_id=config.chain_id,
        private_key=config.private_key,
        market_address=config.prediction_market_address,
        explorer_tx_url=config.explorer_tx_url,
    )


async def _read_positions(reader: SettlementReader, wallet: str, config: Settings) -> list[PositionSchema]:
    logger.info(f"Wallet: {wallet}")
    positions = await reader.get_active_positions(wallet, config.chain_id)
    logger.info(f"Found {len(positions)} active positions")
    return positions


async def claim_winnings(reader: SettlementReader, submitter: BaseSubmitter, config: Settings) -> ClaimSummary:
    """Attempt to claim every settled, winning position for the configured wallet.

    Configuration and settlement-read errors abort the pass before any claim is
    sent and come back as a FAILED summary. Individual claim failures never
    abort the pass.
    """
    try:
        wallet = resolve_wallet_address(config)
        orchestrator = _build_orchestrator(submitter, config)
        positions = await _read_positions(reader, wallet, config)
    except ClaimsError as e:
        logger.error(f"Claim pass failed: {e}")
        return failed_summary(e.message, source=e.source)

    claimable = find_claimable_positions(positions, wallet)
    winners, losers = split_winners(claimable)
    logger.info(
        f"{len(claimable)} claimable positions: {len(winners)} winning, {len(losers)} losing"
    )

    results = await orchestrator.claim_all(winners) if winners else []
    summary = build_summary(len(positions), claimable, results)
    logger.info(
        f"Claim pass finished: outcome={summary.outcome.value}, "
        f"succeeded={summary.successful_claims}, failed={summary.failed_claims}, "
        f"total_winnings={summary.total_winnings}"
    )
    return summary


async def prepare_claims(
    reader: SettlementReader, config: Settings
) -> tuple[ClaimSummary, list[PreparedTransaction]]:
    """Like claim_winnings, but return unsigned burn transactions instead of sending them."""
    try:
        wallet = resolve_wallet_address(config)
        orchestrator = _build_orchestrator(None, config)
        positions = await _read_positions(reader, wallet, config)
    except ClaimsError as e:
        logger.error(f"Claim preparation failed: {e}")
        return failed_summary(e.message, source=e.source), []

    claimable = find_claimable_positions(positions, wallet)
    winners, _ = split_winners(claimable)
    transactions, failures = orchestrator.prepare_all(winners)
    summary = build_summary(len(positions), claimable, failures, submitted=False)
    logger.info(
        f"Claim preparation finished: outcome={summary.outcome.value}, "
        f"prepared={summary.prepared_count}, failed={summary.failed_claims}"
    )
    return summary, transactions
