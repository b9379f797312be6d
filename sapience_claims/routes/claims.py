from fastapi import APIRouter, Depends, Response

from sapience_claims.config import Settings
from sapience_claims.dependencies import get_settings, get_settlement_reader, get_submitter
from sapience_claims.markets.base import ClaimResult
from sapience_claims.markets.settlement import SettlementReader
from sapience_claims.markets.submitter import BaseSubmitter
from sapience_claims.schemas.claims import (
    ClaimResultResponse,
    ClaimWinningsResponse,
    PrepareClaimsResponse,
    TransactionData,
)
from sapience_claims.services.claim_winnings import claim_winnings, prepare_claims
from sapience_claims.services.reporter import ClaimOutcome, ClaimSummary, format_units, render_message

router = APIRouter()


def _failure_status(summary: ClaimSummary) -> int:
    # A local misconfiguration is our fault; anything else came from upstream.
    return 500 if summary.error_source == "config" else 502


def _result_response(result: ClaimResult, decimals: int) -> ClaimResultResponse:
    return ClaimResultResponse(
        token_id=result.token_id,
        market_name=result.market_name,
        winnings=format_units(result.winnings, decimals),
        tx_hash=result.tx_hash,
        error=result.error,
        explorer_url=result.explorer_url,
    )


@router.post("/winnings", response_model=ClaimWinningsResponse)
async def claim_winnings_route(
    response: Response,
    reader: SettlementReader = Depends(get_settlement_reader),
    submitter: BaseSubmitter = Depends(get_submitter),
    config: Settings = Depends(get_settings),
):
    summary = await claim_winnings(reader, submitter, config)
    if summary.outcome == ClaimOutcome.FAILED:
        response.status_code = _failure_status(summary)

    decimals = config.collateral_decimals
    return ClaimWinningsResponse(
        success=summary.success,
        outcome=summary.outcome.value,
        message=render_message(summary, config.collateral_symbol, decimals),
        active_positions=summary.active_positions,
        claimable_count=summary.claimable_count,
        winning_count=summary.winning_count,
        losing_count=summary.losing_count,
        successful_claims=summary.successful_claims,
        failed_claims=summary.failed_claims,
        total_winnings=format_units(summary.total_winnings, decimals),
        total_winnings_raw=str(summary.total_winnings),
        results=[_result_response(r, decimals) for r in summary.results],
        error=summary.error,
    )


@router.get("/prepare", response_model=PrepareClaimsResponse)
async def prepare_claims_route(
    response: Response,
    reader: SettlementReader = Depends(get_settlement_reader),
    config: Settings = Depends(get_settings),
):
    summary, txs = await prepare_claims(reader, config)
    decimals = config.collateral_decimals
    if summary.outcome == ClaimOutcome.FAILED:
        response.status_code = _failure_status(summary)

    return PrepareClaimsResponse(
        success=summary.success,
        outcome=summary.outcome.value,
        message=render_message(summary, config.collateral_symbol, decimals),
        claimable_count=summary.claimable_count,
        winning_count=summary.winning_count,
        transactions=[
            TransactionData(
                to=tx.to, data=tx.data, value=tx.value,
                gas=tx.gas, chain_id=tx.chain_id, description=tx.description,
            )
            for tx in txs
        ],
        errors=[_result_response(r, decimals) for r in summary.results],
        error=summary.error,
    )
