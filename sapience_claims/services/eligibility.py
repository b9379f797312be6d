"""Claim eligibility: which positions can be burned, and who gets paid."""

from typing import Iterable, Optional

from sapience_claims.markets.base import ClaimableInfo, ClaimablePosition, PositionStatus
from sapience_claims.schemas.positions import PositionSchema

MARKET_NAME_MAX_CHARS = 50


def are_all_conditions_settled(position: PositionSchema) -> bool:
    """True only if the position has legs and every leg's condition has settled."""
    if not position.predictions:
        return False
    return all(pred.condition is not None and pred.condition.settled is True for pred in position.predictions)


def did_predictor_win(position: PositionSchema) -> bool:
    """Parlay rule: the predictor must be right on every leg.

    An unsettled or missing condition counts as a miss, so the counterparty
    wins by default. There is no void/push outcome.
    """
    if not position.predictions:
        return False
    for pred in position.predictions:
        if pred.condition is None or not pred.condition.settled:
            return False
        if pred.outcome_yes != pred.condition.resolved_to_yes:
            return False
    return True


def get_market_name(position: PositionSchema) -> str:
    first = position.predictions[0] if position.predictions else None
    condition = first.condition if first else None
    if condition and condition.short_name:
        return condition.short_name
    if condition and condition.question:
        return condition.question[:MARKET_NAME_MAX_CHARS]
    return f"Position #{position.id}"


def get_claimable_info(position: PositionSchema, wallet_address: str) -> Optional[ClaimableInfo]:
    """
    Return the caller's claim on a position, or None when it cannot be claimed yet.

    A position is claimable when:
    1. the wallet is the predictor or the counterparty (case-insensitive)
    2. the position is still active (not yet burned)
    3. every linked condition has settled
    """
    addr = wallet_address.lower()
    is_predictor = position.predictor.lower() == addr
    is_counterparty = position.counterparty.lower() == addr

    if not is_predictor and not is_counterparty:
        return None
    if position.status != PositionStatus.ACTIVE.value:
        return None
    if not are_all_conditions_settled(position):
        return None

    predictor_won = did_predictor_win(position)
    is_winner = predictor_won if is_predictor else not predictor_won

    total_collateral = int(position.total_collateral)
    if is_predictor:
        stake = int(position.predictor_collateral or "0")
        token_id = position.predictor_nft_token_id
    else:
        stake = int(position.counterparty_collateral or "0")
        token_id = position.counterparty_nft_token_id

    # Net profit: the pot minus what the winner put in, never negative.
    winnings = max(total_collateral - stake, 0) if is_winner else 0

    return ClaimableInfo(
        token_id=token_id,
        is_winner=is_winner,
        winnings=winnings,
        market_name=get_market_name(position),
    )


def find_claimable_positions(positions: Iterable[PositionSchema], wallet_address: str) -> list[ClaimablePosition]:
    claimable = []
    for position in positions:
        info = get_claimable_info(position, wallet_address)
        if info is not None:
            claimable.append(ClaimablePosition(position=position, info=info))
    return claimable


def split_winners(claimable: Iterable[ClaimablePosition]) -> tuple[list[ClaimablePosition], list[ClaimablePosition]]:
    winners: list[ClaimablePosition] = []
    losers: list[ClaimablePosition] = []
    for candidate in claimable:
        (winners if candidate.info.is_winner else losers).append(candidate)
    return winners, losers
