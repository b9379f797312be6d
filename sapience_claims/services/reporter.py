"""Reconciliation reporter: fold claim results into a summary, and render it for people."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from sapience_claims.markets.base import ClaimablePosition, ClaimResult


class ClaimOutcome(str, Enum):
    NO_ACTIVE_POSITIONS = "no_active_positions"
    NONE_SETTLED = "none_settled"
    NO_WINNERS = "no_winners"
    PREPARED = "prepared"
    CLAIMED = "claimed"
    PARTIAL = "partial"
    ALL_FAILED = "all_failed"
    FAILED = "failed"


NOTHING_TO_DO = {ClaimOutcome.NO_ACTIVE_POSITIONS, ClaimOutcome.NONE_SETTLED, ClaimOutcome.NO_WINNERS}


@dataclass
class ClaimSummary:
    outcome: ClaimOutcome
    active_positions: int = 0
    claimable_count: int = 0
    winning_count: int = 0
    losing_count: int = 0
    successful_claims: int = 0
    failed_claims: int = 0
    total_winnings: int = 0
    results: list[ClaimResult] = field(default_factory=list)
    losing_markets: list[str] = field(default_factory=list)
    submitted: bool = True
    prepared_count: int = 0
    error: Optional[str] = None
    # ClaimsError.source of a pass-level failure, e.g. "config" or "settlement".
    error_source: Optional[str] = None

    @property
    def success(self) -> bool:
        if self.outcome in NOTHING_TO_DO or self.outcome == ClaimOutcome.PREPARED:
            return True
        return self.successful_claims > 0 or self.prepared_count > 0


def build_summary(
    active_positions: int,
    claimable: Iterable[ClaimablePosition],
    results: Iterable[ClaimResult],
    submitted: bool = True,
) -> ClaimSummary:
    """Aggregate one pass.

    Pass submitted=False when winners were only prepared, not sent; results then
    holds just the winners that could not be prepared.
    """
    claimable = list(claimable)
    results = list(results)

    winners = [c for c in claimable if c.info.is_winner]
    losers = [c for c in claimable if not c.info.is_winner]
    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    prepared_count = 0 if submitted else max(len(winners) - len(failed), 0)

    if active_positions == 0:
        outcome = ClaimOutcome.NO_ACTIVE_POSITIONS
    elif not claimable:
        outcome = ClaimOutcome.NONE_SETTLED
    elif not winners:
        outcome = ClaimOutcome.NO_WINNERS
    elif not submitted and not failed:
        outcome = ClaimOutcome.PREPARED
    elif not submitted:
        outcome = ClaimOutcome.PARTIAL if prepared_count else ClaimOutcome.ALL_FAILED
    elif succeeded and not failed:
        outcome = ClaimOutcome.CLAIMED
    elif succeeded:
        outcome = ClaimOutcome.PARTIAL
    else:
        outcome = ClaimOutcome.ALL_FAILED

    return ClaimSummary(
        outcome=outcome,
        active_positions=active_positions,
        claimable_count=len(claimable),
        winning_count=len(winners),
        losing_count=len(losers),
        successful_claims=len(succeeded),
        failed_claims=len(failed),
        # Realized only: a winner whose burn failed has not been paid.
        total_winnings=sum(r.winnings for r in succeeded),
        results=results,
        losing_markets=[c.info.market_name for c in losers],
        submitted=submitted,
        prepared_count=prepared_count,
    )


def failed_summary(error: str, source: Optional[str] = None, active_positions: int = 0) -> ClaimSummary:
    return ClaimSummary(
        outcome=ClaimOutcome.FAILED,
        active_positions=active_positions,
        error=error,
        error_source=source,
    )


def format_units(amount: int, decimals: int) -> str:
    """Integer base units to a decimal string, e.g. 1500000000000000000 at 18 decimals -> "1.5"."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_str}" if frac_str else f"{sign}{whole}"


def render_message(summary: ClaimSummary, symbol: str, decimals: int) -> str:
    def amount(value: int) -> str:
        return f"{format_units(value, decimals)} {symbol}"

    outcome = summary.outcome
    if outcome == ClaimOutcome.FAILED:
        return f"Failed to claim winnings: {summary.error}"

    if outcome == ClaimOutcome.NO_ACTIVE_POSITIONS:
        return "No active positions found. You don't have any positions to check for claimable winnings."

    if outcome == ClaimOutcome.NONE_SETTLED:
        return (
            f"Found {summary.active_positions} active positions but none have all conditions settled yet. "
            "Positions can only be claimed once all their market conditions have resolved."
        )

    if outcome == ClaimOutcome.NO_WINNERS:
        losses = "\n".join(f"- {name}" for name in summary.losing_markets)
        return (
            f"Found {summary.claimable_count} claimable position(s) but none are winners. "
            f"Your losing positions:\n{losses}\n\nNo winnings to claim."
        )

    succeeded = [r for r in summary.results if r.success]
    failed = [r for r in summary.results if not r.success]
    failed_lines = "\n".join(f"- {r.market_name}: {r.error}" for r in failed)

    if not summary.submitted:
        if outcome == ClaimOutcome.PREPARED:
            return (
                f"Prepared {summary.prepared_count} claim transaction(s) for winning positions. "
                "Sign and send them to receive your collateral."
            )
        if outcome == ClaimOutcome.PARTIAL:
            return (
                f"Prepared {summary.prepared_count} claim transaction(s) for winning positions. "
                "Sign and send them to receive your collateral.\n\n"
                f"Could not prepare {len(failed)} position(s):\n{failed_lines}"
            )
        return f"**Failed to Prepare Claims**\n\nAll {len(failed)} claim(s) failed:\n{failed_lines}"

    if outcome == ClaimOutcome.CLAIMED:
        lines = "\n".join(f"- {r.market_name}: +{amount(r.winnings)} (TX: {r.tx_hash})" for r in succeeded)
        return (
            "**Winnings Claimed Successfully!**\n\n"
            f"Claimed {len(succeeded)} position(s):\n{lines}\n\n"
            f"**Total Profit: {amount(summary.total_winnings)}**"
        )

    if outcome == ClaimOutcome.PARTIAL:
        lines = "\n".join(f"- {r.market_name}: +{amount(r.winnings)}" for r in succeeded)
        return (
            "**Partial Success**\n\n"
            f"Claimed {len(succeeded)} position(s):\n{lines}\n\n"
            f"Failed to claim {len(failed)} position(s):\n{failed_lines}\n\n"
            f"**Total Profit: {amount(summary.total_winnings)}**"
        )

    return f"**Failed to Claim Winnings**\n\nAll {len(failed)} claim(s) failed:\n{failed_lines}"
