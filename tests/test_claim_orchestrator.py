from __future__ import annotations

import asyncio

from helpers import MARKET_ADDRESS, PREDICTOR, TEST_PRIVATE_KEY, FakeSubmitter, decode_burn, make_position
from sapience_claims.markets.base import ClaimSubmissionError
from sapience_claims.services.claim_orchestrator import ClaimOrchestrator
from sapience_claims.services.eligibility import find_claimable_positions
from sapience_claims.services.reporter import ClaimOutcome, build_summary


def make_orchestrator(submitter: FakeSubmitter, explorer_tx_url: str = "") -> ClaimOrchestrator:
    return ClaimOrchestrator(
        submitter=submitter,
        rpc_url="http://rpc.test",
        chain_id=5064014,
        private_key=TEST_PRIVATE_KEY,
        market_address=MARKET_ADDRESS,
        explorer_tx_url=explorer_tx_url,
    )


def winners(*specs):
    positions = [make_position(position_id=pid, total=total, predictor_collateral=stake) for pid, total, stake in specs]
    return find_claimable_positions(positions, PREDICTOR)


def test_prepare_claim_targets_market_with_ref_code():
    ref_code = "0x" + "cd" * 32
    candidate = find_claimable_positions([make_position(position_id=5, ref_code=ref_code)], PREDICTOR)[0]
    tx = make_orchestrator(FakeSubmitter()).prepare_claim(candidate)
    assert tx.to == MARKET_ADDRESS
    assert tx.value == "0"
    assert tx.chain_id == 5064014
    args = decode_burn(tx.data)
    assert args["tokenId"] == 10
    assert args["refCode"] == bytes.fromhex("cd" * 32)


def test_claim_records_tx_hash():
    submitter = FakeSubmitter()
    result = asyncio.run(make_orchestrator(submitter).claim(winners((1, "100", "40"))[0]))
    assert result.success
    assert result.tx_hash == "0x" + "2".rjust(64, "a")
    assert result.error is None
    assert result.winnings == 60
    assert result.explorer_url is None


def test_explorer_url_when_configured():
    orchestrator = make_orchestrator(FakeSubmitter(), explorer_tx_url="https://explorer.test/tx/{}")
    result = asyncio.run(orchestrator.claim(winners((1, "100", "40"))[0]))
    assert result.explorer_url == f"https://explorer.test/tx/{result.tx_hash}"


def test_one_failure_does_not_stop_the_batch():
    submitter = FakeSubmitter(fail={"4": RuntimeError("insufficient funds for gas")})
    batch = winners((1, "100", "40"), (2, "300", "100"), (3, "1000", "400"))
    results = asyncio.run(make_orchestrator(submitter).claim_all(batch))

    assert submitter.submitted_token_ids == ["2", "4", "6"]
    assert [r.success for r in results] == [True, False, True]
    assert results[1].error == "insufficient funds for gas"
    assert results[1].tx_hash is None


def test_partial_failure_totals_only_successful_claims():
    submitter = FakeSubmitter(fail={"4": ClaimSubmissionError("Transaction reverted", tx_hash="0xdead")})
    batch = winners((1, "100", "40"), (2, "300", "100"), (3, "1000", "400"))
    results = asyncio.run(make_orchestrator(submitter).claim_all(batch))
    summary = build_summary(3, batch, results)

    assert summary.successful_claims == 2
    assert summary.failed_claims == 1
    assert summary.total_winnings == 60 + 600
    assert summary.outcome == ClaimOutcome.PARTIAL
    assert results[1].error == "Transaction reverted"


def test_encoding_failure_is_isolated():
    positions = [
        make_position(position_id=1, ref_code="0xbeef"),
        make_position(position_id=2),
    ]
    batch = find_claimable_positions(positions, PREDICTOR)
    submitter = FakeSubmitter()
    results = asyncio.run(make_orchestrator(submitter).claim_all(batch))

    assert results[0].success is False
    assert "refCode" in results[0].error
    assert results[1].success is True
    assert submitter.submitted_token_ids == ["4"]


def test_exception_without_message_uses_class_name():
    submitter = FakeSubmitter(fail={"2": TimeoutError()})
    result = asyncio.run(make_orchestrator(submitter).claim(winners((1, "100", "40"))[0]))
    assert result.error == "TimeoutError"


def test_prepare_all_skips_unencodable_items():
    positions = [
        make_position(position_id=1, ref_code="0xbeef"),
        make_position(position_id=2),
    ]
    batch = find_claimable_positions(positions, PREDICTOR)
    transactions, failures = make_orchestrator(FakeSubmitter()).prepare_all(batch)

    assert [decode_burn(tx.data)["tokenId"] for tx in transactions] == [4]
    assert len(failures) == 1
    assert failures[0].token_id == "2"
    assert failures[0].success is False
    assert "refCode" in failures[0].error
