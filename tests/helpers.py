from __future__ import annotations

from typing import Any

from web3 import Web3

from sapience_claims.markets.base import PreparedTransaction
from sapience_claims.markets.submitter import PREDICTION_MARKET_ABI, BaseSubmitter
from sapience_claims.schemas.positions import PositionSchema

PREDICTOR = "0x1111111111111111111111111111111111111111"
COUNTERPARTY = "0x2222222222222222222222222222222222222222"
OUTSIDER = "0x9999999999999999999999999999999999999999"
MARKET_ADDRESS = "0x3333333333333333333333333333333333333333"
# Well-known throwaway key from the web3 documentation.
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

market_contract = Web3().eth.contract(abi=PREDICTION_MARKET_ABI)


def decode_burn(data: str) -> dict[str, Any]:
    _, args = market_contract.decode_function_input(data)
    return dict(args)


def leg_payload(
    outcome_yes: bool = True,
    settled: bool = True,
    resolved_to_yes: bool | None = True,
    short_name: str | None = "BTC > 100k by Dec",
    question: str | None = "Will BTC close above 100k by December?",
    condition_id: str = "0xc0",
    with_condition: bool = True,
) -> dict[str, Any]:
    condition = None
    if with_condition:
        condition = {
            "id": condition_id,
            "question": question,
            "shortName": short_name,
            "endTime": 1735689600,
            "resolver": "0x4444444444444444444444444444444444444444",
            "settled": settled,
            "resolvedToYes": resolved_to_yes,
        }
    return {"conditionId": condition_id, "outcomeYes": outcome_yes, "chainId": 5064014, "condition": condition}


def position_payload(
    position_id: int = 1,
    legs: list[dict[str, Any]] | None = None,
    total: str = "100",
    predictor_collateral: str | None = "40",
    counterparty_collateral: str | None = "60",
    status: str = "active",
    ref_code: str | None = None,
    predictor: str = PREDICTOR,
    counterparty: str = COUNTERPARTY,
) -> dict[str, Any]:
    return {
        "id": position_id,
        "chainId": 5064014,
        "marketAddress": MARKET_ADDRESS,
        "predictor": predictor,
        "counterparty": counterparty,
        "predictorNftTokenId": str(position_id * 2),
        "counterpartyNftTokenId": str(position_id * 2 + 1),
        "totalCollateral": total,
        "predictorCollateral": predictor_collateral,
        "counterpartyCollateral": counterparty_collateral,
        "refCode": ref_code,
        "status": status,
        "predictorWon": None,
        "settledAt": None,
        "predictions": [leg_payload()] if legs is None else legs,
    }


def make_position(**kwargs: Any) -> PositionSchema:
    return PositionSchema.model_validate(position_payload(**kwargs))


class FakeSubmitter(BaseSubmitter):
    """Records submissions; raises for token ids listed in `fail`."""

    def __init__(self, fail: dict[str, Exception] | None = None):
        self.fail = fail or {}
        self.submitted: list[PreparedTransaction] = []

    async def submit(self, rpc_url: str, private_key: str, tx: PreparedTransaction) -> str:
        self.submitted.append(tx)
        token_id = str(decode_burn(tx.data)["tokenId"])
        if token_id in self.fail:
            raise self.fail[token_id]
        return "0x" + token_id.rjust(64, "a")

    @property
    def submitted_token_ids(self) -> list[str]:
        return [str(decode_burn(tx.data)["tokenId"]) for tx in self.submitted]


class FakeReader:
    def __init__(self, positions: list[PositionSchema] | None = None, error: Exception | None = None):
        self.positions = positions or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def get_active_positions(self, wallet_address: str, chain_id: int) -> list[PositionSchema]:
        self.calls.append((wallet_address, chain_id))
        if self.error is not None:
            raise self.error
        return list(self.positions)
