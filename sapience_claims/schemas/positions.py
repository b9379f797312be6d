from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

GRAPHQL_MODEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


def _integer_string(value):
    """Decimal integer strings as sent by the index; ints are accepted and stringified."""
    if isinstance(value, bool):
        raise ValueError("expected a decimal integer string")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise ValueError(f"expected a decimal integer string, got {value!r}")
    return value


class ConditionSchema(BaseModel):
    id: str
    question: Optional[str] = None
    short_name: Optional[str] = None
    end_time: Optional[int] = None
    resolver: Optional[str] = None
    settled: bool
    resolved_to_yes: Optional[bool] = None

    model_config = GRAPHQL_MODEL_CONFIG


class PredictionSchema(BaseModel):
    condition_id: str
    outcome_yes: bool
    chain_id: Optional[int] = None
    condition: Optional[ConditionSchema] = None

    model_config = GRAPHQL_MODEL_CONFIG


class PositionSchema(BaseModel):
    id: int
    chain_id: int
    market_address: str
    predictor: str
    counterparty: str
    predictor_nft_token_id: str
    counterparty_nft_token_id: str
    total_collateral: str
    # Absent stakes stay None here; they become 0 only when computing winnings.
    predictor_collateral: Optional[str] = None
    counterparty_collateral: Optional[str] = None
    ref_code: Optional[str] = None
    status: str
    predictor_won: Optional[bool] = None
    settled_at: Optional[int] = None
    predictions: list[PredictionSchema] = []

    model_config = GRAPHQL_MODEL_CONFIG

    @field_validator(
        "predictor_nft_token_id",
        "counterparty_nft_token_id",
        "total_collateral",
        mode="before",
    )
    @classmethod
    def _require_integer_string(cls, value):
        return _integer_string(value)

    @field_validator("predictor_collateral", "counterparty_collateral", mode="before")
    @classmethod
    def _optional_integer_string(cls, value):
        if value is None or value == "":
            return None
        return _integer_string(value)

    @field_validator("predictions", mode="before")
    @classmethod
    def _null_predictions(cls, value):
        return [] if value is None else value


class PositionsPage(BaseModel):
    positions: Optional[list[PositionSchema]] = None
