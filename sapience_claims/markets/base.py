"""
Core types shared by the settlement reader, the evaluator and the claim flow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sapience_claims.schemas.positions import PositionSchema


class PositionStatus(str, Enum):
    ACTIVE = "active"


ZERO_REF_CODE = "0x" + "0" * 64


@dataclass(frozen=True)
class ClaimableInfo:
    token_id: str
    is_winner: bool
    winnings: int
    market_name: str


@dataclass(frozen=True)
class ClaimablePosition:
    position: PositionSchema
    info: ClaimableInfo


@dataclass
class PreparedTransaction:
    to: str
    data: str
    value: str
    gas: Optional[str]
    chain_id: int
    description: str


@dataclass
class ClaimResult:
    token_id: str
    market_name: str
    winnings: int
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    explorer_url: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.tx_hash is not None


class ClaimsError(Exception):
    def __init__(self, message: str, source: str, code: Optional[str] = None):
        self.message = message
        self.source = source
        self.code = code
        super().__init__(f"[{source}] {message}")


class ConfigurationError(ClaimsError):
    def __init__(self, message: str):
        super().__init__(message, "config")


class SettlementQueryError(ClaimsError):
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, "settlement", code)


class ClaimEncodingError(ClaimsError):
    def __init__(self, message: str):
        super().__init__(message, "encoding")


class ClaimSubmissionError(ClaimsError):
    def __init__(self, message: str, tx_hash: Optional[str] = None, code: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message, "submission", code)


def get_explorer_url(template: str, tx_hash: str) -> Optional[str]:
    if not template:
        return None
    return template.format(tx_hash)
