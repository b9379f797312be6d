from pydantic import BaseModel


class ClaimResultResponse(BaseModel):
    token_id: str
    market_name: str
    winnings: str
    tx_hash: str | None = None
    error: str | None = None
    explorer_url: str | None = None


class ClaimWinningsResponse(BaseModel):
    success: bool
    action: str = "CLAIM_WINNINGS"
    outcome: str
    message: str
    active_positions: int = 0
    claimable_count: int = 0
    winning_count: int = 0
    losing_count: int = 0
    successful_claims: int = 0
    failed_claims: int = 0
    total_winnings: str = "0"
    total_winnings_raw: str = "0"  # Base units, exact
    results: list[ClaimResultResponse] = []
    error: str | None = None


class TransactionData(BaseModel):
    to: str
    data: str
    value: str
    gas: str | None = None
    chain_id: int
    description: str


class PrepareClaimsResponse(BaseModel):
    success: bool
    outcome: str
    message: str
    claimable_count: int = 0
    winning_count: int = 0
    transactions: list[TransactionData] = []
    errors: list[ClaimResultResponse] = []  # Winners that could not be prepared
    error: str | None = None
