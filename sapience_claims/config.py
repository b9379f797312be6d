from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Settlement index
    graphql_url: str = "https://api.sapience.xyz/graphql"
    positions_page_size: int = Field(100, gt=0)
    http_timeout_seconds: float = 30.0

    # Ethereal chain
    chain_id: int = 5064014
    rpc_url: str = "https://rpc.ethereal.trade"
    prediction_market_address: str = ""
    explorer_tx_url: str = ""  # e.g. "https://explorer.ethereal.trade/tx/{}"

    # Wallet
    wallet_address: str = ""
    private_key: str = ""

    # Collateral
    collateral_symbol: str = "USDe"
    collateral_decimals: int = 18

    # Claim submission
    gas_price_multiplier: float = 1.2
    receipt_timeout_seconds: int = 120

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
