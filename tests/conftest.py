from __future__ import annotations

import pytest

from helpers import MARKET_ADDRESS, PREDICTOR, TEST_PRIVATE_KEY, FakeSubmitter
from sapience_claims.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        wallet_address=PREDICTOR,
        private_key=TEST_PRIVATE_KEY,
        prediction_market_address=MARKET_ADDRESS,
        rpc_url="http://rpc.test",
        chain_id=5064014,
        explorer_tx_url="",
    )


@pytest.fixture
def fake_submitter() -> FakeSubmitter:
    return FakeSubmitter()
