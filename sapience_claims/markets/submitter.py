"""
Transaction submission for claim burns on the prediction market contract.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3

from sapience_claims.config import settings
from sapience_claims.markets.base import (
    ZERO_REF_CODE,
    ClaimEncodingError,
    ClaimSubmissionError,
    PreparedTransaction,
)

logger = logging.getLogger(__name__)

PREDICTION_MARKET_ABI = [
    {"inputs": [{"name": "tokenId", "type": "uint256"}, {"name": "refCode", "type": "bytes32"}],
     "name": "burn", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
]

_ENCODER = Web3().eth.contract(abi=PREDICTION_MARKET_ABI)


def normalize_ref_code(ref_code: Optional[str]) -> bytes:
    if not ref_code:
        ref_code = ZERO_REF_CODE
    raw = ref_code[2:] if ref_code.lower().startswith("0x") else ref_code
    try:
        value = bytes.fromhex(raw)
    except ValueError as e:
        raise ClaimEncodingError(f"Invalid refCode {ref_code!r}: not hex") from e
    if len(value) != 32:
        raise ClaimEncodingError(f"Invalid refCode {ref_code!r}: expected 32 bytes, got {len(value)}")
    return value


def encode_burn_call(token_id: str, ref_code: Optional[str]) -> str:
    """ABI-encode burn(uint256 tokenId, bytes32 refCode); a missing refCode becomes 32 zero bytes."""
    try:
        token = int(token_id)
    except (TypeError, ValueError) as e:
        raise ClaimEncodingError(f"Invalid tokenId {token_id!r}") from e
    return _ENCODER.encode_abi("burn", args=[token, normalize_ref_code(ref_code)])


class BaseSubmitter(ABC):
    @abstractmethod
    async def submit(self, rpc_url: str, private_key: str, tx: PreparedTransaction) -> str:
        """Sign and send tx, returning its 0x-prefixed hash once mined successfully."""

    async def close(self) -> None:
        pass


class Web3Submitter(BaseSubmitter):
    def __init__(
        self,
        gas_price_multiplier: Optional[float] = None,
        receipt_timeout: Optional[int] = None,
    ):
        self._providers: dict[str, AsyncWeb3] = {}
        self._gas_price_multiplier = gas_price_multiplier or settings.gas_price_multiplier
        self._receipt_timeout = receipt_timeout or settings.receipt_timeout_seconds

    def _get_web3(self, rpc_url: str) -> AsyncWeb3:
        if rpc_url not in self._providers:
            self._providers[rpc_url] = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        return self._providers[rpc_url]

    async def close(self) -> None:
        for w3 in self._providers.values():
            try:
                await w3.provider.disconnect()
            except Exception as e:
                logger.debug(f"Provider disconnect failed: {e}")
        self._providers.clear()

    async def submit(self, rpc_url: str, private_key: str, tx: PreparedTransaction) -> str:
        w3 = self._get_web3(rpc_url)
        account = Account.from_key(private_key)
        wallet = account.address

        nonce = await w3.eth.get_transaction_count(wallet, "pending")
        gas_price = await w3.eth.gas_price
        payload = {
            "from": wallet,
            "to": Web3.to_checksum_address(tx.to),
            "data": tx.data,
            "value": int(tx.value or 0),
            "nonce": nonce,
            "gasPrice": int(gas_price * self._gas_price_multiplier),
            "chainId": tx.chain_id,
        }
        # Estimation surfaces reverts (e.g. already claimed) before anything is signed.
        payload["gas"] = int(tx.gas) if tx.gas else await w3.eth.estimate_gas(payload)

        signed = account.sign_transaction(payload)
        tx_hash = Web3.to_hex(await w3.eth.send_raw_transaction(signed.raw_transaction))
        logger.info(f"Sent {tx.description}: {tx_hash}")

        receipt = await w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._receipt_timeout)
        if receipt["status"] != 1:
            raise ClaimSubmissionError("Transaction reverted", tx_hash=tx_hash)
        return tx_hash


web3_submitter = Web3Submitter()
