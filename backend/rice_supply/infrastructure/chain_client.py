"""Chain Client — thin async wrapper over web3 for marker transfers.

Invariants:
    - One operation that writes: send_marker_transfer(recipient) sends a fixed
      small value to the record's address and returns the 0x transaction hash
      once the receipt is confirmed
    - All failures (RPC, signing, timeout, reverted receipt) are mapped to
      ChainInteractionError (core/errors.py)
    - No retries: a failed transfer is reported once and forgotten

Design Decisions:
    - Plain value transfer instead of a contract call: there is no on-chain
      program, the transfer only proves the API interacted with the chain
    - Legacy gasPrice transactions: accepted by every EVM JSON-RPC endpoint
"""

import logging

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from rice_supply.core.errors import ChainInteractionError, ErrorContext

logger = logging.getLogger(__name__)

_TRANSFER_GAS = 21_000


class ChainClient:
    """Signs and sends marker transfers from the configured wallet."""

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        marker_value_wei: int = 10**15,
        timeout_seconds: int = 30,
    ):
        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds}),
        )
        self.account = Account.from_key(private_key)
        self.marker_value_wei = marker_value_wei
        self.timeout_seconds = timeout_seconds

    @property
    def address(self) -> str:
        return self.account.address

    async def is_connected(self) -> bool:
        try:
            return await self.w3.is_connected()
        except Exception as e:
            logger.warning(f"Chain connectivity check failed: {e}")
            return False

    async def send_marker_transfer(self, recipient: str, entity: str | None = None) -> str:
        """Send the marker value to `recipient`; return the confirmed tx hash."""
        context = ErrorContext(entity=entity, record_id=recipient)
        try:
            nonce = await self.w3.eth.get_transaction_count(
                self.account.address, "pending",
            )
            tx = {
                "to": Web3.to_checksum_address(recipient),
                "value": self.marker_value_wei,
                "gas": _TRANSFER_GAS,
                "gasPrice": await self.w3.eth.gas_price,
                "nonce": nonce,
                "chainId": await self.w3.eth.chain_id,
            }
            signed = self.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.timeout_seconds,
            )
        except Exception as e:
            raise ChainInteractionError(str(e), "marker transfer", context)

        if receipt.get("status") != 1:
            raise ChainInteractionError(
                f"transaction {Web3.to_hex(tx_hash)} reverted",
                "marker transfer", context,
            )
        return Web3.to_hex(tx_hash)

    async def close(self) -> None:
        try:
            await self.w3.provider.disconnect()
        except Exception as e:
            logger.warning(f"Chain provider disconnect failed: {e}")
