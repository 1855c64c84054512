from __future__ import annotations

import logging
from typing import Any

from aiohttp import ClientError
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import AsyncWeb3, Web3
from web3.exceptions import TimeExhausted, Web3Exception

from src.gelato_demo.domain.exceptions import (
    ChainReadError,
    TransactionBroadcastError,
    TransactionConfirmationError,
    TransactionTimeoutError,
)
from src.gelato_demo.domain.models import TxOptions, TxReceipt
from src.gelato_demo.infrastructure.evm.abis import ABI
from src.gelato_demo.infrastructure.evm.mappers import AbiMapper

logger = logging.getLogger(__name__)

# Errors an RPC round trip can end with, whether raised by the node or the transport.
RPC_ERRORS = (Web3Exception, ValueError, OSError, ClientError)


class Web3TransactionHandle:
    """Broadcast transaction whose receipt is awaited with a bounded timeout."""

    def __init__(
        self,
        w3: AsyncWeb3,
        tx_hash: str,
        label: str,
        *,
        timeout: float,
        poll_latency: float,
    ) -> None:
        self._w3 = w3
        self.tx_hash = tx_hash
        self._label = label
        self._timeout = timeout
        self._poll_latency = poll_latency

    async def wait(self) -> TxReceipt:
        logger.info(
            "Waiting for transaction to get mined",
            extra={"label": self._label, "tx_hash": self.tx_hash},
        )
        try:
            raw_receipt = await self._w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self._timeout,
                poll_latency=self._poll_latency,
            )
        except TimeExhausted as exc:
            raise TransactionTimeoutError(
                self._label, f"not mined within {self._timeout:g}s", self.tx_hash
            ) from exc
        except RPC_ERRORS as exc:
            raise TransactionConfirmationError(self._label, str(exc), self.tx_hash) from exc

        receipt = AbiMapper.to_receipt(raw_receipt)
        if not receipt.succeeded:
            raise TransactionConfirmationError(
                self._label, f"reverted in block {receipt.block_number}", self.tx_hash
            )
        logger.info(
            "Transaction mined",
            extra={
                "label": self._label,
                "tx_hash": self.tx_hash,
                "block_number": receipt.block_number,
                "gas_used": receipt.gas_used,
            },
        )
        return receipt


class Web3Client:
    """Async web3 connection bound to a single locally signing wallet."""

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        *,
        confirmation_timeout: float = 600.0,
        poll_latency: float = 2.0,
    ) -> None:
        self._w3 = w3
        self._account = account
        self._confirmation_timeout = confirmation_timeout
        self._poll_latency = poll_latency

    @classmethod
    def connect(
        cls,
        rpc_url: str,
        private_key: str,
        *,
        confirmation_timeout: float = 600.0,
        poll_latency: float = 2.0,
    ) -> Web3Client:
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        return cls(
            w3,
            Account.from_key(private_key),
            confirmation_timeout=confirmation_timeout,
            poll_latency=poll_latency,
        )

    @property
    def address(self) -> str:
        return self._account.address

    async def get_address(self) -> str:
        return self._account.address

    def contract(self, address: str, abi: ABI) -> Any:
        return self._w3.eth.contract(address=to_checksum_address(address), abi=abi)

    async def call(self, label: str, function: Any) -> Any:
        """Run a read-only contract call, surfacing failures as ChainReadError."""
        try:
            return await function.call()
        except RPC_ERRORS as exc:
            logger.error("Contract call failed", extra={"label": label, "details": str(exc)})
            raise ChainReadError(label, str(exc)) from exc

    async def send(self, label: str, function: Any, tx_options: TxOptions) -> Web3TransactionHandle:
        """Build, sign and broadcast ``function`` from the bound wallet."""
        try:
            params: dict[str, Any] = {
                "from": self._account.address,
                "nonce": await self._w3.eth.get_transaction_count(
                    self._account.address, "pending"
                ),
            }
            if tx_options.gas_limit is not None:
                params["gas"] = tx_options.gas_limit
            if tx_options.gas_price is not None:
                params["gasPrice"] = tx_options.gas_price
            transaction = await function.build_transaction(params)
            signed = self._account.sign_transaction(transaction)
            raw_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except RPC_ERRORS as exc:
            logger.error("Transaction rejected before inclusion", extra={"label": label})
            raise TransactionBroadcastError(label, str(exc)) from exc

        tx_hash = Web3.to_hex(raw_hash)
        logger.info("Transaction broadcast", extra={"label": label, "tx_hash": tx_hash})
        return Web3TransactionHandle(
            self._w3,
            tx_hash,
            label,
            timeout=self._confirmation_timeout,
            poll_latency=self._poll_latency,
        )
