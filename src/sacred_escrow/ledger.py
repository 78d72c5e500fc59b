"""Ledger client for the SacredEscrow contract.

Thin web3.py wrapper that owns the RPC connection and the contract binding:
- chain id resolution
- deposit / claim / refund transactions, signed locally and sent raw
- deposits(id) reads
- typed decoding of the DepositCreated event

Every failure surfaced by web3, the RPC node or the network is raised as
LedgerError. Nothing here retries.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception
from web3.logs import DISCARD

from .abi import SACRED_ESCROW_ABI
from .attestation.types import Attestation
from .attestation.utils import parse_address, parse_signature
from .errors import LedgerError

logger = logging.getLogger(__name__)

# Receipt polling window. The client keeps waiting past it; it only
# controls how often progress is logged.
RECEIPT_POLL_WINDOW_SECONDS = 120

_LEDGER_EXCEPTIONS = (Web3Exception, ValueError, OSError)


@dataclass(frozen=True)
class Deposit:
    """On-chain deposit record, as returned by deposits(id)."""

    depositor_address: str
    amount: int
    platform_id: int
    recipient_user_id: int
    depositor_user_id: int
    content_uri: str
    claimed: bool


@dataclass(frozen=True)
class DepositCreatedEvent:
    """Decoded DepositCreated log."""

    deposit_id: int
    depositor_address: str
    platform_id: int
    recipient_user_id: int
    amount: int
    depositor_user_id: int
    content_uri: str


@dataclass(frozen=True)
class TransactionOutcome:
    """A confirmed transaction."""

    tx_hash: str
    status: Optional[int]
    receipt: Any
    deposit_created: Optional[DepositCreatedEvent] = None


def _ledger_call(description: str, call: Callable[[], Any]) -> Any:
    try:
        return call()
    except _LEDGER_EXCEPTIONS as exc:
        raise LedgerError(f"{description} failed: {exc}") from exc


class LedgerClient:
    """Connection to one SacredEscrow deployment."""

    def __init__(self, rpc_url: str, escrow_address: str, web3: Optional[Web3] = None):
        self.w3 = web3 or Web3(Web3.HTTPProvider(rpc_url))
        self.escrow_address = parse_address(escrow_address, "escrow address")
        self.escrow = self.w3.eth.contract(
            address=self.escrow_address,
            abi=SACRED_ESCROW_ABI,
        )

    def chain_id(self) -> int:
        """Read the network's chain id from the RPC endpoint."""
        chain_id = _ledger_call("Chain id lookup", lambda: self.w3.eth.chain_id)
        logger.info("Resolved chain id %s from RPC", chain_id)
        return int(chain_id)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def deposit(
        self,
        account: LocalAccount,
        platform_id: int,
        recipient_user_id: int,
        depositor_user_id: int,
        content_uri: str,
        amount_wei: int,
    ) -> TransactionOutcome:
        """Deposit ``amount_wei`` for a platform identity.

        Returns:
            TransactionOutcome whose ``deposit_created`` holds the decoded
            DepositCreated event, or None if the receipt has none
        """
        func = self.escrow.functions.deposit(
            platform_id, recipient_user_id, depositor_user_id, content_uri
        )
        outcome = self._send(account, func, value=amount_wei)
        event = self.parse_deposit_created(outcome.receipt)
        return TransactionOutcome(
            tx_hash=outcome.tx_hash,
            status=outcome.status,
            receipt=outcome.receipt,
            deposit_created=event,
        )

    def claim(
        self,
        account: LocalAccount,
        deposit_id: int,
        payout_address: str,
        attestation: Attestation,
        signature: str,
    ) -> TransactionOutcome:
        """Relay a claim with the attester's signature."""
        func = self.escrow.functions.claim(
            deposit_id,
            payout_address,
            attestation.as_tuple(),
            parse_signature(signature),
        )
        return self._send(account, func)

    def refund(self, account: LocalAccount, deposit_id: int) -> TransactionOutcome:
        """Refund an unclaimed deposit. The contract checks caller and refund window."""
        return self._send(account, self.escrow.functions.refund(deposit_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_deposit(self, deposit_id: int) -> Deposit:
        """Read a deposit record."""
        raw = _ledger_call(
            f"deposits({deposit_id})",
            lambda: self.escrow.functions.deposits(deposit_id).call(),
        )
        (
            depositor_address,
            amount,
            platform_id,
            recipient_user_id,
            depositor_user_id,
            content_uri,
            claimed,
        ) = raw
        return Deposit(
            depositor_address=depositor_address,
            amount=int(amount),
            platform_id=int(platform_id),
            recipient_user_id=int(recipient_user_id),
            depositor_user_id=int(depositor_user_id),
            content_uri=content_uri,
            claimed=bool(claimed),
        )

    def parse_deposit_created(self, receipt: Any) -> Optional[DepositCreatedEvent]:
        """Decode the first DepositCreated log of a receipt.

        Logs emitted by other contracts or events are skipped.
        """
        events = self.escrow.events.DepositCreated().process_receipt(receipt, errors=DISCARD)
        if not events:
            return None

        args = events[0]["args"]
        return DepositCreatedEvent(
            deposit_id=int(args["depositId"]),
            depositor_address=args["depositorAddress"],
            platform_id=int(args["platformId"]),
            recipient_user_id=int(args["recipientUserId"]),
            amount=int(args["amount"]),
            depositor_user_id=int(args["depositorUserId"]),
            content_uri=args["contentUri"],
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _tx_params(self, account: LocalAccount, value: int) -> Dict[str, Any]:
        return {
            "from": account.address,
            "nonce": self.w3.eth.get_transaction_count(account.address, "pending"),
            "value": value,
        }

    def _send(self, account: LocalAccount, func: Any, value: int = 0) -> TransactionOutcome:
        name = func.fn_name

        def submit() -> Any:
            tx = func.build_transaction(self._tx_params(account, value))
            signed = account.sign_transaction(tx)
            return self.w3.eth.send_raw_transaction(signed.raw_transaction)

        tx_hash = Web3.to_hex(_ledger_call(f"{name} submission", submit))
        logger.info("Submitted %s from %s: %s", name, account.address, tx_hash)

        receipt = self._wait_for_receipt(name, tx_hash)
        status = receipt.get("status")
        if status == 0:
            raise LedgerError(f"{name} transaction reverted: {tx_hash}")

        logger.info("Confirmed %s in block %s", tx_hash, receipt.get("blockNumber"))
        return TransactionOutcome(tx_hash=tx_hash, status=status, receipt=receipt)

    def _wait_for_receipt(self, name: str, tx_hash: str) -> Any:
        while True:
            try:
                return self.w3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=RECEIPT_POLL_WINDOW_SECONDS
                )
            except TimeExhausted:
                logger.info("Still waiting for %s confirmation: %s", name, tx_hash)
            except _LEDGER_EXCEPTIONS as exc:
                raise LedgerError(f"Waiting for {name} receipt failed: {exc}") from exc
