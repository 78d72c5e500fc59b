"""Escrow command dispatcher.

One method per CLI command. Each parses and validates its raw inputs first,
then either calls the attestation codec locally or goes through the ledger
client, and returns a CommandResult for the CLI to render.

The claim flow:
1. Parse every attestation field and the escrow address (no network yet)
2. Resolve the chain id (override or RPC) and build the EIP-712 domain
3. Sign locally with the attester key if no signature was supplied
4. Recover the attester locally (preflight) and log it
5. Relay claim() through the relayer account
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .attestation import (
    CLAIM_ATTESTATION_TYPES,
    Attestation,
    EIP712Domain,
    build_domain,
    create_attestation,
    format_ether,
    hash_attestation,
    load_signing_account,
    parse_address,
    parse_ether,
    parse_signature,
    parse_uint8,
    parse_uint256,
    sign_attestation,
    verify_attestation,
)
from .config import EscrowConfig
from .errors import ConfigError, SignatureError
from .ledger import LedgerClient

logger = logging.getLogger(__name__)

LedgerFactory = Callable[[str, str], LedgerClient]


@dataclass
class CommandResult:
    """Structured payload (for --json) plus a one-line human message."""

    payload: Dict[str, Any]
    message: str


class EscrowDispatcher:
    """Runs Sacred Escrow commands against one configuration.

    Example:
        ```python
        config = EscrowConfig.from_env().with_overrides(chain_id=8453)
        dispatcher = EscrowDispatcher(config)

        result = dispatcher.attest(
            platform="1",
            user_id="987654321",
            payout="0x...",
            deposit_id="1",
        )
        print(result.payload["signature"])
        ```
    """

    def __init__(
        self,
        config: EscrowConfig,
        ledger_factory: LedgerFactory = LedgerClient,
    ):
        self.config = config
        self._ledger_factory = ledger_factory
        self._ledger: Optional[LedgerClient] = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def deposit(
        self,
        platform: str,
        recipient_user_id: str,
        amount: str,
        depositor_user_id: str = "0",
        content_url: str = "",
    ) -> CommandResult:
        """Create a deposit for a platform identity."""
        platform_id = parse_uint8(platform, "platform id")
        recipient = parse_uint256(recipient_user_id, "recipient user id")
        depositor_user = parse_uint256(depositor_user_id or "0", "depositor user id")
        amount_wei = parse_ether(amount)
        content_uri = content_url or ""
        escrow_address = self._escrow_address()

        key = self.config.depositor_signing_key
        if not key:
            raise ConfigError("depositor-key (or RELAYER_PRIVATE_KEY) required for deposit")
        account = load_signing_account(key, "depositor")

        ledger = self._get_ledger()
        chain_id = self._chain_id()
        outcome = ledger.deposit(
            account, platform_id, recipient, depositor_user, content_uri, amount_wei
        )

        payload: Dict[str, Any] = {
            "chainId": chain_id,
            "escrow": escrow_address,
            "hash": outcome.tx_hash,
            "depositId": None,
        }
        message = f"Deposit submitted. tx={outcome.tx_hash}"

        event = outcome.deposit_created
        if event is None:
            logger.warning("No DepositCreated event found in receipt %s", outcome.tx_hash)
        else:
            payload.update(
                {
                    "depositId": str(event.deposit_id),
                    "depositorAddress": event.depositor_address,
                    "platformId": event.platform_id,
                    "recipientUserId": str(event.recipient_user_id),
                    "amount": str(event.amount),
                    "depositorUserId": str(event.depositor_user_id),
                    "contentUri": event.content_uri,
                }
            )
            message += f" depositId={event.deposit_id}"
            if event.depositor_user_id:
                message += f" depositorUserId={event.depositor_user_id}"
            if event.content_uri:
                message += f' contentUri="{event.content_uri}"'

        return CommandResult(payload, message)

    def attest(
        self,
        platform: str,
        user_id: str,
        payout: str,
        deposit_id: str,
        nonce: Optional[str] = None,
        expiry: Optional[str] = None,
    ) -> CommandResult:
        """Sign a claim attestation off-chain."""
        attestation = create_attestation(platform, user_id, payout, deposit_id, nonce, expiry)
        escrow_address = self._escrow_address()

        key = self.config.attester_key
        if not key:
            raise ConfigError("attester-key (or ATTESTER_PRIVATE_KEY) required for attest")
        attester = load_signing_account(key, "attester")

        domain = build_domain(self._chain_id(), escrow_address)
        signature = sign_attestation(domain, attestation, key)
        hashes = hash_attestation(domain, attestation)

        payload = {
            "domain": dict(domain),
            "types": CLAIM_ATTESTATION_TYPES,
            "value": attestation.to_json(),
            "digest": hashes.digest,
            "signature": signature,
            "attester": attester.address,
        }
        return CommandResult(payload, f"Signature: {signature}")

    def verify(
        self,
        platform: str,
        user_id: str,
        payout: str,
        deposit_id: str,
        nonce: str,
        expiry: str,
        signature: str,
        expected_attester: Optional[str] = None,
    ) -> CommandResult:
        """Recover the attester of a signature, without touching chain state."""
        attestation = create_attestation(platform, user_id, payout, deposit_id, nonce, expiry)
        parse_signature(signature)
        expected = (
            parse_address(expected_attester, "expected attester") if expected_attester else None
        )
        escrow_address = self._escrow_address()

        domain = build_domain(self._chain_id(), escrow_address)
        result = verify_attestation(domain, attestation, signature, expected)

        message = f"Recovered attester: {result.recovered}"
        if expected:
            message += f" (matches expected={str(result.matches).lower()})"

        return CommandResult({"recovered": result.recovered, "matches": result.matches}, message)

    def claim(
        self,
        platform: str,
        user_id: str,
        payout: str,
        deposit_id: str,
        nonce: str,
        expiry: str,
        signature: Optional[str] = None,
        expected_attester: Optional[str] = None,
    ) -> CommandResult:
        """Relay a claim, signing locally when no signature is supplied."""
        attestation = create_attestation(platform, user_id, payout, deposit_id, nonce, expiry)
        if signature:
            parse_signature(signature)
        expected = (
            parse_address(expected_attester, "expected attester") if expected_attester else None
        )
        escrow_address = self._escrow_address()

        relayer_key = self.config.relayer_signing_key
        if not relayer_key:
            raise ConfigError(
                "relayer-key (or RELAYER_PRIVATE_KEY / depositor-key) required for claim"
            )
        relayer = load_signing_account(relayer_key, "relayer")
        if not signature and not self.config.attester_key:
            raise ConfigError("signature not provided and no attester-key available to sign")

        domain = build_domain(self._chain_id(), escrow_address)
        if not signature:
            signature = sign_attestation(domain, attestation, self.config.attester_key)

        recovered = self._preflight(domain, attestation, signature, expected)

        outcome = self._get_ledger().claim(
            relayer, attestation.deposit_id, attestation.payout_address, attestation, signature
        )
        payload = {
            "hash": outcome.tx_hash,
            "status": outcome.status,
            "recoveredAttester": recovered,
        }
        return CommandResult(payload, f"Claim submitted. tx={outcome.tx_hash}")

    def get_deposit(self, deposit_id: str) -> CommandResult:
        """Read a deposit record."""
        deposit_number = parse_uint256(deposit_id, "deposit id")
        escrow_address = self._escrow_address()

        deposit = self._get_ledger().get_deposit(deposit_number)
        payload = {
            "chainId": self._chain_id(),
            "escrow": escrow_address,
            "depositId": str(deposit_number),
            "depositorAddress": deposit.depositor_address,
            "amount": str(deposit.amount),
            "platformId": deposit.platform_id,
            "recipientUserId": str(deposit.recipient_user_id),
            "depositorUserId": str(deposit.depositor_user_id),
            "contentUri": deposit.content_uri,
            "claimed": deposit.claimed,
        }

        message = (
            f"Deposit {deposit_number}: claimed={str(deposit.claimed).lower()}"
            f" amount={format_ether(deposit.amount)} ETH"
        )
        if deposit.depositor_user_id:
            message += f" depositorUserId={deposit.depositor_user_id}"
        if deposit.content_uri:
            message += f' contentUri="{deposit.content_uri}"'

        return CommandResult(payload, message)

    def refund(self, deposit_id: str) -> CommandResult:
        """Refund an unclaimed deposit (caller must be the depositor)."""
        deposit_number = parse_uint256(deposit_id, "deposit id")
        self._escrow_address()

        key = self.config.depositor_signing_key
        if not key:
            raise ConfigError("depositor-key (or RELAYER_PRIVATE_KEY) required for refund")
        account = load_signing_account(key, "depositor")

        outcome = self._get_ledger().refund(account, deposit_number)
        return CommandResult(
            {"hash": outcome.tx_hash, "status": outcome.status},
            f"Refund submitted. tx={outcome.tx_hash}",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _escrow_address(self) -> str:
        return parse_address(self.config.require_escrow_address(), "escrow address")

    def _get_ledger(self) -> LedgerClient:
        if self._ledger is None:
            self._ledger = self._ledger_factory(
                self.config.require_rpc_url(),
                self.config.require_escrow_address(),
            )
        return self._ledger

    def _chain_id(self) -> int:
        if self.config.chain_id is not None:
            return self.config.chain_id
        return self._get_ledger().chain_id()

    def _preflight(
        self,
        domain: EIP712Domain,
        attestation: Attestation,
        signature: str,
        expected: Optional[str],
    ) -> str:
        result = verify_attestation(domain, attestation, signature, expected)
        logger.info(
            "Preflight: attestation for deposit %s recovers attester %s",
            attestation.deposit_id,
            result.recovered,
        )
        if result.matches is False:
            raise SignatureError(
                f"Attestation signed by {result.recovered}, expected {expected}"
            )
        return result.recovered
