"""Claim Attestation Signing for Sacred Escrow.

Provides the EIP-712 operations behind the attest, verify and claim commands:
- domain construction (binds signatures to one chain and one contract)
- attestation creation with nonce/expiry defaults
- signing with a local private key
- signer recovery and verification
"""

import logging
import secrets
import time
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from ..errors import SignatureError, SigningKeyError, ValidationError
from .types import (
    CLAIM_ATTESTATION_TYPES,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    EIP712_DOMAIN_TYPES,
    PRIMARY_TYPE,
    Attestation,
    EIP712Domain,
    VerificationResult,
)
from .utils import (
    DEFAULT_ATTESTATION_TTL,
    IntLike,
    parse_address,
    parse_signature,
    parse_uint8,
    parse_uint64,
    parse_uint256,
)

logger = logging.getLogger(__name__)


def build_domain(chain_id: int, verifying_contract: str) -> EIP712Domain:
    """Create the EIP-712 domain for the escrow contract.

    Args:
        chain_id: Numeric chain id the contract is deployed on
        verifying_contract: Address of the escrow contract

    Returns:
        EIP-712 domain dictionary

    Raises:
        ValidationError: If the contract address or chain id is invalid
    """
    if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id < 0:
        raise ValidationError(f"Invalid chain id: {chain_id!r}")

    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": parse_address(verifying_contract, "escrow address"),
    }


def encode_attestation(domain: EIP712Domain, attestation: Attestation) -> Dict[str, Any]:
    """Build the full EIP-712 typed data structure for an attestation."""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPES,
            **CLAIM_ATTESTATION_TYPES,
        },
        "primaryType": PRIMARY_TYPE,
        "domain": dict(domain),
        "message": attestation.to_message(),
    }


def default_nonce(now: Optional[float] = None) -> int:
    """Time-derived nonce: whole seconds scaled by 1000 plus a random offset.

    Two nonces drawn in the same second collide with probability 1/1000.
    Callers that need strict uniqueness must pass an explicit nonce.
    """
    seconds = int(time.time() if now is None else now)
    return seconds * 1000 + secrets.randbelow(1000)


def default_expiry(now: Optional[float] = None) -> int:
    """Expiry 24 hours from now, in unix seconds."""
    seconds = int(time.time() if now is None else now)
    return seconds + DEFAULT_ATTESTATION_TTL


def create_attestation(
    platform_id: IntLike,
    user_id: IntLike,
    payout_address: str,
    deposit_id: IntLike,
    nonce: Optional[IntLike] = None,
    expiry: Optional[IntLike] = None,
    now: Optional[float] = None,
) -> Attestation:
    """Create a claim attestation from raw inputs.

    Args:
        platform_id: Platform id (uint8)
        user_id: Platform numeric user id (uint256)
        payout_address: Address that receives the claimed funds
        deposit_id: Deposit to claim (uint256)
        nonce: Replay-protection nonce (default: time-derived, see default_nonce)
        expiry: Unix timestamp deadline (default: now + 24h)
        now: Clock override for the defaults

    Returns:
        Attestation object

    Raises:
        ValidationError: If any field is malformed or out of range
    """
    return Attestation(
        platform_id=parse_uint8(platform_id, "platform id"),
        user_id=parse_uint256(user_id, "user id"),
        payout_address=parse_address(payout_address, "payout address"),
        deposit_id=parse_uint256(deposit_id, "deposit id"),
        nonce=default_nonce(now) if nonce is None else parse_uint256(nonce, "nonce"),
        expiry=default_expiry(now) if expiry is None else parse_uint64(expiry, "expiry"),
    )


def load_signing_account(private_key: Optional[str], role: str = "signer") -> LocalAccount:
    """Build a local account from a hex private key (with or without 0x).

    Raises:
        SigningKeyError: If the key is missing or invalid. The key is never
            included in the message.
    """
    if not private_key or not private_key.strip():
        raise SigningKeyError(f"Missing private key for {role}")

    key = private_key.strip()
    if not key.startswith(("0x", "0X")):
        key = "0x" + key

    try:
        return Account.from_key(key)
    except Exception:
        raise SigningKeyError(
            f"Invalid private key for {role} (key not shown for security)"
        ) from None


def sign_attestation(
    domain: EIP712Domain,
    attestation: Attestation,
    private_key: str,
) -> str:
    """Sign a claim attestation with EIP-712 using a private key.

    Signing is deterministic (RFC 6979): the same key, domain and attestation
    always produce the same signature.

    Args:
        domain: Domain built with build_domain()
        attestation: Attestation to sign
        private_key: Attester private key (hex string with or without 0x prefix)

    Returns:
        65-byte signature as a 0x-prefixed hex string

    Raises:
        SigningKeyError: If the key is missing or invalid
    """
    account = load_signing_account(private_key, "attester")

    signed_message = account.sign_typed_data(
        domain_data=dict(domain),
        message_types=CLAIM_ATTESTATION_TYPES,
        message_data=attestation.to_message(),
    )
    logger.debug(
        "Signed attestation for deposit %s as %s", attestation.deposit_id, account.address
    )
    return to_hex(signed_message.signature)


def recover_attester(
    domain: EIP712Domain,
    attestation: Attestation,
    signature: str,
) -> str:
    """Recover the address that signed an attestation.

    A signature over a different payload or domain recovers some other
    address; that is not an error, callers compare against the expected one.

    Returns:
        Checksum address of the signer

    Raises:
        SignatureError: If the signature is malformed
    """
    raw = parse_signature(signature)
    signable_message = encode_typed_data(
        domain_data=dict(domain),
        message_types=CLAIM_ATTESTATION_TYPES,
        message_data=attestation.to_message(),
    )

    try:
        return Account.recover_message(signable_message, signature=raw)
    except Exception as exc:
        raise SignatureError(f"Cannot recover signer from signature: {exc}") from exc


def verify_attestation(
    domain: EIP712Domain,
    attestation: Attestation,
    signature: str,
    expected_signer: Optional[str] = None,
) -> VerificationResult:
    """Verify an attestation signature locally.

    Never touches chain state. Expiry and nonce consumption are enforced by
    the contract, not here.

    Args:
        domain: Domain built with build_domain()
        attestation: Attestation that was signed
        signature: Attester signature
        expected_signer: Optional address to compare against (case-insensitive)

    Returns:
        VerificationResult; ``matches`` is None when no expected signer is given
    """
    recovered = recover_attester(domain, attestation, signature)

    matches = None
    if expected_signer:
        matches = recovered.lower() == expected_signer.lower()

    return VerificationResult(recovered=recovered, matches=matches)
