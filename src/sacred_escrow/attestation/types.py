"""Attestation Types for Sacred Escrow.

User-facing types for claim attestation signing.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TypedDict


# EIP-712 domain constants shared with the escrow contract
DOMAIN_NAME = "SacredAttester"
DOMAIN_VERSION = "1"

PRIMARY_TYPE = "ClaimAttestation"

EIP712_DOMAIN_TYPES = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# EIP-712 types for the claim attestation. Field order and widths are part of
# the signed payload and must match the verifying contract.
CLAIM_ATTESTATION_TYPES = {
    "ClaimAttestation": [
        {"name": "platformId", "type": "uint8"},
        {"name": "userId", "type": "uint256"},
        {"name": "payoutAddress", "type": "address"},
        {"name": "depositId", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "expiry", "type": "uint64"},
    ],
}


class EIP712Domain(TypedDict):
    """EIP-712 domain separator."""

    name: str
    version: str
    chainId: int
    verifyingContract: str


@dataclass(frozen=True)
class Attestation:
    """Claim attestation signed by the attester."""

    platform_id: int
    """Source platform (uint8, e.g. 1 for X)."""

    user_id: int
    """Platform numeric id of the claim recipient (uint256)."""

    payout_address: str
    """Checksum address receiving the claimed funds."""

    deposit_id: int
    """Target deposit on the escrow contract (uint256)."""

    nonce: int
    """Replay-protection token (uint256)."""

    expiry: int
    """Unix timestamp deadline for the attestation (uint64)."""

    def to_message(self) -> Dict[str, Any]:
        """Return the EIP-712 message keyed by the schema field names."""
        return {
            "platformId": self.platform_id,
            "userId": self.user_id,
            "payoutAddress": self.payout_address,
            "depositId": self.deposit_id,
            "nonce": self.nonce,
            "expiry": self.expiry,
        }

    def as_tuple(self) -> Tuple[int, int, str, int, int, int]:
        """Return the fields in schema order, as the contract's struct argument."""
        return (
            self.platform_id,
            self.user_id,
            self.payout_address,
            self.deposit_id,
            self.nonce,
            self.expiry,
        )

    def to_json(self) -> Dict[str, Any]:
        """Return the message with uint256 fields as decimal strings."""
        return {
            "platformId": self.platform_id,
            "userId": str(self.user_id),
            "payoutAddress": self.payout_address,
            "depositId": str(self.deposit_id),
            "nonce": str(self.nonce),
            "expiry": self.expiry,
        }


@dataclass(frozen=True)
class AttestationHashes:
    """EIP-712 hashes of an attestation under a domain."""

    domain_separator: str
    struct_hash: str
    digest: str


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a local signature check."""

    recovered: str
    """Checksum address recovered from the signature."""

    matches: Optional[bool] = None
    """Comparison against the expected signer, None if none was given."""
