"""Sacred Escrow Attestation Module.

This module provides the EIP-712 claim attestation used by the Sacred Escrow
contract to authorize a claim.

Key components:
- Domain construction (binds a signature to one chain and one contract)
- Attestation creation, signing, recovery and verification
- EIP-712 hashing (domain separator, struct hash, digest)
- Strict parsing of uint8/uint64/uint256 and address inputs

Example usage:
    ```python
    from sacred_escrow.attestation import (
        build_domain,
        create_attestation,
        sign_attestation,
        verify_attestation,
    )

    domain = build_domain(8453, "0x...")
    attestation = create_attestation(
        platform_id=1,  # X
        user_id=987654321,
        payout_address="0x...",
        deposit_id=1,
    )

    signature = sign_attestation(domain, attestation, private_key="0x...")
    result = verify_attestation(domain, attestation, signature, expected_signer="0x...")
    assert result.matches
    ```
"""

from .types import (
    Attestation,
    AttestationHashes,
    EIP712Domain,
    VerificationResult,
    CLAIM_ATTESTATION_TYPES,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    PRIMARY_TYPE,
)
from .hashing import (
    CLAIM_ATTESTATION_TYPEHASH,
    domain_separator,
    hash_attestation,
    struct_hash,
)
from .signing import (
    build_domain,
    create_attestation,
    default_expiry,
    default_nonce,
    encode_attestation,
    load_signing_account,
    recover_attester,
    sign_attestation,
    verify_attestation,
)
from .utils import (
    ZERO_ADDRESS,
    PLATFORM_X,
    DEFAULT_ATTESTATION_TTL,
    format_ether,
    parse_address,
    parse_ether,
    parse_signature,
    parse_uint,
    parse_uint8,
    parse_uint64,
    parse_uint256,
)

__all__ = [
    # Types
    "Attestation",
    "AttestationHashes",
    "EIP712Domain",
    "VerificationResult",
    "CLAIM_ATTESTATION_TYPES",
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "PRIMARY_TYPE",
    # Hashing
    "CLAIM_ATTESTATION_TYPEHASH",
    "domain_separator",
    "hash_attestation",
    "struct_hash",
    # Signing
    "build_domain",
    "create_attestation",
    "default_expiry",
    "default_nonce",
    "encode_attestation",
    "load_signing_account",
    "recover_attester",
    "sign_attestation",
    "verify_attestation",
    # Utils
    "ZERO_ADDRESS",
    "PLATFORM_X",
    "DEFAULT_ATTESTATION_TTL",
    "format_ether",
    "parse_address",
    "parse_ether",
    "parse_signature",
    "parse_uint",
    "parse_uint8",
    "parse_uint64",
    "parse_uint256",
]
