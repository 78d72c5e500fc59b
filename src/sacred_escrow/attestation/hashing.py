"""EIP-712 hashing for claim attestations.

Computes the same three values the escrow contract derives on-chain:
- the domain separator (binds chain id and contract address)
- the ClaimAttestation struct hash
- the final digest that the attester signs
"""

from eth_abi import encode
from eth_utils import keccak, to_hex

from .types import (
    CLAIM_ATTESTATION_TYPES,
    PRIMARY_TYPE,
    Attestation,
    AttestationHashes,
    EIP712Domain,
)


EIP712_DOMAIN_TYPEHASH = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)


def _type_string() -> str:
    fields = ",".join(
        f"{field['type']} {field['name']}"
        for field in CLAIM_ATTESTATION_TYPES[PRIMARY_TYPE]
    )
    return f"{PRIMARY_TYPE}({fields})"


CLAIM_ATTESTATION_TYPEHASH = keccak(text=_type_string())


def domain_separator(domain: EIP712Domain) -> bytes:
    """Hash the EIP-712 domain."""
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPEHASH,
                keccak(text=domain["name"]),
                keccak(text=domain["version"]),
                domain["chainId"],
                domain["verifyingContract"],
            ],
        )
    )


def struct_hash(attestation: Attestation) -> bytes:
    """Hash the ClaimAttestation struct (static fields only, no dynamic types)."""
    field_types = [field["type"] for field in CLAIM_ATTESTATION_TYPES[PRIMARY_TYPE]]
    return keccak(
        encode(
            ["bytes32", *field_types],
            [CLAIM_ATTESTATION_TYPEHASH, *attestation.as_tuple()],
        )
    )


def hash_attestation(domain: EIP712Domain, attestation: Attestation) -> AttestationHashes:
    """Compute the EIP-712 hashes of an attestation.

    Args:
        domain: Domain built with build_domain()
        attestation: Attestation to hash

    Returns:
        AttestationHashes with 0x-prefixed bytes32 hex strings
    """
    separator = domain_separator(domain)
    message_hash = struct_hash(attestation)
    digest = keccak(b"\x19\x01" + separator + message_hash)

    return AttestationHashes(
        domain_separator=to_hex(separator),
        struct_hash=to_hex(message_hash),
        digest=to_hex(digest),
    )
