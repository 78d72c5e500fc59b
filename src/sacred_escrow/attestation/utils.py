"""Input parsing and constants for Sacred Escrow attestations."""

import re
from decimal import Decimal, InvalidOperation
from typing import Union

from eth_utils import to_checksum_address

from ..errors import SignatureError, ValidationError

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Platform ids understood by the escrow contract
PLATFORM_X = 1  # X / Twitter

SECONDS_PER_DAY = 86400

# Default attestation lifetime (24 hours)
DEFAULT_ATTESTATION_TTL = SECONDS_PER_DAY

WEI_PER_ETHER = 10**18

SIGNATURE_LENGTH = 65

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

_DECIMAL_PATTERN = re.compile(r"[0-9]+")
_HEX_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+")
_SIGNATURE_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")

IntLike = Union[int, str]


def parse_uint(value: IntLike, bits: int, field: str = "value") -> int:
    """Parse an unsigned integer of the given bit width.

    Accepts ints, decimal strings and 0x-prefixed hex strings. Nothing is
    coerced silently: floats, bools, negatives and values that do not fit in
    ``bits`` are rejected.

    Args:
        value: Raw input value
        bits: Width of the target type (8, 64, 256, ...)
        field: Field name for error messages

    Returns:
        The parsed integer

    Raises:
        ValidationError: If the value is malformed, negative or overflows
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r} is not an integer")

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if _HEX_PATTERN.fullmatch(text):
            parsed = int(text, 16)
        elif _DECIMAL_PATTERN.fullmatch(text):
            parsed = int(text, 10)
        else:
            raise ValidationError(f"Invalid {field}: {value!r} is not an unsigned integer")
    else:
        raise ValidationError(f"Invalid {field}: {value!r} is not an integer")

    if parsed < 0:
        raise ValidationError(f"Invalid {field}: {parsed} is negative")
    if parsed >= 1 << bits:
        raise ValidationError(f"Invalid {field}: {parsed} does not fit in uint{bits}")

    return parsed


def parse_uint8(value: IntLike, field: str = "value") -> int:
    return parse_uint(value, 8, field)


def parse_uint64(value: IntLike, field: str = "value") -> int:
    return parse_uint(value, 64, field)


def parse_uint256(value: IntLike, field: str = "value") -> int:
    return parse_uint(value, 256, field)


def parse_address(value: str, field: str = "address") -> str:
    """Validate a 0x-prefixed 20-byte address and return its checksum form.

    Mixed case is accepted whatever its checksum, matching the contract's
    view of an address as plain bytes.

    Raises:
        ValidationError: If the value is not ``0x`` followed by 40 hex characters
    """
    if not isinstance(value, str) or not ADDRESS_PATTERN.fullmatch(value):
        raise ValidationError(f"Invalid {field}: {value!r} must be a 0x-prefixed address")
    return to_checksum_address(value.lower())


def parse_signature(signature: str) -> bytes:
    """Decode a hex signature (with or without 0x) into its 65 raw bytes.

    Raises:
        SignatureError: If the value is not hex or not 65 bytes long
    """
    if not isinstance(signature, str):
        raise SignatureError("Signature must be a hex string")

    text = signature[2:] if signature.startswith(("0x", "0X")) else signature
    # bytes.fromhex skips whitespace
    if not _SIGNATURE_HEX_PATTERN.fullmatch(text):
        raise SignatureError("Signature is not valid hex")
    try:
        raw = bytes.fromhex(text)
    except ValueError:
        raise SignatureError("Signature is not valid hex") from None

    if len(raw) != SIGNATURE_LENGTH:
        raise SignatureError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}"
        )
    return raw


def parse_ether(amount: Union[str, int, Decimal]) -> int:
    """Parse a human readable ETH amount to wei.

    Args:
        amount: ETH amount (e.g., "0.1")

    Returns:
        Amount in wei (e.g., 100000000000000000)

    Raises:
        ValidationError: If the amount is malformed, negative or finer than 1 wei
    """
    if isinstance(amount, (bool, float)):
        raise ValidationError(f"Invalid amount: {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {amount!r}") from None

    if not value.is_finite() or value < 0:
        raise ValidationError(f"Invalid amount: {amount!r}")

    wei = value * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValidationError(f"Invalid amount: {amount!r} has more than 18 decimals")
    return int(wei)


def format_ether(wei: int) -> str:
    """Format a wei amount to a human readable ETH string.

    Args:
        wei: Amount in wei (e.g., 1500000000000000000)

    Returns:
        Human readable string (e.g., "1.5")
    """
    whole, fraction = divmod(wei, WEI_PER_ETHER)
    return f"{whole}.{fraction:018d}".rstrip("0").rstrip(".")
