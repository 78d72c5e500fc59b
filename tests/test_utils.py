"""Tests for input parsing helpers."""

import pytest

from sacred_escrow.attestation import (
    format_ether,
    parse_address,
    parse_ether,
    parse_signature,
    parse_uint8,
    parse_uint64,
    parse_uint256,
)
from sacred_escrow.errors import SignatureError, ValidationError


class TestParseUint:
    """Tests for the unsigned integer parsers."""

    def test_parse_decimal_and_hex(self):
        """Test decimal strings, hex strings and ints."""
        assert parse_uint8("255") == 255
        assert parse_uint8(0) == 0
        assert parse_uint256("0x10") == 16
        assert parse_uint256(" 987654321 ") == 987654321
        assert parse_uint64(str(2**64 - 1)) == 2**64 - 1

    @pytest.mark.parametrize("value", ["256", 256, "0x100"])
    def test_uint8_overflow(self, value):
        """Test values above 255 are rejected for uint8."""
        with pytest.raises(ValidationError, match="uint8"):
            parse_uint8(value, "platform id")

    def test_uint256_overflow(self):
        """Test 2**256 is rejected."""
        with pytest.raises(ValidationError, match="uint256"):
            parse_uint256(2**256)

    @pytest.mark.parametrize("value", ["-1", -1, "1.5", "abc", "", "0x", True, 1.0, None])
    def test_malformed(self, value):
        """Test nothing is silently coerced."""
        with pytest.raises(ValidationError):
            parse_uint256(value, "deposit id")


class TestParseAddress:
    """Tests for address parsing."""

    def test_returns_checksum(self):
        """Test lowercase input is returned in checksum form."""
        address = parse_address("0x" + "ab" * 20)
        assert address.lower() == "0x" + "ab" * 20
        assert address != address.lower()

    def test_invalid(self):
        """Test that invalid addresses raise an error naming the field."""
        with pytest.raises(ValidationError, match="Invalid payout address"):
            parse_address("invalid", "payout address")

    @pytest.mark.parametrize("value", ["0x" + "11" * 20 + "\n", "0x" + "11" * 20 + " ", " 0x" + "11" * 20])
    def test_rejects_surrounding_whitespace(self, value):
        """Test that a trailing newline or padding is not accepted as an address."""
        with pytest.raises(ValidationError, match="Invalid payout address"):
            parse_address(value, "payout address")


class TestParseSignature:
    """Tests for signature decoding."""

    def test_with_and_without_prefix(self):
        """Test 0x is optional."""
        assert parse_signature("0x" + "11" * 65) == bytes([0x11]) * 65
        assert parse_signature("11" * 65) == bytes([0x11]) * 65

    def test_wrong_length(self):
        """Test that signatures must be 65 bytes."""
        with pytest.raises(SignatureError, match="65 bytes"):
            parse_signature("0x" + "11" * 64)

    @pytest.mark.parametrize(
        "signature",
        ["0x" + "11 " * 65, "0x" + "11" * 64 + "\n11", "0x" + "11" * 65 + "\n", "0x" + "1" * 129],
    )
    def test_rejects_non_hex(self, signature):
        """Test that whitespace and odd-length hex are encoding errors."""
        with pytest.raises(SignatureError, match="not valid hex"):
            parse_signature(signature)


class TestEther:
    """Tests for ETH amount helpers."""

    def test_parse_ether(self):
        """Test ETH parsing."""
        assert parse_ether("0.1") == 10**17
        assert parse_ether("1") == 10**18
        assert parse_ether("0.000000000000000001") == 1
        assert parse_ether(2) == 2 * 10**18

    @pytest.mark.parametrize("amount", ["-1", "abc", "0.0000000000000000001", "NaN", 0.1])
    def test_parse_ether_invalid(self, amount):
        """Test malformed, negative and sub-wei amounts."""
        with pytest.raises(ValidationError, match="Invalid amount"):
            parse_ether(amount)

    def test_format_ether(self):
        """Test ETH formatting."""
        assert format_ether(10**18) == "1"
        assert format_ether(1_500_000_000_000_000_000) == "1.5"
        assert format_ether(10**17) == "0.1"
        assert format_ether(1) == "0.000000000000000001"
        assert format_ether(0) == "0"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
