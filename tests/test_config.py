"""Tests for configuration loading."""

import pytest

from sacred_escrow.config import EscrowConfig
from sacred_escrow.errors import ConfigError

from conftest import ATTESTER_KEY, ESCROW_ADDRESS, RELAYER_KEY


class TestEscrowConfig:
    """Tests for EscrowConfig."""

    def test_from_env(self):
        """Test environment variables map onto config fields."""
        config = EscrowConfig.from_env(
            {
                "RPC_URL": "http://localhost:8545",
                "CHAIN_ID": "84532",
                "ESCROW_ADDRESS": ESCROW_ADDRESS,
                "RELAYER_PRIVATE_KEY": RELAYER_KEY,
                "ATTESTER_PRIVATE_KEY": ATTESTER_KEY,
                "FEE_BPS": "250",
            }
        )

        assert config.rpc_url == "http://localhost:8545"
        assert config.chain_id == 84532
        assert config.escrow_address == ESCROW_ADDRESS
        assert config.relayer_key == RELAYER_KEY
        assert config.attester_key == ATTESTER_KEY
        assert config.depositor_key is None
        assert config.fee_bps == 250

    def test_defaults(self):
        """Test defaults for an empty environment."""
        config = EscrowConfig.from_env({})

        assert config.rpc_url is None
        assert config.chain_id is None
        assert config.fee_bps == 100
        assert config.rate_limit == 60
        assert config.cors_origin == "*"
        assert config.json_output is False

    def test_blank_values_are_unset(self):
        """Test empty strings count as unset."""
        config = EscrowConfig.from_env({"CHAIN_ID": "", "RPC_URL": "  "})
        assert config.chain_id is None
        assert config.rpc_url is None

    def test_hex_chain_id(self):
        """Test CHAIN_ID accepts hex."""
        assert EscrowConfig.from_env({"CHAIN_ID": "0x14a34"}).chain_id == 84532

    def test_malformed_chain_id(self):
        """Test that a malformed CHAIN_ID raises an error."""
        with pytest.raises(ConfigError, match="CHAIN_ID"):
            EscrowConfig.from_env({"CHAIN_ID": "base"})

    def test_with_overrides(self):
        """Test flags override env values and None leaves them alone."""
        config = EscrowConfig.from_env({"RPC_URL": "http://env", "CHAIN_ID": "1"})

        overridden = config.with_overrides(rpc_url="http://flag", chain_id=None, json_output=True)

        assert overridden.rpc_url == "http://flag"
        assert overridden.chain_id == 1
        assert overridden.json_output is True
        assert config.rpc_url == "http://env"

    def test_repr_hides_keys(self):
        """Test key material never appears in the repr."""
        config = EscrowConfig(relayer_key=RELAYER_KEY, attester_key=ATTESTER_KEY)
        text = repr(config)

        assert RELAYER_KEY not in text
        assert ATTESTER_KEY not in text

    def test_require_missing(self):
        """Test that missing RPC URL or escrow address raise errors."""
        config = EscrowConfig()

        with pytest.raises(ConfigError, match="RPC_URL"):
            config.require_rpc_url()
        with pytest.raises(ConfigError, match="ESCROW_ADDRESS"):
            config.require_escrow_address()

    def test_key_fallbacks(self):
        """Test depositor and relayer keys fall back to each other."""
        only_relayer = EscrowConfig(relayer_key=RELAYER_KEY)
        only_depositor = EscrowConfig(depositor_key=ATTESTER_KEY)

        assert only_relayer.depositor_signing_key == RELAYER_KEY
        assert only_depositor.relayer_signing_key == ATTESTER_KEY
