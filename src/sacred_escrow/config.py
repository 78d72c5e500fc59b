"""Configuration for the Sacred Escrow client.

Built once at start-up from the environment (optionally a ``.env`` file) and
then layered with command-line flags. Command handlers receive the resulting
object explicitly; nothing below the CLI reads the environment.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from .errors import ConfigError


def _optional_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip(), 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _int_with_default(env: Mapping[str, str], name: str, default: int) -> int:
    value = _optional_int(env, name)
    return default if value is None else value


def _optional_str(env: Mapping[str, str], name: str) -> Optional[str]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class EscrowConfig:
    """Resolved client configuration."""

    rpc_url: Optional[str] = None
    chain_id: Optional[int] = None
    """Chain id override. When None the id is read from the RPC endpoint."""

    escrow_address: Optional[str] = None

    depositor_key: Optional[str] = field(default=None, repr=False)
    relayer_key: Optional[str] = field(default=None, repr=False)
    attester_key: Optional[str] = field(default=None, repr=False)

    json_output: bool = False

    # Settings for the surrounding attestation service, not used by the CLI
    fee_bps: int = 100
    fee_recipient: Optional[str] = None
    cors_origin: str = "*"
    rate_limit: int = 60
    twitter_client_id: Optional[str] = None
    twitter_client_secret: Optional[str] = field(default=None, repr=False)
    oauth_redirect_url: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EscrowConfig":
        """Load configuration from environment variables.

        Args:
            env: Mapping to read from (default: os.environ)

        Raises:
            ConfigError: If a numeric variable is malformed
        """
        env = os.environ if env is None else env
        return cls(
            rpc_url=_optional_str(env, "RPC_URL"),
            chain_id=_optional_int(env, "CHAIN_ID"),
            escrow_address=_optional_str(env, "ESCROW_ADDRESS"),
            relayer_key=_optional_str(env, "RELAYER_PRIVATE_KEY"),
            attester_key=_optional_str(env, "ATTESTER_PRIVATE_KEY"),
            fee_bps=_int_with_default(env, "FEE_BPS", 100),
            fee_recipient=_optional_str(env, "FEE_RECIPIENT"),
            cors_origin=_optional_str(env, "CORS_ORIGIN") or "*",
            rate_limit=_int_with_default(env, "RATE_LIMIT", 60),
            twitter_client_id=_optional_str(env, "TWITTER_CLIENT_ID"),
            twitter_client_secret=_optional_str(env, "TWITTER_CLIENT_SECRET"),
            oauth_redirect_url=_optional_str(env, "OAUTH_REDIRECT_URL"),
        )

    def with_overrides(self, **overrides) -> "EscrowConfig":
        """Return a copy with command-line values applied. None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def require_rpc_url(self) -> str:
        if not self.rpc_url:
            raise ConfigError("RPC_URL is required (flag --rpc or env)")
        return self.rpc_url

    def require_escrow_address(self) -> str:
        if not self.escrow_address:
            raise ConfigError("ESCROW_ADDRESS is required (flag --escrow or env)")
        return self.escrow_address

    @property
    def depositor_signing_key(self) -> Optional[str]:
        """Key for deposit and refund: depositor key, else relayer key."""
        return self.depositor_key or self.relayer_key

    @property
    def relayer_signing_key(self) -> Optional[str]:
        """Key for claim relays: relayer key, else depositor key."""
        return self.relayer_key or self.depositor_key
