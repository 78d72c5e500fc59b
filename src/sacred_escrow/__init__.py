"""Sacred Escrow client.

Command-line client for the SacredEscrow contract: deposits, EIP-712 claim
attestations, claim relays, deposit reads and refunds.
"""

from .attestation import (
    Attestation,
    VerificationResult,
    build_domain,
    create_attestation,
    hash_attestation,
    recover_attester,
    sign_attestation,
    verify_attestation,
)
from .config import EscrowConfig
from .dispatcher import CommandResult, EscrowDispatcher
from .errors import (
    ConfigError,
    LedgerError,
    SacredEscrowError,
    SignatureError,
    SigningKeyError,
    ValidationError,
)
from .ledger import Deposit, DepositCreatedEvent, LedgerClient, TransactionOutcome

__version__ = "0.1.0"

__all__ = [
    "Attestation",
    "VerificationResult",
    "build_domain",
    "create_attestation",
    "hash_attestation",
    "recover_attester",
    "sign_attestation",
    "verify_attestation",
    "EscrowConfig",
    "CommandResult",
    "EscrowDispatcher",
    "ConfigError",
    "LedgerError",
    "SacredEscrowError",
    "SignatureError",
    "SigningKeyError",
    "ValidationError",
    "Deposit",
    "DepositCreatedEvent",
    "LedgerClient",
    "TransactionOutcome",
]
