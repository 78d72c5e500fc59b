"""Errors raised by the Sacred Escrow client.

Every error is fatal to a single CLI invocation: the entry point prints the
message on one line and exits with status 1.
"""


class SacredEscrowError(Exception):
    """Base class for all client errors."""


class ValidationError(SacredEscrowError, ValueError):
    """Malformed address, amount, id or other user input."""


class ConfigError(SacredEscrowError):
    """Missing RPC URL, escrow address or key material for an operation."""


class SigningKeyError(SacredEscrowError):
    """Private key material is absent or not a valid secp256k1 scalar.

    The message never contains the key itself.
    """


class SignatureError(SacredEscrowError):
    """Signature bytes are malformed or cannot be recovered."""


class LedgerError(SacredEscrowError):
    """Any failure surfaced by the ledger: network, RPC or reverted transaction."""
