"""Shared fixtures for the Sacred Escrow tests."""

import pytest
from eth_account import Account

from sacred_escrow.config import EscrowConfig
from sacred_escrow.ledger import Deposit, DepositCreatedEvent, TransactionOutcome


# Test wallets (DO NOT use in production)
ATTESTER_KEY = "0x" + "ab" * 32
ATTESTER_ADDRESS = Account.from_key(ATTESTER_KEY).address

RELAYER_KEY = "cd" * 32  # no 0x prefix on purpose
RELAYER_ADDRESS = Account.from_key("0x" + RELAYER_KEY).address

DEPOSITOR_KEY = "0x" + "ef" * 32
DEPOSITOR_ADDRESS = Account.from_key(DEPOSITOR_KEY).address

ESCROW_ADDRESS = "0x2222222222222222222222222222222222222222"
PAYOUT_ADDRESS = "0x1111111111111111111111111111111111111111"
CHAIN_ID = 84532

TX_HASH = "0x" + "aa" * 32

ENV_VARS = (
    "RPC_URL",
    "CHAIN_ID",
    "ESCROW_ADDRESS",
    "RELAYER_PRIVATE_KEY",
    "ATTESTER_PRIVATE_KEY",
    "FEE_BPS",
    "RATE_LIMIT",
)


class FakeLedger:
    """In-memory stand-in for LedgerClient that records every call."""

    instances = []

    def __init__(self, rpc_url, escrow_address):
        self.rpc_url = rpc_url
        self.escrow_address = escrow_address
        self.calls = []
        self.deposit_event = DepositCreatedEvent(
            deposit_id=7,
            depositor_address=DEPOSITOR_ADDRESS,
            platform_id=1,
            recipient_user_id=987654321,
            amount=10**17,
            depositor_user_id=0,
            content_uri="",
        )
        FakeLedger.instances.append(self)

    def chain_id(self):
        self.calls.append(("chain_id",))
        return CHAIN_ID

    def deposit(self, account, platform_id, recipient_user_id, depositor_user_id, content_uri, amount_wei):
        self.calls.append(
            ("deposit", account.address, platform_id, recipient_user_id,
             depositor_user_id, content_uri, amount_wei)
        )
        return TransactionOutcome(
            tx_hash=TX_HASH, status=1, receipt={}, deposit_created=self.deposit_event
        )

    def claim(self, account, deposit_id, payout_address, attestation, signature):
        self.calls.append(("claim", account.address, deposit_id, payout_address, attestation, signature))
        return TransactionOutcome(tx_hash=TX_HASH, status=1, receipt={})

    def refund(self, account, deposit_id):
        self.calls.append(("refund", account.address, deposit_id))
        return TransactionOutcome(tx_hash=TX_HASH, status=1, receipt={})

    def get_deposit(self, deposit_id):
        self.calls.append(("get_deposit", deposit_id))
        return Deposit(
            depositor_address=DEPOSITOR_ADDRESS,
            amount=1_500_000_000_000_000_000,
            platform_id=1,
            recipient_user_id=987654321,
            depositor_user_id=42,
            content_uri="https://x.com/someone/status/1",
            claimed=False,
        )


@pytest.fixture
def fake_ledger():
    FakeLedger.instances = []
    yield FakeLedger
    FakeLedger.instances = []


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    return EscrowConfig(
        rpc_url="http://localhost:8545",
        chain_id=CHAIN_ID,
        escrow_address=ESCROW_ADDRESS,
        depositor_key=DEPOSITOR_KEY,
        relayer_key=RELAYER_KEY,
        attester_key=ATTESTER_KEY,
    )
