"""
SacredEscrow Contract ABI

Minimal ABI covering the functions and events used by the client:
deposit, claim, refund, deposits (view) and the DepositCreated event.
"""

_CLAIM_ATTESTATION_COMPONENTS = [
    {"internalType": "uint8", "name": "platformId", "type": "uint8"},
    {"internalType": "uint256", "name": "userId", "type": "uint256"},
    {"internalType": "address", "name": "payoutAddress", "type": "address"},
    {"internalType": "uint256", "name": "depositId", "type": "uint256"},
    {"internalType": "uint256", "name": "nonce", "type": "uint256"},
    {"internalType": "uint64", "name": "expiry", "type": "uint64"},
]

SACRED_ESCROW_ABI = [
    # deposit(uint8, uint256, uint256, string) payable -> uint256
    {
        "inputs": [
            {"internalType": "uint8", "name": "platformId", "type": "uint8"},
            {"internalType": "uint256", "name": "recipientUserId", "type": "uint256"},
            {"internalType": "uint256", "name": "depositorUserId", "type": "uint256"},
            {"internalType": "string", "name": "contentUri", "type": "string"},
        ],
        "name": "deposit",
        "outputs": [{"internalType": "uint256", "name": "depositId", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
    # claim(uint256, address, ClaimAttestation, bytes)
    {
        "inputs": [
            {"internalType": "uint256", "name": "depositId", "type": "uint256"},
            {"internalType": "address", "name": "payoutAddress", "type": "address"},
            {
                "components": _CLAIM_ATTESTATION_COMPONENTS,
                "internalType": "struct SacredEscrow.ClaimAttestation",
                "name": "attestation",
                "type": "tuple",
            },
            {"internalType": "bytes", "name": "signature", "type": "bytes"},
        ],
        "name": "claim",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    # refund(uint256)
    {
        "inputs": [
            {"internalType": "uint256", "name": "depositId", "type": "uint256"},
        ],
        "name": "refund",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    # deposits(uint256) -> Deposit
    {
        "inputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "name": "deposits",
        "outputs": [
            {"internalType": "address", "name": "depositorAddress", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
            {"internalType": "uint8", "name": "platformId", "type": "uint8"},
            {"internalType": "uint256", "name": "recipientUserId", "type": "uint256"},
            {"internalType": "uint256", "name": "depositorUserId", "type": "uint256"},
            {"internalType": "string", "name": "contentUri", "type": "string"},
            {"internalType": "bool", "name": "claimed", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    # DepositCreated(uint256 indexed, address indexed, uint8, uint256, uint256, uint256, string)
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "uint256", "name": "depositId", "type": "uint256"},
            {"indexed": True, "internalType": "address", "name": "depositorAddress", "type": "address"},
            {"indexed": False, "internalType": "uint8", "name": "platformId", "type": "uint8"},
            {"indexed": False, "internalType": "uint256", "name": "recipientUserId", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "amount", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "depositorUserId", "type": "uint256"},
            {"indexed": False, "internalType": "string", "name": "contentUri", "type": "string"},
        ],
        "name": "DepositCreated",
        "type": "event",
    },
]
