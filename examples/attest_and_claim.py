"""Attest + Claim Example.

This example demonstrates the attester/relayer flow against a SacredEscrow
deployment:
- The attester signs a ClaimAttestation off-chain (EIP-712)
- The signature is verified locally (preflight)
- The relayer submits the claim on-chain

Prerequisites:
1. pip install sacred-escrow
2. Set environment variables (see .env.example)
3. Fund the relayer wallet with gas on the target chain

Usage:
    python attest_and_claim.py <deposit-id> <user-id> <payout-address>
"""

import sys

from dotenv import load_dotenv

load_dotenv()


def main():
    # Import here to show what's needed
    from sacred_escrow import EscrowConfig, EscrowDispatcher, SacredEscrowError

    if len(sys.argv) != 4:
        print(__doc__)
        return

    deposit_id, user_id, payout = sys.argv[1:]

    config = EscrowConfig.from_env()
    required = {
        "RPC_URL": config.rpc_url,
        "ESCROW_ADDRESS": config.escrow_address,
        "RELAYER_PRIVATE_KEY": config.relayer_key,
        "ATTESTER_PRIVATE_KEY": config.attester_key,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}")
        print("See .env.example for required variables.")
        return

    print("=" * 60)
    print("  SACRED ESCROW: ATTEST AND CLAIM")
    print("=" * 60)

    dispatcher = EscrowDispatcher(config)

    try:
        print("\n[1] Signing claim attestation...")
        attested = dispatcher.attest(
            platform="1",  # X / Twitter
            user_id=user_id,
            payout=payout,
            deposit_id=deposit_id,
        )
        value = attested.payload["value"]
        print(f"    Attester:  {attested.payload['attester']}")
        print(f"    Nonce:     {value['nonce']}")
        print(f"    Expiry:    {value['expiry']}")
        print(f"    Signature: {attested.payload['signature'][:20]}...")

        print("\n[2] Verifying signature locally...")
        verified = dispatcher.verify(
            platform="1",
            user_id=user_id,
            payout=payout,
            deposit_id=deposit_id,
            nonce=value["nonce"],
            expiry=str(value["expiry"]),
            signature=attested.payload["signature"],
            expected_attester=attested.payload["attester"],
        )
        print(f"    {verified.message}")

        print("\n[3] Relaying claim...")
        claimed = dispatcher.claim(
            platform="1",
            user_id=user_id,
            payout=payout,
            deposit_id=deposit_id,
            nonce=value["nonce"],
            expiry=str(value["expiry"]),
            signature=attested.payload["signature"],
            expected_attester=attested.payload["attester"],
        )
        print(f"    {claimed.message}")

        print("\n[4] Deposit state after claim:")
        print(f"    {dispatcher.get_deposit(deposit_id).message}")

    except SacredEscrowError as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
