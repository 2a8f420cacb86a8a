#!/usr/bin/env python3
"""
Complete demo of the Multi-Signature Vault
"""

import logging

from multisig_vault.wallet import MultiSigWallet
from multisig_vault.identity import OwnerKey
from multisig_vault.exceptions import VaultError


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("🏦 MULTI-SIGNATURE VAULT - COMPLETE DEMO")
    print("=" * 60)
    print()

    # Step 1: Setup
    print("🔧 STEP 1: Setting up vault owners")
    print("-" * 40)

    participants = []
    for name in ["Alice", "Bob", "Carol"]:
        _, identity = OwnerKey.generate_key_pair()
        participants.append({'name': name, 'identity': identity})
        print(f"✅ {name}: {identity[:16]}...")

    alice, bob, carol = (p['identity'] for p in participants)
    _, dave = OwnerKey.generate_key_pair()
    print()

    # Step 2: Create wallet
    print("🏗️  STEP 2: Creating 2-of-3 wallet")
    print("-" * 40)

    wallet = MultiSigWallet([alice, bob, carol], threshold=2)
    wallet.deposit(dave, 100_000_000)

    print(f"✅ Address: {wallet.address}")
    print(f"✅ Balance: {wallet.balance:,}")
    print(f"✅ Rules: {wallet.threshold}-of-{len(wallet.owners)} confirmations required")
    print()

    # Step 3: Submit, confirm, execute
    print("💰 STEP 3: Quorum-approved transfer")
    print("-" * 40)

    index = wallet.submit_transaction(alice, dave, 5_000_000)
    print(f"   Alice submits transaction {index}: 5,000,000 to Dave")

    try:
        wallet.execute_transaction(carol, index)
        print("   ❌ UNEXPECTED: executed without quorum")
    except VaultError as e:
        print(f"   ✅ EXPECTED FAILURE: {type(e).__name__}: {e}")

    print(f"   Bob confirms: {wallet.confirm_transaction(bob, index)}/{wallet.threshold}")
    print(f"   Alice confirms: {wallet.confirm_transaction(alice, index)}/{wallet.threshold}")

    tx = wallet.execute_transaction(carol, index)
    print(f"   ✅ Carol executes: status={tx.status.value}")
    print(f"   💰 Remaining balance: {wallet.balance:,}")
    print(f"   💸 Dave received: {wallet.dispatcher.received(dave):,}")
    print()

    # Step 4: Guards
    print("🛡️  STEP 4: Guard checks")
    print("-" * 40)

    for label, action in [
        ("Bob executes again", lambda: wallet.execute_transaction(bob, index)),
        ("Dave submits", lambda: wallet.submit_transaction(dave, dave, 1)),
        ("Bob confirms twice", lambda: (
            wallet.confirm_transaction(bob, wallet.submit_transaction(bob, dave, 1)),
            wallet.confirm_transaction(bob, wallet.transaction_count() - 1)
        )),
    ]:
        try:
            action()
            print(f"   ❌ UNEXPECTED: {label} succeeded")
        except VaultError as e:
            print(f"   ✅ {label}: {type(e).__name__}")
    print()

    # Step 5: Summary
    print("📊 Final Statistics:")
    print(f"   Wallet balance: {wallet.balance:,}")
    print(f"   Transactions: {wallet.transaction_count()}")
    print(f"   Pending: {wallet.get_transaction_ids(executed=False)}")
    print(f"   Executed: {wallet.get_transaction_ids(pending=False)}")
    print(f"   Events emitted: {len(wallet.events)}")


if __name__ == "__main__":
    main()
