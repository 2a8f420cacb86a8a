#!/usr/bin/env python3
"""
Web interface for Multi-Signature Vault
"""

from flask import Flask, request, jsonify
import logging
import os
import sys
import threading

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from multisig_vault.wallet import MultiSigWallet
from multisig_vault.config import WalletConfig
from multisig_vault.events import event_to_dict
from multisig_vault.identity import OwnerKey, verify_signature
from multisig_vault.exceptions import (
    VaultError, Unauthorized, NotFound, AlreadyExecuted,
    AlreadyConfirmedByCaller, InsufficientConfirmations, ExecutionFailed,
    InvalidConfiguration, InvalidTransaction
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global storage (in production, use proper database)
wallets = {}
# (wallet_id, caller) -> next expected nonce
nonces = {}
nonce_lock = threading.Lock()

STATUS_CODES = {
    Unauthorized: 403,
    NotFound: 404,
    AlreadyExecuted: 409,
    AlreadyConfirmedByCaller: 409,
    InsufficientConfirmations: 409,
    ExecutionFailed: 502,
    InvalidConfiguration: 400,
    InvalidTransaction: 400,
}


def signing_message(wallet_id: str, action: str, nonce: int, detail) -> bytes:
    """Canonical message an owner signs to authorize an API call"""
    return f"{wallet_id}:{action}:{nonce}:{detail}".encode()


class SignatureRejected(Exception):
    pass


@app.errorhandler(VaultError)
def handle_vault_error(e):
    status = STATUS_CODES.get(type(e), 400)
    return jsonify({'success': False, 'error': type(e).__name__, 'message': str(e)}), status


@app.errorhandler(SignatureRejected)
def handle_bad_signature(e):
    return jsonify({'success': False, 'error': 'InvalidSignature', 'message': str(e)}), 401


def _get_wallet(wallet_id):
    if wallet_id not in wallets:
        raise NotFound("Wallet not found", {'wallet_id': wallet_id})
    return wallets[wallet_id]


def _authenticate(wallet_id: str, action: str, detail, data: dict) -> str:
    caller = data.get('caller')
    signature = data.get('signature')
    if not caller or not signature:
        raise SignatureRejected("'caller' and 'signature' are required")

    nonce = data.get('nonce')
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise SignatureRejected("'nonce' must be an integer")

    if not verify_signature(caller, signing_message(wallet_id, action, nonce, detail), signature):
        logger.warning(f"Bad signature for {action} on wallet {wallet_id[:8]}...")
        raise SignatureRejected("Signature does not match caller")

    # Each signed request is usable once
    with nonce_lock:
        expected = nonces.get((wallet_id, caller), 0)
        if nonce != expected:
            logger.warning(f"Stale nonce {nonce} for {action} on wallet {wallet_id[:8]}..., expected {expected}")
            raise SignatureRejected(f"Nonce {nonce} already used or out of order, expected {expected}")
        nonces[(wallet_id, caller)] = expected + 1
    return caller


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidTransaction("Request body must be a JSON object")
    return data


@app.route('/api/wallets', methods=['POST'])
def create_wallet():
    """Create new multi-signature wallet"""
    data = _json_body()
    keys_info = []

    if 'members' in data:
        if not isinstance(data['members'], list):
            raise InvalidConfiguration("'members' must be a list of names")

        # Generate keys for named members
        owners = []
        for name in data['members']:
            private_hex, identity = OwnerKey.generate_key_pair()
            owners.append(identity)
            keys_info.append({
                'name': name,
                'identity': identity,
                'private_key': private_hex
            })
        config = WalletConfig.from_dict({'owners': owners, 'threshold': data.get('threshold')})
    else:
        config = WalletConfig.from_dict(data)

    wallet_id = config.wallet_id()
    if wallet_id in wallets:
        return jsonify({'success': False, 'error': 'Wallet already exists', 'wallet_id': wallet_id}), 409

    wallets[wallet_id] = MultiSigWallet.from_config(config)
    logger.info(f"Created wallet {wallet_id[:8]}... ({config.threshold}-of-{len(config.owners)})")

    response = {
        'success': True,
        'wallet_id': wallet_id,
        'address': wallets[wallet_id].address,
        'owners': config.owners,
        'threshold': config.threshold
    }
    if keys_info:
        response['keys'] = keys_info
    return jsonify(response), 201


@app.route('/api/wallets/<wallet_id>')
def get_wallet(wallet_id):
    """Get wallet information"""
    wallet = _get_wallet(wallet_id)
    return jsonify({
        'wallet_id': wallet_id,
        'address': wallet.address,
        'owners': list(wallet.owners),
        'threshold': wallet.threshold,
        'balance': wallet.balance,
        'transaction_count': wallet.transaction_count()
    })


@app.route('/api/wallets/<wallet_id>/deposit', methods=['POST'])
def deposit(wallet_id):
    """Deposit value into the wallet (open to anyone)"""
    wallet = _get_wallet(wallet_id)
    data = _json_body()

    balance = wallet.deposit(data.get('sender', ''), data.get('amount', 0))
    return jsonify({'success': True, 'balance': balance})


@app.route('/api/wallets/<wallet_id>/transactions', methods=['POST'])
def submit_transaction(wallet_id):
    """Submit a proposed transaction"""
    wallet = _get_wallet(wallet_id)
    data = _json_body()

    target = data.get('target')
    value = data.get('value', 0)
    payload_hex = data.get('payload_hex', '')
    try:
        payload = bytes.fromhex(payload_hex)
    except (ValueError, TypeError):
        raise InvalidTransaction("'payload_hex' must be a hex string")

    caller = _authenticate(wallet_id, 'submit', f"{target}:{value}:{payload_hex}", data)
    index = wallet.submit_transaction(caller, target, value, payload)

    return jsonify({'success': True, 'index': index}), 201


@app.route('/api/wallets/<wallet_id>/transactions/<int:index>/confirm', methods=['POST'])
def confirm_transaction(wallet_id, index):
    """Confirm a pending transaction"""
    wallet = _get_wallet(wallet_id)
    caller = _authenticate(wallet_id, 'confirm', index, _json_body())

    count = wallet.confirm_transaction(caller, index)
    return jsonify({'success': True, 'confirmation_count': count})


@app.route('/api/wallets/<wallet_id>/transactions/<int:index>/execute', methods=['POST'])
def execute_transaction(wallet_id, index):
    """Execute a transaction that reached quorum"""
    wallet = _get_wallet(wallet_id)
    caller = _authenticate(wallet_id, 'execute', index, _json_body())

    tx = wallet.execute_transaction(caller, index)
    return jsonify({'success': True, 'transaction': tx.to_dict(), 'balance': wallet.balance})


@app.route('/api/wallets/<wallet_id>/transactions')
def list_transactions(wallet_id):
    """List transactions, optionally filtered by status"""
    wallet = _get_wallet(wallet_id)
    status = request.args.get('status')

    if status not in (None, 'pending', 'executed'):
        raise InvalidTransaction("status must be 'pending' or 'executed'")

    transactions = wallet.get_transactions(
        pending=status in (None, 'pending'),
        executed=status in (None, 'executed')
    )
    return jsonify({'transactions': [tx.to_dict() for tx in transactions]})


@app.route('/api/wallets/<wallet_id>/transactions/<int:index>')
def get_transaction(wallet_id, index):
    wallet = _get_wallet(wallet_id)
    return jsonify(wallet.transaction_at(index).to_dict())


@app.route('/api/wallets/<wallet_id>/nonce/<caller>')
def get_nonce(wallet_id, caller):
    """Next nonce the caller must sign with"""
    _get_wallet(wallet_id)
    with nonce_lock:
        return jsonify({'caller': caller, 'nonce': nonces.get((wallet_id, caller), 0)})


@app.route('/api/wallets/<wallet_id>/events')
def get_events(wallet_id):
    wallet = _get_wallet(wallet_id)
    return jsonify({'events': [event_to_dict(e) for e in wallet.events.events()]})


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    port = int(os.environ.get("PORT", 10000))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=False
    )
