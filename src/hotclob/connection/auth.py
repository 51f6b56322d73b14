"""
L1 / L2 认证头部

L1: 钱包对 ClobAuth 结构做 EIP-712 签名, 仅用于创建/派生 API Key。
L2: 用 API secret 对 (timestamp + method + path + body) 做 HMAC-SHA256。
"""

import base64
import hashlib
import hmac
from typing import Dict, Optional

from hotclob.core.exceptions import ValidationError
from hotclob.order.signing import EIP712_DOMAIN_TYPE, WalletSigner, hash_typed_data
from hotclob.order.types import ApiCredentials

CLOB_AUTH_DOMAIN_NAME = "ClobAuthDomain"
CLOB_AUTH_DOMAIN_VERSION = "1"
CLOB_AUTH_MESSAGE = "This message attests that I control the given wallet"

CLOB_AUTH_TYPE = [
    {"name": "address", "type": "address"},
    {"name": "timestamp", "type": "string"},
    {"name": "nonce", "type": "uint256"},
    {"name": "message", "type": "string"},
]

POLY_ADDRESS = "POLY_ADDRESS"
POLY_SIGNATURE = "POLY_SIGNATURE"
POLY_TIMESTAMP = "POLY_TIMESTAMP"
POLY_NONCE = "POLY_NONCE"
POLY_API_KEY = "POLY_API_KEY"
POLY_PASSPHRASE = "POLY_PASSPHRASE"


def sign_clob_auth(signer: WalletSigner, chain_id: int, timestamp: int, nonce: int) -> str:
    # domain 不含 verifyingContract
    message_hash = hash_typed_data({
        "types": {
            "EIP712Domain": [t for t in EIP712_DOMAIN_TYPE if t["name"] != "verifyingContract"],
            "ClobAuth": CLOB_AUTH_TYPE,
        },
        "primaryType": "ClobAuth",
        "domain": {
            "name": CLOB_AUTH_DOMAIN_NAME,
            "version": CLOB_AUTH_DOMAIN_VERSION,
            "chainId": chain_id,
        },
        "message": {
            "address": signer.address,
            "timestamp": str(timestamp),
            "nonce": nonce,
            "message": CLOB_AUTH_MESSAGE,
        },
    })
    return signer.sign_hash(message_hash)


def l1_headers(
    signer: WalletSigner,
    chain_id: int,
    timestamp: int,
    nonce: Optional[int] = None,
) -> Dict[str, str]:
    nonce = nonce or 0
    return {
        POLY_ADDRESS: signer.address,
        POLY_SIGNATURE: sign_clob_auth(signer, chain_id, timestamp, nonce),
        POLY_TIMESTAMP: str(timestamp),
        POLY_NONCE: str(nonce),
    }


def build_hmac_signature(secret: str, timestamp: int, method: str, path: str, body: str = "") -> str:
    """url-safe base64(HMAC-SHA256(base64decode(secret), ts + method + path + body))"""
    try:
        key = base64.urlsafe_b64decode(secret)
    except ValueError as e:
        raise ValidationError("API secret is not valid url-safe base64", field="credentials") from e
    message = f"{timestamp}{method}{path}{body}"
    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8")


def l2_headers(
    address: str,
    credentials: ApiCredentials,
    method: str,
    path: str,
    body: str,
    timestamp: int,
) -> Dict[str, str]:
    return {
        POLY_ADDRESS: address,
        POLY_SIGNATURE: build_hmac_signature(credentials.secret, timestamp, method, path, body),
        POLY_TIMESTAMP: str(timestamp),
        POLY_API_KEY: credentials.key,
        POLY_PASSPHRASE: credentials.passphrase,
    }
