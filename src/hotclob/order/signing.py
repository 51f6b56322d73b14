"""
EIP-712 订单签名

签名域 = (协议名, 版本, chain_id, 撮合合约地址)。
合约地址由 (chain_id, neg_risk) 决定, 每笔订单重新构建签名域,
防止签名在其他链/合约/neg-risk 池上被重放。
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import keccak

from hotclob.core.exceptions import ConfigurationError, MissingContractConfigError
from hotclob.order.types import Order

logger = logging.getLogger(__name__)

POLYGON = 137

ORDER_DOMAIN_NAME = "Polymarket CTF Exchange"
ORDER_DOMAIN_VERSION = "1"

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

ORDER_TYPE = [
    {"name": "salt", "type": "uint256"},
    {"name": "maker", "type": "address"},
    {"name": "signer", "type": "address"},
    {"name": "taker", "type": "address"},
    {"name": "tokenId", "type": "uint256"},
    {"name": "makerAmount", "type": "uint256"},
    {"name": "takerAmount", "type": "uint256"},
    {"name": "expiration", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "feeRateBps", "type": "uint256"},
    {"name": "side", "type": "uint8"},
    {"name": "signatureType", "type": "uint8"},
]


@dataclass(frozen=True)
class ContractConfig:
    exchange: str
    collateral: str
    conditional_tokens: str


CONTRACT_CONFIG: Dict[tuple, ContractConfig] = {
    (POLYGON, False): ContractConfig(
        exchange="0x4bFb41d5B3570DeFd03C39a9A4D8dE6Bd8B8982E",
        collateral="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
        conditional_tokens="0x4D97DCd97eC945f40cF65F87097ACe5EA0476045",
    ),
    (POLYGON, True): ContractConfig(
        exchange="0xC5d563A36AE78145C45a50134d48A1215220f80a",
        collateral="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
        conditional_tokens="0x4D97DCd97eC945f40cF65F87097ACe5EA0476045",
    ),
}


def contract_config(chain_id: int, neg_risk: bool) -> ContractConfig:
    config = CONTRACT_CONFIG.get((chain_id, bool(neg_risk)))
    if config is None:
        raise MissingContractConfigError(chain_id, neg_risk)
    return config


class WalletSigner:
    """
    钱包签名能力

    只暴露 address 与 sign_hash; 私钥不会被序列化或记录。
    """

    def __init__(self, account: Any):
        self._account = account

    @classmethod
    def from_key(cls, private_key: str) -> "WalletSigner":
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError, KeyValidationError) as e:
            # 不把私钥本身写进错误信息
            raise ConfigurationError(
                f"invalid private key: {type(e).__name__}", field="private_key"
            ) from None
        return cls(account)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_hash(self, message_hash: bytes) -> str:
        signed = self._account.unsafe_sign_hash(message_hash)
        return "0x" + bytes(signed.signature).hex()

    def __repr__(self) -> str:
        return f"WalletSigner(address={self.address})"


def hash_typed_data(full_message: Dict[str, Any]) -> bytes:
    """EIP-712 签名哈希: keccak(0x19 0x01 ‖ domainSeparator ‖ hashStruct(message))"""
    signable: SignableMessage = encode_typed_data(full_message=full_message)
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def order_domain(chain_id: int, neg_risk: bool) -> Dict[str, Any]:
    return {
        "name": ORDER_DOMAIN_NAME,
        "version": ORDER_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": contract_config(chain_id, neg_risk).exchange,
    }


def order_signing_hash(order: Order, chain_id: int, neg_risk: bool) -> bytes:
    return hash_typed_data({
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, "Order": ORDER_TYPE},
        "primaryType": "Order",
        "domain": order_domain(chain_id, neg_risk),
        "message": order.to_typed_data(),
    })


def sign_order(signer: WalletSigner, order: Order, chain_id: int, neg_risk: bool) -> str:
    """对订单做 EIP-712 签名, 返回 0x 开头的 65 字节签名"""
    signature = signer.sign_hash(order_signing_hash(order, chain_id, neg_risk))
    logger.debug(f"Signed order salt={order.salt} chain_id={chain_id} neg_risk={neg_risk}")
    return signature
