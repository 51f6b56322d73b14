"""
测试 EIP-712 订单签名
"""

from decimal import Decimal

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data

from hotclob.core.exceptions import ConfigurationError, MissingContractConfigError, ValidationError
from hotclob.order.builder import OrderBuilder
from hotclob.order.signing import (
    EIP712_DOMAIN_TYPE,
    ORDER_TYPE,
    POLYGON,
    WalletSigner,
    contract_config,
    order_domain,
    order_signing_hash,
    sign_order,
)
from hotclob.order.types import LimitOrderRequest, Side, SignatureType, TickSize


@pytest.fixture
def order(signer, funder):
    builder = OrderBuilder(funder, signer.address, SignatureType.POLY_GNOSIS_SAFE)
    request = LimitOrderRequest(token_id=99, side=Side.BUY, price=Decimal("0.42"), size=Decimal("5"))
    return builder.build(request, TickSize.HUNDREDTH, 0)


def _recover(order, chain_id, neg_risk, signature) -> str:
    signable = encode_typed_data(full_message={
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, "Order": ORDER_TYPE},
        "primaryType": "Order",
        "domain": order_domain(chain_id, neg_risk),
        "message": order.to_typed_data(),
    })
    return Account.recover_message(signable, signature=signature)


class TestContractConfig:
    """测试合约地址表"""

    def test_polygon_exchanges_differ_by_neg_risk(self):
        standard = contract_config(POLYGON, False)
        neg_risk = contract_config(POLYGON, True)

        assert standard.exchange == "0x4bFb41d5B3570DeFd03C39a9A4D8dE6Bd8B8982E"
        assert neg_risk.exchange == "0xC5d563A36AE78145C45a50134d48A1215220f80a"

    def test_unmapped_chain(self):
        with pytest.raises(MissingContractConfigError) as exc_info:
            contract_config(80002, True)

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.chain_id == 80002
        assert exc_info.value.neg_risk is True
        assert "80002" in str(exc_info.value)
        assert "neg_risk=True" in str(exc_info.value)


class TestWalletSigner:
    """测试钱包签名能力"""

    def test_address_is_checksummed(self, signer, private_key):
        assert signer.address.startswith("0x")
        assert signer.address == Account.from_key(private_key).address

    def test_invalid_key_does_not_leak(self):
        bad_key = "0xdeadbeef"
        with pytest.raises(ConfigurationError) as exc_info:
            WalletSigner.from_key(bad_key)

        assert exc_info.value.field == "private_key"
        assert bad_key not in str(exc_info.value)

    def test_repr_has_no_key(self, signer, private_key):
        assert private_key[2:] not in repr(signer)


class TestOrderSigning:
    """测试签名域绑定"""

    def test_domain(self):
        domain = order_domain(POLYGON, False)

        assert domain == {
            "name": "Polymarket CTF Exchange",
            "version": "1",
            "chainId": 137,
            "verifyingContract": "0x4bFb41d5B3570DeFd03C39a9A4D8dE6Bd8B8982E",
        }

    def test_signature_recovers_signer(self, signer, order):
        signature = sign_order(signer, order, POLYGON, False)

        assert signature.startswith("0x")
        assert len(signature) == 2 + 65 * 2
        assert _recover(order, POLYGON, False, signature) == signer.address

    def test_neg_risk_changes_hash(self, order):
        assert order_signing_hash(order, POLYGON, False) != order_signing_hash(order, POLYGON, True)

    def test_signature_bound_to_neg_risk_pool(self, signer, order):
        signature = sign_order(signer, order, POLYGON, True)

        assert _recover(order, POLYGON, True, signature) == signer.address
        assert _recover(order, POLYGON, False, signature) != signer.address

    def test_hash_is_deterministic(self, order):
        assert order_signing_hash(order, POLYGON, False) == order_signing_hash(order, POLYGON, False)
        assert len(order_signing_hash(order, POLYGON, False)) == 32

    def test_unmapped_chain_fails_signing(self, signer, order):
        with pytest.raises(MissingContractConfigError):
            sign_order(signer, order, 1, False)

    def test_uint256_bounds_encodable(self, signer, funder):
        builder = OrderBuilder(funder, signer.address, SignatureType.POLY_PROXY)
        request = LimitOrderRequest(
            token_id=2**256 - 1, side=Side.SELL, price=Decimal("0.5"), size=Decimal("1"), nonce=2**256 - 1
        )
        order = builder.build(request, TickSize.HUNDREDTH, 2**256 - 1)

        signature = sign_order(signer, order, POLYGON, False)

        assert _recover(order, POLYGON, False, signature) == signer.address
