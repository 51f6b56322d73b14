import base64

import pytest

from hotclob.core.config import HotPathConfig
from hotclob.order.policy import HotPathPolicies
from hotclob.order.signing import POLYGON, WalletSigner
from hotclob.order.types import ApiCredentials, SignatureType

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_FUNDER = "0x1111111111111111111111111111111111111111"
TEST_HOST = "https://clob.example.com"


@pytest.fixture
def private_key():
    return TEST_PRIVATE_KEY


@pytest.fixture
def funder():
    return TEST_FUNDER


@pytest.fixture
def signer():
    return WalletSigner.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def policies():
    return HotPathPolicies.fixed()


@pytest.fixture
def hotpath_config(policies):
    return HotPathConfig(
        host=TEST_HOST,
        chain_id=POLYGON,
        private_key=TEST_PRIVATE_KEY,
        signature_type=SignatureType.POLY_PROXY,
        funder=TEST_FUNDER,
        policies=policies,
    )


@pytest.fixture
def credentials():
    return ApiCredentials(
        key="key-1",
        secret=base64.urlsafe_b64encode(b"s" * 32).decode(),
        passphrase="pass-1",
    )


@pytest.fixture
def credentials_payload():
    return {
        "apiKey": "key-2",
        "secret": base64.urlsafe_b64encode(b"t" * 32).decode(),
        "passphrase": "pass-2",
    }
