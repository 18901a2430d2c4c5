"""Shared pytest fixtures for gift_storage_frame tests."""

import base64
import json

import pytest
from unittest.mock import AsyncMock, Mock
from eth_account import Account
from eth_account.messages import encode_defunct

from gift_storage_frame.core import GiftStorageFrame, PaymentSessionCoordinator
from gift_storage_frame.types import (
    PaymentConfig,
    PaymentSession,
    PaymentSessionState,
    UnsignedTransaction,
    UserProfile,
    STORAGE_REGISTRY_ADDRESS,
    PAYMENT_CHAIN_ID
)


@pytest.fixture
def sample_profile():
    """Profile the identity service returns for 'alice'."""
    return UserProfile(
        fid=123,
        username="alice",
        display_name="Alice",
        pfp_url="https://example.com/alice.png",
        follower_count=42
    )


@pytest.fixture
def test_account():
    """Create a test Ethereum account."""
    # Use a deterministic private key for consistent testing
    private_key = "0x" + "1" * 64
    return Account.from_key(private_key)


@pytest.fixture
def payment_config():
    return PaymentConfig()


@pytest.fixture
def sample_unsigned_transaction():
    return UnsignedTransaction(
        chain_id=PAYMENT_CHAIN_ID,
        to=STORAGE_REGISTRY_ADDRESS,
        data="0xdeadbeef",
        value="0x64"
    )


@pytest.fixture
def created_session(sample_unsigned_transaction):
    return PaymentSession(
        session_id="session-1",
        state=PaymentSessionState.CREATED,
        unsigned_transaction=sample_unsigned_transaction
    )


@pytest.fixture
def settled_session():
    return PaymentSession(
        session_id="session-1",
        state=PaymentSessionState.SETTLED,
        payment_transaction_hash="0xdef",
        sponsored_transaction_hash="0x999"
    )


@pytest.fixture
def mock_identity(sample_profile):
    identity = Mock()
    identity.search = AsyncMock(return_value=sample_profile)
    identity.get_by_fid = AsyncMock(return_value=sample_profile)
    return identity


@pytest.fixture
def mock_oracle():
    oracle = Mock()
    oracle.unit_price = AsyncMock(return_value=100)
    return oracle


@pytest.fixture
def mock_provider(created_session):
    provider = Mock()
    provider.create_session = AsyncMock(return_value=created_session)
    provider.get_session_by_payment_transaction = AsyncMock(return_value=None)
    provider.wait_for_session = AsyncMock()
    return provider


@pytest.fixture
def coordinator(mock_provider, mock_oracle, payment_config):
    return PaymentSessionCoordinator(mock_provider, mock_oracle, payment_config)


@pytest.fixture
def frame(mock_identity, coordinator, payment_config):
    return GiftStorageFrame(mock_identity, coordinator, payment_config)


def make_xmtp_body(account, action_body=None, untrusted=None, client_protocol="xmtp@2024-02-09"):
    """Build a signed XMTP frame POST body."""
    action_body = action_body if action_body is not None else {
        "buttonIndex": 1,
        "url": "http://testserver/api/frame/",
    }
    message_bytes = json.dumps(action_body).encode()
    signed = Account.sign_message(encode_defunct(primitive=message_bytes), private_key=account.key)
    return {
        "clientProtocol": client_protocol,
        "untrustedData": untrusted if untrusted is not None else dict(action_body),
        "trustedData": {
            "messageBytes": base64.b64encode(message_bytes).decode(),
            "signature": "0x" + bytes(signed.signature).hex(),
        },
    }


@pytest.fixture
def xmtp_body_factory(test_account):
    def factory(**kwargs):
        return make_xmtp_body(test_account, **kwargs)
    return factory
