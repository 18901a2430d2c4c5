"""Tests for the frame server executor over HTTP."""

import pytest
from unittest.mock import AsyncMock
from starlette.testclient import TestClient

from gift_storage_frame.app import create_app, create_executor
from gift_storage_frame.types import (
    FrameErrorCode,
    FrameServerConfig,
    LookupNotFoundError,
    PaymentProviderError,
    PaymentSession,
    PaymentSessionState,
    UnsignedTransaction,
    PAYMENT_CHAIN_ID,
    STORAGE_REGISTRY_ADDRESS
)


FRAME = "/api/frame"
PAYER = "0x00000000000000000000000000000000000000aa"


@pytest.fixture
def server_config():
    return FrameServerConfig(
        base_url="http://testserver",
        glide_project_id="project-1",
        neynar_api_key="key-1"
    )


@pytest.fixture
def executor(server_config, mock_identity, mock_provider, mock_oracle):
    return create_executor(
        server_config,
        identity=mock_identity,
        provider=mock_provider,
        oracle=mock_oracle
    )


@pytest.fixture
def client(server_config, executor):
    return TestClient(create_app(server_config, executor))


async def _echo_session(intent, payer_address, payment_currency):
    return PaymentSession(
        session_id="session-1",
        unsigned_transaction=UnsignedTransaction(
            chain_id=PAYMENT_CHAIN_ID,
            to=intent.to,
            data=intent.data,
            value=intent.hex_value
        )
    )


def _post(client, path, untrusted=None, **kwargs):
    body = {"untrustedData": untrusted or {}, "clientProtocol": "farcaster@vNext"}
    return client.post(f"{FRAME}{path}", json=body, **kwargs)


class TestEntryRoute:

    def test_get_entry_frame(self, client):
        response = client.get(f"{FRAME}/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        html = response.text
        assert 'property="fc:frame" content="vNext"' in html
        assert 'property="of:accepts:xmtp" content="vNext"' in html
        assert 'property="fc:frame:input:text"' in html
        assert f'content="http://testserver{FRAME}/search"' in html
        assert "cache-control" not in response.headers

    def test_root_redirects_to_frame(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code in (302, 307)
        assert response.headers["location"] == f"{FRAME}/"

    def test_post_reset_renders_entry(self, client):
        response = _post(client, "/", {"buttonIndex": 2})
        assert response.status_code == 200
        assert "Search a username" in response.text


class TestSearchRoute:

    def test_search_found(self, client, mock_identity):
        response = _post(client, "/search", {"inputText": "@alice", "buttonIndex": 1})

        assert response.status_code == 200
        mock_identity.search.assert_called_once_with("alice")
        assert f"http://testserver{FRAME}/image/123" in response.text
        assert 'property="fc:frame:button:1:action" content="tx"' in response.text
        assert f"http://testserver{FRAME}/tx/123" in response.text

    def test_search_not_found(self, client, mock_identity):
        mock_identity.search = AsyncMock(side_effect=LookupNotFoundError("none"))

        response = _post(client, "/search", {"inputText": "doesnotexist"})

        assert response.status_code == 200
        assert 'content="tx"' not in response.text
        assert "Try again" in response.text

    def test_get_search_renders_entry(self, client, mock_identity):
        response = client.get(f"{FRAME}/search")

        assert response.status_code == 200
        mock_identity.search.assert_not_called()


class TestTransactionRoute:
    """Two-phase transaction handler."""

    def test_transaction_payload(self, client, mock_provider, mock_oracle):
        mock_oracle.unit_price = AsyncMock(return_value=250)
        mock_provider.create_session = AsyncMock(side_effect=_echo_session)

        response = _post(client, "/tx/123", {"address": PAYER, "buttonIndex": 1})

        assert response.status_code == 200
        payload = response.json()
        assert payload["chainId"] == "eip155:8453"
        assert payload["method"] == "eth_sendTransaction"
        assert payload["attribution"] is False
        assert payload["params"]["to"] == STORAGE_REGISTRY_ADDRESS
        assert payload["params"]["value"] == "0xfa"

    def test_missing_wallet(self, client):
        response = _post(client, "/tx/123", {"buttonIndex": 1})

        assert response.status_code == 400
        assert response.json()["error"] == FrameErrorCode.MISSING_TRANSACTION_DATA

    def test_provider_without_unsigned_transaction(self, client, mock_provider):
        mock_provider.create_session = AsyncMock(return_value=PaymentSession(session_id="s"))

        response = _post(client, "/tx/123", {"address": PAYER})

        assert response.status_code == 502
        assert response.json()["error"] == FrameErrorCode.MISSING_TRANSACTION_DATA

    def test_provider_failure(self, client, mock_provider):
        mock_provider.create_session = AsyncMock(side_effect=PaymentProviderError("down"))

        response = _post(client, "/tx/123", {"address": PAYER})

        assert response.status_code == 502
        assert response.json()["error"] == FrameErrorCode.PAYMENT_PROVIDER_ERROR

    def test_get_renders_entry(self, client, mock_provider):
        response = client.get(f"{FRAME}/tx/123")

        assert response.status_code == 200
        assert "Search a username" in response.text
        mock_provider.create_session.assert_not_called()


class TestXmtpRequests:
    """Signed XMTP requests."""

    def test_verified_address_pays(self, client, mock_provider, test_account, xmtp_body_factory):
        action = {"buttonIndex": 1, "url": f"http://testserver{FRAME}/tx/123"}
        body = xmtp_body_factory(action_body=action, untrusted=dict(action, address=PAYER))

        response = client.post(f"{FRAME}/tx/123", json=body)

        assert response.status_code == 200
        assert mock_provider.create_session.call_args.args[1] == test_account.address

    def test_bad_signature_is_rejected(self, client, mock_identity, xmtp_body_factory):
        body = xmtp_body_factory()
        body["trustedData"]["signature"] = "0x1234"

        response = client.post(f"{FRAME}/search", json=body)

        assert response.status_code == 401
        assert response.json()["error"] == FrameErrorCode.VERIFICATION_FAILED
        mock_identity.search.assert_not_called()


class TestStatusRoute:
    """Status polling over HTTP."""

    def test_status_without_hash(self, client):
        response = _post(client, "/status", {"buttonIndex": 1})

        assert response.status_code == 400
        assert response.json()["error"] == FrameErrorCode.MISSING_TRANSACTION_DATA

    def test_status_pending_offers_refresh(self, client):
        response = _post(client, "/status", {"transactionId": "0xabc"})

        assert response.status_code == 200
        assert f"http://testserver{FRAME}/status?value=0xabc" in response.text
        assert "fc:frame:button:2" not in response.text

    def test_refresh_uses_echoed_value(self, client, mock_provider):
        response = _post(client, "/status?value=0xabc", {"buttonIndex": 1})

        assert response.status_code == 200
        assert mock_provider.get_session_by_payment_transaction.call_args.args[1] == "0xabc"

    def test_status_provider_failure_offers_refresh(self, client, mock_provider):
        mock_provider.get_session_by_payment_transaction = AsyncMock(
            return_value=PaymentSession(session_id="session-1", state=PaymentSessionState.PENDING)
        )
        mock_provider.wait_for_session = AsyncMock(side_effect=PaymentProviderError("invalid session body"))

        response = _post(client, "/status", {"transactionId": "0xabc"})

        assert response.status_code == 200
        assert f"http://testserver{FRAME}/status?value=0xabc" in response.text

    def test_status_settled(self, client, mock_provider, settled_session):
        mock_provider.get_session_by_payment_transaction = AsyncMock(
            return_value=PaymentSession(session_id="session-1", state=PaymentSessionState.PENDING)
        )
        mock_provider.wait_for_session = AsyncMock(return_value=settled_session)

        response = _post(client, "/status", {"transactionId": "0xdef"})

        assert response.status_code == 200
        assert "https://optimistic.etherscan.io/tx/0x999" in response.text
        assert 'content="link"' in response.text


class TestImageRoutes:

    def test_profile_image(self, client, mock_identity):
        response = client.get(f"{FRAME}/image/123")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert response.headers["cache-control"] == "max-age=0"
        assert "@alice" in response.text
        mock_identity.get_by_fid.assert_called_once_with(123)

    def test_profile_image_not_found(self, client, mock_identity):
        mock_identity.get_by_fid = AsyncMock(side_effect=LookupNotFoundError("none"))

        response = client.get(f"{FRAME}/image/999")

        assert response.status_code == 200
        assert "User not found!" in response.text

    def test_view_route(self, client):
        response = client.get(f"{FRAME}/view/pending", params={"title": "Payment pending", "tx_hash": "0xabc"})

        assert response.status_code == 200
        assert "0xabc" in response.text
        assert response.headers["cache-control"] == "max-age=0"

    def test_unknown_view(self, client):
        assert client.get(f"{FRAME}/view/nope").status_code == 404
