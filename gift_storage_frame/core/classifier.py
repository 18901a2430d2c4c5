"""Request classification: origin protocol tag and verified sender address."""

import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from pydantic import BaseModel, Field

from ..types import (
    ClientProtocol,
    VerificationError,
    XMTP_PROTOCOL_MARKER
)


logger = logging.getLogger(__name__)


class ClassifiedRequest(BaseModel):
    """Facts the classifier attaches to a request for downstream read-only use."""
    protocol: ClientProtocol = ClientProtocol.FARCASTER
    verified_address: Optional[str] = None
    body: Dict[str, Any] = Field(default_factory=dict)


class FramesPostValidator(ABC):
    """Verifies a signed XMTP frame action and returns the signer's wallet address."""

    @abstractmethod
    async def validate(self, body: Dict[str, Any]) -> str:
        """Return the verified wallet address or raise VerificationError."""
        ...


class SignedPayloadValidator(FramesPostValidator):
    """Recovers the EIP-191 signer of ``trustedData.messageBytes``.

    ``messageBytes`` is the base64 encoded JSON action body and
    ``signature`` the hex signature over those bytes. The signed action
    body must agree with ``untrustedData`` on the button pressed and the
    frame URL.
    """

    CHECKED_FIELDS = ("buttonIndex", "url")

    async def validate(self, body: Dict[str, Any]) -> str:
        trusted = body.get("trustedData") or {}
        message_b64 = trusted.get("messageBytes")
        signature = trusted.get("signature")
        if not message_b64 or not signature:
            raise VerificationError("Missing trustedData.messageBytes or signature")

        try:
            message_bytes = base64.b64decode(message_b64, validate=True)
            action_body = json.loads(message_bytes)
        except (binascii.Error, ValueError) as e:
            raise VerificationError(f"Undecodable trusted payload: {e}") from e
        if not isinstance(action_body, dict):
            raise VerificationError("Trusted payload is not an object")

        try:
            address = Account.recover_message(
                encode_defunct(primitive=message_bytes),
                signature=signature
            )
        except Exception as e:
            raise VerificationError(f"Signature recovery failed: {e}") from e

        untrusted = body.get("untrustedData") or {}
        for field in self.CHECKED_FIELDS:
            if field in untrusted and field in action_body and untrusted[field] != action_body[field]:
                raise VerificationError(f"Signed {field} does not match untrusted {field}")

        return address


def parse_body(raw_body: bytes) -> Dict[str, Any]:
    """Parse a POST body; anything that is not a JSON object becomes ``{}``."""
    if not raw_body:
        return {}
    try:
        parsed = json.loads(raw_body)
    except (UnicodeDecodeError, ValueError):
        logger.info("Malformed frame body, treating as empty")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def is_xmtp_body(body: Dict[str, Any]) -> bool:
    """Check whether the body declares the XMTP client protocol."""
    client_protocol = body.get("clientProtocol")
    return isinstance(client_protocol, str) and XMTP_PROTOCOL_MARKER in client_protocol


async def classify_request(
    method: str,
    raw_body: bytes,
    validator: FramesPostValidator
) -> ClassifiedRequest:
    """Tag a request with its origin protocol.

    Args:
        method: HTTP method of the request
        raw_body: Unparsed request body
        validator: XMTP payload validator, called at most once

    Returns:
        ClassifiedRequest with protocol, verified address and parsed body

    Raises:
        VerificationError: XMTP body whose signature does not verify
    """
    if method.upper() != "POST":
        return ClassifiedRequest()

    body = parse_body(raw_body)
    if not is_xmtp_body(body):
        return ClassifiedRequest(protocol=ClientProtocol.FARCASTER, body=body)

    verified_address = await validator.validate(body)
    logger.info(f"Verified XMTP frame request from {verified_address}")
    return ClassifiedRequest(
        protocol=ClientProtocol.XMTP,
        verified_address=verified_address,
        body=body
    )
