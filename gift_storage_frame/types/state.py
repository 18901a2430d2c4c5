"""Protocol states, button kinds, and frame meta tag keys."""

from enum import Enum


class ClientProtocol(str, Enum):
    """Client ecosystem that issued the frame request"""
    XMTP = "xmtp"              # Chat client, signed payload verifiable
    FARCASTER = "farcaster"    # Social client, default for everything else


class ButtonAction(str, Enum):
    """Frame button kinds"""
    POST = "post"              # Navigate to another frame route
    TX = "tx"                  # Ask the wallet to sign a transaction
    LINK = "link"              # Open an external URL
    RESET = "reset"            # Go back to the entry frame


class PaymentSessionState(str, Enum):
    """Payment session lifecycle as reported by the session provider"""
    CREATED = "created"        # Unsigned transaction minted
    PENDING = "pending"        # Payment transaction submitted, not final
    SETTLED = "settled"        # Sponsored transaction confirmed on-chain


class SettlementStatus(str, Enum):
    """Outcome of one reconciliation attempt"""
    SETTLED = "settled"
    PENDING = "pending"
    UNAVAILABLE = "unavailable"  # Provider unreachable, still user-retryable


class FrameMetadata:
    """Frame and OpenFrames meta tag names"""
    FRAME_KEY = "fc:frame"
    IMAGE_KEY = "fc:frame:image"
    ASPECT_RATIO_KEY = "fc:frame:image:aspect_ratio"
    POST_URL_KEY = "fc:frame:post_url"
    INPUT_TEXT_KEY = "fc:frame:input:text"
    BUTTON_KEY = "fc:frame:button"
    OF_VERSION_KEY = "of:version"
    OF_ACCEPTS_KEY = "of:accepts"
    OF_IMAGE_KEY = "of:image"
    FRAME_VERSION = "vNext"
