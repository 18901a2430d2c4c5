"""Core package exports for gift_storage_frame."""

from .classifier import (
    ClassifiedRequest,
    FramesPostValidator,
    SignedPayloadValidator,
    classify_request,
    parse_body,
    is_xmtp_body
)
from .identity import IdentityResolver, NeynarIdentityResolver
from .pricing import PricingOracle, StorageRegistryPricingOracle, STORAGE_REGISTRY_ABI
from .payments import (
    PaymentSessionProvider,
    GlidePaymentProvider,
    PaymentSessionCoordinator,
    encode_rent_calldata
)
from .machine import (
    GiftStorageFrame,
    ROUTE_ENTRY,
    ROUTE_SEARCH,
    ROUTE_STATUS,
    confirm_route,
    transaction_route,
    image_route
)
from .utils import (
    FrameUtils,
    frame_context_from_body,
    stamp_attribution,
    normalize_handle,
    explorer_url
)

__all__ = [
    # Request classification
    "ClassifiedRequest",
    "FramesPostValidator",
    "SignedPayloadValidator",
    "classify_request",
    "parse_body",
    "is_xmtp_body",

    # External collaborators
    "IdentityResolver",
    "NeynarIdentityResolver",
    "PricingOracle",
    "StorageRegistryPricingOracle",
    "STORAGE_REGISTRY_ABI",

    # Payment sessions
    "PaymentSessionProvider",
    "GlidePaymentProvider",
    "PaymentSessionCoordinator",
    "encode_rent_calldata",

    # Frame states
    "GiftStorageFrame",
    "ROUTE_ENTRY",
    "ROUTE_SEARCH",
    "ROUTE_STATUS",
    "confirm_route",
    "transaction_route",
    "image_route",

    # Utilities
    "FrameUtils",
    "frame_context_from_body",
    "stamp_attribution",
    "normalize_handle",
    "explorer_url"
]
