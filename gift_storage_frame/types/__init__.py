"""Types package for gift_storage_frame - frame models, payment sessions, config and errors."""

from .state import (
    ClientProtocol,
    ButtonAction,
    PaymentSessionState,
    SettlementStatus,
    FrameMetadata
)

from .frames import (
    MAX_BUTTONS,
    FrameContext,
    FrameButton,
    FrameView,
    FrameResponse,
    UserProfile,
    TransactionIntent,
    UnsignedTransaction,
    PaymentSession,
    SettlementResult,
    TransactionParams,
    TransactionPayload
)

from .errors import (
    FrameError,
    VerificationError,
    LookupNotFoundError,
    MissingTransactionDataError,
    PaymentProviderError,
    SettlementTimeoutError,
    FrameErrorCode,
    map_error_to_code
)

from .config import (
    SETTLEMENT_CHAIN_ID,
    STORAGE_REGISTRY_ADDRESS,
    EXPLORER_TX_URL,
    PAYMENT_CHAIN_ID,
    USDC_BASE_ADDRESS,
    PAYMENT_CURRENCY,
    XMTP_PROTOCOL_MARKER,
    OpenFramesConfig,
    PaymentConfig,
    FrameServerConfig
)

__all__ = [

    "ClientProtocol",
    "ButtonAction",
    "PaymentSessionState",
    "SettlementStatus",
    "FrameMetadata",

    "MAX_BUTTONS",
    "FrameContext",
    "FrameButton",
    "FrameView",
    "FrameResponse",
    "UserProfile",
    "TransactionIntent",
    "UnsignedTransaction",
    "PaymentSession",
    "SettlementResult",
    "TransactionParams",
    "TransactionPayload",

    "FrameError",
    "VerificationError",
    "LookupNotFoundError",
    "MissingTransactionDataError",
    "PaymentProviderError",
    "SettlementTimeoutError",
    "FrameErrorCode",
    "map_error_to_code",

    "SETTLEMENT_CHAIN_ID",
    "STORAGE_REGISTRY_ADDRESS",
    "EXPLORER_TX_URL",
    "PAYMENT_CHAIN_ID",
    "USDC_BASE_ADDRESS",
    "PAYMENT_CURRENCY",
    "XMTP_PROTOCOL_MARKER",
    "OpenFramesConfig",
    "PaymentConfig",
    "FrameServerConfig"
]
