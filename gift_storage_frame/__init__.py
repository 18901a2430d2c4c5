"""gift_storage_frame - Stateless frame for gifting Farcaster storage, paid through payment sessions."""

# Frame & Payment Types
from .types import (
    ClientProtocol,
    ButtonAction,
    PaymentSessionState,
    SettlementStatus,
    FrameContext,
    FrameButton,
    FrameView,
    FrameResponse,
    UserProfile,
    TransactionIntent,
    UnsignedTransaction,
    PaymentSession,
    SettlementResult,
    TransactionPayload,

    # Configuration
    FrameServerConfig,
    PaymentConfig,
    OpenFramesConfig,

    # Error Types
    FrameError,
    VerificationError,
    LookupNotFoundError,
    MissingTransactionDataError,
    PaymentProviderError,
    SettlementTimeoutError,
    FrameErrorCode
)

# Core
from .core import (
    classify_request,
    SignedPayloadValidator,
    NeynarIdentityResolver,
    StorageRegistryPricingOracle,
    GlidePaymentProvider,
    PaymentSessionCoordinator,
    GiftStorageFrame,
    stamp_attribution
)

# Server
from .executors import FrameBaseExecutor, FrameServerExecutor
from .render import SvgViewRenderer
from .app import create_app, create_executor

__version__ = "0.1.0"

__all__ = [
    # Frame & Payment Types
    "ClientProtocol",
    "ButtonAction",
    "PaymentSessionState",
    "SettlementStatus",
    "FrameContext",
    "FrameButton",
    "FrameView",
    "FrameResponse",
    "UserProfile",
    "TransactionIntent",
    "UnsignedTransaction",
    "PaymentSession",
    "SettlementResult",
    "TransactionPayload",

    # Configuration
    "FrameServerConfig",
    "PaymentConfig",
    "OpenFramesConfig",

    # Error Types
    "FrameError",
    "VerificationError",
    "LookupNotFoundError",
    "MissingTransactionDataError",
    "PaymentProviderError",
    "SettlementTimeoutError",
    "FrameErrorCode",

    # Core
    "classify_request",
    "SignedPayloadValidator",
    "NeynarIdentityResolver",
    "StorageRegistryPricingOracle",
    "GlidePaymentProvider",
    "PaymentSessionCoordinator",
    "GiftStorageFrame",
    "stamp_attribution",

    # Server
    "FrameBaseExecutor",
    "FrameServerExecutor",
    "SvgViewRenderer",
    "create_app",
    "create_executor"
]
