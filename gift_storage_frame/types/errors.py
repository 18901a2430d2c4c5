# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Frame error types and error code mapping."""

from typing import Optional


class FrameError(Exception):
    """Base error for the gift storage frame."""
    pass


class VerificationError(FrameError):
    """Signed frame payload could not be verified.

    Raised by the request classifier for XMTP requests. This is a trust
    boundary check: it always fails the request and is never downgraded to
    an unverified Farcaster request.
    """
    pass


class LookupNotFoundError(FrameError):
    """Identity lookup returned nothing or could not be performed."""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class MissingTransactionDataError(FrameError):
    """Data required to build or track a transaction is absent.

    Example:
        # No unsigned transaction came back from the session provider
        raise MissingTransactionDataError(
            "Payment provider returned no unsigned transaction",
            status_code=502
        )
    """

    def __init__(self, message: str, status_code: int = 400):
        """Initialize missing transaction data error.

        Args:
            message: Human-readable error message
            status_code: HTTP status the server answers with
        """
        super().__init__(message)
        self.status_code = status_code


class PaymentProviderError(FrameError):
    """Payment session provider failed or answered unexpectedly."""
    pass


class SettlementTimeoutError(PaymentProviderError):
    """Provider gave up waiting for the session to settle."""

    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message)
        self.session_id = session_id


class FrameErrorCode:
    """Stable error codes returned in failed frame responses."""
    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MISSING_TRANSACTION_DATA = "MISSING_TRANSACTION_DATA"
    PAYMENT_PROVIDER_ERROR = "PAYMENT_PROVIDER_ERROR"
    SETTLEMENT_TIMEOUT = "SETTLEMENT_TIMEOUT"
    INVALID_REQUEST = "INVALID_REQUEST"

    @classmethod
    def get_all_codes(cls) -> list[str]:
        """Returns all defined error codes."""
        return [
            cls.VERIFICATION_FAILED,
            cls.USER_NOT_FOUND,
            cls.MISSING_TRANSACTION_DATA,
            cls.PAYMENT_PROVIDER_ERROR,
            cls.SETTLEMENT_TIMEOUT,
            cls.INVALID_REQUEST
        ]


def map_error_to_code(error: Exception) -> str:
    """Maps implementation errors to frame error codes."""
    error_mapping = {
        VerificationError: FrameErrorCode.VERIFICATION_FAILED,
        LookupNotFoundError: FrameErrorCode.USER_NOT_FOUND,
        MissingTransactionDataError: FrameErrorCode.MISSING_TRANSACTION_DATA,
        PaymentProviderError: FrameErrorCode.PAYMENT_PROVIDER_ERROR,
        SettlementTimeoutError: FrameErrorCode.SETTLEMENT_TIMEOUT,
        ValueError: FrameErrorCode.INVALID_REQUEST,
    }
    return error_mapping.get(type(error), "UNKNOWN_ERROR")
