"""Payment session coordination: priced intents and settlement reconciliation."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from eth_abi import encode
from web3 import Web3

from .pricing import PricingOracle, STORAGE_REGISTRY_ABI
from ..types import (
    PaymentConfig,
    PaymentSession,
    SettlementResult,
    SettlementStatus,
    TransactionIntent,
    UnsignedTransaction,
    MissingTransactionDataError,
    PaymentProviderError,
    SettlementTimeoutError
)


logger = logging.getLogger(__name__)

RENT_SIGNATURE = "rent(uint256,uint256)"


def encode_rent_calldata(fid: int, units: int) -> str:
    """ABI encode ``rent(fid, units)`` for the storage registry."""
    selector = bytes(Web3.keccak(text=RENT_SIGNATURE)[:4])
    return "0x" + (selector + encode(["uint256", "uint256"], [fid, units])).hex()


class PaymentSessionProvider(ABC):
    """External service that mints, tracks and settles payment sessions."""

    @abstractmethod
    async def create_session(
        self,
        intent: TransactionIntent,
        payer_address: str,
        payment_currency: str
    ) -> PaymentSession:
        ...

    @abstractmethod
    async def get_session_by_payment_transaction(
        self,
        chain_id: str,
        tx_hash: str
    ) -> Optional[PaymentSession]:
        """Return the session paid by ``tx_hash`` or None if the provider does not know it yet."""
        ...

    @abstractmethod
    async def wait_for_session(self, session_id: str) -> PaymentSession:
        """Block until the session settles; raise SettlementTimeoutError when the provider gives up."""
        ...

    async def aclose(self):
        pass


class GlidePaymentProvider(PaymentSessionProvider):
    """REST client for the Glide payment session API."""

    def __init__(
        self,
        project_id: Optional[str],
        api_url: str = "https://api.paywithglide.xyz",
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.project_id = project_id
        self.api_url = api_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self):
        await self._client.aclose()

    @property
    def _headers(self) -> dict:
        if not self.project_id:
            raise PaymentProviderError("GLIDE_PROJECT_ID is not configured")
        return {"X-PROJECT-ID": self.project_id, "accept": "application/json"}

    async def create_session(
        self,
        intent: TransactionIntent,
        payer_address: str,
        payment_currency: str
    ) -> PaymentSession:
        body = {
            "chainId": intent.chain_id,
            "account": payer_address,
            "paymentCurrency": payment_currency,
            "address": intent.to,
            "abi": STORAGE_REGISTRY_ABI,
            "functionName": "rent",
            "args": [str(intent.fid), str(intent.units)],
            "value": intent.hex_value,
        }
        logger.info(f"Creating payment session for fid {intent.fid} ({intent.units} unit(s), {intent.value} wei)")
        try:
            response = await self._client.post(f"{self.api_url}/sessions", json=body, headers=self._headers)
            response.raise_for_status()
            return PaymentSession.model_validate(response.json())
        except httpx.HTTPError as e:
            raise PaymentProviderError(f"Session creation failed: {e}") from e
        except ValueError as e:
            raise PaymentProviderError(f"Session creation returned an invalid session: {e}") from e

    async def get_session_by_payment_transaction(
        self,
        chain_id: str,
        tx_hash: str
    ) -> Optional[PaymentSession]:
        try:
            response = await self._client.get(
                f"{self.api_url}/sessions/by-payment-transaction",
                params={"chainId": chain_id, "txHash": tx_hash},
                headers=self._headers
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return PaymentSession.model_validate(response.json())
        except httpx.HTTPError as e:
            raise PaymentProviderError(f"Session lookup for {tx_hash} failed: {e}") from e
        except ValueError as e:
            raise PaymentProviderError(f"Session lookup for {tx_hash} returned an invalid session: {e}") from e

    async def wait_for_session(self, session_id: str) -> PaymentSession:
        try:
            response = await self._client.get(
                f"{self.api_url}/sessions/{session_id}/wait",
                headers=self._headers
            )
            if response.status_code in (408, 504):
                raise SettlementTimeoutError(f"Session {session_id} did not settle in time", session_id=session_id)
            response.raise_for_status()
            return PaymentSession.model_validate(response.json())
        except httpx.TimeoutException as e:
            raise SettlementTimeoutError(f"Timed out waiting for session {session_id}", session_id=session_id) from e
        except httpx.HTTPError as e:
            raise PaymentProviderError(f"Waiting for session {session_id} failed: {e}") from e
        except ValueError as e:
            raise PaymentProviderError(f"Session {session_id} returned an invalid session: {e}") from e


class PaymentSessionCoordinator:
    """Creates priced storage intents and reconciles their settlement.

    The coordinator never retries. A failed intent fails the request; an
    unsettled payment is reported as pending and the user retries by
    refreshing the status frame.
    """

    def __init__(
        self,
        provider: PaymentSessionProvider,
        oracle: PricingOracle,
        config: Optional[PaymentConfig] = None
    ):
        self.provider = provider
        self.oracle = oracle
        self.config = config or PaymentConfig()

    async def aclose(self):
        """Close the session provider and pricing oracle clients."""
        await self.provider.aclose()
        await self.oracle.aclose()

    def build_intent(self, fid: int, units: int, unit_price: int) -> TransactionIntent:
        """Price a storage rental for ``fid``. No I/O."""
        if units < 1:
            raise ValueError(f"Storage units must be at least 1, got {units}")
        if unit_price < 0:
            raise ValueError(f"Unit price cannot be negative, got {unit_price}")
        return TransactionIntent(
            chain_id=self.config.settlement_chain_id,
            to=self.config.storage_registry_address,
            data=encode_rent_calldata(fid, units),
            value=unit_price * units,
            units=units,
            unit_price=unit_price,
            fid=fid
        )

    async def create_intent(
        self,
        payer_address: Optional[str],
        fid: int,
        units: Optional[int] = None
    ) -> UnsignedTransaction:
        """Mint the unsigned transaction that pays for ``units`` of storage for ``fid``.

        Args:
            payer_address: Connected or verified wallet address of the payer
            fid: Recipient of the storage
            units: Storage units to rent, defaults to the configured amount

        Returns:
            UnsignedTransaction for the payer's wallet

        Raises:
            ValueError: units below 1
            MissingTransactionDataError: no payer address, or the provider minted nothing
            PaymentProviderError: the provider call failed
        """
        units = self.config.storage_units if units is None else units
        if units < 1:
            raise ValueError(f"Storage units must be at least 1, got {units}")
        if not payer_address:
            raise MissingTransactionDataError("No wallet address to pay from")

        unit_price = await self.oracle.unit_price()
        intent = self.build_intent(fid, units, unit_price)
        session = await self.provider.create_session(intent, payer_address, self.config.payment_currency)

        if session.unsigned_transaction is None:
            logger.error(f"Payment session {session.session_id} has no unsigned transaction")
            raise MissingTransactionDataError(
                "Payment provider returned no unsigned transaction",
                status_code=502
            )
        logger.info(f"Payment session {session.session_id} created for fid {fid}")
        return session.unsigned_transaction

    async def query_by_hash(self, tx_hash: str, chain_id: Optional[str] = None) -> Optional[PaymentSession]:
        """Look up the session paid by ``tx_hash``. Read-only."""
        return await self.provider.get_session_by_payment_transaction(
            chain_id or self.config.payment_chain_id,
            tx_hash
        )

    async def wait_for_settlement(self, session_id: str) -> PaymentSession:
        """Wait, bounded by the provider, for the session to settle."""
        return await self.provider.wait_for_session(session_id)

    async def reconcile(self, tx_hash: str) -> SettlementResult:
        """Check once whether the payment ``tx_hash`` has settled.

        Not-found and timeouts are pending. Provider failures are reported as
        unavailable so they can be told apart, but remain user-retryable.
        """
        try:
            session = await self.query_by_hash(tx_hash)
            if session is None:
                logger.info(f"No payment session for {tx_hash} yet")
                return SettlementResult(
                    status=SettlementStatus.PENDING,
                    tx_hash=tx_hash,
                    reason="Payment not found yet"
                )
            if not session.is_settled:
                session = await self.wait_for_settlement(session.session_id)
        except SettlementTimeoutError as e:
            logger.info(f"Settlement of {tx_hash} still pending: {e}")
            return SettlementResult(
                status=SettlementStatus.PENDING,
                tx_hash=tx_hash,
                reason="Payment is still processing"
            )
        except PaymentProviderError as e:
            logger.warning(f"Payment provider unavailable while reconciling {tx_hash}: {e}", exc_info=True)
            return SettlementResult(
                status=SettlementStatus.UNAVAILABLE,
                tx_hash=tx_hash,
                reason="Payment service unreachable"
            )

        if not session.is_settled:
            return SettlementResult(
                status=SettlementStatus.PENDING,
                tx_hash=tx_hash,
                reason="Payment is still processing"
            )
        logger.info(f"Payment {tx_hash} settled as {session.sponsored_transaction_hash}")
        return SettlementResult(
            status=SettlementStatus.SETTLED,
            tx_hash=tx_hash,
            settlement_hash=session.sponsored_transaction_hash
        )
