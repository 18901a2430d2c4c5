"""Gift storage frame states.

Each state turns a FrameContext into exactly one FrameResponse (or, for the
transaction state, a TransactionPayload). Continuation state travels only in
the route path (the recipient fid) and in echoed button values (the payment
transaction hash); nothing is remembered between requests.
"""

import logging
from typing import Optional

from .identity import IdentityResolver
from .payments import PaymentSessionCoordinator
from .utils import explorer_url, normalize_handle
from ..types import (
    ButtonAction,
    FrameButton,
    FrameContext,
    FrameResponse,
    FrameView,
    LookupNotFoundError,
    MissingTransactionDataError,
    PaymentConfig,
    SettlementResult,
    SettlementStatus,
    TransactionParams,
    TransactionPayload
)


logger = logging.getLogger(__name__)

ROUTE_ENTRY = "/"
ROUTE_SEARCH = "/search"
ROUTE_STATUS = "/status"
NOT_FOUND_TITLE = "User not found!"


def confirm_route(fid: int) -> str:
    return f"/confirm/{fid}"


def transaction_route(fid: int) -> str:
    return f"/tx/{fid}"


def image_route(fid: int) -> str:
    return f"/image/{fid}"


class GiftStorageFrame:
    """The frame state machine for gifting Farcaster storage."""

    def __init__(
        self,
        identity: IdentityResolver,
        coordinator: PaymentSessionCoordinator,
        payment_config: Optional[PaymentConfig] = None
    ):
        self.identity = identity
        self.coordinator = coordinator
        self.payment_config = payment_config or coordinator.config

    async def aclose(self):
        await self.identity.aclose()
        await self.coordinator.aclose()

    def entry(self, context: FrameContext) -> FrameResponse:
        """First load and every reset."""
        return FrameResponse(
            view=FrameView(name="entry", params={
                "title": "Gift Farcaster storage",
                "subtitle": "Search for a user to gift one unit of storage",
            }),
            input_text="Search a username",
            buttons=[FrameButton(label="Search", action=ButtonAction.POST, target=ROUTE_SEARCH)]
        )

    async def search(self, context: FrameContext) -> FrameResponse:
        """Resolve the entered handle; render Confirm on success, a retry view otherwise."""
        handle = normalize_handle(context.input_text or context.button_value)
        if not handle:
            logger.info("Search submitted without a handle")
            return self.not_found("")

        try:
            profile = await self.identity.search(handle)
        except LookupNotFoundError as e:
            logger.info(f"Search for '{handle}' found nothing: {e}")
            return self.not_found(handle)

        logger.info(f"Search for '{handle}' resolved to fid {profile.fid}")
        return self.confirm(context, profile.fid)

    def confirm(self, context: FrameContext, fid: int) -> FrameResponse:
        """Preview the recipient and offer the payment transaction."""
        return FrameResponse(
            view=FrameView(name="profile", params={"fid": str(fid)}),
            image_path=image_route(fid),
            buttons=[
                FrameButton(
                    label="Gift storage",
                    action=ButtonAction.TX,
                    target=transaction_route(fid),
                    post_url=ROUTE_STATUS
                ),
                FrameButton(label="Cancel", action=ButtonAction.RESET, target=ROUTE_ENTRY),
            ]
        )

    async def preview(self, fid: int) -> FrameView:
        """Profile preview rendered by the image route for the Confirm frame."""
        try:
            profile = await self.identity.get_by_fid(fid)
        except LookupNotFoundError as e:
            logger.info(f"Preview for fid {fid} unavailable: {e}")
            return FrameView(name="not-found", params={"title": NOT_FOUND_TITLE, "handle": f"fid {fid}"})

        return FrameView(name="profile", params={
            "fid": str(profile.fid),
            "username": profile.username,
            "display_name": profile.display_name or profile.username,
            "pfp_url": profile.pfp_url or "",
        })

    async def build_transaction(self, context: FrameContext, fid: int) -> TransactionPayload:
        """Price the gift and return the transaction for the wallet to sign.

        Raises:
            MissingTransactionDataError: no payer address or no unsigned transaction
        """
        unsigned = await self.coordinator.create_intent(context.payer_address, fid)
        logger.info(f"Built storage gift transaction for fid {fid} on {unsigned.chain_id}")
        return TransactionPayload(
            chainId=unsigned.chain_id,
            params=TransactionParams(to=unsigned.to, data=unsigned.data, value=unsigned.value)
        )

    async def status(self, context: FrameContext) -> FrameResponse:
        """Reconcile the payment; settled ends the flow, anything else offers Refresh.

        Raises:
            MissingTransactionDataError: neither a transaction id nor a refresh value was sent
        """
        tx_hash = context.transaction_id or context.button_value
        if not tx_hash:
            raise MissingTransactionDataError("No transaction hash to check")

        result = await self.coordinator.reconcile(tx_hash)
        if result.status == SettlementStatus.SETTLED:
            return self.settled(result)
        return self.pending(result)

    def settled(self, result: SettlementResult) -> FrameResponse:
        return FrameResponse(
            view=FrameView(name="settled", params={
                "title": "Storage gifted!",
                "settlement_hash": result.settlement_hash or "",
            }),
            buttons=[
                FrameButton(
                    label="View on explorer",
                    action=ButtonAction.LINK,
                    target=explorer_url(self.payment_config, result.settlement_hash)
                ),
                FrameButton(label="Gift again", action=ButtonAction.RESET, target=ROUTE_ENTRY),
            ]
        )

    def pending(self, result: SettlementResult) -> FrameResponse:
        return FrameResponse(
            view=FrameView(name="pending", params={
                "title": "Payment pending",
                "reason": result.reason or "Payment is still processing",
                "tx_hash": result.tx_hash,
            }),
            buttons=[
                FrameButton(
                    label="Refresh",
                    action=ButtonAction.POST,
                    target=ROUTE_STATUS,
                    value=result.tx_hash
                ),
            ]
        )

    def not_found(self, handle: str) -> FrameResponse:
        return FrameResponse(
            view=FrameView(name="not-found", params={"title": NOT_FOUND_TITLE, "handle": handle}),
            buttons=[FrameButton(label="Try again", action=ButtonAction.RESET, target=ROUTE_ENTRY)]
        )
