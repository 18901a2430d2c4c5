"""Base executor types and interfaces for frame request handling."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from starlette.requests import Request
from starlette.routing import BaseRoute

from ..core.classifier import ClassifiedRequest, FramesPostValidator, classify_request
from ..core.machine import GiftStorageFrame
from ..core.utils import FrameUtils, frame_context_from_body
from ..render import ViewRenderer
from ..types import FrameContext, FrameServerConfig


logger = logging.getLogger(__name__)


class FrameBaseExecutor(ABC):
    """Base executor that classifies requests before handing them to the frame states."""

    def __init__(
        self,
        delegate: GiftStorageFrame,
        config: FrameServerConfig,
        validator: FramesPostValidator,
        renderer: ViewRenderer
    ):
        """Initialize base executor.

        Args:
            delegate: Frame state machine that holds the business logic
            config: Server configuration
            validator: Verifier for signed XMTP payloads
            renderer: View renderer for images and frame pages
        """
        self._delegate = delegate
        self.config = config
        self.validator = validator
        self.renderer = renderer
        self.utils = FrameUtils(config.frame_url, config.open_frames)

    async def aclose(self):
        """Release the clients held by the frame states."""
        await self._delegate.aclose()
        logger.info("Frame executor closed")

    async def classify(self, request: Request) -> ClassifiedRequest:
        """Classify the request once and attach the result to ``request.state``.

        Raises:
            VerificationError: XMTP payload failed verification
        """
        cached: Optional[ClassifiedRequest] = getattr(request.state, "classified", None)
        if cached is not None:
            return cached

        raw_body = await request.body() if request.method == "POST" else b""
        classified = await classify_request(request.method, raw_body, self.validator)
        request.state.classified = classified
        request.state.client_protocol = classified.protocol
        request.state.verified_address = classified.verified_address
        logger.info(f"{request.method} {request.url.path} classified as {classified.protocol.value}")
        return classified

    async def frame_context(self, request: Request, route: str) -> FrameContext:
        """Classify the request and build its FrameContext."""
        classified = await self.classify(request)
        return frame_context_from_body(
            route,
            classified.body,
            button_value=request.query_params.get("value"),
            protocol=classified.protocol,
            verified_address=classified.verified_address
        )

    @abstractmethod
    def routes(self) -> List[BaseRoute]:
        """Routes served under the frame base path."""
        ...
