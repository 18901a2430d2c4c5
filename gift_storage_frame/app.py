"""Application assembly: wires configuration, providers and the frame executor."""

import contextlib
import logging
from typing import Optional

from starlette.applications import Starlette
from starlette.responses import RedirectResponse
from starlette.routing import Mount, Route

from .core import (
    FramesPostValidator,
    GiftStorageFrame,
    GlidePaymentProvider,
    IdentityResolver,
    NeynarIdentityResolver,
    PaymentSessionCoordinator,
    PaymentSessionProvider,
    PricingOracle,
    SignedPayloadValidator,
    StorageRegistryPricingOracle
)
from .executors import FrameServerExecutor
from .render import SvgViewRenderer, ViewRenderer
from .types import FrameServerConfig


logger = logging.getLogger(__name__)


def create_executor(
    config: FrameServerConfig,
    identity: Optional[IdentityResolver] = None,
    provider: Optional[PaymentSessionProvider] = None,
    oracle: Optional[PricingOracle] = None,
    validator: Optional[FramesPostValidator] = None,
    renderer: Optional[ViewRenderer] = None
) -> FrameServerExecutor:
    """Build the frame executor, defaulting every collaborator from ``config``."""
    identity = identity or NeynarIdentityResolver(
        api_url=config.neynar_api_url,
        api_key=config.neynar_api_key,
        timeout=config.provider_timeout_seconds
    )
    provider = provider or GlidePaymentProvider(
        project_id=config.glide_project_id,
        api_url=config.glide_api_url,
        timeout=config.provider_timeout_seconds
    )
    oracle = oracle or StorageRegistryPricingOracle(
        rpc_url=config.optimism_rpc_url,
        registry_address=config.payment.storage_registry_address
    )
    coordinator = PaymentSessionCoordinator(provider, oracle, config.payment)
    frame = GiftStorageFrame(identity, coordinator, config.payment)
    return FrameServerExecutor(
        frame,
        config,
        validator or SignedPayloadValidator(),
        renderer or SvgViewRenderer()
    )


def create_app(
    config: Optional[FrameServerConfig] = None,
    executor: Optional[FrameServerExecutor] = None
) -> Starlette:
    """Starlette app serving the frame under ``config.base_path``."""
    config = config or FrameServerConfig.from_env()
    executor = executor or create_executor(config)

    if not config.neynar_api_key:
        logger.warning("NEYNAR_API_KEY not set: user search will always render 'User not found!'")
    if not config.glide_project_id:
        logger.warning("GLIDE_PROJECT_ID not set: transactions and status checks will fail")

    @contextlib.asynccontextmanager
    async def lifespan(app):
        yield
        await executor.aclose()

    async def root(request):
        return RedirectResponse(f"{config.base_path}/")

    return Starlette(
        routes=[
            Route("/", endpoint=root, methods=["GET"]),
            Mount(config.base_path, routes=executor.routes()),
        ],
        lifespan=lifespan
    )
