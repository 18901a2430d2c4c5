"""Server-side executor serving the gift storage frame over HTTP."""

import logging
from typing import Awaitable, Callable, List

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import BaseRoute, Route

from .base import FrameBaseExecutor
from ..core.machine import ROUTE_ENTRY, ROUTE_SEARCH, ROUTE_STATUS
from ..core.utils import stamp_attribution
from ..types import (
    FrameContext,
    FrameErrorCode,
    FrameResponse,
    FrameView,
    MissingTransactionDataError,
    PaymentProviderError,
    TransactionPayload,
    VerificationError,
    map_error_to_code
)


logger = logging.getLogger(__name__)

NO_CACHE = "max-age=0"
PAGE_TITLE = "Gift Farcaster storage"


class FrameServerExecutor(FrameBaseExecutor):
    """HTTP front of the frame state machine.

    Every request is classified first; trust failures and missing
    transaction data fail the request with a JSON error and no frame.
    Lookup failures never reach this layer, the state machine renders them.

    Example:
        executor = FrameServerExecutor(frame, config, SignedPayloadValidator(), SvgViewRenderer())
        app = Starlette(routes=[Mount(config.base_path, routes=executor.routes())])
    """

    def routes(self) -> List[BaseRoute]:
        return [
            Route("/", endpoint=self.handle_entry, methods=["GET", "POST"]),
            Route(ROUTE_SEARCH, endpoint=self.handle_search, methods=["GET", "POST"]),
            Route("/confirm/{fid:int}", endpoint=self.handle_confirm, methods=["GET", "POST"]),
            Route("/tx/{fid:int}", endpoint=self.handle_transaction, methods=["GET", "POST"]),
            Route(ROUTE_STATUS, endpoint=self.handle_status, methods=["GET", "POST"]),
            Route("/image/{fid:int}", endpoint=self.handle_image, methods=["GET"]),
            Route("/view/{name}", endpoint=self.handle_view, methods=["GET"]),
        ]

    async def handle_entry(self, request: Request) -> Response:
        return await self._guard(request, self._entry)

    async def handle_search(self, request: Request) -> Response:
        return await self._guard(request, self._search)

    async def handle_confirm(self, request: Request) -> Response:
        return await self._guard(request, self._confirm)

    async def handle_transaction(self, request: Request) -> Response:
        return await self._guard(request, self._transaction)

    async def handle_status(self, request: Request) -> Response:
        return await self._guard(request, self._status)

    async def handle_image(self, request: Request) -> Response:
        fid = request.path_params["fid"]
        view = await self._delegate.preview(fid)
        return self.image_response(view)

    async def handle_view(self, request: Request) -> Response:
        name = request.path_params["name"]
        if not self.renderer.has_view(name):
            return JSONResponse({"error": FrameErrorCode.INVALID_REQUEST, "message": f"Unknown view {name}"}, status_code=404)
        return self.image_response(FrameView(name=name, params=dict(request.query_params)))

    async def _entry(self, request: Request) -> Response:
        context = await self.frame_context(request, ROUTE_ENTRY)
        return self.frame_response(self._delegate.entry(context), ROUTE_ENTRY)

    async def _search(self, request: Request) -> Response:
        if request.method != "POST":
            return await self._entry(request)
        context = await self.frame_context(request, ROUTE_SEARCH)
        return self.frame_response(await self._delegate.search(context), ROUTE_SEARCH)

    async def _confirm(self, request: Request) -> Response:
        fid = request.path_params["fid"]
        route = f"/confirm/{fid}"
        context = await self.frame_context(request, route)
        return self.frame_response(self._delegate.confirm(context, fid), route)

    async def _transaction(self, request: Request) -> Response:
        """Two phases: build the transaction, then post-process it before it leaves."""
        if request.method != "POST":
            return await self._entry(request)
        fid = request.path_params["fid"]
        context = await self.frame_context(request, f"/tx/{fid}")
        payload = await self.build_transaction(context, fid)
        payload = self.post_process_transaction(payload)
        return JSONResponse(payload.model_dump(by_alias=True, exclude_none=True))

    async def _status(self, request: Request) -> Response:
        if request.method != "POST":
            return await self._entry(request)
        context = await self.frame_context(request, ROUTE_STATUS)
        return self.frame_response(await self._delegate.status(context), ROUTE_STATUS)

    async def build_transaction(self, context: FrameContext, fid: int) -> TransactionPayload:
        return await self._delegate.build_transaction(context, fid)

    def post_process_transaction(self, payload: TransactionPayload) -> TransactionPayload:
        return stamp_attribution(payload)

    def frame_response(self, response: FrameResponse, route: str) -> HTMLResponse:
        """Serialize a FrameResponse into the HTML page carrying its meta tags."""
        meta_tags = self.utils.build_meta_tags(response, post_route=route)
        html = self.renderer.render_page(PAGE_TITLE, self.utils.image_url(response), meta_tags)
        return HTMLResponse(html)

    def image_response(self, view: FrameView) -> Response:
        return Response(
            self.renderer.render_view(view),
            media_type=self.renderer.media_type,
            headers={"Cache-Control": NO_CACHE}
        )

    async def _guard(self, request: Request, handler: Callable[[Request], Awaitable[Response]]) -> Response:
        """Run a frame handler and turn fatal errors into JSON failures."""
        try:
            return await handler(request)
        except VerificationError as e:
            logger.error(f"Frame request verification failed on {request.url.path}: {e}")
            return self._error_response(e, 401)
        except MissingTransactionDataError as e:
            logger.error(f"Missing transaction data on {request.url.path}: {e}")
            return self._error_response(e, e.status_code)
        except PaymentProviderError as e:
            logger.error(f"Payment provider failed on {request.url.path}: {e}", exc_info=True)
            return self._error_response(e, 502)
        except ValueError as e:
            logger.error(f"Invalid frame request on {request.url.path}: {e}")
            return self._error_response(e, 400)

    def _error_response(self, error: Exception, status_code: int) -> JSONResponse:
        return JSONResponse(
            {"error": map_error_to_code(error), "message": str(error)},
            status_code=status_code
        )
