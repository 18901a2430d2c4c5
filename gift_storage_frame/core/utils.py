"""Frame context extraction and meta tag serialization utilities."""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from ..types import (
    ButtonAction,
    ClientProtocol,
    FrameButton,
    FrameContext,
    FrameMetadata,
    FrameResponse,
    OpenFramesConfig,
    PaymentConfig,
    TransactionPayload
)


def normalize_handle(text: Optional[str]) -> str:
    """Strip whitespace and a leading ``@`` from a typed username."""
    if not text:
        return ""
    return text.strip().lstrip("@").strip()


def explorer_url(config: PaymentConfig, tx_hash: Optional[str]) -> str:
    return config.explorer_tx_url.format(tx_hash=tx_hash or "")


def stamp_attribution(payload: TransactionPayload) -> TransactionPayload:
    """Post-process a built transaction: never ask the client for attribution."""
    return payload.model_copy(update={"attribution": False})


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None and value != "" else None
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value or None


def frame_context_from_body(
    route: str,
    body: Dict[str, Any],
    button_value: Optional[str] = None,
    protocol: ClientProtocol = ClientProtocol.FARCASTER,
    verified_address: Optional[str] = None
) -> FrameContext:
    """Build the per-request FrameContext from a classified POST body.

    Args:
        route: Frame route relative to the frame base path
        body: Parsed body, ``{}`` when absent or malformed
        button_value: Value echoed back through the button target URL
        protocol: Origin protocol tag from the classifier
        verified_address: Verified signer, XMTP only
    """
    untrusted = body.get("untrustedData")
    if not isinstance(untrusted, dict):
        untrusted = {}
    return FrameContext(
        route=route,
        button_index=_optional_int(untrusted.get("buttonIndex")),
        button_value=_optional_str(button_value),
        input_text=_optional_str(untrusted.get("inputText")),
        transaction_id=_optional_str(untrusted.get("transactionId")),
        address=_optional_str(untrusted.get("address")),
        fid=_optional_int(untrusted.get("fid")),
        protocol=protocol,
        verified_address=verified_address
    )


class FrameUtils:
    """Serializes FrameResponse objects into frame and OpenFrames meta tags."""

    def __init__(self, frame_url: str, open_frames: Optional[OpenFramesConfig] = None):
        self.frame_url = frame_url.rstrip("/")
        self.open_frames = open_frames or OpenFramesConfig()

    def absolute_url(self, route: str, value: Optional[str] = None) -> str:
        """Frame route as an absolute URL; ``value`` travels in the query string."""
        url = f"{self.frame_url}{route}" if route != "/" else f"{self.frame_url}/"
        if value is not None:
            url = f"{url}?{urlencode({'value': value})}"
        return url

    def image_url(self, response: FrameResponse) -> str:
        if response.image_path:
            return self.absolute_url(response.image_path)
        query = urlencode(response.view.params)
        url = self.absolute_url(f"/view/{response.view.name}")
        return f"{url}?{query}" if query else url

    def open_frames_tags(self) -> List[Tuple[str, str]]:
        """Tags advertising which clients this frame accepts."""
        cfg = self.open_frames
        return [
            (FrameMetadata.OF_VERSION_KEY, cfg.of_version),
            (FrameMetadata.OF_ACCEPTS_KEY, cfg.version),
            (f"{FrameMetadata.OF_ACCEPTS_KEY}:{cfg.client}", cfg.version),
        ]

    def button_tags(self, index: int, button: FrameButton) -> List[Tuple[str, str]]:
        key = f"{FrameMetadata.BUTTON_KEY}:{index}"
        tags = [(key, button.label)]
        if button.action == ButtonAction.LINK:
            tags.append((f"{key}:action", "link"))
            tags.append((f"{key}:target", button.target or ""))
        elif button.action == ButtonAction.TX:
            tags.append((f"{key}:action", "tx"))
            tags.append((f"{key}:target", self.absolute_url(button.target or "/")))
            if button.post_url:
                tags.append((f"{key}:post_url", self.absolute_url(button.post_url)))
        else:
            # Reset is a post back to the entry route.
            tags.append((f"{key}:action", "post"))
            tags.append((f"{key}:target", self.absolute_url(button.target or "/", button.value)))
        return tags

    def build_meta_tags(self, response: FrameResponse, post_route: str = "/") -> List[Tuple[str, str]]:
        """All meta tags for one frame, in document order."""
        image_url = self.image_url(response)
        tags = [
            (FrameMetadata.FRAME_KEY, FrameMetadata.FRAME_VERSION),
            (FrameMetadata.IMAGE_KEY, image_url),
            (FrameMetadata.ASPECT_RATIO_KEY, "1.91:1"),
            (FrameMetadata.POST_URL_KEY, self.absolute_url(post_route)),
            (FrameMetadata.OF_IMAGE_KEY, image_url),
        ]
        if response.input_text:
            tags.append((FrameMetadata.INPUT_TEXT_KEY, response.input_text))
        for index, button in enumerate(response.buttons, start=1):
            tags.extend(self.button_tags(index, button))
        tags.extend(self.open_frames_tags())
        return tags
