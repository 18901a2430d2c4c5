"""View rendering: frame views to SVG images and frames to HTML pages."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from jinja2 import Environment, PackageLoader, select_autoescape

from .types import FrameView


VIEW_NAMES = ("entry", "profile", "not-found", "pending", "settled")


class ViewRenderer(ABC):
    """Turns a declarative view into a displayable artifact."""

    media_type: str = "image/svg+xml"

    @abstractmethod
    def render_view(self, view: FrameView) -> str:
        ...

    @abstractmethod
    def render_page(self, title: str, image_url: str, meta_tags: List[Tuple[str, str]]) -> str:
        ...

    def has_view(self, name: str) -> bool:
        return name in VIEW_NAMES


class SvgViewRenderer(ViewRenderer):
    """Jinja2 templates shipped in the package's ``templates`` directory."""

    def __init__(self, width: int = 1146, height: int = 600):
        self.width = width
        self.height = height
        self.env = Environment(
            loader=PackageLoader("gift_storage_frame", "templates"),
            autoescape=select_autoescape(["html", "xml", "svg"]),
        )

    def render_view(self, view: FrameView) -> str:
        if not self.has_view(view.name):
            raise ValueError(f"Unknown view: {view.name}")
        template = self.env.get_template(f"views/{view.name}.svg")
        return template.render(params=view.params, width=self.width, height=self.height)

    def render_page(self, title: str, image_url: str, meta_tags: List[Tuple[str, str]]) -> str:
        template = self.env.get_template("frame.html")
        return template.render(title=title, image_url=image_url, meta_tags=meta_tags)
