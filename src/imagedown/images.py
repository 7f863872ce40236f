"""Inline image handling for imagedown.

Wraps Python-Markdown's image recognizers (``![alt](src)``, ``![alt][ref]``
and ``![ref]``) and enhances every local raster image they produce: lazy
loading, inferred dimensions, resizing to an explicit width and a
responsive ``srcset``.
"""

import re
from xml.etree.ElementTree import Element

from markdown import Markdown
from markdown.inlinepatterns import IMAGE_LINK_RE, ImageInlineProcessor, InlineProcessor

from .assets import Asset, AssetError, AssetStore
from .attr_list import ATTR_LIST_RE, assign_attributes, parse_attribute_list
from .config import ImagesConfig
from .logging import debug
from .srcset import build_srcset

NUMERIC_WIDTH_RE = re.compile(r"[0-9]+")


class AssetImageInlineProcessor(InlineProcessor):
    """Inline image pattern backed by an AssetStore.

    ``recognizer_class`` is the Python-Markdown processor that turns the
    match into an ``img`` element; everything after that is shared.
    """

    def __init__(
        self,
        md: Markdown,
        store: AssetStore,
        images: ImagesConfig,
        pattern: str = IMAGE_LINK_RE,
        recognizer_class: type[InlineProcessor] = ImageInlineProcessor,
    ):
        super().__init__(pattern, md)
        self.recognizer = recognizer_class(pattern, md)
        self.store = store
        self.images = images

    def handleMatch(self, m: re.Match, data: str):
        el, start, end = self.recognize(m, data)
        if el is None:
            return el, start, end
        self.resolve(el)
        return el, start, end

    def recognize(
        self, m: re.Match, data: str, recognizer: InlineProcessor | None = None
    ) -> tuple[Element | None, int | None, int | None]:
        """Run the recognizer and consume an attribute list right after the image."""
        el, start, end = (recognizer or self.recognizer).handleMatch(m, data)
        if el is None:
            return el, start, end

        attrs = ATTR_LIST_RE.match(data, end)
        if attrs:
            assign_attributes(el, parse_attribute_list(attrs.group(1)))
            end = attrs.end()
        return el, start, end

    def resolve(self, el: Element) -> Element:
        """Enhance an ``img`` element in place.

        Remote, vector and unreadable images are returned untouched.
        """
        path = el.get("src", "").split("?", 1)[0].strip()
        asset = self.store.resolve(path)
        if asset is None or asset.width is None:
            return el

        natural_width = asset.width
        el.set("src", asset)

        if self.images.lazy:
            el.set("loading", "lazy")

        width = natural_width
        resized: Asset | None = None
        declared = el.get("width")
        if (
            declared is not None
            and NUMERIC_WIDTH_RE.fullmatch(declared)
            and int(declared) < natural_width
            and self.images.resize
        ):
            try:
                resized = asset.resize(int(declared))
            except AssetError as e:
                debug(str(e))
                return el
            el.set("src", resized)
            width = int(declared)

        if declared is None:
            el.set("width", str(natural_width))
        # The original image's height, even when a narrower variant is used
        if el.get("height") is None:
            el.set("height", str(asset.height))

        responsive = self.images.responsive
        if responsive.enabled:
            srcset = build_srcset(asset, width, resized, responsive)
            if srcset:
                el.set("srcset", srcset)
                el.set("sizes", responsive.sizes)

        return el
