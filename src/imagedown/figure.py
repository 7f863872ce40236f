"""Figure captions for image-only lines.

    ![A cat](cat.png "Our cat, asleep")

becomes

    <figure><img ...><figcaption>Our cat, asleep</figcaption></figure>
"""

import re
from xml.etree import ElementTree as etree

from markdown import Markdown
from markdown.blockparser import BlockParser
from markdown.blockprocessors import BlockProcessor
from markdown.inlinepatterns import IMAGE_LINK_RE, ImageInlineProcessor
from markdown.util import AtomicString

from .images import AssetImageInlineProcessor

# The line has to start with an image, not merely contain one
IMAGE_LINE_RE = re.compile(r"^!\[.*?\]\(.*?\)")


class LineImageRecognizer(ImageInlineProcessor):
    """Image recognizer for raw block text.

    Blocks are parsed before any inline processing, so there is no inline
    stash to restore from yet. Backslash escapes are resolved directly.
    """

    def __init__(self, md: Markdown):
        super().__init__(IMAGE_LINK_RE, md)
        chars = "".join(re.escape(c) for c in md.ESCAPED_CHARS)
        self.escaped_re = re.compile(rf"\\([{chars}])")

    def unescape(self, text: str) -> str:
        return self.escaped_re.sub(r"\1", text)


class FigureBlockProcessor(BlockProcessor):
    """Render a titled image standing alone on its line as a figure."""

    def __init__(self, parser: BlockParser, images: AssetImageInlineProcessor):
        super().__init__(parser)
        self.images = images
        self.recognizer = LineImageRecognizer(parser.md)

    def test(self, parent: etree.Element, block: str) -> bool:
        return bool(IMAGE_LINE_RE.match(block))

    def run(self, parent: etree.Element, blocks: list[str]):
        block = blocks.pop(0)
        line, _, rest = block.partition("\n")

        img = self.build_image(line)
        if img is None:
            blocks.insert(0, block)
            return False

        figure = etree.SubElement(parent, "figure")
        figure.append(img)
        caption = etree.SubElement(figure, "figcaption")
        caption.text = AtomicString(img.get("title"))

        if rest.strip():
            blocks.insert(0, rest)

    def build_image(self, line: str) -> etree.Element | None:
        """Return the resolved image if ``line`` is exactly one titled image."""
        m = self.recognizer.compiled_re.match(line)
        if m is None:
            return None
        img, _, end = self.images.recognize(m, line, self.recognizer)
        if img is None or line[end:].strip():
            return None
        if not img.get("title"):
            return None
        return self.images.resolve(img)
