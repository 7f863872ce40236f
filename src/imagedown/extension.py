"""Python-Markdown extension wiring for imagedown.

Usage:

    markdown.Markdown(extensions=[ImagedownExtension(source_dir="content")])

or by name, ``extensions=["imagedown.extension"]``.
"""

from pathlib import Path

from markdown import Extension, Markdown
from markdown.inlinepatterns import (
    IMAGE_REFERENCE_RE,
    ImageReferenceInlineProcessor,
    ShortImageReferenceInlineProcessor,
)
from markdown.treeprocessors import Treeprocessor

from .assets import Asset, AssetStore
from .attr_list import AttributeListTreeprocessor
from .config import ImagesConfig
from .figure import FigureBlockProcessor
from .images import AssetImageInlineProcessor
from .obsidian_image_size import ObsidianImageSizePreprocessor


class AssetReferenceTreeprocessor(Treeprocessor):
    """Replace Asset attribute values with their final URL."""

    def run(self, root):
        for elem in root.iter():
            for key, value in elem.items():
                if isinstance(value, Asset):
                    elem.set(key, str(value))


class ImagedownExtension(Extension):
    """Asset-aware images, figures and attribute lists."""

    def __init__(self, **kwargs):
        self.config = {
            "images": [ImagesConfig(), "Image enhancement options (ImagesConfig)"],
            "source_dir": [".", "Directory image paths are resolved against"],
            "output_dir": ["", "Directory for resized variants (default: source_dir)"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        images = self.getConfig("images")
        source_dir = Path(self.getConfig("source_dir"))
        output_dir = self.getConfig("output_dir")
        store = AssetStore(source_dir, Path(output_dir) if output_dir else None)

        md.preprocessors.register(
            ObsidianImageSizePreprocessor(md), "obsidian_image_size", 175
        )

        # Replace the built-in image patterns of the same names
        image_processor = AssetImageInlineProcessor(md, store, images)
        md.inlinePatterns.register(image_processor, "image_link", 150)
        md.inlinePatterns.register(
            AssetImageInlineProcessor(
                md, store, images, IMAGE_REFERENCE_RE, ImageReferenceInlineProcessor
            ),
            "image_reference",
            140,
        )
        md.inlinePatterns.register(
            AssetImageInlineProcessor(
                md, store, images, IMAGE_REFERENCE_RE, ShortImageReferenceInlineProcessor
            ),
            "short_image_ref",
            125,
        )

        if images.caption:
            # After "reference" (15), before "paragraph" (10)
            md.parser.blockprocessors.register(
                FigureBlockProcessor(md.parser, image_processor), "figure", 12
            )

        # Replaces the attr_list extension's processor when both are loaded
        md.treeprocessors.register(AttributeListTreeprocessor(md), "attr_list", 8)
        # Must run before "unescape" (0), which expects string attribute values
        md.treeprocessors.register(AssetReferenceTreeprocessor(md), "asset_reference", 1)


def makeExtension(**kwargs):
    """Entry point for markdown extension."""
    return ImagedownExtension(**kwargs)
