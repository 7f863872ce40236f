"""imagedown - Markdown to HTML with asset-aware images."""

from .extension import ImagedownExtension, makeExtension

__all__ = ["ImagedownExtension", "makeExtension"]
