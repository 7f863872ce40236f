"""Obsidian-style image size modifiers.

Rewrites ``![alt|300](url)`` to ``![alt](url){width=300}`` so the width
goes through the same resize and srcset handling as an attribute list.
"""

import re

from markdown.preprocessors import Preprocessor

# ![alt|width](url) or ![|width](url), optionally followed by an attribute list
OBSIDIAN_IMAGE_PATTERN = re.compile(
    r"!\[([^|\]]*)\|(\d+)\]\(([^)]+)\)(?:\{[ ]*([^{}\n]*?)[ ]*\})?"
)


class ObsidianImageSizePreprocessor(Preprocessor):
    """Preprocessor to handle Obsidian-style image size syntax."""

    def run(self, lines):
        return [OBSIDIAN_IMAGE_PATTERN.sub(self._replace_image, line) for line in lines]

    def _replace_image(self, match):
        alt_text = match.group(1).strip()
        width = match.group(2)
        url = match.group(3)
        extra = match.group(4)

        attrs = f"width={width} {extra}" if extra else f"width={width}"
        return f"![{alt_text}]({url}){{{attrs}}}"
