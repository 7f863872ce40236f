"""Markdown rendering helpers for imagedown."""

from functools import lru_cache
from pathlib import Path

import frontmatter
import markdown

from .config import Config, ImagesConfig
from .extension import ImagedownExtension
from .logging import warning

# Loaded before imagedown so its attr_list processor takes precedence
MARKDOWN_EXTENSIONS = [
    "extra",  # tables, footnotes, etc.
    "smarty",
    "sane_lists",
    "toc",
]

EXTENSION_CONFIGS = {
    "toc": {
        "permalink": "#",
        "permalink_class": "header-anchor",
        "permalink_title": "Link to this section",
    },
}


def parse_markdown_file(filepath: Path) -> tuple[dict, str]:
    """Parse a markdown file with YAML frontmatter.

    Args:
        filepath: Path to the markdown file

    Returns:
        Tuple of (metadata dict, markdown content string)
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            post = frontmatter.load(f)
        return dict(post.metadata), post.content
    except Exception as e:
        warning(f"YAML parsing error in {filepath}: {e}")
        return {}, ""


@lru_cache(maxsize=8)
def get_markdown_converter(
    images: ImagesConfig,
    source_dir: Path,
    output_dir: Path,
    toc_depth: str = "2-3",
) -> markdown.Markdown:
    """Get or create a cached Markdown converter for the given options."""
    extension_configs = {k: v.copy() for k, v in EXTENSION_CONFIGS.items()}
    extension_configs["toc"]["toc_depth"] = toc_depth

    return markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS
        + [
            ImagedownExtension(
                images=images, source_dir=source_dir, output_dir=output_dir
            )
        ],
        extension_configs=extension_configs,
    )


def render_markdown(content: str, config: Config | None = None) -> str:
    """Render markdown to HTML with image enhancement.

    Args:
        content: Markdown content
        config: Loaded configuration (defaults if None)

    Returns:
        HTML string
    """
    config = config or Config()
    md = get_markdown_converter(
        config.images,
        config.get_source_dir(),
        config.get_output_dir(),
        config.toc.depth,
    )
    md.reset()
    return md.convert(content)
