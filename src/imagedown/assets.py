"""Image assets for imagedown.

An ``Asset`` is a handle on an image file under an ``AssetStore``. It knows
its natural pixel size (read lazily with Pillow) and can derive resized
variants, which are written next to the source path under the store's
output directory.
"""

import posixpath
from functools import cached_property
from pathlib import Path
from urllib.parse import unquote, urlsplit

from PIL import Image

from .logging import debug

# Only these are measured and resized; anything else (SVG, PDF, ...) is left alone
RASTER_IMAGE_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".bmp",
}


class AssetError(Exception):
    """Raised when a variant of an asset cannot be produced."""


class Asset:
    """An image source, or a resized variant of one.

    Args:
        store: Store the path is resolved in
        path: Image path as written in the document, without query string
        target_width: Width of the variant, or None for the original image
    """

    def __init__(self, store: "AssetStore", path: str, target_width: int | None = None):
        self.store = store
        self.path = path
        self.target_width = target_width

    def __repr__(self) -> str:
        return f"Asset({self.url!r})"

    def __str__(self) -> str:
        return self.url

    @property
    def url(self) -> str:
        """Reference written into the rendered HTML."""
        if self.target_width is None:
            return self.path
        directory, filename = posixpath.split(self.path)
        stem, ext = posixpath.splitext(filename)
        return posixpath.join(directory, f"{stem}-{self.target_width}{ext}")

    @property
    def source_file(self) -> Path:
        return self.store.source_dir / unquote(self.path).lstrip("/")

    @property
    def output_file(self) -> Path:
        return self.store.output_dir / unquote(self.url).lstrip("/")

    @cached_property
    def source_size(self) -> tuple[int, int] | None:
        """Natural (width, height) of the source file, or None if unavailable."""
        source = self.source_file
        if source.suffix.lower() not in RASTER_IMAGE_EXTENSIONS:
            return None
        if not source.is_file():
            debug(f"Image not found: {source}")
            return None
        try:
            with Image.open(source) as img:
                return img.size
        except OSError as e:
            debug(f"Unable to read image {source}: {e}")
            return None

    @property
    def width(self) -> int | None:
        if self.source_size is None:
            return None
        return self.target_width or self.source_size[0]

    @property
    def height(self) -> int | None:
        if self.source_size is None:
            return None
        source_width, source_height = self.source_size
        if self.target_width is None:
            return source_height
        return max(1, round(source_height * self.target_width / source_width))

    def resize(self, width: int) -> "Asset":
        """Return the variant of this asset scaled to ``width`` pixels.

        The receiver is left untouched. The variant file is only re-encoded
        when it is missing or older than the source.

        Raises:
            AssetError: If the source is not a readable raster image, the
                width is out of range, or the variant cannot be written
        """
        if self.source_size is None:
            raise AssetError(f"Cannot resize {self.path}: not a readable raster image")
        if width <= 0 or width > self.source_size[0]:
            raise AssetError(
                f"Cannot resize {self.path} to {width}px "
                f"(natural width {self.source_size[0]}px)"
            )

        variant = Asset(self.store, self.path, width)
        target = variant.output_file
        if not target.resolve().is_relative_to(self.store.output_dir.resolve()):
            raise AssetError(f"Refusing to write {target} outside {self.store.output_dir}")

        source = self.source_file
        if target.exists() and target.stat().st_mtime >= source.stat().st_mtime:
            return variant

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with Image.open(source) as img:
                resized = img.resize((variant.width, variant.height), Image.Resampling.LANCZOS)
                resized.save(target)
        except (OSError, ValueError) as e:
            raise AssetError(f"Unable to resize {self.path} to {width}px: {e}") from e

        debug(f"Resized {self.path} -> {variant.url}")
        return variant


class AssetStore:
    """Resolves image paths from documents to local assets.

    Args:
        source_dir: Directory image paths are relative to
        output_dir: Directory resized variants are written to (default: source_dir)
    """

    def __init__(self, source_dir: Path, output_dir: Path | None = None):
        self.source_dir = Path(source_dir)
        self.output_dir = Path(output_dir) if output_dir else self.source_dir

    def resolve(self, path: str) -> Asset | None:
        """Return an Asset for a local path, or None for remote and inline references."""
        if not path:
            return None
        parts = urlsplit(path)
        if parts.scheme or parts.netloc:
            return None
        return Asset(self, path)
