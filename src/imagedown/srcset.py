"""Responsive ``srcset`` generation."""

import copy
import math

from .assets import Asset, AssetError
from .config import ResponsiveConfig
from .logging import debug


def build_srcset(
    asset: Asset,
    width: int,
    resized: Asset | None,
    options: ResponsiveConfig,
) -> str:
    """Build a ``srcset`` value with stepped widths up to ``width``.

    Candidates are ``width_min * i`` for ``i`` in ``1..steps``, stopping at
    the first one wider than ``width`` or ``width_max``. When any candidate
    fits, the image actually used (``resized`` or ``asset``) closes the list
    at ``width``. Only the stepped candidates are bounded by ``width_max``;
    the closing entry is the rendered image itself, so it can be wider.

    Args:
        asset: Original image
        width: Effective width of the rendered image
        resized: Variant already used as ``src``, if the image was resized
        options: Responsive options

    Returns:
        e.g. ``"cat-320.png 320w, cat-640.png 640w, cat.png 800w"``, or an
        empty string if no candidate fits
    """
    working = copy.copy(asset)
    candidates: list[tuple[int, str]] = []

    for i in range(1, options.steps + 1):
        w = math.ceil(options.width_min * i)
        if w > width or w > options.width_max:
            break
        try:
            variant = working.resize(w)
        except AssetError as e:
            debug(f"Stopping srcset for {asset.path}: {e}")
            break
        candidates.append((w, f"{variant} {w}w"))

    if not candidates:
        return ""

    if candidates[-1][0] == width:
        candidates.pop()
    candidates.append((width, f"{resized or asset} {width}w"))
    return ", ".join(entry for _, entry in candidates)
