"""Configuration loading for imagedown.

Option sections are frozen dataclasses: they are read once when a converter
is built and can be used as cache keys for it.
"""

import difflib
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TypeVar

from .logging import warning

T = TypeVar("T")

CONFIG_DIR = ".imagedown"
CONFIG_FILE = "config.toml"


def _find_similar(key: str, valid_keys: set[str], threshold: float = 0.6) -> str | None:
    """Return the valid key closest to ``key``, if any is close enough."""
    matches = difflib.get_close_matches(key, sorted(valid_keys), n=1, cutoff=threshold)
    return matches[0] if matches else None


def _warn_unknown_keys(
    data: dict, valid_keys: set[str], section: str, config_path: Path | None = None
) -> None:
    """Warn about keys of a config section that no option consumes."""
    for key in sorted(set(data.keys()) - valid_keys):
        location = f" in {config_path}" if config_path else ""
        msg = f"Unknown config key '{key}' in [{section}]{location}"

        similar = _find_similar(key, valid_keys)
        if similar:
            msg += f". Did you mean '{similar}'?"

        warning(msg)


def _load_dataclass(
    cls: type[T],
    data: dict,
    defaults: T,
    transforms: dict[str, callable] | None = None,
    section: str = "",
    config_path: Path | None = None,
    nested: set[str] | None = None,
) -> T:
    """Build a dataclass from a config table, falling back to ``defaults``.

    Args:
        cls: The dataclass type to create
        data: Table from the config file
        defaults: Instance with default values
        transforms: Optional field name -> conversion function
        section: Section name for validation warnings
        config_path: Path to config file for validation warnings
        nested: Keys that are sub-tables loaded by the caller

    Returns:
        New instance of cls
    """
    transforms = transforms or {}
    nested = nested or set()
    valid_keys = {f.name for f in fields(cls)}

    _warn_unknown_keys(data, valid_keys, section, config_path)

    kwargs = {}
    for f in fields(cls):
        if f.name in nested:
            kwargs[f.name] = getattr(defaults, f.name)
            continue
        value = data.get(f.name, getattr(defaults, f.name))
        if f.name in transforms:
            value = transforms[f.name](value)
        kwargs[f.name] = value
    return cls(**kwargs)


@dataclass(frozen=True)
class ResponsiveConfig:
    """Responsive ``srcset`` generation."""

    enabled: bool = False
    steps: int = 5
    width_min: int = 320
    width_max: int = 1280
    sizes: str = "100vw"


@dataclass(frozen=True)
class ImagesConfig:
    """Image enhancement toggles."""

    lazy: bool = True
    resize: bool = False
    caption: bool = False
    responsive: ResponsiveConfig = field(default_factory=ResponsiveConfig)


@dataclass(frozen=True)
class AssetsConfig:
    """Where image sources live and where resized variants go."""

    source_dir: str = "."
    output_dir: str = ""


@dataclass(frozen=True)
class TocConfig:
    """Table of contents options passed to the ``toc`` extension."""

    selectors: tuple[str, ...] = ("h2", "h3")

    @property
    def depth(self) -> str:
        """Heading range covered by the selectors, e.g. ``"2-3"``."""
        levels = sorted(
            int(s[1]) for s in self.selectors if len(s) == 2 and s[0] == "h" and s[1] in "123456"
        )
        if not levels:
            return "2-3"
        return f"{levels[0]}-{levels[-1]}"


@dataclass
class Config:
    """Main configuration container."""

    images: ImagesConfig = field(default_factory=ImagesConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    toc: TocConfig = field(default_factory=TocConfig)

    # Computed paths (set after loading)
    project_path: Path | None = None
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """Load configuration from a TOML file.

        A missing file yields the defaults.

        Raises:
            tomllib.TOMLDecodeError: If the file is not valid TOML
        """
        config = cls()
        config.config_path = config_path
        config.project_path = config_path.parent.parent  # .imagedown/config.toml -> project

        if not config_path.exists():
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        _warn_unknown_keys(data, {"images", "assets", "toc"}, "top-level", config_path)

        if "images" in data:
            images_data = data["images"]
            images = _load_dataclass(
                ImagesConfig,
                images_data,
                config.images,
                section="images",
                config_path=config_path,
                nested={"responsive"},
            )
            if "responsive" in images_data:
                responsive = _load_dataclass(
                    ResponsiveConfig,
                    images_data["responsive"],
                    images.responsive,
                    transforms={"steps": int, "width_min": int, "width_max": int},
                    section="images.responsive",
                    config_path=config_path,
                )
                images = replace(images, responsive=responsive)
            config.images = images

        if "assets" in data:
            config.assets = _load_dataclass(
                AssetsConfig,
                data["assets"],
                config.assets,
                section="assets",
                config_path=config_path,
            )

        if "toc" in data:
            config.toc = _load_dataclass(
                TocConfig,
                data["toc"],
                config.toc,
                transforms={"selectors": tuple},
                section="toc",
                config_path=config_path,
            )

        return config

    @classmethod
    def find_and_load(cls, start_path: Path | None = None) -> "Config":
        """Load the nearest ``.imagedown/config.toml``, or defaults if none exists."""
        if start_path is None:
            start_path = Path.cwd()

        config_path = cls.find_config(start_path)
        if config_path is None:
            config = cls()
            config.project_path = start_path.resolve()
            return config

        return cls.load(config_path)

    @staticmethod
    def find_config(start_path: Path) -> Path | None:
        """Find ``.imagedown/config.toml`` from start_path up to the filesystem root."""
        current = start_path.resolve()

        while True:
            config_path = current / CONFIG_DIR / CONFIG_FILE
            if config_path.exists():
                return config_path

            parent = current.parent
            if parent == current:
                return None
            current = parent

    def get_source_dir(self) -> Path:
        """Directory image paths are resolved against."""
        base = self.project_path or Path.cwd()
        return base / self.assets.source_dir

    def get_output_dir(self) -> Path:
        """Directory resized variants are written to."""
        if self.assets.output_dir:
            return (self.project_path or Path.cwd()) / self.assets.output_dir
        return self.get_source_dir()
