"""Command-line interface for imagedown."""

import tomllib
from pathlib import Path

import click

from .config import CONFIG_DIR, CONFIG_FILE, Config
from .logging import error, info, setup_logging

DEFAULT_CONFIG = """\
[images]
lazy = true
resize = false
caption = false

[images.responsive]
enabled = false
steps = 5
width_min = 320
width_max = 1280
sizes = "100vw"

[assets]
source_dir = "."
output_dir = ""

[toc]
selectors = ["h2", "h3"]
"""


def _load_config() -> Config:
    try:
        return Config.find_and_load()
    except tomllib.TOMLDecodeError as e:
        error(f"Invalid config: {e}")
        raise SystemExit(1)


@click.group()
@click.version_option(package_name="imagedown")
def main():
    """imagedown - Markdown to HTML with asset-aware images."""
    setup_logging()


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def init(force: bool):
    """Create a default .imagedown/config.toml."""
    config_dir = Path.cwd() / CONFIG_DIR
    config_file = config_dir / CONFIG_FILE

    if config_file.exists() and not force:
        error(f"{CONFIG_DIR}/{CONFIG_FILE} already exists. Use --force to overwrite")
        raise SystemExit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(DEFAULT_CONFIG)
    info(f"Created {config_file}")


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write HTML here instead of stdout",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def render(source: Path, output: Path | None, verbose: bool):
    """Render a markdown file to an HTML fragment."""
    from .markdown_utils import parse_markdown_file, render_markdown

    if verbose:
        setup_logging(verbose=True)
    config = _load_config()

    _, content = parse_markdown_file(source)
    html = render_markdown(content, config)

    if output is None:
        click.echo(html)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")
        info(f"Wrote {output}")


@main.command()
@click.argument("image")
def inspect(image: str):
    """Show the natural size of an image as the renderer sees it."""
    from .assets import AssetStore

    config = _load_config()
    store = AssetStore(config.get_source_dir(), config.get_output_dir())
    asset = store.resolve(image.split("?", 1)[0].strip())

    if asset is None or asset.width is None:
        click.echo(f"{image}: unavailable (remote, not a raster image, or unreadable)")
        raise SystemExit(1)

    click.echo(f"{image}: {asset.width}x{asset.height}")


if __name__ == "__main__":
    main()
