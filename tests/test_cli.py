"""Tests for CLI commands."""

from pathlib import Path

from click.testing import CliRunner
from PIL import Image

from imagedown.cli import main


def _write_image(name: str, size=(800, 600)) -> None:
    path = Path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (10, 20, 30)).save(path)


class TestInitCommand:
    """Tests for the init command."""

    def test_creates_config_file(self):
        """Should create .imagedown/config.toml."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["init"])

            assert result.exit_code == 0
            config_file = Path(".imagedown/config.toml")
            assert config_file.exists()
            assert "[images.responsive]" in config_file.read_text()
            assert "Created" in result.output

    def test_fails_if_config_exists_without_force(self):
        """Should not overwrite an existing config."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".imagedown").mkdir()
            Path(".imagedown/config.toml").write_text("[images]\nlazy = false\n")

            result = runner.invoke(main, ["init"])

            assert result.exit_code == 1
            assert "Error: .imagedown/config.toml already exists" in result.output
            assert "--force" in result.output
            assert "lazy = false" in Path(".imagedown/config.toml").read_text()

    def test_force_overwrites(self):
        """--force replaces an existing config."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".imagedown").mkdir()
            Path(".imagedown/config.toml").write_text("[images]\nlazy = false\n")

            result = runner.invoke(main, ["init", "--force"])

            assert result.exit_code == 0
            assert "lazy = true" in Path(".imagedown/config.toml").read_text()


class TestRenderCommand:
    """Tests for the render command."""

    def test_renders_to_stdout(self):
        """Prints the rendered fragment with image dimensions."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_image("photo.png")
            Path("doc.md").write_text("![p](photo.png)\n")

            result = runner.invoke(main, ["render", "doc.md"])

            assert result.exit_code == 0
            assert 'width="800"' in result.output
            assert 'height="600"' in result.output

    def test_strips_frontmatter(self):
        """Front matter is not rendered."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("doc.md").write_text("---\ntitle: Hi\n---\nBody text\n")

            result = runner.invoke(main, ["render", "doc.md"])

            assert result.exit_code == 0
            assert "<p>Body text</p>" in result.output
            assert "title" not in result.output

    def test_writes_output_file(self):
        """--output writes the HTML to a file."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("doc.md").write_text("# Hello\n")

            result = runner.invoke(main, ["render", "doc.md", "-o", "out/doc.html"])

            assert result.exit_code == 0
            assert "<h1" in Path("out/doc.html").read_text()
            assert "Wrote" in result.output

    def test_uses_project_config(self):
        """Options from .imagedown/config.toml apply."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".imagedown").mkdir()
            Path(".imagedown/config.toml").write_text(
                '[images]\nresize = true\ncaption = true\n\n[assets]\nsource_dir = "content"\n'
            )
            _write_image("content/photo.png")
            Path("doc.md").write_text('![p](photo.png "Caption"){width=200}\n')

            result = runner.invoke(main, ["render", "doc.md"])

            assert result.exit_code == 0
            assert "<figure>" in result.output
            assert 'src="photo-200.png"' in result.output
            assert Path("content/photo-200.png").exists()

    def test_invalid_config(self):
        """A broken config is reported and exits with 1."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".imagedown").mkdir()
            Path(".imagedown/config.toml").write_text("[images\n")
            Path("doc.md").write_text("text\n")

            result = runner.invoke(main, ["render", "doc.md"])

            assert result.exit_code == 1
            assert "Error: Invalid config" in result.output
            assert "<p>" not in result.output

    def test_verbose_reports_skipped_tokens(self):
        """--verbose shows why parts of an attribute list were ignored."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_image("photo.png")
            Path("doc.md").write_text("![p](photo.png){=oops .ok}\n")

            quiet = runner.invoke(main, ["render", "doc.md"])
            verbose = runner.invoke(main, ["render", "doc.md", "-v"])

            assert "Skipping attribute token" not in quiet.output
            assert "Skipping attribute token '=oops'" in verbose.output
            assert 'class="ok"' in verbose.output

    def test_missing_source(self):
        """A missing source file is a usage error."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["render", "nope.md"])
            assert result.exit_code == 2


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_reports_dimensions(self):
        """Prints the natural size of a local image."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_image("photo.png", (640, 480))

            result = runner.invoke(main, ["inspect", "photo.png"])

            assert result.exit_code == 0
            assert "photo.png: 640x480" in result.output

    def test_unavailable_image(self):
        """Remote or missing images are reported as unavailable."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["inspect", "https://example.com/a.png"])

            assert result.exit_code == 1
            assert "unavailable" in result.output
