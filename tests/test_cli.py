"""Tests for the command line interface."""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler
from typer.testing import CliRunner

from inkpage.cli import app


runner = CliRunner()


def write_post(directory: Path, name: str, front_matter: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(f"---\n{front_matter}---\nBody.\n", encoding="utf-8")


@pytest.fixture
def site(tmp_path):
    posts = tmp_path / "_posts"
    for day in range(1, 6):
        write_post(posts, f"2023-03-{day:02d}-note-{day}.md", f"title: Note {day}\ncategories: jvm\n")
    write_post(posts, "2023-04-01-unfinished.md", "title: Unfinished\npublished: false\n")
    return tmp_path


class TestBuildCommand:
    def test_build(self, site):
        result = runner.invoke(app, ["build", "--source", str(site), "--per-page", "2"])

        assert result.exit_code == 0
        assert "Build summary" in result.output
        assert (site / "_site" / "index.html").is_file()
        assert (site / "_site" / "page3" / "index.html").is_file()
        assert not (site / "_site" / "page4").exists()

    def test_build_custom_destination(self, site, tmp_path_factory):
        destination = tmp_path_factory.mktemp("out")
        result = runner.invoke(
            app, ["build", "--source", str(site), "--destination", str(destination)]
        )
        assert result.exit_code == 0
        assert (destination / "index.html").is_file()

    def test_invalid_config_exits_with_error(self, site):
        (site / "_config.yml").write_text("paginate: -1\n", encoding="utf-8")
        result = runner.invoke(app, ["build", "--source", str(site)])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestListingCommands:
    def test_posts(self, site):
        result = runner.invoke(app, ["posts", "--source", str(site)])
        assert result.exit_code == 0
        assert "Note 5" in result.output
        assert "Unfinished" not in result.output

    def test_posts_with_drafts(self, site):
        result = runner.invoke(app, ["posts", "--source", str(site), "--drafts"])
        assert result.exit_code == 0
        assert "(draft)" in result.output

    def test_pages(self, site):
        result = runner.invoke(app, ["pages", "--source", str(site), "--per-page", "2"])
        assert result.exit_code == 0
        assert "/page3/" in result.output

    def test_pages_without_posts(self, tmp_path):
        result = runner.invoke(app, ["pages", "--source", str(tmp_path)])
        assert result.exit_code == 0
        assert "no pages" in result.output

    def test_warnings_go_through_rich_logging(self, site):
        (site / "_posts" / "2023-05-01-plain.md").write_text("# No front-matter\n", encoding="utf-8")
        result = runner.invoke(app, ["posts", "--source", str(site)])

        assert result.exit_code == 0
        handlers = logging.getLogger("inkpage").handlers
        assert any(isinstance(h, RichHandler) for h in handlers)
        assert "Skipping" in result.output

    def test_global_verbose_flag(self, site):
        result = runner.invoke(app, ["--verbose", "categories", "--source", str(site)])
        assert result.exit_code == 0
        assert logging.getLogger("inkpage").level == logging.DEBUG

    def test_categories(self, site):
        result = runner.invoke(app, ["categories", "--source", str(site)])
        assert result.exit_code == 0
        assert "jvm" in result.output

    def test_no_categories(self, tmp_path):
        result = runner.invoke(app, ["categories", "--source", str(tmp_path)])
        assert result.exit_code == 0
        assert "No categories found" in result.output


class TestNewCommand:
    def test_new_post(self, tmp_path):
        result = runner.invoke(
            app, ["new", "Escape Analysis", "--category", "jvm", "--source", str(tmp_path)]
        )

        assert result.exit_code == 0
        created = list((tmp_path / "_posts").glob("*-escape-analysis.md"))
        assert len(created) == 1
        text = created[0].read_text(encoding="utf-8")
        assert "title: Escape Analysis" in text
        assert "- jvm" in text

    def test_new_post_refuses_overwrite(self, tmp_path):
        args = ["new", "Same Title", "--source", str(tmp_path)]
        assert runner.invoke(app, args).exit_code == 0

        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestCleanCommand:
    def test_clean(self, site):
        runner.invoke(app, ["build", "--source", str(site)])
        result = runner.invoke(app, ["clean", "--source", str(site)])

        assert result.exit_code == 0
        assert "Removed" in result.output
        assert not (site / "_site").exists()

    def test_clean_nothing(self, tmp_path):
        result = runner.invoke(app, ["clean", "--source", str(tmp_path)])
        assert result.exit_code == 0
        assert "Nothing to remove" in result.output
