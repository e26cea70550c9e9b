"""Tests for loading posts from the content tree."""

from datetime import datetime
from pathlib import Path

import pytest

from inkpage.config import Settings
from inkpage.core.content_store import (
    ContentStore,
    build_permalink,
    parse_post_filename,
    split_front_matter,
)
from inkpage.errors import ContentError, FrontMatterError


def write_post(directory: Path, name: str, front_matter: str, body: str = "Body text.") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(f"---\n{front_matter}---\n{body}\n", encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path):
    """A source tree with a root posts directory and a java section."""
    posts = tmp_path / "_posts"
    write_post(posts, "2021-03-01-hello-world.md", "title: Hello World\n")
    write_post(
        posts,
        "2021-04-10-spring-beans.md",
        "title: Spring Beans\ncategories: [spring]\ntags: ioc, beans\n",
    )
    write_post(posts, "2021-05-20-draft-notes.md", "title: Draft Notes\npublished: false\n")
    write_post(
        tmp_path / "java" / "_posts",
        "2021-04-10-gc-tuning.md",
        "title: GC Tuning\ncategories: jvm\n",
    )
    return tmp_path


@pytest.fixture
def store(site):
    return ContentStore(Settings(source_dir=site))


class TestSplitFrontMatter:
    def test_split(self):
        data, body = split_front_matter("---\ntitle: A\n---\n# Heading\n")
        assert data == {"title": "A"}
        assert body == "# Heading\n"

    def test_empty_block(self):
        assert split_front_matter("---\n---\nBody") == ({}, "Body")

    def test_no_block(self):
        assert split_front_matter("# Just markdown\n") is None

    def test_byte_order_mark(self):
        data, _ = split_front_matter("\ufeff---\ntitle: A\n---\n")
        assert data == {"title": "A"}

    def test_non_mapping(self):
        with pytest.raises(TypeError):
            split_front_matter("---\n- a\n- b\n---\n")


class TestFilenamesAndPermalinks:
    def test_parse_post_filename(self):
        assert parse_post_filename("2020-01-02-my-post") == (datetime(2020, 1, 2), "my-post")

    def test_filename_without_date(self):
        assert parse_post_filename("about") == (None, "about")

    def test_filename_with_impossible_date(self):
        assert parse_post_filename("2020-13-45-oops") == (None, "2020-13-45-oops")

    def test_default_permalink(self):
        url = build_permalink(
            "/:categories/:year/:month/:day/:title.html",
            date=datetime(2021, 4, 5),
            slug="gc-tuning",
            categories=["Java", "JVM Internals"],
        )
        assert url == "/java/jvm-internals/2021/04/05/gc-tuning.html"

    def test_permalink_without_categories_collapses_slashes(self):
        url = build_permalink(
            "/:categories/:year/:month/:day/:title.html",
            date=datetime(2021, 4, 5),
            slug="hello",
        )
        assert url == "/2021/04/05/hello.html"

    def test_pretty_permalink(self):
        url = build_permalink(":year/:title/", date=datetime(2021, 4, 5), slug="hello")
        assert url == "/2021/hello/"


class TestContentStore:
    def test_load_includes_unpublished(self, store):
        assert len(store.load()) == 4

    def test_published_posts_sorted_newest_first(self, store):
        posts = store.published_posts()
        assert [p.slug for p in posts] == ["gc-tuning", "spring-beans", "hello-world"]

    def test_unpublished_post_excluded(self, store):
        assert "draft-notes" not in {p.slug for p in store.published_posts()}

    def test_drafts_included_when_enabled(self, site):
        store = ContentStore(Settings(source_dir=site, show_drafts=True))
        assert store.published_posts()[0].slug == "draft-notes"

    def test_directory_categories(self, store):
        post = next(p for p in store.load() if p.slug == "gc-tuning")
        assert post.categories == ("java", "jvm")
        assert post.url == "/java/jvm/2021/04/10/gc-tuning.html"

    def test_tags_and_rendered_html(self, store):
        post = next(p for p in store.load() if p.slug == "spring-beans")
        assert post.tags == ("ioc", "beans")
        assert post.html == "<p>Body text.</p>"
        assert post.date == datetime(2021, 4, 10)

    def test_categories(self, store):
        categories = store.categories()
        assert [c.name for c in categories] == ["java", "jvm", "spring"]
        assert all(c.post_count == 1 for c in categories)

    def test_posts_in_category(self, store):
        assert [p.slug for p in store.posts_in_category("spring")] == ["spring-beans"]
        assert store.posts_in_category("missing") == []

    def test_case_variants_are_one_category(self, site):
        write_post(
            site / "java" / "_posts",
            "2021-06-01-records.md",
            "title: Records\ncategories: Java\n",
        )
        write_post(site / "_posts", "2021-07-01-loom.md", "title: Loom\ncategories: JAVA\n")
        store = ContentStore(Settings(source_dir=site))

        records = next(p for p in store.load() if p.slug == "records")
        assert records.categories == ("java",)
        assert records.url == "/java/2021/06/01/records.html"

        java = next(c for c in store.categories() if c.slug == "java")
        assert java.post_count == 3
        assert [p.slug for p in store.posts_in_category("Java")] == [
            "loom",
            "records",
            "gc-tuning",
        ]

    def test_non_ascii_category_keeps_its_name(self, tmp_path):
        write_post(tmp_path / "_posts", "2022-01-01-locks.md", "title: Locks\ncategories: 并发\n")
        store = ContentStore(Settings(source_dir=tmp_path))

        [category] = store.categories()
        assert category.slug == "并发"
        assert category.url == "/并发/"
        assert store.published_posts()[0].url == "/并发/2022/01/01/locks.html"
        assert len(store.posts_in_category("并发")) == 1

    def test_empty_source(self, tmp_path):
        store = ContentStore(Settings(source_dir=tmp_path))
        assert store.published_posts() == []
        assert store.categories() == []

    def test_output_directory_ignored(self, site):
        write_post(site / "_site" / "_posts", "2021-01-01-copied.md", "title: Copied\n")
        store = ContentStore(Settings(source_dir=site))
        assert "copied" not in {p.slug for p in store.load()}


class TestLoadPost:
    def test_front_matter_date_wins(self, tmp_path):
        path = write_post(tmp_path, "2020-01-01-post.md", "date: 2020-02-03 10:15:00\n")
        post = ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert post.date == datetime(2020, 2, 3, 10, 15)

    def test_title_defaults_to_slug(self, tmp_path):
        path = write_post(tmp_path, "2020-01-01-lock-free-queues.md", "layout: post\n")
        post = ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert post.title == "Lock Free Queues"

    def test_slug_from_front_matter(self, tmp_path):
        path = write_post(tmp_path, "2020-01-01-post.md", "title: X\nslug: Better Slug\n")
        post = ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert post.slug == "better-slug"

    def test_excerpt_separator(self, tmp_path):
        body = "Intro *one*.\n\nIntro two.\n<!--more-->\nRest of the post."
        path = write_post(tmp_path, "2020-01-01-post.md", "title: X\n", body)
        post = ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert post.excerpt == "<p>Intro <em>one</em>.</p>\n<p>Intro two.</p>"
        assert "<!--more-->" not in post.html
        assert "Rest of the post." in post.html

    def test_excerpt_defaults_to_first_paragraph(self, tmp_path):
        body = "# Heading\n\nFirst paragraph.\n\nSecond paragraph."
        path = write_post(tmp_path, "2020-01-01-post.md", "title: X\n", body)
        post = ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert post.excerpt == "<p>First paragraph.</p>"

    def test_missing_date_is_an_error(self, tmp_path):
        path = write_post(tmp_path, "undated.md", "title: X\n")
        with pytest.raises(ContentError, match="no date"):
            ContentStore(Settings(source_dir=tmp_path)).load_post(path)

    def test_malformed_yaml_is_an_error(self, tmp_path):
        path = write_post(tmp_path, "2020-01-01-bad.md", "title: [unclosed\n")
        with pytest.raises(FrontMatterError) as exc_info:
            ContentStore(Settings(source_dir=tmp_path)).load_post(path)
        assert exc_info.value.path == path

    def test_invalid_field_is_an_error(self, tmp_path):
        path = write_post(tmp_path, "2020-01-01-bad.md", "published: maybe-later\n")
        with pytest.raises(FrontMatterError):
            ContentStore(Settings(source_dir=tmp_path)).load_post(path)

    def test_file_without_front_matter_is_skipped(self, tmp_path):
        path = tmp_path / "2020-01-01-plain.md"
        path.write_text("# Plain\n", encoding="utf-8")
        assert ContentStore(Settings(source_dir=tmp_path)).load_post(path) is None

    def test_duplicate_urls_are_an_error(self, tmp_path):
        posts = tmp_path / "_posts"
        write_post(posts, "2020-01-01-same.md", "title: A\n")
        write_post(posts, "2020-01-01-same.markdown", "title: B\n")
        with pytest.raises(ContentError, match="also produced by"):
            ContentStore(Settings(source_dir=tmp_path)).published_posts()
