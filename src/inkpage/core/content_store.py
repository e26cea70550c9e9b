"""Content store: discovers Markdown posts and parses their front-matter."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

import yaml
from pydantic import ValidationError

from inkpage.config import Settings
from inkpage.errors import ContentError, FrontMatterError
from inkpage.models.category import Category, category_slug
from inkpage.models.post import FrontMatter, Post
from inkpage.utils.logging import get_logger
from inkpage.utils.text_utils import (
    extract_first_paragraph,
    markdown_to_html,
    slugify,
    titleize,
)


logger = get_logger(__name__)

MARKDOWN_SUFFIXES = {".md", ".markdown"}

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
_POST_FILENAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")


def split_front_matter(text: str) -> tuple[dict, str] | None:
    """
    Split a content file into its front-matter mapping and Markdown body.

    Returns None when the file has no front-matter block. Raises
    yaml.YAMLError for malformed YAML and TypeError when the block is not
    a mapping.
    """
    text = text.lstrip("\ufeff")
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return None

    data = yaml.safe_load(match.group(1))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"front-matter must be a mapping, got {type(data).__name__}")
    return data, text[match.end():]


def parse_post_filename(name: str) -> tuple[datetime | None, str]:
    """Split ``YYYY-MM-DD-slug`` into its date and slug."""
    match = _POST_FILENAME_RE.match(name)
    if not match:
        return None, name
    year, month, day, slug = match.groups()
    try:
        return datetime(int(year), int(month), int(day)), slug
    except ValueError:
        return None, name


def build_permalink(
    pattern: str,
    *,
    date: datetime,
    slug: str,
    categories: list[str] | tuple[str, ...] = (),
) -> str:
    """Resolve a permalink pattern such as ``/:categories/:year/:title.html``."""
    category_path = "/".join(category_slug(c) for c in categories)
    url = (
        pattern.replace(":categories", category_path)
        .replace(":year", f"{date.year:04d}")
        .replace(":month", f"{date.month:02d}")
        .replace(":day", f"{date.day:02d}")
        .replace(":title", slug)
    )
    url = re.sub(r"/{2,}", "/", url)
    if not url.startswith("/"):
        url = "/" + url
    return url


class ContentStore:
    """Loads posts from every posts directory under the source root."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.root = settings.content_root
        self._posts: list[Post] | None = None

    def discover(self) -> list[tuple[Path, list[str]]]:
        """Find post files and the categories implied by their location."""
        found: list[tuple[Path, list[str]]] = []
        output_root = self.settings.output_root

        for posts_dir in sorted(self.root.rglob(self.settings.posts_dir_name)):
            if not posts_dir.is_dir() or output_root in posts_dir.parents:
                continue
            relative = posts_dir.relative_to(self.root)
            path_categories = list(relative.parts[:-1])

            for path in sorted(posts_dir.rglob("*")):
                if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES:
                    found.append((path, path_categories))

        return found

    def load_post(self, path: Path, categories_from_path: list[str] | None = None) -> Post | None:
        """
        Load a single post file.

        Returns None for files without a front-matter block.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentError(f"cannot read file: {exc}", path=path) from exc

        try:
            parts = split_front_matter(text)
        except yaml.YAMLError as exc:
            raise FrontMatterError(f"invalid YAML front-matter: {exc}", path=path) from exc
        except TypeError as exc:
            raise FrontMatterError(str(exc), path=path) from exc

        if parts is None:
            logger.warning(f"Skipping {path}: no front-matter block")
            return None
        data, body = parts

        try:
            front = FrontMatter.model_validate(data)
        except ValidationError as exc:
            raise FrontMatterError(f"invalid front-matter: {exc}", path=path) from exc

        file_date, file_slug = parse_post_filename(path.stem)
        post_date = front.date or file_date
        if post_date is None:
            raise ContentError(
                "no date in front-matter and filename is not YYYY-MM-DD-slug",
                path=path,
            )

        explicit_slug = (front.model_extra or {}).get("slug")
        slug = slugify(str(explicit_slug)) if explicit_slug else slugify(file_slug) or file_slug

        # Spellings sharing a slug (java, Java) name one category
        categories: list[str] = []
        seen_slugs: set[str] = set()
        for category in [*(categories_from_path or []), *front.categories]:
            if category_slug(category) not in seen_slugs:
                seen_slugs.add(category_slug(category))
                categories.append(category)

        body = body.strip("\n")
        separator = self.settings.excerpt_separator
        if separator and separator in body:
            excerpt_source, _ = body.split(separator, 1)
            body = body.replace(separator, "", 1)
        else:
            excerpt_source = extract_first_paragraph(body)

        return Post(
            title=front.title or titleize(slug),
            date=post_date,
            slug=slug,
            url=build_permalink(
                self.settings.permalink,
                date=post_date,
                slug=slug,
                categories=categories,
            ),
            categories=tuple(categories),
            tags=tuple(front.tags),
            published=front.published,
            description=front.description,
            layout=front.layout,
            content=body,
            html=markdown_to_html(body),
            excerpt=markdown_to_html(excerpt_source),
            source_path=path,
        )

    def load(self) -> list[Post]:
        """Load every post, published or not."""
        if self._posts is None:
            posts = []
            for path, categories in self.discover():
                post = self.load_post(path, categories)
                if post is not None:
                    posts.append(post)
            logger.debug(f"Loaded {len(posts)} posts from {self.root}")
            self._posts = posts
        return list(self._posts)

    def published_posts(self) -> list[Post]:
        """Published posts, newest first; same-date posts ordered by slug."""
        include_drafts = self.settings.show_drafts
        posts = [p for p in self.load() if p.published or include_drafts]

        # Two stable sorts: slug ascending within each date, dates descending
        posts.sort(key=lambda p: p.slug)
        posts.sort(key=lambda p: p.date, reverse=True)

        seen: dict[str, Post] = {}
        for post in posts:
            if post.url in seen:
                raise ContentError(
                    f"URL {post.url} is also produced by {seen[post.url].source_path}",
                    path=post.source_path,
                )
            seen[post.url] = post

        return posts

    def categories(self) -> list[Category]:
        """
        Categories used by published posts, sorted by name.

        Names are grouped by slug; the spelling of the newest post using a
        category becomes its name.
        """
        names: dict[str, str] = {}
        counts: dict[str, int] = {}
        for post in self.published_posts():
            for name, slug in zip(post.categories, post.category_slugs):
                names.setdefault(slug, name)
                counts[slug] = counts.get(slug, 0) + 1
        result = [
            Category(name=names[slug], slug=slug, post_count=count)
            for slug, count in counts.items()
        ]
        return sorted(result, key=lambda c: (c.name.lower(), c.slug))

    def posts_in_category(self, name: str) -> list[Post]:
        """Published posts filed under a category or any spelling of it, in listing order."""
        slug = category_slug(name)
        return [p for p in self.published_posts() if slug in p.category_slugs]


def create_content_store(settings: Settings) -> ContentStore:
    """Factory function to create a content store."""
    return ContentStore(settings=settings)
