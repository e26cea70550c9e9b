"""Site build orchestration: content in, static files out."""

import asyncio
import shutil
import time
from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field

from inkpage.config import Settings
from inkpage.core.content_store import ContentStore, create_content_store
from inkpage.core.paginator import Paginator
from inkpage.errors import ConfigurationError, InkpageError
from inkpage.models.post import Post
from inkpage.output.renderer import DEFAULT_STATIC_DIR, Renderer, output_path_for
from inkpage.output.search_index import SearchIndexWriter
from inkpage.utils.logging import LogContext, get_logger


logger = get_logger(__name__)


class BuildResult(BaseModel):
    """Summary of a finished build."""

    destination: Path
    posts: int = 0
    index_pages: int = 0
    categories: int = 0
    category_pages: int = 0
    files_written: int = 0
    elapsed_seconds: float = Field(default=0.0, ge=0)


class SiteBuilder:
    """Builds the whole site into the destination directory."""

    def __init__(
        self,
        settings: Settings,
        store: ContentStore | None = None,
        renderer: Renderer | None = None,
    ):
        self.settings = settings
        self.store = store or create_content_store(settings)
        self.paginator = Paginator(settings.paginate, settings.paginate_path)
        self.renderer = renderer or Renderer(settings, paginator=self.paginator)
        self.destination = settings.output_root

    async def build(self) -> BuildResult:
        """Render every page and write the site."""
        started = time.perf_counter()
        self._check_destination()

        with LogContext(logger, "loading content"):
            posts = self.store.published_posts()
            categories = self.store.categories()
        logger.info(f"{len(posts)} published posts in {len(categories)} categories")

        files: dict[Path, str] = {}

        with LogContext(logger, "rendering pages"):
            index_pages = self._render_listing(files, posts, base="/")
            category_pages = 0
            for category in categories:
                category_pages += self._render_listing(
                    files,
                    self.store.posts_in_category(category.name),
                    base=category.url,
                    title=category.display_name,
                )
            self._render_posts(files, posts)
            self._add(files, self.destination / "feed.xml", self.renderer.render_feed(posts))

        with LogContext(logger, f"writing {self.destination}"):
            self.destination.mkdir(parents=True, exist_ok=True)
            await asyncio.gather(*(self._write(path, content) for path, content in files.items()))

            search_index = SearchIndexWriter(self.destination, self.settings.excerpt_words)
            await search_index.write(posts)
            copied = self._copy_static()

        return BuildResult(
            destination=self.destination,
            posts=len(posts),
            index_pages=index_pages,
            categories=len(categories),
            category_pages=category_pages,
            files_written=len(files) + 1 + copied,
            elapsed_seconds=time.perf_counter() - started,
        )

    def _render_listing(
        self,
        files: dict[Path, str],
        posts: list[Post],
        *,
        base: str,
        title: str | None = None,
    ) -> int:
        """Render every page of a listing; an empty listing still gets its first page."""
        pages = self.paginator.paginate(posts, base=base) or [self.paginator.empty_page(base)]
        for page in pages:
            page_title = title
            if title and page.page_number > 1:
                page_title = f"{title} - Page {page.page_number}"
            html = self.renderer.render_listing(page, title=page_title, base=base)
            self._add(files, output_path_for(page.path, self.destination), html)
        return len(pages)

    def _render_posts(self, files: dict[Path, str], posts: list[Post]) -> None:
        # posts are newest first: the previous post is the next item
        for i, post in enumerate(posts):
            older = posts[i + 1] if i + 1 < len(posts) else None
            newer = posts[i - 1] if i > 0 else None
            html = self.renderer.render_post(post, previous=older, next=newer)
            self._add(files, output_path_for(post.url, self.destination), html)

    def _add(self, files: dict[Path, str], path: Path, content: str) -> None:
        if path in files:
            raise InkpageError(f"Two pages would be written to {path}")
        files[path] = content

    async def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)
        logger.debug(f"Wrote {path}")

    def _copy_static(self) -> int:
        """Copy theme assets, then the site's own static directory over them."""
        copied = 0
        sources = [DEFAULT_STATIC_DIR]
        if self.settings.static_dir:
            static_dir = self.settings.site_path(self.settings.static_dir)
            if not static_dir.is_dir():
                raise ConfigurationError(f"Static directory not found: {static_dir}")
            sources.append(static_dir)

        for source in sources:
            for path in source.rglob("*"):
                if path.is_file():
                    target = self.destination / "assets" / path.relative_to(source)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(path, target)
                    copied += 1
        return copied

    def _check_destination(self) -> None:
        source = self.settings.content_root
        destination = self.destination
        if destination == source or destination in source.parents:
            raise ConfigurationError(
                f"Destination {destination} would overwrite the source directory {source}"
            )

    def clean(self) -> bool:
        """Remove the destination directory. Returns False if it did not exist."""
        self._check_destination()
        if not self.destination.exists():
            return False
        shutil.rmtree(self.destination)
        logger.info(f"Removed {self.destination}")
        return True


def create_site_builder(settings: Settings) -> SiteBuilder:
    """Factory function to create a site builder."""
    return SiteBuilder(settings=settings)
