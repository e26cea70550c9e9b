"""HTML and feed rendering with Jinja2 templates."""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup

from inkpage.config import Settings
from inkpage.core.paginator import Paginator
from inkpage.errors import InkpageError
from inkpage.models.page import Page
from inkpage.models.post import Post
from inkpage.utils.text_utils import slugify, strip_html, truncate_words


THEME_DIR = Path(__file__).resolve().parent.parent
DEFAULT_TEMPLATES_DIR = THEME_DIR / "templates"
DEFAULT_STATIC_DIR = THEME_DIR / "static"

# Templates that expect listing context and cannot serve as a post layout
LISTING_TEMPLATES = {"base", "index", "feed"}


class Renderer:
    """Renders listing pages, post pages and the feed from templates."""

    def __init__(self, settings: Settings, paginator: Paginator | None = None):
        self.settings = settings
        self.paginator = paginator or Paginator(settings.paginate, settings.paginate_path)
        self.env = self._create_environment()

    def _create_environment(self) -> Environment:
        loaders = []
        if self.settings.templates_dir:
            templates_dir = self.settings.site_path(self.settings.templates_dir)
            loaders.append(FileSystemLoader(str(templates_dir)))
        loaders.append(FileSystemLoader(str(DEFAULT_TEMPLATES_DIR)))

        env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["strip_html"] = strip_html
        env.filters["truncatewords"] = truncate_words
        env.filters["date_format"] = self.format_date
        env.filters["slugify"] = slugify
        env.filters["absolute_url"] = self.absolute_url
        env.filters["rfc3339"] = self.format_rfc3339
        env.globals["site"] = {
            "title": self.settings.site_title,
            "description": self.settings.site_description,
            "url": self.settings.site_url,
            "author": self.settings.author,
        }
        return env

    def format_date(self, value: datetime, fmt: str | None = None) -> str:
        return value.strftime(fmt or self.settings.date_format)

    def format_rfc3339(self, value: datetime) -> str:
        """Timestamp with offset for feeds; naive dates are in the site timezone."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=self.settings.tzinfo)
        return value.isoformat()

    def absolute_url(self, path: str) -> str:
        """Prefix a site path with the configured site URL."""
        return f"{self.settings.site_url}{path}"

    def render_template(self, template_name: str | list[str], **context: Any) -> str:
        """
        Render a template, wrapping Jinja2 failures in InkpageError.

        A list of names renders the first template that exists.
        """
        try:
            template = self.env.select_template(
                [template_name] if isinstance(template_name, str) else template_name
            )
            return template.render(**context)
        except TemplateError as exc:
            raise InkpageError(f"Template error in {template_name}: {exc}") from exc

    def render_listing(self, page: Page, *, title: str | None = None, base: str = "/") -> str:
        """
        Render one page of a post listing.

        Each post gets a block with its title, date, categories (when it has
        any), a plain-text excerpt and a "Read more" link. The pagination
        control follows only when the listing spans more than one page.
        """
        links = []
        if page.show_pagination:
            links = self.paginator.links(page, base=base, window=self.settings.pagination_window)

        if title is None:
            title = "Home" if page.page_number == 1 else f"Page {page.page_number}"

        return self.render_template(
            "index.html",
            page=page,
            posts=page.posts,
            page_links=links,
            title=title,
            excerpt_words=self.settings.excerpt_words,
        )

    def render_post(
        self,
        post: Post,
        *,
        previous: Post | None = None,
        next: Post | None = None,
    ) -> str:
        """Render the page of a single post, with links to its neighbours."""
        templates = ["post.html"]
        if post.layout not in LISTING_TEMPLATES:
            templates.insert(0, f"{post.layout}.html")
        return self.render_template(
            templates,
            post=post,
            content=Markup(post.html),
            previous=previous,
            next=next,
            title=post.title,
        )

    def render_feed(self, posts: list[Post], *, updated: datetime | None = None) -> str:
        """Render the Atom feed for the newest posts."""
        posts = posts[: self.settings.feed_limit]
        if updated is None:
            updated = posts[0].date if posts else datetime.now(self.settings.tzinfo)
        return self.render_template(
            "feed.xml",
            posts=posts,
            updated=updated,
            excerpt_words=self.settings.excerpt_words,
        )


def create_renderer(settings: Settings, paginator: Paginator | None = None) -> Renderer:
    """Factory function to create a renderer."""
    return Renderer(settings=settings, paginator=paginator)


def output_path_for(url: str, destination: Path) -> Path:
    """File written for a URL: directories get an ``index.html``."""
    relative = url.lstrip("/")
    if not relative or relative.endswith("/"):
        relative += "index.html"
    return destination / relative
