"""Pagination of ordered post listings."""

from __future__ import annotations

from collections.abc import Sequence

from inkpage.errors import ConfigurationError, PaginationError
from inkpage.models.page import Page, PageLink
from inkpage.models.post import Post


def total_pages(count: int, per_page: int) -> int:
    """Number of pages needed for ``count`` posts; 0 when there are none."""
    if per_page <= 0:
        raise ConfigurationError(f"Page size must be a positive integer, got {per_page}")
    return (count + per_page - 1) // per_page  # integer ceiling


def paginate(posts: Sequence[Post], per_page: int) -> list[Page]:
    """Split an ordered post sequence into pages of at most ``per_page`` posts."""
    return Paginator(per_page).paginate(posts)


def page_links(current: int, total: int, window: int = 1) -> list[int | None]:
    """
    Page numbers shown in the pagination control.

    The first and last pages are always present, along with ``window``
    pages on each side of ``current``. None marks a gap standing in for a
    run of omitted pages; a gap that would hide a single page shows that
    page instead.
    """
    if total <= 1:
        return []

    start = max(current - window, 2)
    end = min(current + window, total - 1)

    # Close one-page gaps at either edge
    if start == 3:
        start = 2
    if end == total - 2:
        end = total - 1

    links: list[int | None] = [1]
    if start > 2:
        links.append(None)
    links.extend(range(start, end + 1))
    if end < total - 1:
        links.append(None)
    links.append(total)
    return links


class Paginator:
    """Builds the pages of a listing rooted at a base URL."""

    def __init__(self, per_page: int, path_pattern: str = "/page:num/"):
        if per_page <= 0:
            raise ConfigurationError(f"Page size must be a positive integer, got {per_page}")
        if ":num" not in path_pattern:
            raise ConfigurationError(f"Pagination path must contain ':num', got {path_pattern!r}")
        self.per_page = per_page
        self.path_pattern = path_pattern

    def page_path(self, number: int, base: str = "/") -> str:
        """URL path of page ``number``; page 1 is the listing's base URL."""
        base = "/" + base.strip("/") + "/" if base.strip("/") else "/"
        if number <= 1:
            return base
        suffix = self.path_pattern.replace(":num", str(number)).lstrip("/")
        return base + suffix

    def total_pages(self, count: int) -> int:
        return total_pages(count, self.per_page)

    def paginate(self, posts: Sequence[Post], base: str = "/") -> list[Page]:
        """Every page of the listing, in order. No posts means no pages."""
        count = len(posts)
        pages_total = self.total_pages(count)
        return [
            self._build_page(posts, number, pages_total, base)
            for number in range(1, pages_total + 1)
        ]

    def page(self, posts: Sequence[Post], number: int, base: str = "/") -> Page:
        """A single page of the listing; raises PaginationError when out of range."""
        pages_total = self.total_pages(len(posts))
        if not 1 <= number <= pages_total:
            raise PaginationError(number, pages_total)
        return self._build_page(posts, number, pages_total, base)

    def empty_page(self, base: str = "/") -> Page:
        """Stand-in page for rendering a listing that has no posts."""
        return Page(
            page_number=1,
            per_page=self.per_page,
            total_pages=0,
            total_posts=0,
            path=self.page_path(1, base),
        )

    def links(self, page: Page, base: str = "/", window: int = 1) -> list[PageLink]:
        """Pagination control entries for a page of this listing."""
        return [
            PageLink()
            if number is None
            else PageLink(
                number=number,
                url=self.page_path(number, base),
                is_current=number == page.page_number,
            )
            for number in page_links(page.page_number, page.total_pages, window)
        ]

    def _build_page(self, posts: Sequence[Post], number: int, pages_total: int, base: str) -> Page:
        start = (number - 1) * self.per_page
        end = min(number * self.per_page, len(posts))
        return Page(
            page_number=number,
            posts=tuple(posts[start:end]),
            per_page=self.per_page,
            total_pages=pages_total,
            total_posts=len(posts),
            path=self.page_path(number, base),
            previous_page_path=self.page_path(number - 1, base) if number > 1 else None,
            next_page_path=self.page_path(number + 1, base) if number < pages_total else None,
        )
