"""Pagination models for post listings."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from inkpage.models.post import Post


class Page(BaseModel):
    """One page of a paginated post listing."""

    model_config = ConfigDict(frozen=True)

    page_number: int = Field(..., ge=1, description="1-based page number")
    posts: tuple[Post, ...] = Field(default=(), description="Posts on this page, in listing order")
    per_page: int = Field(..., gt=0, description="Configured page size")
    total_pages: int = Field(..., ge=0, description="Number of pages in the listing, 0 when empty")
    total_posts: int = Field(..., ge=0, description="Number of posts in the listing")
    path: str = Field(default="/", description="URL path of this page")
    previous_page_path: str | None = None
    next_page_path: str | None = None

    @computed_field
    @property
    def has_previous(self) -> bool:
        """Check if there's a previous page."""
        return self.page_number > 1

    @computed_field
    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page_number < self.total_pages

    @property
    def previous_page(self) -> int | None:
        """Get the previous page number."""
        return self.page_number - 1 if self.has_previous else None

    @property
    def next_page(self) -> int | None:
        """Get the next page number."""
        return self.page_number + 1 if self.has_next else None

    @property
    def show_pagination(self) -> bool:
        """Pagination controls are only rendered for multi-page listings."""
        return self.total_pages > 1

    @property
    def offset(self) -> int:
        """Index of the first post of this page in the full listing."""
        return (self.page_number - 1) * self.per_page


class PageLink(BaseModel):
    """An entry in the pagination control: a page number or a gap."""

    number: int | None = None
    url: str | None = None
    is_current: bool = False

    @property
    def is_gap(self) -> bool:
        """Gaps stand in for a run of omitted page numbers."""
        return self.number is None
