"""Exceptions raised while loading content and building the site."""

from pathlib import Path


class InkpageError(RuntimeError):
    """Base class for build errors reported to the user."""


class ConfigurationError(InkpageError):
    """Raised when site settings are missing or invalid."""


class ContentError(InkpageError):
    """Raised when a content file cannot be turned into a post."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class FrontMatterError(ContentError):
    """Raised when a front-matter block is not valid YAML or not a mapping."""


class PaginationError(InkpageError):
    """Raised when a page number falls outside the paginated range."""

    def __init__(self, page_number: int, total_pages: int) -> None:
        super().__init__(
            f"Page {page_number} is out of range (1-{total_pages})"
            if total_pages
            else f"Page {page_number} requested but there are no pages"
        )
        self.page_number = page_number
        self.total_pages = total_pages
