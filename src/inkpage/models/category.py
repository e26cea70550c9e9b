"""Category model for grouping posts."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from inkpage.utils.text_utils import slugify


def category_slug(name: str) -> str:
    """
    URL segment for a category name.

    Names differing only in case share a slug. Names with no ASCII
    letters keep their own characters (``并发``), and a name with no word
    characters at all falls back to ``category``.
    """
    return slugify(name) or slugify(name, allow_unicode=True) or "category"


class Category(BaseModel):
    """Represents a blog category and its listing page."""

    name: str = Field(..., description="Category as written in front-matter (e.g., java)")
    display_name: str | None = Field(
        default=None, description="Human-friendly category name"
    )
    slug: str = Field(default="", description="URL segment for the category listing")
    post_count: int = Field(default=0, description="Number of published posts in this category")

    @model_validator(mode="after")
    def _derive_defaults(self) -> "Category":
        if not self.slug:
            self.slug = category_slug(self.name)
        if not self.display_name:
            normalized = self.name.replace("_", "-").replace("-", " ").strip()
            self.display_name = " ".join(w[:1].upper() + w[1:] for w in normalized.split())
        return self

    @property
    def url(self) -> str:
        """URL path of the first listing page for this category."""
        return f"/{self.slug}/"
