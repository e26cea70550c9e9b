"""Post models for Markdown content with YAML front-matter."""

import re
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from inkpage.models.category import Category, category_slug
from inkpage.utils.text_utils import reading_time, strip_html, truncate_words


def _split_terms(value: Any, pattern: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [term for term in re.split(pattern, value) if term]
    if isinstance(value, (list, tuple)):
        return [str(term).strip() for term in value if str(term).strip()]
    return [str(value)]


def _unique(items: list[str]) -> list[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class FrontMatter(BaseModel):
    """Metadata block at the top of a content file."""

    model_config = ConfigDict(extra="allow")

    layout: str = Field(default="post", description="Template used for the post page")
    title: str | None = Field(default=None, description="Post title")
    date: datetime | None = Field(default=None, description="Publication date")
    categories: list[str] = Field(default_factory=list, description="Ordered categories")
    published: bool = Field(default=True, description="Unpublished posts are never listed")
    description: str = Field(default="", description="Summary used for meta tags")
    tags: list[str] = Field(default_factory=list, description="Post tags or keywords")

    @model_validator(mode="before")
    @classmethod
    def _merge_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # A single "category" key is listed before "categories"
        categories = _split_terms(data.pop("category", None), r"\s+")
        categories += _split_terms(data.get("categories"), r"\s+")
        data["categories"] = _unique(categories)

        # "keywords" is accepted as an alias of "tags"
        tags = _split_terms(data.get("tags"), r"[,\s]+")
        tags += _split_terms(data.pop("keywords", None), r"\s*,\s*")
        data["tags"] = _unique(tags)
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # YAML gives a date for "2020-01-02" and a datetime for full timestamps;
        # dates are compared as local wall-clock time
        if isinstance(value, datetime):
            return value.replace(tzinfo=None)
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        return value

    @field_validator("date")
    @classmethod
    def _drop_timezone(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    @field_validator("title", "description", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class Post(BaseModel):
    """A single article, immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    title: str
    date: datetime
    slug: str
    url: str
    categories: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    published: bool = True
    description: str = ""
    layout: str = "post"
    content: str = Field(default="", description="Raw Markdown body", repr=False)
    html: str = Field(default="", description="Rendered HTML body", repr=False)
    excerpt: str = Field(default="", description="Rendered HTML excerpt source", repr=False)
    source_path: Path | None = None

    @computed_field
    @property
    def category_slugs(self) -> list[str]:
        """Category URL segments, in order."""
        return [category_slug(c) for c in self.categories]

    @property
    def category_links(self) -> list[Category]:
        """Categories as listing targets for templates."""
        return [Category(name=c) for c in self.categories]

    @property
    def reading_minutes(self) -> int:
        return reading_time(self.content)

    def excerpt_text(self, words: int) -> str:
        """Plain-text excerpt truncated to a word count."""
        return truncate_words(strip_html(self.excerpt or self.html), words)
