"""Pydantic data models."""

from inkpage.models.post import FrontMatter, Post
from inkpage.models.page import Page, PageLink
from inkpage.models.category import Category

__all__ = [
    "Category",
    "FrontMatter",
    "Post",
    "Page",
    "PageLink",
]
