"""JSON search index writer for published posts."""

import json
from pathlib import Path
from typing import Any

import aiofiles

from inkpage.models.post import Post


class SearchIndexWriter:
    """Writer for the ``search.json`` index consumed by client-side search."""

    def __init__(self, output_dir: Path, excerpt_words: int = 50, filename: str = "search.json"):
        self.output_dir = output_dir
        self.excerpt_words = excerpt_words
        self.filename = filename

    @property
    def file_path(self) -> Path:
        return self.output_dir / self.filename

    async def write(self, posts: list[Post]) -> Path:
        """Write the index for the given posts, in listing order."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        data = self.build_index(posts)

        async with aiofiles.open(self.file_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2, ensure_ascii=False))

        return self.file_path

    def build_index(self, posts: list[Post]) -> list[dict[str, Any]]:
        """Build one entry per post."""
        return [
            {
                "title": post.title,
                "url": post.url,
                "date": post.date.isoformat(),
                "categories": list(post.categories),
                "tags": list(post.tags),
                "excerpt": post.excerpt_text(self.excerpt_words),
            }
            for post in posts
        ]
