"""Markdown post scaffolding with YAML front-matter."""

from datetime import datetime
from pathlib import Path

import aiofiles
import yaml

from inkpage.utils.text_utils import slugify


class PostWriter:
    """Writer for new Markdown posts in a posts directory."""

    def __init__(self, posts_dir: Path):
        self.posts_dir = posts_dir

    def file_path_for(self, title: str, date: datetime) -> Path:
        """``YYYY-MM-DD-slug.md`` inside the posts directory."""
        slug = slugify(title) or "untitled"
        return self.posts_dir / f"{date:%Y-%m-%d}-{slug}.md"

    async def write_post(
        self,
        title: str,
        *,
        categories: list[str] | None = None,
        tags: list[str] | None = None,
        description: str = "",
        date: datetime | None = None,
        published: bool = True,
        body: str = "",
    ) -> Path:
        """Write a new post file; an existing file is never overwritten."""
        date = date or datetime.now().replace(microsecond=0)
        file_path = self.file_path_for(title, date)
        if file_path.exists():
            raise FileExistsError(f"Post already exists: {file_path}")

        self.posts_dir.mkdir(parents=True, exist_ok=True)
        content = self.build_markdown(
            title,
            categories=categories or [],
            tags=tags or [],
            description=description,
            date=date,
            published=published,
            body=body,
        )

        async with aiofiles.open(file_path, "x", encoding="utf-8") as f:
            await f.write(content)

        return file_path

    def build_markdown(
        self,
        title: str,
        *,
        categories: list[str],
        tags: list[str],
        description: str,
        date: datetime,
        published: bool,
        body: str = "",
    ) -> str:
        """Build full Markdown content with front-matter."""
        data = {
            "layout": "post",
            "title": title,
            "date": date,
            "categories": categories,
            "tags": tags,
            "description": description,
        }
        if not published:
            data["published"] = False

        frontmatter = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        return f"---\n{frontmatter}---\n\n{body}"
