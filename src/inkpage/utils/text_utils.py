"""Text utilities for post content processing."""

import re
import unicodedata

import mistune
from bs4 import BeautifulSoup


def slugify(text: str, max_length: int = 100, allow_unicode: bool = False) -> str:
    """
    Convert text to URL-friendly slug.

    Args:
        text: Text to convert
        max_length: Maximum slug length
        allow_unicode: Keep non-ASCII word characters instead of dropping them

    Returns:
        URL-friendly slug
    """
    # Normalize unicode characters
    if allow_unicode:
        text = unicodedata.normalize("NFKC", text)
    else:
        text = unicodedata.normalize("NFKD", text)
        text = text.encode("ascii", "ignore").decode("ascii")

    text = text.lower()

    # Replace spaces and special chars with hyphens
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    text = re.sub(r'-+', '-', text)

    text = text.strip('-')

    # Truncate to max length at word boundary
    if len(text) > max_length:
        text = text[:max_length].rsplit('-', 1)[0]

    return text


def titleize(slug: str) -> str:
    """Turn a slug such as ``my-first-post`` into ``My First Post``."""
    words = re.split(r'[-_\s]+', slug.strip("-_ "))
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def strip_html(text: str) -> str:
    """Remove markup, leaving whitespace-normalized plain text."""
    if not text:
        return ""
    plain = BeautifulSoup(text, "html.parser").get_text(" ")
    return " ".join(plain.split())


def truncate_words(text: str, max_words: int, suffix: str = "...") -> str:
    """
    Truncate text to a number of words.

    Args:
        text: Text to truncate
        max_words: Maximum number of words kept
        suffix: Suffix to add when truncated

    Returns:
        Truncated text
    """
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + suffix


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to max length, preserving words."""
    if len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)

    # Find last space before truncate point
    last_space = text.rfind(' ', 0, truncate_at)
    if last_space > 0:
        return text[:last_space] + suffix

    return text[:truncate_at] + suffix


def count_words(text: str) -> int:
    """Count words in Markdown text, ignoring code blocks and link targets."""
    clean = re.sub(r'```[\s\S]*?```', '', text)
    clean = re.sub(r'!\[.*?\]\(.*?\)', '', clean)
    clean = re.sub(r'\[([^\]]*)\]\(.*?\)', r'\1', clean)
    clean = re.sub(r'[#*_`\[\]()>]', '', clean)
    return len(clean.split())


def reading_time(text: str, words_per_minute: int = 200) -> int:
    """Estimated reading time in minutes, at least one."""
    return max(1, round(count_words(text) / words_per_minute))


def extract_first_paragraph(markdown: str) -> str:
    """Extract first non-heading paragraph from markdown."""
    lines = markdown.split('\n')

    paragraph_lines = []
    in_paragraph = False
    in_code = False

    for line in lines:
        stripped = line.strip()

        if stripped.startswith("```"):
            if in_paragraph:
                break
            in_code = not in_code
            continue
        if in_code:
            continue

        # Skip headings and empty lines before paragraph
        if not stripped or stripped.startswith('#'):
            if in_paragraph:
                break
            continue

        in_paragraph = True
        paragraph_lines.append(stripped)

    return '\n'.join(paragraph_lines)


class PostRenderer(mistune.HTMLRenderer):
    """Mistune renderer with heading anchors.

    Raw HTML blocks pass through; inline tags are escaped so prose such as
    ``List<String>`` stays visible.
    """

    def __init__(self):
        super().__init__(escape=False)

    def heading(self, text, level, **attrs):
        anchor = attrs.get("id") or slugify(strip_html(text))
        id_attr = f' id="{anchor}"' if anchor else ""
        return f"<h{level}{id_attr}>{text}</h{level}>\n"

    def inline_html(self, html):
        return mistune.escape(html)


_markdown = mistune.create_markdown(
    renderer=PostRenderer(),
    plugins=["table", "strikethrough", "task_lists"],
)


def markdown_to_html(markdown_text: str) -> str:
    """Convert Markdown content to HTML."""
    return _markdown(markdown_text).strip()
