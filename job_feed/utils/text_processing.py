"""Markdown/HTML cell cleanup and link extraction."""

import re

from bs4 import BeautifulSoup

MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
SEPARATOR_ROW = re.compile(r"^\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?$")
EMPHASIS = re.compile(r"(\*\*|__|~~)")


def is_separator_row(line: str) -> bool:
    """True for a markdown table rule such as `|---|:---:|`."""
    return bool(SEPARATOR_ROW.match(line.strip()))


def split_row(line: str) -> list[str]:
    """Split a table row on the column delimiter, dropping empty cells."""
    return [part.strip() for part in line.split("|") if part.strip()]


def _strip_html(text: str) -> str:
    if "<" not in text and "&" not in text:
        return text
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def clean_cell(text: str) -> str:
    """Reduce a cell to its display text: link labels kept, markup removed."""
    text = MARKDOWN_LINK.sub(lambda m: m.group(1), text)
    text = _strip_html(text)
    text = EMPHASIS.sub("", text)
    return " ".join(text.split())


def extract_url(text: str) -> str:
    """Pull the target out of a markdown or HTML link; otherwise return the text itself."""
    match = MARKDOWN_LINK.search(text)
    if match:
        return match.group(2).strip()

    if "<a" in text.lower():
        anchor = BeautifulSoup(text, "html.parser").find("a", href=True)
        if anchor:
            return anchor["href"].strip()

    return text.strip()


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated slug used for asset paths."""
    return re.sub(r"\s+", "-", text.strip().lower())
