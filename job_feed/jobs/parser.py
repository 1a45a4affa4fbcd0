"""Markdown listing-table parser.

Listing sources publish tables shaped like::

    | Company | Role | Location | Application/Link |
    | ------- | ---- | -------- | ---------------- |
    | Acme Labs | Software Engineer Intern | Remote | [Apply](https://acme.example/apply) |

A table starts at a row containing the "Company" header and ends at the
first blank line or heading. Rows with fewer than four non-empty cells or
without an apply link are skipped; nothing in here raises on bad input.
"""

import logging
from collections.abc import Iterator

from job_feed.jobs.models import RawListing
from job_feed.utils.text_processing import clean_cell, extract_url, is_separator_row, split_row

logger = logging.getLogger("job_feed.jobs.parser")

HEADER_MARKER = "Company"
MIN_COLUMNS = 4


def _is_header(line: str) -> bool:
    return "|" in line and HEADER_MARKER in line


def _is_repeated_header(line: str) -> bool:
    cells = split_row(line)
    return bool(cells) and clean_cell(cells[0]) == HEADER_MARKER


def _ends_table(line: str) -> bool:
    return not line or line.startswith("#") or "|" not in line


def parse_row(line: str) -> RawListing | None:
    """Parse one table row, or return None if it cannot yield a full listing."""
    cells = split_row(line)
    if len(cells) < MIN_COLUMNS:
        return None

    company = clean_cell(cells[0])
    title = clean_cell(cells[1])
    location = clean_cell(cells[2])
    apply_url = extract_url(cells[3])

    if not company or not title or not apply_url:
        return None

    return RawListing(company=company, title=title, location=location, apply_url=apply_url)


def parse_listings(text: str) -> Iterator[RawListing]:
    """Lazily yield listings from every table found in `text`."""
    in_table = False

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if not in_table:
            if _is_header(line):
                in_table = True
            continue

        if is_separator_row(line) or _is_repeated_header(line):
            continue

        if _ends_table(line):
            in_table = False
            continue

        listing = parse_row(line)
        if listing is None:
            logger.debug("Skipping unparseable row: %s", line[:120])
            continue
        yield listing
