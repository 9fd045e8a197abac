"""Metadata parsing for org-style note files."""

import re
from datetime import date as _date
from datetime import datetime

import frontmatter
import yaml

from ..models import ParsedNote

# Keywords are case-insensitive, as in org-mode ("#+title:" works too).
# Match "#+TITLE: value", "#+FILETAGS: :a:b:", "#+DATE: [2024-01-31 Wed 09:15]"
TITLE_PATTERN = re.compile(r"^#\+TITLE:[ \t]*(.*?)[ \t]*$", re.MULTILINE | re.IGNORECASE)
FILETAGS_PATTERN = re.compile(r"^#\+FILETAGS:[ \t]*(.*?)[ \t]*$", re.MULTILINE | re.IGNORECASE)
DATE_PATTERN = re.compile(r"^#\+DATE:.*?[\[<]([^\]>\n]*)[\]>]", re.MULTILINE | re.IGNORECASE)

# Inside the brackets: YYYY-MM-DD, optional weekday, optional HH:MM
TIMESTAMP_PATTERN = re.compile(
    r"^\s*(\d{4})-(\d{2})-(\d{2})"
    r"(?:\s+[^\d\s]+)?"
    r"(?:\s+(\d{1,2}):(\d{2}))?\s*$"
)

# Blank lines and "#+UPPER_WORD: ..." header lines
NOISE_LINE_PATTERN = re.compile(r"^(?:#\+[A-Z_]+:.*|[ \t]*)$", re.MULTILINE)


def extract_title(content: str) -> str | None:
    """Return the first #+TITLE value, or None if missing or blank."""
    match = TITLE_PATTERN.search(content)
    if not match:
        return None
    return match.group(1).strip() or None


def split_tags(raw: str, separators: str = ":") -> tuple[str, ...]:
    """Split a tag string, dropping empty segments and duplicates in order."""
    parts = re.split(f"[{re.escape(separators)}]", raw)
    seen = set()
    result = []
    for part in parts:
        tag = part.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return tuple(result)


def extract_tags(content: str) -> tuple[str, ...]:
    """Return tags from the first #+FILETAGS line.

    `#+FILETAGS: :work:urgent:` yields ("work", "urgent").
    """
    match = FILETAGS_PATTERN.search(content)
    if not match:
        return ()
    return split_tags(match.group(1))


def parse_timestamp(text: str) -> float | None:
    """Parse the inside of an org timestamp into local epoch seconds.

    Accepts `YYYY-MM-DD`, optionally followed by a weekday name and `HH:MM`.
    Returns None for anything malformed, including impossible dates.
    """
    match = TIMESTAMP_PATTERN.match(text)
    if not match:
        return None
    year, month, day, hour, minute = match.groups()
    try:
        value = datetime(
            int(year),
            int(month),
            int(day),
            int(hour) if hour else 0,
            int(minute) if minute else 0,
        )
        return value.timestamp()
    except (ValueError, OverflowError, OSError):
        return None


def extract_date(content: str) -> float | None:
    """Return the authored timestamp from the first bracketed #+DATE line."""
    match = DATE_PATTERN.search(content)
    if not match:
        return None
    return parse_timestamp(match.group(1))


def make_summary(content: str) -> str:
    """Strip blank and metadata lines, then leading whitespace."""
    return NOISE_LINE_PATTERN.sub(" ", content).lstrip()


def _coerce_front_matter_date(value) -> float | None:
    if isinstance(value, _date):
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        try:
            return value.timestamp()
        except (OverflowError, OSError):
            return None
    if isinstance(value, str):
        return parse_timestamp(value.strip().strip("[]<>"))
    return None


def _coerce_front_matter_tags(value) -> tuple[str, ...]:
    if isinstance(value, str):
        return split_tags(value, separators=":,")
    if isinstance(value, (list, tuple)):
        return split_tags(":".join(str(v) for v in value if v is not None))
    return ()


def read_front_matter(content: str) -> tuple[dict, str]:
    """Split a leading YAML front-matter block from the body.

    Returns ({}, content) when there is no block or it does not parse.
    """
    if not content.startswith("---"):
        return {}, content
    try:
        post = frontmatter.loads(content)
    except (yaml.YAMLError, ValueError, TypeError):
        return {}, content
    if not post.metadata:
        return {}, content
    return dict(post.metadata), post.content


def parse(content: str) -> ParsedNote:
    """Extract title, tags, authored date and summary from raw note content.

    Org metadata lines take precedence; YAML front matter (markdown notes)
    fills in whatever they leave unset. Malformed fields degrade to their
    absent default and never abort the rest of the parse.
    """
    metadata, body = read_front_matter(content)

    title = extract_title(content)
    tags = extract_tags(content)
    authored = extract_date(content)

    if metadata:
        if title is None and metadata.get("title") is not None:
            title = str(metadata["title"]).strip() or None
        if not tags:
            tags = _coerce_front_matter_tags(metadata.get("tags"))
        if authored is None:
            authored = _coerce_front_matter_date(metadata.get("date"))

    return ParsedNote(
        title=title,
        tags=tags,
        date=authored,
        summary=make_summary(body),
    )
