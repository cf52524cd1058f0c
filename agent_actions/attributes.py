"""
Attribute extraction for action tags.

Model output is not guaranteed to be well-formed XML, so attributes are pulled
out of a raw tag string with tolerant regexes: any order, double or single
quotes, or bare unquoted tokens.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

TRUE_VALUES = ("true", "1", "yes")

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),  # last, so "&amp;lt;" decodes to "&lt;" and not "<"
)


def extract_attr(tag: str, name: str) -> Optional[str]:
    """
    Extract an attribute value from a raw tag string.

    Args:
        tag: The raw tag text, e.g. '<read path="a.py" limit=10/>'
        name: Attribute name (case-insensitive)

    Returns:
        The attribute value, or None if the attribute is absent.
    """
    name = name.strip()
    if not name:
        return None

    pattern = re.compile(
        rf"\b{re.escape(name)}\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'>]+?)(?=\s|/?>|$))",
        re.IGNORECASE,
    )
    match = pattern.search(tag)
    if not match:
        return None
    for value in match.groups():
        if value is not None:
            return value
    return None


def extract_bool_attr(tag: str, name: str) -> bool:
    """True iff the attribute is present and reads as true/1/yes."""
    value = extract_attr(tag, name)
    if value is None:
        return False
    return value.strip().lower() in TRUE_VALUES


def extract_int_attr(tag: str, name: str) -> Optional[int]:
    """Parse a leading integer from the attribute value ("10", "10ms")."""
    value = extract_attr(tag, name)
    if value is None:
        return None
    match = re.match(r"\s*(-?\d+)", value)
    return int(match.group(1)) if match else None


def extract_list_attr(tag: str, name: str) -> Optional[tuple[str, ...]]:
    """Split a comma-separated attribute into a tuple of trimmed items."""
    value = extract_attr(tag, name)
    if not value:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


def first_attr(tag: str, *names: str) -> Optional[str]:
    """Return the first non-empty value among several attribute spellings."""
    for name in names:
        value = extract_attr(tag, name)
        if value:
            return value
    return None


_TAG_ATTRS = r"((?:\"[^\"]*\"|'[^']*'|[^\"'>])*)>"


def is_self_closing(tag: str) -> bool:
    """True for a raw tag written as ``<tag ... />``."""
    return tag.rstrip()[:-1].rstrip().endswith("/")


def find_tags(content: str, name: str) -> list[str]:
    """
    Return every raw opening or self-closing ``<name ...>`` tag in ``content``.

    Quoted attribute values may contain ``>``.
    """
    pattern = re.compile(rf"<{re.escape(name)}(?=[\s/>]){_TAG_ATTRS}", re.IGNORECASE)
    return [m.group(0) for m in pattern.finditer(content)]


def find_blocks(content: str, name: str) -> list[tuple[str, str]]:
    """
    Return ``(opening_tag, body)`` for every paired ``<name>...</name>`` block.

    Self-closing forms and openers without a closer are skipped.
    """
    opener = re.compile(rf"<{re.escape(name)}(?=[\s/>]){_TAG_ATTRS}", re.IGNORECASE)
    closer = re.compile(rf"</{re.escape(name)}\s*>", re.IGNORECASE)

    blocks = []
    pos = 0
    while True:
        match = opener.search(content, pos)
        if match is None:
            break
        if is_self_closing(match.group(0)):
            pos = match.end()
            continue
        end = closer.search(content, match.end())
        if end is None:
            break
        blocks.append((match.group(0), content[match.end() : end.start()]))
        pos = end.end()
    return blocks


def decode_entities(text: str) -> str:
    """Decode the basic HTML entities models use inside tag bodies."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


@dataclass(frozen=True)
class ParserUtils:
    """
    Stateless helpers handed to every sub-parser.

    ``detect_corruption`` is bound to the active settings' thresholds and
    returns a rejection reason, or None for clean content.
    """

    extract_attr: Callable[[str, str], Optional[str]] = extract_attr
    extract_bool_attr: Callable[[str, str], bool] = extract_bool_attr
    extract_int_attr: Callable[[str, str], Optional[int]] = extract_int_attr
    extract_list_attr: Callable[[str, str], Optional[tuple]] = extract_list_attr
    first_attr: Callable[..., Optional[str]] = first_attr
    find_tags: Callable[[str, str], list[str]] = find_tags
    find_blocks: Callable[[str, str], list[tuple[str, str]]] = find_blocks
    is_self_closing: Callable[[str], bool] = is_self_closing
    decode_entities: Callable[[str], str] = decode_entities
    detect_corruption: Callable[..., Optional[str]] = lambda content, path=None: None
