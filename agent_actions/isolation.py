"""
Two-phase content isolation.

A single left-to-right scan splits model output into regions. Whichever
starts first wins:

- a fenced code block (```...```), an inline code span (`...`) or a
  <literal>...</literal> block is removed and never parsed;
- the opening tag of a content-bearing action is kept intact, together with
  its payload, up to the first matching closer.

Because the scan is in document order, a code fence inside a <write> body
stays part of that body, while a <write> tag inside a code fence is only an
example. Unterminated fences, literals and content tags extend to the end of
the input.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

CODE = "code"
LITERAL = "literal"
CONTENT = "content"

FENCE_PATTERN = re.compile(r"```")
# Inline spans may wrap onto following lines but stop at a blank line
INLINE_CODE_PATTERN = re.compile(r"`(?:[^`\n]|\n(?![ \t]*\n))+`")
LITERAL_OPEN_PATTERN = re.compile(r"<literal\b[^>]*>", re.IGNORECASE)
LITERAL_CLOSE_PATTERN = re.compile(r"</literal\s*>", re.IGNORECASE)

# Quoted attribute values may contain ">" without ending the tag
_OPEN_TAG_REST = r"((?:\"[^\"]*\"|'[^']*'|[^\"'>])*)>"


@dataclass(frozen=True)
class Region:
    """A span of the scanned content."""

    kind: str  # code | literal | content
    start: int
    end: int
    text: str
    tag: Optional[str] = None  # Canonical tag for content regions
    block: Optional[int] = None  # Index into block_patterns for tagless blocks


@dataclass(frozen=True)
class IsolatedContent:
    spans: list[Region]  # Top-level content-bearing regions, document order
    structural: str  # Input with every region removed


def _tag_opener_pattern(tags: Iterable[str]) -> Optional[re.Pattern]:
    unique = sorted({t.lower() for t in tags if t}, key=len, reverse=True)
    if not unique:
        return None
    alternation = "|".join(re.escape(t) for t in unique)
    return re.compile(rf"<({alternation})(?=[\s/>]|\Z)", re.IGNORECASE)


def _end_of_content_tag(content: str, match: re.Match, greedy: bool = True) -> int:
    tag = match.group(1)
    rest = re.compile(_OPEN_TAG_REST).match(content, match.end())
    if rest is None:
        if greedy:
            # Opening tag never closed: everything after it is payload
            return len(content)
        line_end = content.find("\n", match.end())
        return len(content) if line_end == -1 else line_end
    if rest.group(1).rstrip().endswith("/"):
        return rest.end()

    closer = re.compile(rf"</{re.escape(tag)}\s*>", re.IGNORECASE).search(content, rest.end())
    if closer is None:
        return len(content) if greedy else rest.end()
    return closer.end()


def scan_regions(
    content: str,
    content_tags: Iterable[str] = (),
    block_patterns: Sequence[re.Pattern] = (),
    include_code: bool = True,
    greedy: bool = True,
) -> list[Region]:
    """
    Find code, literal and content-bearing regions in document order.

    Args:
        content: Alias-normalized, repaired model output
        content_tags: Canonical content-bearing tag names
        block_patterns: Tagless content-bearing block patterns
        include_code: Also detect code fences, inline code and literals
        greedy: An unterminated content tag runs to the end of the input;
            otherwise only the opening tag itself is matched

    Returns:
        Non-overlapping regions, sorted by start offset.
    """
    opener = _tag_opener_pattern(content_tags)
    regions = []
    pos = 0

    while pos < len(content):
        # (start, priority, kind, match) - lower priority wins a tie
        candidates = []
        if include_code:
            fence = FENCE_PATTERN.search(content, pos)
            if fence:
                candidates.append((fence.start(), 0, CODE, fence))
            inline = INLINE_CODE_PATTERN.search(content, pos)
            if inline:
                candidates.append((inline.start(), 1, "inline", inline))
            literal = LITERAL_OPEN_PATTERN.search(content, pos)
            if literal:
                candidates.append((literal.start(), 2, LITERAL, literal))
        if opener is not None:
            tag_match = opener.search(content, pos)
            if tag_match:
                candidates.append((tag_match.start(), 3, CONTENT, tag_match))
        for index, pattern in enumerate(block_patterns):
            block = pattern.search(content, pos)
            if block and block.end() > block.start():
                candidates.append((block.start(), 4 + index, "block", block))

        if not candidates:
            break

        start, priority, kind, match = min(candidates, key=lambda c: (c[0], c[1]))

        if kind == CODE:
            closing = FENCE_PATTERN.search(content, match.end())
            end = closing.end() if closing else len(content)
            regions.append(Region(CODE, start, end, content[start:end]))
        elif kind == "inline":
            end = match.end()
            regions.append(Region(CODE, start, end, content[start:end]))
        elif kind == LITERAL:
            closing = LITERAL_CLOSE_PATTERN.search(content, match.end())
            end = closing.end() if closing else len(content)
            regions.append(Region(LITERAL, start, end, content[start:end]))
        elif kind == CONTENT:
            end = _end_of_content_tag(content, match, greedy)
            regions.append(Region(CONTENT, start, end, content[start:end], tag=match.group(1).lower()))
        else:
            end = match.end()
            regions.append(Region(CONTENT, start, end, content[start:end], block=priority - 4))

        pos = max(end, start + 1)

    return regions


def remove_regions(content: str, regions: Sequence[Region]) -> str:
    """
    Cut the given regions out of ``content``.

    Each region is replaced by a single space so text on either side can
    never fuse into a new tag.
    """
    if not regions:
        return content
    parts = []
    pos = 0
    for region in sorted(regions, key=lambda r: r.start):
        parts.append(content[pos : region.start])
        parts.append(" ")
        pos = region.end
    parts.append(content[pos:])
    return "".join(parts)


def strip_code_blocks(content: str) -> str:
    """Remove fenced code, inline code and <literal> blocks."""
    regions = scan_regions(content)
    return remove_regions(content, regions)


def strip_content_tags(content: str, tags: Iterable[str], greedy: bool = False) -> str:
    """
    Remove paired spans and self-closing forms of ``tags``.

    An opener without a closer only loses the opening tag unless ``greedy``.
    """
    tags = list(tags)
    if not tags:
        return content
    regions = scan_regions(content, tags, include_code=False, greedy=greedy)
    return remove_regions(content, regions)


def isolate_content(
    content: str,
    content_tags: Iterable[str],
    block_patterns: Sequence[re.Pattern] = (),
) -> IsolatedContent:
    """
    Split content into top-level content-bearing spans and structural text.

    Args:
        content: Alias-normalized, repaired model output
        content_tags: Canonical content-bearing tag names
        block_patterns: Tagless content-bearing block patterns

    Returns:
        IsolatedContent with the spans for phase 1 and the remaining text
        for phase 2.
    """
    regions = scan_regions(content, content_tags, block_patterns)
    spans = [r for r in regions if r.kind == CONTENT]
    return IsolatedContent(spans=spans, structural=remove_regions(content, regions))
