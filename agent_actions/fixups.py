"""
Fixup engine.

Repairs common model formatting mistakes before structural parsing. Every
repair is a named pure function so each rule can be tested on its own.
Repairs are conservative: they only fire when the malformed shape is
unambiguous, because over-eager repair can rewrite legitimate content that
merely looks like a broken tag.
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Sequence, Union

if TYPE_CHECKING:
    from .registry import ParserConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fixup:
    """A declarative rewrite: every match of ``pattern`` becomes ``replacement``."""

    pattern: re.Pattern
    replacement: str

    @classmethod
    def of(cls, pattern: str, replacement: str, flags: int = re.IGNORECASE) -> "Fixup":
        return cls(re.compile(pattern, flags), replacement)

    def apply(self, content: str) -> str:
        return self.pattern.sub(self.replacement, content)


FixupSpec = Union[Callable[[str], str], Sequence[Fixup]]


def _alternation(names: Iterable[str]) -> str:
    # Longest first so "edit" does not shadow "edit-file" inside the group
    unique = sorted({n.strip().lower() for n in names if n and n.strip()}, key=len, reverse=True)
    return "|".join(re.escape(n) for n in unique)


def repair_stray_quotes(content: str, names: Iterable[str]) -> str:
    """
    Drop stray quotes/whitespace after attribute-less tag names.

    ``<search">`` becomes ``<search>`` and ``</replace' >`` becomes
    ``</replace>``. Only use for tags that never carry attributes.
    """
    alternation = _alternation(names)
    if not alternation:
        return content
    pattern = re.compile(rf"<(/?)({alternation})[\"'\s]*>", re.IGNORECASE)
    return pattern.sub(lambda m: f"<{m.group(1)}{m.group(2).lower()}>", content)


def repair_truncated_closing_tags(content: str, tags: Iterable[str]) -> str:
    """
    Terminate closing tags that lost their ``>``.

    ``</edit`` at end of input, or followed by whitespace, becomes ``</edit>``.
    """
    alternation = _alternation(tags)
    if not alternation:
        return content
    pattern = re.compile(rf"</({alternation})(?!\s*>)(?=\s|\Z)", re.IGNORECASE)
    return pattern.sub(r"</\1>", content)


def _quotes_balanced(text: str) -> bool:
    return text.count('"') % 2 == 0 and text.count("'") % 2 == 0


def repair_unterminated_self_closing(content: str, tags: Iterable[str]) -> str:
    """
    Close self-closing tags that end their line without ``/>``.

    ``<read path="a.py"`` at the end of a line becomes ``<read path="a.py"/>``
    and a dangling ``<read path="a.py"/`` gets its ``>``. The tag must carry
    at least one attribute with balanced quotes, and the next line must not
    continue the attribute list.
    """
    alternation = _alternation(tags)
    if not alternation:
        return content

    pattern = re.compile(
        rf"<({alternation})(\s+[^<>\n]*?)[ \t]*"
        r"(?=\n(?![ \t]*(?:[\w:-]+\s*=|/?>))|\Z)",
        re.IGNORECASE,
    )

    def _close(match: re.Match) -> str:
        attrs = match.group(2)
        if "=" not in attrs or not _quotes_balanced(attrs):
            return match.group(0)
        stripped = attrs.rstrip()
        if stripped.endswith("/"):
            return f"<{match.group(1)}{stripped}>"
        return f"<{match.group(1)}{stripped}/>"

    return pattern.sub(_close, content)


def run_fixups(content: str, fixups: FixupSpec) -> str:
    """Apply one config's fixups, callable or declarative."""
    if callable(fixups):
        return fixups(content)
    for fixup in fixups:
        content = fixup.apply(content)
    return content


def apply_fixups(
    content: str,
    configs: Sequence["ParserConfig"],
    paired_tags: Iterable[str] = (),
    self_closing_tags: Iterable[str] = (),
) -> str:
    """
    Run the core repairs, then each config's fixups in registration order.

    Args:
        content: Alias-normalized model output
        configs: Registered parser configs
        paired_tags: Tags that may appear with a closing tag
        self_closing_tags: Tags that may appear in ``<tag .../>`` form

    Returns:
        The repaired content.
    """
    fixed = repair_truncated_closing_tags(content, paired_tags)
    fixed = repair_unterminated_self_closing(fixed, self_closing_tags)

    for config in configs:
        if config.fixups:
            fixed = run_fixups(fixed, config.fixups)

    if fixed != content:
        logger.debug("Applied fixups to malformed action markup")
    return fixed
