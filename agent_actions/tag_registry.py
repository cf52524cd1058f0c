"""
Tag registry and alias normalization.

Models spell multi-word tags inconsistently (``read_file`` vs ``read-file``,
``<Read>`` vs ``<read>``). Every registered spelling, plus its hyphen/underscore
variants, maps to one canonical tag per action family. Normalizing once, up
front, lets each sub-parser match a single spelling.
"""

import logging
import re
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# <tag or </tag followed by whitespace, "/", ">" or end of input
TAG_TOKEN_PATTERN = re.compile(r"<(/?)([a-z][a-z0-9_-]*)(?=[\s/>]|$)", re.IGNORECASE)


def build_tag_variants(tag: str) -> list[str]:
    """Return the lowercased tag plus its hyphen/underscore spellings."""
    normalized = tag.strip().lower()
    if not normalized:
        return []

    variants = [normalized]
    if "-" in normalized:
        variants.append(normalized.replace("-", "_"))
    if "_" in normalized:
        variants.append(normalized.replace("_", "-"))
    return variants


class TagRegistry:
    """
    Maps every known tag spelling to its canonical tag.

    Entries are kept in registration order; the lookup map is rebuilt lazily
    on the first lookup after a change. The first registrant of a variant
    wins. Lookups are case-insensitive.
    """

    def __init__(self):
        self._entries: list[tuple[str, list[str]]] = []
        self._canonical_map: Optional[dict[str, str]] = None

    def register_tags(self, tags: Iterable[str], canonical: Optional[str] = None) -> None:
        """
        Register a family of tag spellings.

        Args:
            tags: Spellings belonging to one action family
            canonical: Spelling every variant normalizes to (defaults to the
                first tag)
        """
        tags = [t for t in tags if t and t.strip()]
        if not tags:
            return
        canonical = (canonical or tags[0]).strip().lower()
        self._entries.append((canonical, tags))
        self._canonical_map = None

    def unregister_tags(self, tags: Iterable[str]) -> None:
        """Remove the given spellings from every registered family."""
        removed = {t.strip().lower() for t in tags}
        if not removed:
            return

        entries = []
        for canonical, family in self._entries:
            remaining = [t for t in family if t.strip().lower() not in removed]
            if remaining:
                entries.append((canonical, remaining))
        self._entries = entries
        self._canonical_map = None

    def clear(self) -> None:
        self._entries = []
        self._canonical_map = None

    def _get_canonical_map(self) -> dict[str, str]:
        if self._canonical_map is None:
            canonical_map: dict[str, str] = {}
            for canonical, family in self._entries:
                for tag in family:
                    for variant in build_tag_variants(tag):
                        canonical_map.setdefault(variant, canonical)

            # A family whose canonical spelling an earlier family claimed
            # resolves to that family's canonical
            for variant, canonical in canonical_map.items():
                seen = {variant}
                while canonical_map.get(canonical, canonical) != canonical and canonical not in seen:
                    seen.add(canonical)
                    canonical = canonical_map[canonical]
                canonical_map[variant] = canonical
            self._canonical_map = canonical_map
            logger.debug(f"Built tag map with {len(canonical_map)} spellings")
        return self._canonical_map

    def canonical(self, tag_name: str) -> Optional[str]:
        """Return the canonical spelling for a tag name, or None if unknown."""
        return self._get_canonical_map().get(tag_name.strip().lower())

    def is_known(self, tag_name: str) -> bool:
        return self.canonical(tag_name) is not None

    def known_tags(self) -> list[str]:
        """All canonical tags, in registration order."""
        seen = []
        for canonical, _family in self._entries:
            if canonical not in seen:
                seen.append(canonical)
        return seen

    def normalize(self, content: str) -> str:
        """
        Rewrite every recognized tag spelling to its canonical form.

        Unrecognized tag-like tokens are left untouched. Idempotent.
        """
        canonical_map = self._get_canonical_map()
        if not canonical_map:
            return content

        def _replace(match: re.Match) -> str:
            canonical = canonical_map.get(match.group(2).lower())
            if canonical is None:
                return match.group(0)
            return f"<{match.group(1)}{canonical}"

        return TAG_TOKEN_PATTERN.sub(_replace, content)
