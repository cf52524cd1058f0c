"""
Action Parser Registry.

Manages registration of per-action sub-parsers (ParserConfig) and the tag
registry they feed. Registration is expected to happen once at startup;
concurrent registration while a parse is running is not supported.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .attributes import ParserUtils
from .base import Action
from .fixups import FixupSpec
from .tag_registry import TagRegistry, build_tag_variants

logger = logging.getLogger(__name__)

ParseFn = Callable[[str, ParserUtils], list[Action]]


@dataclass
class ParserConfig:
    """
    One action family's sub-parser.

    Attributes:
        tags: Tag spellings for the family; ``tags[0]`` is canonical
        parse: Pure function ``(content, utils) -> list[Action]``
        self_closing_tags: Spellings that appear in ``<tag .../>`` form
        pre_strip: The tags carry opaque payloads and are parsed in phase 1
        protected_tags: Spans of these tags are hidden from this config
        fixups: Callable or Fixup list run before any parsing
        strip_after_parse: Tags removed from the content once this config ran
        block_pattern: Tagless payload shape parsed in phase 1 with the tags
        description: One-line summary used in the system prompt fragment
        usage: Example markup used in the system prompt fragment
    """

    tags: list[str]
    parse: Optional[ParseFn] = None
    self_closing_tags: list[str] = field(default_factory=list)
    pre_strip: bool = False
    protected_tags: list[str] = field(default_factory=list)
    fixups: Optional[FixupSpec] = None
    strip_after_parse: list[str] = field(default_factory=list)
    block_pattern: Optional[re.Pattern] = None
    description: str = ""
    usage: str = ""

    def __post_init__(self):
        self.tags = [t.strip().lower() for t in self.tags if t and t.strip()]
        self.self_closing_tags = [t.strip().lower() for t in self.self_closing_tags if t and t.strip()]
        if not self.tags and not self.self_closing_tags:
            raise ValueError("ParserConfig must declare at least one tag")
        if self.parse is None:
            raise ValueError(f"ParserConfig for <{self.canonical_tag}> must provide a parse callable")

    @property
    def canonical_tag(self) -> str:
        return (self.tags or self.self_closing_tags)[0]

    @property
    def all_tags(self) -> list[str]:
        """Every spelling this config declares, paired first."""
        seen = []
        for tag in self.tags + self.self_closing_tags:
            if tag not in seen:
                seen.append(tag)
        return seen

    def matches_any(self, tags: Iterable[str]) -> bool:
        wanted = set()
        for tag in tags:
            wanted.update(build_tag_variants(tag))
        for tag in self.all_tags:
            if wanted.intersection(build_tag_variants(tag)):
                return True
        return False


class ParserRegistry:
    """Ordered list of ParserConfigs plus the tag registry they populate."""

    def __init__(self):
        self._configs: list[ParserConfig] = []
        self.tags = TagRegistry()

    def register(self, config: ParserConfig) -> None:
        self._configs.append(config)
        self.tags.register_tags(config.all_tags, canonical=config.canonical_tag)
        phase = "content" if config.pre_strip else "structural"
        logger.info(f"Registered action parser: <{config.canonical_tag}> ({phase}, tags: {', '.join(config.all_tags)})")

    def unregister_for_tags(self, tags: Iterable[str]) -> int:
        """
        Remove every config whose tags intersect ``tags``.

        All tags of the removed configs, self-closing ones included, are
        dropped from the tag registry.

        Returns:
            Number of configs removed.
        """
        tags = list(tags)
        removed = [c for c in self._configs if c.matches_any(tags)]
        if not removed:
            return 0

        self._configs = [c for c in self._configs if c not in removed]
        dropped = []
        for config in removed:
            dropped.extend(config.all_tags)
        self.tags.unregister_tags(dropped)
        logger.info(f"Unregistered {len(removed)} action parser(s) for tags: {', '.join(tags)}")
        return len(removed)

    def clear(self) -> None:
        self._configs = []
        self.tags.clear()

    def configs(self) -> list[ParserConfig]:
        return list(self._configs)

    def content_configs(self) -> list[ParserConfig]:
        return [c for c in self._configs if c.pre_strip]

    def content_blocks(self) -> list[tuple[ParserConfig, re.Pattern]]:
        """Tagless content-bearing block patterns, with their owning config."""
        return [(c, c.block_pattern) for c in self._configs if c.pre_strip and c.block_pattern is not None]

    def structural_configs(self) -> list[ParserConfig]:
        return [c for c in self._configs if not c.pre_strip]

    def content_tags(self) -> list[str]:
        """Canonical spellings of every content-bearing tag."""
        tags = []
        for config in self.content_configs():
            for tag in config.all_tags:
                canonical = self.tags.canonical(tag) or tag
                if canonical not in tags:
                    tags.append(canonical)
        return tags

    def paired_tags(self) -> list[str]:
        tags = []
        for config in self._configs:
            for tag in config.tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def self_closing_tags(self) -> list[str]:
        tags = []
        for config in self._configs:
            for tag in config.self_closing_tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def normalize(self, content: str) -> str:
        return self.tags.normalize(content)

    def get_system_prompt(self) -> str:
        """
        Generate system prompt instructions for the registered action tags.

        Returns:
            String to inject into the system prompt, or "" when nothing is
            registered.
        """
        if not self._configs:
            return ""

        lines = [
            "",
            "## Available Actions",
            "",
            "You can act on the user's behalf by writing action tags in your response.",
            "Tags inside code fences, inline code or <literal> blocks are NOT executed,",
            "so use those to show examples without running them.",
            "",
            f"VALID tags: {', '.join(self.tags.known_tags())}",
            "",
        ]
        for config in self._configs:
            if not (config.description or config.usage):
                continue
            entry = f"- <{config.canonical_tag}>"
            if config.description:
                entry += f": {config.description}"
            lines.append(entry)
            if config.usage:
                lines.append(f"  {config.usage}")
        lines.append("")
        return "\n".join(lines)


# Global registry of action parsers
_registry = ParserRegistry()


def get_registry() -> ParserRegistry:
    return _registry


def register_action_parser(config: ParserConfig) -> None:
    """
    Register an action parser with the global registry.

    Args:
        config: The sub-parser configuration to register
    """
    _registry.register(config)


def unregister_action_parsers_for_tags(tags: Iterable[str]) -> int:
    """Remove every globally registered parser that declares any of ``tags``."""
    return _registry.unregister_for_tags(tags)


def clear_action_parsers() -> None:
    """Empty the global registry (tests, plugin reload)."""
    _registry.clear()


def normalize_action_tag_variants(content: str) -> str:
    """Rewrite every known tag spelling in ``content`` to its canonical form."""
    return _registry.normalize(content)


def get_system_prompt_for_actions() -> str:
    return _registry.get_system_prompt()
