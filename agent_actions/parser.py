"""
Action Parser.

Extracts typed actions from model output. The pipeline is:

1. Normalize tag aliases to their canonical spelling
2. Repair malformed tags (core repairs, then per-family fixups)
3. Isolate content: drop code fences, inline code and <literal> blocks, and
   cut out every top-level content-bearing span
4. Phase 1: each content-bearing family parses only its own spans
5. Phase 2: structural families parse what is left, in registration order

Parsing never raises; malformed or unknown tags simply produce no action.
"""

import functools
import logging
import re
from typing import Optional

from .attributes import ParserUtils, decode_entities
from .base import Action
from .fixups import apply_fixups
from .guards import detect_corruption
from .isolation import CODE, LITERAL, isolate_content, scan_regions, strip_content_tags
from .registry import ParserConfig, ParserRegistry, get_registry
from .settings import ActionSettings, get_settings

logger = logging.getLogger(__name__)


def _identity(text: str) -> str:
    return text


def build_parser_utils(settings: Optional[ActionSettings] = None) -> ParserUtils:
    """
    Build the helper bundle handed to every sub-parser.

    Args:
        settings: Settings providing the corruption thresholds (defaults to
            the process-wide settings)
    """
    settings = settings or get_settings()
    return ParserUtils(
        decode_entities=decode_entities if settings.decode_entities else _identity,
        detect_corruption=functools.partial(
            detect_corruption,
            tag_threshold=settings.corruption_tag_threshold,
            indent_threshold=settings.escaped_newline_indent_threshold,
            statement_threshold=settings.escaped_newline_statement_threshold,
        ),
    )


def _run_parser(config: ParserConfig, content: str, utils: ParserUtils) -> list[Action]:
    try:
        return list(config.parse(content, utils) or [])
    except Exception as e:
        logger.error(f"Action parser for <{config.canonical_tag}> failed: {e}", exc_info=True)
        return []


def prepare_content(content: str, registry: Optional[ParserRegistry] = None) -> str:
    """Normalize aliases and apply fixups, without parsing."""
    registry = registry or get_registry()
    normalized = registry.normalize(content)
    return apply_fixups(
        normalized,
        registry.configs(),
        paired_tags=registry.paired_tags(),
        self_closing_tags=registry.self_closing_tags(),
    )


def parse_actions(
    content: str,
    registry: Optional[ParserRegistry] = None,
    settings: Optional[ActionSettings] = None,
) -> list[Action]:
    """
    Parse model output into an ordered list of actions.

    Args:
        content: Raw model output
        registry: Parser registry to use (defaults to the global one)
        settings: Settings to use (defaults to the process-wide settings)

    Returns:
        Phase-1 actions followed by phase-2 actions, each group in
        registration order, matches within one family in document order.
    """
    if not content or not content.strip():
        return []

    registry = registry or get_registry()
    utils = build_parser_utils(settings)
    prepared = prepare_content(content, registry)

    blocks = registry.content_blocks()
    isolated = isolate_content(prepared, registry.content_tags(), [pattern for _, pattern in blocks])

    actions: list[Action] = []

    # Phase 1: content-bearing families, each on its own top-level spans
    for config in registry.content_configs():
        owned = {registry.tags.canonical(tag) or tag for tag in config.all_tags}
        for span in isolated.spans:
            if span.tag is not None and span.tag in owned:
                actions.extend(_run_parser(config, span.text, utils))
            elif span.block is not None and blocks[span.block][0] is config:
                actions.extend(_run_parser(config, span.text, utils))

    # Phase 2: structural families on the remaining text
    working = isolated.structural
    for config in registry.structural_configs():
        view = working
        if config.protected_tags:
            view = strip_content_tags(view, config.protected_tags, greedy=True)
        actions.extend(_run_parser(config, view, utils))
        if config.strip_after_parse:
            working = strip_content_tags(working, config.strip_after_parse)

    if actions:
        logger.debug(f"Parsed {len(actions)} action(s): {', '.join(a.type for a in actions)}")
    return actions


def has_actions(content: str, registry: Optional[ParserRegistry] = None) -> bool:
    """True if ``content`` contains at least one executable action."""
    return bool(parse_actions(content, registry))


def strip_actions(content: str, registry: Optional[ParserRegistry] = None) -> str:
    """
    Remove action markup so only the prose remains.

    Code fences, inline code and <literal> blocks are kept as written since
    they are part of what the model is showing the user.

    Args:
        content: Raw model output
        registry: Parser registry to use (defaults to the global one)

    Returns:
        The content without action tags, blank runs collapsed.
    """
    if not content:
        return ""

    registry = registry or get_registry()
    prepared = prepare_content(content, registry)
    known = registry.tags.known_tags()
    blocks = [pattern for _, pattern in registry.content_blocks()]
    regions = scan_regions(prepared, registry.content_tags(), blocks)

    parts = []
    pos = 0
    for region in regions:
        parts.append(_strip_structural(prepared[pos : region.start], known))
        if region.kind in (CODE, LITERAL):
            parts.append(region.text)
        pos = region.end
    parts.append(_strip_structural(prepared[pos:], known))

    stripped = "".join(parts)
    stripped = re.sub(r"[ \t]+\n", "\n", stripped)
    stripped = re.sub(r"\n{3,}", "\n\n", stripped)
    return stripped.strip()


def _strip_structural(text: str, tags: list[str]) -> str:
    if not tags or "<" not in text:
        return text
    text = strip_content_tags(text, tags)
    alternation = "|".join(re.escape(t) for t in sorted(tags, key=len, reverse=True))
    return re.sub(rf"</(?:{alternation})\s*>", "", text, flags=re.IGNORECASE)
