"""
Corruption guards for content-bearing payloads.

Models sometimes emit a write/edit payload that is itself full of action
markup (a runaway generation that re-emits its own tags), or that fakes line
breaks with literal backslash-n sequences. Such payloads would garble the
target file, so they are rejected instead of being turned into actions.
"""

import re
from typing import Optional

# Raw action-tag shapes that have no business inside a file payload
ACTION_TAG_PATTERNS = (
    re.compile(r"<edit\s+path\s*=", re.IGNORECASE),
    re.compile(r"</edit>", re.IGNORECASE),
    re.compile(r"<bash>", re.IGNORECASE),
    re.compile(r"</bash>", re.IGNORECASE),
    re.compile(r"<say>", re.IGNORECASE),
    re.compile(r"</say>", re.IGNORECASE),
    re.compile(r"<end>", re.IGNORECASE),
    re.compile(r"<write\s+path\s*=", re.IGNORECASE),
    re.compile(r"</write>", re.IGNORECASE),
)

STATEMENT_KEYWORDS = (
    "const",
    "let",
    "var",
    "if",
    "for",
    "while",
    "return",
    "function",
    "class",
    "import",
    "export",
)

_ESCAPED_NEWLINE_INDENT = re.compile(r"\\n[ \t]{2,}\S")
_CHAINED_ESCAPED_NEWLINES = re.compile(r"(?:\\n[ \t]*){3,}")
_ESCAPED_NEWLINE_STATEMENT = re.compile(rf"\\n[ \t]*(?:{'|'.join(STATEMENT_KEYWORDS)})\b")

DEFAULT_TAG_THRESHOLD = 3
DEFAULT_INDENT_THRESHOLD = 2
DEFAULT_STATEMENT_THRESHOLD = 2


def _blank(ch: str) -> str:
    return "\n" if ch == "\n" else " "


def strip_literals_and_comments(text: str) -> str:
    """
    Blank out string literals and comments, preserving offsets and newlines.

    Structural checks then only see code, so an escaped newline inside a
    legitimate string literal is never flagged.
    """
    out = []
    state = "code"
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if state == "code":
            if ch == "'" and nxt:
                state = "single"
            elif ch == '"':
                state = "double"
            elif ch == "`":
                state = "template"
            elif ch == "/" and nxt == "/":
                state = "line_comment"
                out.append("  ")
                i += 2
                continue
            elif ch == "/" and nxt == "*":
                state = "block_comment"
                out.append("  ")
                i += 2
                continue
            else:
                out.append(ch)
                i += 1
                continue
            out.append(" ")
            i += 1
            continue

        if state in ("single", "double", "template"):
            closer = {"single": "'", "double": '"', "template": "`"}[state]
            if ch == "\\":
                out.append("  ")
                i += 2
                continue
            if ch == closer:
                state = "code"
                out.append(" ")
            else:
                out.append(_blank(ch))
            i += 1
            continue

        if state == "line_comment":
            if ch == "\n":
                state = "code"
            out.append(_blank(ch))
            i += 1
            continue

        # block_comment
        if ch == "*" and nxt == "/":
            state = "code"
            out.append("  ")
            i += 2
            continue
        out.append(_blank(ch))
        i += 1

    return "".join(out)


def detect_escaped_newline_corruption(
    content: str,
    indent_threshold: int = DEFAULT_INDENT_THRESHOLD,
    statement_threshold: int = DEFAULT_STATEMENT_THRESHOLD,
) -> Optional[str]:
    """
    Detect literal ``\\n`` sequences used as real line breaks.

    Returns:
        A rejection reason, or None for clean content.
    """
    if "\\n" not in content:
        return None

    structural = strip_literals_and_comments(content)

    if len(_ESCAPED_NEWLINE_INDENT.findall(structural)) >= indent_threshold:
        return 'literal "\\n" used for structural line breaks/indentation'
    if _CHAINED_ESCAPED_NEWLINES.search(structural):
        return 'multiple chained literal "\\n" sequences detected'
    if len(_ESCAPED_NEWLINE_STATEMENT.findall(structural)) >= statement_threshold:
        return 'literal "\\n" used between code statements'
    return None


def count_action_tag_patterns(content: str) -> int:
    """Number of distinct raw action-tag shapes present in ``content``."""
    return sum(1 for pattern in ACTION_TAG_PATTERNS if pattern.search(content))


def has_nested_edit(content: str, path: Optional[str]) -> bool:
    """True if ``content`` opens another <edit> on the same target path."""
    if not path:
        return False
    pattern = re.compile(
        rf"<edit\s+[^>]*\bpath\s*=\s*[\"']?{re.escape(path)}[\"'\s/>]",
        re.IGNORECASE,
    )
    return pattern.search(content) is not None


def detect_corruption(
    content: str,
    path: Optional[str] = None,
    tag_threshold: int = DEFAULT_TAG_THRESHOLD,
    indent_threshold: int = DEFAULT_INDENT_THRESHOLD,
    statement_threshold: int = DEFAULT_STATEMENT_THRESHOLD,
) -> Optional[str]:
    """
    Check a content-bearing payload for recursive action syntax or fake
    escaped newlines.

    Args:
        content: The payload (write body, or an edit's body/replacement)
        path: Target path of the enclosing action, if any
        tag_threshold: Distinct action-tag shapes that mark the payload corrupt
        indent_threshold: Escaped-newline-plus-indent hits that mark it corrupt
        statement_threshold: Escaped-newline-before-keyword hits that mark it corrupt

    Returns:
        A rejection reason, or None for clean content.
    """
    if not content:
        return None

    if has_nested_edit(content, path):
        return f"nested <edit> for the same target ({path})"

    tag_count = count_action_tag_patterns(content)
    if tag_count >= tag_threshold:
        return f"payload contains {tag_count} distinct raw action tags"

    return detect_escaped_newline_corruption(content, indent_threshold, statement_threshold)
