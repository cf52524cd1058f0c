"""
Filesystem action parsers.

Tags:
- <read path="..." offset="10" limit="50"/>
- <edit path="..." replace_all="true"><search>old</search><replace>new</replace></edit>
- <multi-edit path="..."><edit><search>..</search><replace>..</replace></edit>...</multi-edit>
- <write path="...">content</write>  (and legacy <create>)
- Tagless diff edits:

      src/app.py
      <<<<<<< SEARCH@10-12
      old
      =======
      new
      >>>>>>> REPLACE

Write/edit payloads are content-bearing: they are parsed on their own spans
and never re-scanned for nested actions. Payloads that fail the corruption
check are dropped with a warning.
"""

import logging
import re
from typing import Optional

from agent_actions.attributes import ParserUtils
from agent_actions.base import (
    Action,
    CreateAction,
    EditAction,
    EditHunk,
    MultiEditAction,
    ReadAction,
    WriteAction,
)
from agent_actions.fixups import repair_stray_quotes
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)

# <search>...</search> <replace>...</replace> pairs inside an edit body
SEARCH_REPLACE_PATTERN = re.compile(
    r"<search>(.*?)</search>\s*<replace>(.*?)</replace>",
    re.IGNORECASE | re.DOTALL,
)

# Conflict-marker hunks inside an edit body
DIFF_HUNK_PATTERN = re.compile(
    r"^<<<<<<< SEARCH(?:@(\d+)-(\d+))?[ \t]*\n(.*?)^=======[ \t]*\n(.*?)^>>>>>>> REPLACE[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

# A file path line followed by one conflict-marker hunk, outside any tag
DIFF_BLOCK_PATTERN = re.compile(
    r"^([\w./-]+\.\w+)[ \t]*\n"
    r"<<<<<<< SEARCH(?:@(\d+)-(\d+))?[ \t]*\n(.*?)^=======[ \t]*\n(.*?)^>>>>>>> REPLACE[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

_EDIT_OPENER = re.compile(r"<edit(?=[\s/>])((?:\"[^\"]*\"|'[^']*'|[^\"'>])*)>", re.IGNORECASE)
_EDIT_CLOSER = re.compile(r"</edit\s*>", re.IGNORECASE)


def _trim_newlines(text: str) -> str:
    return text.strip("\n")


def _trim_payload(text: str) -> str:
    """Drop blank lines around a file body, keep first-line indentation."""
    return re.sub(r"\A(?:[ \t]*\n)+", "", text).rstrip()


def fix_edit_markup(content: str) -> str:
    """Repair the edit-tag mistakes models make most often."""
    fixed = repair_stray_quotes(content, ("search", "replace"))

    # Extra </search> after </replace>
    fixed = re.sub(r"</replace>\s*</search>\s*</edit", "</replace></edit", fixed, flags=re.IGNORECASE)

    # </search> used to close the replace block
    fixed = re.sub(
        r"<replace>(.*?)</search>\s*</replace>",
        r"<replace>\1</replace>",
        fixed,
        flags=re.IGNORECASE | re.DOTALL,
    )
    fixed = re.sub(
        r"<replace>((?:(?!</replace>|</edit>|<search>).)*?)</search>",
        r"<replace>\1</replace>",
        fixed,
        flags=re.IGNORECASE | re.DOTALL,
    )

    # <edit file="..."> -> <edit path="...">
    fixed = re.sub(r"<edit\s+file\s*=", "<edit path=", fixed, flags=re.IGNORECASE)

    # <edit path=src/app.py> -> <edit path="src/app.py">
    fixed = re.sub(
        r"<edit\s+path\s*=\s*([^\"'\s>][^\s>]*?)(?=\s|/?>)",
        r'<edit path="\1"',
        fixed,
        flags=re.IGNORECASE,
    )

    # <edit>src/app.py <search> -> <edit path="src/app.py"><search>
    fixed = re.sub(
        r"<edit\s*>\s*([\w./-]+\.\w+)\s*<search>",
        r'<edit path="\1"><search>',
        fixed,
        flags=re.IGNORECASE,
    )
    return fixed


def _edit_path(opener: str, utils: ParserUtils) -> Optional[str]:
    return utils.first_attr(opener, "path", "file")


def _replace_all(opener: str, utils: ParserUtils) -> Optional[bool]:
    if utils.extract_bool_attr(opener, "replace_all") or utils.extract_bool_attr(opener, "replaceAll"):
        return True
    return None


def parse_hunks(body: str, replace_all: Optional[bool] = None) -> list[EditHunk]:
    """Extract search/replace hunks, tag pairs first, then conflict markers."""
    hunks = [
        EditHunk(search=_trim_newlines(m.group(1)), replace=_trim_newlines(m.group(2)), replace_all=replace_all)
        for m in SEARCH_REPLACE_PATTERN.finditer(body)
    ]
    if hunks:
        return hunks
    return [
        EditHunk(search=_trim_newlines(m.group(3)), replace=_trim_newlines(m.group(4)), replace_all=replace_all)
        for m in DIFF_HUNK_PATTERN.finditer(body)
    ]


def _split_edit(content: str) -> Optional[tuple[str, str]]:
    """Return (opening tag, body) of an <edit> span, or None if unterminated."""
    opener = _EDIT_OPENER.search(content)
    if opener is None:
        return None
    closers = list(_EDIT_CLOSER.finditer(content, opener.end()))
    if not closers:
        return None
    return opener.group(0), content[opener.end() : closers[-1].start()]


def parse_read(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "read"):
        path = utils.first_attr(tag, "path", "file")
        if path:
            actions.append(
                ReadAction(
                    path=path,
                    offset=utils.extract_int_attr(tag, "offset"),
                    limit=utils.extract_int_attr(tag, "limit"),
                )
            )
    return actions


def parse_edit(content: str, utils: ParserUtils) -> list[Action]:
    """Parse one <edit> span or one tagless diff block."""
    diff = DIFF_BLOCK_PATTERN.match(content)
    if diff:
        path = diff.group(1)
        search, replace = _trim_newlines(diff.group(4)), _trim_newlines(diff.group(5))
        reason = utils.detect_corruption(replace, path)
        if reason:
            logger.warning(f"Rejected diff edit for {path}: {reason}")
            return []
        return [EditAction(path=path, search=search, replace=replace)]

    split = _split_edit(content)
    if split is None:
        return []
    opener, body = split

    path = _edit_path(opener, utils)
    if not path:
        logger.debug("Ignoring <edit> without a path")
        return []

    reason = utils.detect_corruption(body, path)
    if reason:
        logger.warning(f"Rejected edit for {path}: {reason}")
        return []

    hunks = parse_hunks(body, _replace_all(opener, utils))
    if not hunks:
        logger.debug(f"Ignoring <edit> for {path} without search/replace hunks")
    return [EditAction(path=path, search=h.search, replace=h.replace, replace_all=h.replace_all) for h in hunks]


def parse_multi_edit(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "multi-edit"):
        path = utils.first_attr(opener, "path", "file")
        if not path:
            continue

        reason = utils.detect_corruption(body, path)
        if reason:
            logger.warning(f"Rejected multi-edit for {path}: {reason}")
            continue

        hunks = []
        inner = utils.find_blocks(body, "edit")
        if inner:
            for edit_opener, edit_body in inner:
                hunks.extend(parse_hunks(edit_body, _replace_all(edit_opener, utils)))
        else:
            hunks = parse_hunks(body)

        if hunks:
            actions.append(MultiEditAction(path=path, edits=tuple(hunks)))
    return actions


def _parse_file_payload(content: str, utils: ParserUtils, tag: str, action_class) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, tag):
        path = utils.first_attr(opener, "path", "file")
        if not path:
            continue

        payload = utils.decode_entities(_trim_payload(body))
        reason = utils.detect_corruption(payload, path)
        if reason:
            logger.warning(f"Rejected <{tag}> for {path}: {reason}")
            continue
        actions.append(action_class(path=path, content=payload))
    return actions


def parse_write(content: str, utils: ParserUtils) -> list[Action]:
    return _parse_file_payload(content, utils, "write", WriteAction)


def parse_create(content: str, utils: ParserUtils) -> list[Action]:
    return _parse_file_payload(content, utils, "create", CreateAction)


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["read", "read-file"],
            self_closing_tags=["read", "read-file"],
            protected_tags=["edit", "multi-edit"],
            parse=parse_read,
            description="Read a file",
            usage='<read path="src/app.py" offset="1" limit="100"/>',
        ),
        ParserConfig(
            tags=["edit"],
            pre_strip=True,
            fixups=fix_edit_markup,
            block_pattern=DIFF_BLOCK_PATTERN,
            parse=parse_edit,
            description="Replace exact text in a file",
            usage='<edit path="src/app.py"><search>old</search><replace>new</replace></edit>',
        ),
        ParserConfig(
            tags=["multi-edit"],
            pre_strip=True,
            parse=parse_multi_edit,
            description="Several edits to one file",
            usage='<multi-edit path="src/app.py"><edit><search>a</search><replace>b</replace></edit></multi-edit>',
        ),
        ParserConfig(
            tags=["write", "write-file"],
            pre_strip=True,
            parse=parse_write,
            description="Write a whole file",
            usage='<write path="src/new.py">content</write>',
        ),
        ParserConfig(
            tags=["create"],
            pre_strip=True,
            parse=parse_create,
        ),
    ]
