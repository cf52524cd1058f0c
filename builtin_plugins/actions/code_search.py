"""
Code search and navigation parsers: glob, grep, ls, format.

All tags are structural and self-closing.
"""

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, FormatAction, GlobAction, GrepAction, LSAction
from agent_actions.registry import ParserConfig


def _int_attr(tag: str, utils: ParserUtils, *names: str):
    for name in names:
        value = utils.extract_int_attr(tag, name)
        if value is not None:
            return value
    return None


def parse_glob(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "glob"):
        pattern = utils.extract_attr(tag, "pattern")
        if pattern:
            actions.append(GlobAction(pattern=pattern, path=utils.extract_attr(tag, "path") or None))
    return actions


def parse_grep(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "grep"):
        pattern = utils.extract_attr(tag, "pattern")
        if not pattern:
            continue

        case = (utils.extract_attr(tag, "case") or "").strip().lower()
        case_insensitive = utils.extract_bool_attr(tag, "i") or case == "insensitive"
        line_numbers = utils.extract_bool_attr(tag, "n") or utils.extract_bool_attr(tag, "lines")
        multiline = utils.extract_bool_attr(tag, "multiline")

        actions.append(
            GrepAction(
                pattern=pattern,
                path=utils.extract_attr(tag, "path") or None,
                glob=utils.first_attr(tag, "glob", "file"),
                output_mode=utils.first_attr(tag, "output", "mode"),
                context=_int_attr(tag, utils, "context", "C"),
                context_before=_int_attr(tag, utils, "before", "B"),
                context_after=_int_attr(tag, utils, "after", "A"),
                case_insensitive=case_insensitive or None,
                line_numbers=line_numbers or None,
                head_limit=_int_attr(tag, utils, "limit", "head"),
                multiline=multiline or None,
            )
        )
    return actions


def parse_ls(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "ls"):
        path = utils.extract_attr(tag, "path")
        if path:
            actions.append(LSAction(path=path, ignore=utils.extract_list_attr(tag, "ignore")))
    return actions


def parse_format(content: str, utils: ParserUtils) -> list[Action]:
    return [FormatAction(path=utils.extract_attr(tag, "path") or None) for tag in utils.find_tags(content, "format")]


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["glob"],
            self_closing_tags=["glob"],
            parse=parse_glob,
            description="Find files by pattern",
            usage='<glob pattern="**/*.py" path="src"/>',
        ),
        ParserConfig(
            tags=["grep"],
            self_closing_tags=["grep"],
            parse=parse_grep,
            description="Search file contents",
            usage='<grep pattern="def main" path="src" glob="*.py" C="2" i="true"/>',
        ),
        ParserConfig(
            tags=["ls", "list"],
            self_closing_tags=["ls", "list"],
            parse=parse_ls,
            description="List a directory",
            usage='<ls path="src" ignore="__pycache__,*.pyc"/>',
        ),
        ParserConfig(
            tags=["format"],
            self_closing_tags=["format"],
            parse=parse_format,
            description="Run the project formatter",
            usage='<format path="src"/>',
        ),
    ]
