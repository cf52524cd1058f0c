"""
Git parsers.

Tags:
- <git-status/>
- <git-diff ref="HEAD~1" staged="true"/>
- <git-log count="5"/>
- <git-commit files="a.py,b.py" message="..."/>  or
  <git-commit files="a.py">message</git-commit>
- <git command="stash" args="list"/>

Every form becomes a GitAction whose ``args`` is a shell-quoted argument
string for the git subcommand.
"""

import logging
import shlex

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, GitAction
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)


def _git(command: str, args: list[str]) -> GitAction:
    return GitAction(command=command, args=shlex.join(args) if args else None)


def parse_git_status(content: str, utils: ParserUtils) -> list[Action]:
    return [_git("status", []) for _ in utils.find_tags(content, "git-status")]


def parse_git_diff(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "git-diff"):
        args = []
        if utils.extract_bool_attr(tag, "staged"):
            args.append("--staged")
        ref = utils.extract_attr(tag, "ref")
        if ref:
            args.append(ref)
        path = utils.extract_attr(tag, "path")
        if path:
            args.extend(["--", path])
        actions.append(_git("diff", args))
    return actions


def parse_git_log(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "git-log"):
        args = ["--oneline"]
        count = utils.extract_int_attr(tag, "count")
        if count and count > 0:
            args.append(f"-{count}")
        actions.append(_git("log", args))
    return actions


def _commit(message: str, files) -> GitAction:
    args = ["-m", message]
    if files:
        args.extend(["--", *files])
    return _git("commit", args)


def parse_git_commit(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "git-commit"):
        message = utils.decode_entities(body.strip()) or utils.extract_attr(opener, "message")
        if message:
            actions.append(_commit(message, utils.extract_list_attr(opener, "files")))

    for tag in utils.find_tags(content, "git-commit"):
        if not utils.is_self_closing(tag):
            continue
        message = utils.extract_attr(tag, "message")
        if message:
            actions.append(_commit(message, utils.extract_list_attr(tag, "files")))
        else:
            logger.debug("Ignoring <git-commit/> without a message")
    return actions


def parse_git(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "git"):
        command = (utils.extract_attr(tag, "command") or "").strip()
        if not command:
            continue
        args = (utils.extract_attr(tag, "args") or "").strip()
        actions.append(GitAction(command=command, args=args or None))
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["git-status"],
            self_closing_tags=["git-status"],
            parse=parse_git_status,
            description="Show working tree status",
            usage="<git-status/>",
        ),
        ParserConfig(
            tags=["git-diff"],
            self_closing_tags=["git-diff"],
            parse=parse_git_diff,
            description="Show changes (optionally staged or against a ref)",
            usage='<git-diff ref="HEAD~1" staged="true"/>',
        ),
        ParserConfig(
            tags=["git-log"],
            self_closing_tags=["git-log"],
            parse=parse_git_log,
            description="Show recent commits",
            usage='<git-log count="10"/>',
        ),
        ParserConfig(
            tags=["git-commit"],
            pre_strip=True,
            parse=parse_git_commit,
            description="Commit changes",
            usage='<git-commit files="src/app.py">Fix startup crash</git-commit>',
        ),
        ParserConfig(
            tags=["git"],
            self_closing_tags=["git"],
            parse=parse_git,
            description="Any other git subcommand",
            usage='<git command="stash" args="list"/>',
        ),
    ]
