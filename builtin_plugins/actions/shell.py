"""
Shell and process parsers.

Tags:
- <bash timeout="30000" description="..." background="true">command</bash>
- <exec>command</exec>  (legacy)
- <ps/>
- <kill target="proc-1"/>

Command bodies are content-bearing: a shell heredoc may contain anything,
including text that looks like other action tags.
"""

import logging

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, BashAction, ExecAction, KillAction, PsAction
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)


def _command(opener: str, body: str, utils: ParserUtils) -> str:
    command = utils.decode_entities(body.strip())
    if not command:
        command = (utils.extract_attr(opener, "command") or "").strip()
    return command


def _command_tags(content: str, utils: ParserUtils, name: str) -> list[tuple[str, str]]:
    """Paired blocks, or self-closing ``<name command="..."/>`` forms when there are none."""
    blocks = utils.find_blocks(content, name)
    if blocks:
        return blocks
    return [(tag, "") for tag in utils.find_tags(content, name) if utils.is_self_closing(tag)]


def parse_bash(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in _command_tags(content, utils, "bash"):
        command = _command(opener, body, utils)
        if not command:
            logger.debug("Ignoring empty <bash>")
            continue

        background = utils.extract_bool_attr(opener, "background") or utils.extract_bool_attr(
            opener, "run_in_background"
        )
        actions.append(
            BashAction(
                command=command,
                timeout=utils.extract_int_attr(opener, "timeout"),
                description=utils.extract_attr(opener, "description") or None,
                run_in_background=background or None,
            )
        )
    return actions


def parse_exec(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in _command_tags(content, utils, "exec"):
        command = _command(opener, body, utils)
        if command:
            actions.append(ExecAction(command=command))
    return actions


def parse_ps(content: str, utils: ParserUtils) -> list[Action]:
    return [PsAction() for _ in utils.find_tags(content, "ps")]


def parse_kill(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "kill"):
        target = utils.first_attr(tag, "target", "pid", "id")
        if target:
            actions.append(KillAction(target=target.strip()))
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["bash"],
            pre_strip=True,
            parse=parse_bash,
            description="Run a shell command (timeout in ms, background for long-running processes)",
            usage='<bash timeout="60000" description="Run tests">pytest -q</bash>',
        ),
        ParserConfig(
            tags=["exec"],
            pre_strip=True,
            parse=parse_exec,
        ),
        ParserConfig(
            tags=["ps"],
            self_closing_tags=["ps"],
            parse=parse_ps,
            description="List background processes",
            usage="<ps/>",
        ),
        ParserConfig(
            tags=["kill"],
            self_closing_tags=["kill"],
            parse=parse_kill,
            description="Stop a background process",
            usage='<kill target="proc-1"/>',
        ),
    ]
