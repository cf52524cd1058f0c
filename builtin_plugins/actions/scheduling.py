"""
Scheduling and notification parsers.

Tags:
- <schedule cron="0 9 * * *" name="daily-backup">./backup.sh</schedule>
- <schedule cron="0 8 * * *" name="news" type="llm">Summarize tech news</schedule>
- <notify to="telegram">message</notify>
"""

import logging

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, NotifyAction, ScheduleAction
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_NAME = "Scheduled Task"
PROMPT_TYPES = ("prompt", "llm")


def parse_schedule(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "schedule"):
        cron = (utils.extract_attr(opener, "cron") or "").strip()
        payload = utils.decode_entities(body.strip())
        if not cron or not payload:
            logger.debug("Ignoring <schedule> without cron or payload")
            continue

        name = (utils.extract_attr(opener, "name") or "").strip() or DEFAULT_SCHEDULE_NAME
        kind = (utils.extract_attr(opener, "type") or "").strip().lower()
        if kind in PROMPT_TYPES:
            actions.append(ScheduleAction(cron=cron, name=name, prompt=payload))
        else:
            actions.append(ScheduleAction(cron=cron, name=name, command=payload))
    return actions


def parse_notify(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "notify"):
        message = utils.decode_entities(body.strip())
        if message:
            target = utils.first_attr(opener, "to", "target")
            actions.append(NotifyAction(message=message, target=target))
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["schedule"],
            pre_strip=True,
            parse=parse_schedule,
            description='Schedule a recurring shell command, or an LLM prompt with type="llm"',
            usage='<schedule cron="0 9 * * *" name="daily-backup">./backup.sh</schedule>',
        ),
        ParserConfig(
            tags=["notify"],
            pre_strip=True,
            parse=parse_notify,
            description="Push a notification to the user's connected platforms",
            usage='<notify to="telegram">Build finished</notify>',
        ),
    ]
