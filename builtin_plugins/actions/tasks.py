"""
Sub-task, exploration and planning parsers.

Tags:
- <task description="...">prompt for a sub-agent</task>
- <explore query="..." path="src" depth="quick|medium|deep"/>
- <plan operation="add|update|complete|remove|show|clear|ask" id content
  description status question/>
"""

import logging
from typing import Optional

from agent_actions.attributes import ParserUtils
from agent_actions.base import (
    EXPLORE_DEPTHS,
    PLAN_OPERATIONS,
    Action,
    ExploreAction,
    PlanAction,
    PlanItemStatus,
    TaskAction,
)
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)


def parse_task(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "task"):
        prompt = utils.decode_entities(body.strip())
        if prompt:
            actions.append(TaskAction(prompt=prompt, description=utils.extract_attr(opener, "description") or None))
    return actions


def parse_explore(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "explore"):
        query = (utils.extract_attr(tag, "query") or "").strip()
        if not query:
            continue

        depth = (utils.extract_attr(tag, "depth") or "").strip().lower() or None
        if depth is not None and depth not in EXPLORE_DEPTHS:
            logger.debug(f"Ignoring unknown explore depth: {depth}")
            depth = None
        actions.append(ExploreAction(query=query, path=utils.extract_attr(tag, "path") or None, depth=depth))
    return actions


def parse_plan_status(value: Optional[str]) -> Optional[PlanItemStatus]:
    """Map "in-progress", "In_Progress" etc. to a PlanItemStatus."""
    if not value:
        return None
    try:
        return PlanItemStatus(value.strip().lower().replace("-", "_"))
    except ValueError:
        return None


def parse_plan(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "plan"):
        operation = (utils.first_attr(tag, "operation", "op") or "").strip().lower()
        if operation not in PLAN_OPERATIONS:
            logger.debug(f"Ignoring <plan> with unknown operation: {operation or '(none)'}")
            continue

        actions.append(
            PlanAction(
                operation=operation,
                id=utils.extract_attr(tag, "id") or None,
                content=utils.extract_attr(tag, "content") or None,
                description=utils.extract_attr(tag, "description") or None,
                status=parse_plan_status(utils.extract_attr(tag, "status")),
                question=utils.extract_attr(tag, "question") or None,
            )
        )
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["task"],
            pre_strip=True,
            parse=parse_task,
            description="Delegate a self-contained job to a sub-agent",
            usage='<task description="Audit tests">Find tests that never assert anything</task>',
        ),
        ParserConfig(
            tags=["explore"],
            self_closing_tags=["explore"],
            parse=parse_explore,
            description="Search the codebase broadly for a concept",
            usage='<explore query="authentication" path="src" depth="medium"/>',
        ),
        ParserConfig(
            tags=["plan"],
            self_closing_tags=["plan"],
            parse=parse_plan,
            description="Maintain the task plan",
            usage='<plan operation="add" content="Write the migration"/>',
        ),
    ]
