"""
Skills, sub-tasks, exploration and planning execution.
"""

from typing import Optional

from ..base import (
    ActionHandlers,
    ActionResult,
    ExploreAction,
    PlanAction,
    PlanResult,
    SkillAction,
    SkillInstallAction,
    TaskAction,
)
from . import describe_action


async def execute_skill(action: SkillAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_skill:
        return None

    output = await handlers.on_skill(action.name, args=action.args)
    return ActionResult(action=describe_action(action), success=True, result=output or f"Skill {action.name} ran")


async def execute_skill_install(action: SkillInstallAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_skill_install:
        return None

    installed = await handlers.on_skill_install(action.url, name=action.name) or {}
    name = installed.get("name") or action.name or action.url
    path = installed.get("path")
    result = f"Installed skill {name}" + (f" to {path}" if path else "")
    return ActionResult(action=describe_action(action), success=True, result=result)


async def execute_task(action: TaskAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_task:
        return None

    output = await handlers.on_task(action.prompt, description=action.description)
    return ActionResult(action=describe_action(action), success=True, result=output or "Task completed")


async def execute_explore(action: ExploreAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_explore:
        return None

    output = await handlers.on_explore(action.query, path=action.path, depth=action.depth)
    return ActionResult(action=describe_action(action), success=True, result=output or "Nothing found")


async def execute_plan(action: PlanAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_plan:
        return None

    result: PlanResult = await handlers.on_plan(
        action.operation,
        id=action.id,
        content=action.content,
        description=action.description,
        status=action.status.value if action.status else None,
        question=action.question,
    )

    text = result.message
    if action.operation == "ask" and result.question:
        text = f"{text}\n\nQuestion: {result.question}" if text else f"Question: {result.question}"

    return ActionResult(
        action=describe_action(action),
        success=result.success,
        result=text,
        error=None if result.success else result.message,
    )
