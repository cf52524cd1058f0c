"""
Shell and process execution: bash, exec, ps, kill, git.
"""

from typing import Optional

from ..base import ActionHandlers, ActionResult, BashAction, ExecAction, GitAction, KillAction, PsAction
from . import describe_action

NO_OUTPUT = "(no output)"


async def execute_bash(action: BashAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_bash:
        return None

    output = await handlers.on_bash(
        action.command,
        timeout=action.timeout,
        run_in_background=bool(action.run_in_background),
    )
    return ActionResult(action=describe_action(action), success=True, result=output or NO_OUTPUT)


async def execute_exec(action: ExecAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if handlers.on_exec:
        output = await handlers.on_exec(action.command)
    elif handlers.on_bash:
        output = await handlers.on_bash(action.command)
    else:
        return None
    return ActionResult(action=describe_action(action), success=True, result=output or NO_OUTPUT)


async def execute_ps(action: PsAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_ps:
        return None

    output = await handlers.on_ps()
    return ActionResult(action=describe_action(action), success=True, result=output or "No running processes")


async def execute_kill(action: KillAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_kill:
        return None

    killed = bool(await handlers.on_kill(action.target))
    return ActionResult(
        action=describe_action(action),
        success=killed,
        result=f"Killed {action.target}" if killed else "Failed",
        error=None if killed else f"Could not kill process {action.target}",
    )


async def execute_git(action: GitAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_git:
        return None

    output = await handlers.on_git(action.command, args=action.args)
    return ActionResult(action=describe_action(action), success=True, result=output or NO_OUTPUT)
