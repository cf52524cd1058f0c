"""
Action Executor for Agent Actions.

Dispatches parsed actions to their execution functions and collects results.
By default only the first real action of a response runs, so the model can
adapt to each result before issuing the next action.
"""

import logging
from typing import Awaitable, Callable, Optional

from .base import Action, ActionHandlers, ActionResult
from .handlers import describe_action, short_text
from .handlers.connectors import execute_discord_config, execute_telegram_config
from .handlers.file import execute_create, execute_edit, execute_multi_edit, execute_read, execute_write
from .handlers.say import execute_continue, execute_end, execute_say
from .handlers.scheduling import execute_notify, execute_schedule
from .handlers.search import execute_format, execute_glob, execute_grep, execute_ls
from .handlers.shell import execute_bash, execute_exec, execute_git, execute_kill, execute_ps
from .handlers.tasks import execute_explore, execute_plan, execute_skill, execute_skill_install, execute_task
from .handlers.web import execute_fetch, execute_search
from .settings import get_settings

logger = logging.getLogger(__name__)

ExecuteFn = Callable[[Action, ActionHandlers], Awaitable[Optional[ActionResult]]]

# Actions that always run and never consume the one-at-a-time slot
TRANSPARENT_TYPES = frozenset({"say", "continue"})

EXECUTORS: dict[str, ExecuteFn] = {
    "read": execute_read,
    "edit": execute_edit,
    "multi-edit": execute_multi_edit,
    "write": execute_write,
    "create": execute_create,
    "glob": execute_glob,
    "grep": execute_grep,
    "ls": execute_ls,
    "format": execute_format,
    "bash": execute_bash,
    "exec": execute_exec,
    "ps": execute_ps,
    "kill": execute_kill,
    "git": execute_git,
    "fetch": execute_fetch,
    "search": execute_search,
    "schedule": execute_schedule,
    "notify": execute_notify,
    "skill": execute_skill,
    "skill-install": execute_skill_install,
    "task": execute_task,
    "explore": execute_explore,
    "plan": execute_plan,
    "telegram-config": execute_telegram_config,
    "discord-config": execute_discord_config,
    "say": execute_say,
    "end": execute_end,
    "continue": execute_continue,
}


async def execute_action(action: Action, handlers: ActionHandlers) -> Optional[ActionResult]:
    """
    Execute a single action.

    Returns:
        The ActionResult, or None when the action type is unknown or the host
        has no handler for it.
    """
    execute = EXECUTORS.get(action.type)
    if execute is None:
        logger.warning(f"No executor for action type: {action.type}")
        return None

    try:
        return await execute(action, handlers)
    except Exception as e:
        logger.exception(f"Action execution error: {describe_action(action)}")
        return ActionResult(
            action=describe_action(action),
            success=False,
            result="Failed",
            error=str(e) or type(e).__name__,
        )


def _pending_label(action: Action) -> str:
    if action.type in ("bash", "exec"):
        return f"{action.type}: {short_text(action.command, 40)}"
    return action.type


def pending_notice(skipped: list[Action]) -> str:
    """Notice appended to the last result when actions were held back."""
    names = ", ".join(_pending_label(a) for a in skipped)
    return (
        f"\n\n[PENDING: {len(skipped)} action(s) not yet executed: {names}. "
        "Execute them one at a time in subsequent responses.]"
    )


async def execute_actions(
    actions: list[Action],
    handlers: ActionHandlers,
    one_at_a_time: Optional[bool] = None,
) -> list[ActionResult]:
    """
    Execute parsed actions in order.

    Transparent actions (say, continue) run first and do not count against
    the one-at-a-time limit.

    Args:
        actions: Actions from parse_actions()
        handlers: Host capabilities
        one_at_a_time: Run only the first real action (None uses the
            configured default)

    Returns:
        One result per executed action, in execution order. Skipped actions
        (no handler, unknown type) produce no result.
    """
    if not actions:
        return []

    settings = get_settings()
    if one_at_a_time is None:
        one_at_a_time = settings.one_at_a_time

    transparent = [a for a in actions if a.type in TRANSPARENT_TYPES]
    real = [a for a in actions if a.type not in TRANSPARENT_TYPES]
    to_execute = real[:1] if one_at_a_time else real
    skipped = real[1:] if one_at_a_time else []

    results = []
    for action in transparent + to_execute:
        result = await execute_action(action, handlers)
        if result is not None:
            results.append(result)

    if skipped:
        logger.info(f"Holding back {len(skipped)} action(s) until the next response")
        if results and settings.pending_notice:
            results[-1].result += pending_notice(skipped)

    return results
