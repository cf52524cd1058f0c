"""
Search and navigation execution: glob, grep, ls, format.
"""

from typing import Optional

from ..base import ActionHandlers, ActionResult, FormatAction, GlobAction, GrepAction, LSAction
from . import describe_action


async def execute_glob(action: GlobAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_glob:
        return None

    files = await handlers.on_glob(action.pattern, path=action.path) or []
    return ActionResult(
        action=describe_action(action),
        success=True,
        result="\n".join(files) if files else "No files found",
    )


async def execute_grep(action: GrepAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_grep:
        return None

    # Only forward the options the model actually set
    options = {k: v for k, v in action.options().items() if v is not None}
    output = await handlers.on_grep(action.pattern, **options)
    return ActionResult(action=describe_action(action), success=True, result=output or "No results")


async def execute_ls(action: LSAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_ls:
        return None

    ignore = list(action.ignore) if action.ignore else None
    entries = await handlers.on_ls(action.path, ignore=ignore) or []
    return ActionResult(
        action=describe_action(action),
        success=True,
        result="\n".join(entries) if entries else "Empty directory",
    )


async def execute_format(action: FormatAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_format:
        return None

    output = await handlers.on_format(path=action.path)
    return ActionResult(action=describe_action(action), success=True, result=output or "Formatted")
