"""
File action execution: read, edit, multi-edit, write, create.
"""

import logging
from typing import Optional

from ..base import (
    ActionHandlers,
    ActionResult,
    CreateAction,
    EditAction,
    EditResult,
    EditStatus,
    MultiEditAction,
    ReadAction,
    WriteAction,
)
from . import describe_action

logger = logging.getLogger(__name__)


async def execute_read(action: ReadAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_read:
        return None

    content = await handlers.on_read(action.path, offset=action.offset, limit=action.limit)

    if content is None:
        return ActionResult(
            action=describe_action(action),
            success=False,
            result="File not found",
            error="File not found",
        )
    # Full content goes back to the model, no truncation
    return ActionResult(action=describe_action(action), success=True, result=content)


def _edit_error(result: EditResult, path: str) -> str:
    """Append a recovery hint to a not-found edit failure."""
    message = result.message or "Edit failed"
    if result.status != EditStatus.NOT_FOUND:
        return message
    if "File not found" in message:
        return f"{message} - Use <read> to verify path or <write> to make new file"
    return f'{message} - Use <read path="{path}"/> first to see actual content'


async def execute_edit(action: EditAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_edit:
        return None

    result: EditResult = await handlers.on_edit(
        action.path, action.search, action.replace, replace_all=bool(action.replace_all)
    )

    if result.status == EditStatus.ALREADY_APPLIED:
        text = "Skipped (already applied)"
    elif result.success:
        text = "OK"
    else:
        text = "Failed"

    return ActionResult(
        action=describe_action(action),
        success=result.success,
        result=text,
        error=None if result.success else _edit_error(result, action.path),
    )


async def _apply_hunks_sequentially(action: MultiEditAction, handlers: ActionHandlers) -> EditResult:
    """Run each hunk through on_edit, stopping at the first real failure."""
    result = None
    for index, hunk in enumerate(action.edits, start=1):
        result = await handlers.on_edit(action.path, hunk.search, hunk.replace, replace_all=bool(hunk.replace_all))
        if not result.success and result.status != EditStatus.ALREADY_APPLIED:
            logger.warning(f"Multi-edit of {action.path} stopped at hunk {index}/{len(action.edits)}")
            return result
    return result or EditResult(success=True, status=EditStatus.APPLIED, message="OK")


async def execute_multi_edit(action: MultiEditAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_multi_edit and not handlers.on_edit:
        return None

    if handlers.on_multi_edit:
        result: EditResult = await handlers.on_multi_edit(action.path, list(action.edits))
    else:
        result = await _apply_hunks_sequentially(action, handlers)

    if not result.success:
        text = "Failed"
    elif result.status == EditStatus.ALREADY_APPLIED:
        text = "Skipped (already applied)"
    else:
        text = f"Applied {len(action.edits)} edits"

    return ActionResult(
        action=describe_action(action),
        success=result.success,
        result=text,
        error=None if result.success else (result.message or "Multi-edit failed"),
    )


async def execute_write(action: WriteAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    handler = handlers.on_write or handlers.on_create
    if not handler:
        return None

    success = bool(await handler(action.path, action.content))
    return ActionResult(
        action=describe_action(action),
        success=success,
        result="OK" if success else "Failed",
        error=None if success else "Failed to write file",
    )


async def execute_create(action: CreateAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    handler = handlers.on_create or handlers.on_write
    if not handler:
        return None

    success = bool(await handler(action.path, action.content))
    return ActionResult(
        action=describe_action(action),
        success=success,
        result="OK" if success else "Failed",
        error=None if success else "Failed to create file",
    )
