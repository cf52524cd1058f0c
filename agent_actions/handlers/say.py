"""
Conversation control execution: say, end, continue.

``say`` always produces a result: without a host renderer the message itself
is the result, so the caller can still show it.
"""

from typing import Optional

from ..base import ActionHandlers, ActionResult, ContinueAction, EndAction, SayAction
from . import describe_action
from .scheduling import summarize_delivery


async def execute_say(action: SayAction, handlers: ActionHandlers) -> ActionResult:
    message = action.message.strip()

    if action.target and handlers.on_notify:
        delivery = await handlers.on_notify(message, target=action.target)
        return ActionResult(
            action=describe_action(action),
            success=True,
            result=f"Message to {action.target}: {summarize_delivery(delivery)}",
        )

    rendered = None
    if handlers.on_say:
        rendered = await handlers.on_say(message)
    return ActionResult(action=describe_action(action), success=True, result=rendered or message)


async def execute_end(action: EndAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_end:
        return None

    await handlers.on_end(action.message)
    return ActionResult(action=describe_action(action), success=True, result=action.message)


async def execute_continue(action: ContinueAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_continue:
        return None

    await handlers.on_continue()
    return ActionResult(action=describe_action(action), success=True, result="Continuing")
