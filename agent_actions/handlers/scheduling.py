"""
Scheduling and notification execution: schedule, notify.
"""

from typing import Optional

from ..base import ActionHandlers, ActionResult, NotifyAction, NotifyResult, ScheduleAction
from . import describe_action


async def execute_schedule(action: ScheduleAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_schedule:
        return None

    payload = action.prompt if action.is_prompt else (action.command or "")
    await handlers.on_schedule(action.cron, payload, action.name, is_prompt=action.is_prompt)

    suffix = " (AI-powered)" if action.is_prompt else ""
    return ActionResult(
        action=describe_action(action),
        success=True,
        result=f"Scheduled: {action.cron}{suffix}",
    )


def summarize_delivery(result: NotifyResult) -> str:
    if not result.sent:
        return "No messages sent"
    summary = f"Sent to {', '.join(result.sent)}"
    if result.failed:
        summary += f" (failed: {', '.join(result.failed)})"
    return summary


async def execute_notify(action: NotifyAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_notify:
        return None

    result: NotifyResult = await handlers.on_notify(action.message, target=action.target)
    delivered = bool(result.sent)

    error = None
    if not delivered and result.failed:
        error = f"Failed: {', '.join(result.failed)}"
    elif not delivered:
        error = "No connectors delivered the message"

    return ActionResult(
        action=describe_action(action),
        success=delivered,
        result=summarize_delivery(result),
        error=error,
    )
