"""
Web execution: fetch and search.
"""

from typing import Optional

from ..base import ActionHandlers, ActionResult, FetchAction, SearchAction
from . import describe_action


async def execute_fetch(action: FetchAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_fetch:
        return None

    content = await handlers.on_fetch(action.url, prompt=action.prompt)
    return ActionResult(action=describe_action(action), success=True, result=content or "")


async def execute_search(action: SearchAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_search:
        return None

    response, citations = await handlers.on_search(
        action.query,
        allowed_domains=list(action.allowed_domains) if action.allowed_domains else None,
        blocked_domains=list(action.blocked_domains) if action.blocked_domains else None,
    )

    result = response or "No results"
    if citations:
        result += "\n\nSources:\n" + "\n".join(f"- {url}" for url in citations)
    return ActionResult(action=describe_action(action), success=True, result=result)
