"""
Connector configuration execution: Telegram and Discord setup.
"""

import logging
from typing import Optional

from ..base import ActionHandlers, ActionResult, ConnectorResult, DiscordConfigAction, TelegramConfigAction
from . import describe_action

logger = logging.getLogger(__name__)


async def execute_telegram_config(action: TelegramConfigAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_telegram_config:
        return None

    result: ConnectorResult = await handlers.on_telegram_config(action.bot_token, chat_id=action.chat_id)
    if result.success:
        logger.info(f"Telegram configured (chat_id: {result.chat_id or action.chat_id or 'auto'})")

    return ActionResult(
        action=describe_action(action),
        success=result.success,
        result=result.message,
        error=None if result.success else result.message,
    )


async def execute_discord_config(action: DiscordConfigAction, handlers: ActionHandlers) -> Optional[ActionResult]:
    if not handlers.on_discord_config:
        return None

    result: ConnectorResult = await handlers.on_discord_config(action.bot_token, action.channel_id)
    if result.success:
        logger.info(f"Discord configured (channel_id: {action.channel_id})")

    return ActionResult(
        action=describe_action(action),
        success=result.success,
        result=result.message,
        error=None if result.success else result.message,
    )
