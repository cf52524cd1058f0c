"""
Connector configuration parsers.

Tags:
- <telegram-config token="..." chat_id="..."/>
- <discord-config token="..." channel_id="..."/>

Both tags are stripped from the working content once parsed so bot tokens
never reach later parsers.
"""

import logging

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, DiscordConfigAction, TelegramConfigAction
from agent_actions.registry import ParserConfig

logger = logging.getLogger(__name__)


def _token(tag: str, utils: ParserUtils) -> str:
    return (utils.first_attr(tag, "token", "bot_token") or "").strip()


def parse_telegram_config(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "telegram-config"):
        token = _token(tag, utils)
        if not token:
            logger.debug("Ignoring <telegram-config> without a token")
            continue
        actions.append(TelegramConfigAction(bot_token=token, chat_id=utils.extract_attr(tag, "chat_id") or None))
    return actions


def parse_discord_config(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "discord-config"):
        token = _token(tag, utils)
        channel_id = (utils.extract_attr(tag, "channel_id") or "").strip()
        if not token or not channel_id:
            logger.debug("Ignoring <discord-config> without a token and channel_id")
            continue
        actions.append(DiscordConfigAction(bot_token=token, channel_id=channel_id))
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["telegram-config"],
            self_closing_tags=["telegram-config"],
            strip_after_parse=["telegram-config"],
            parse=parse_telegram_config,
            description="Connect a Telegram bot (chat_id is detected when omitted)",
            usage='<telegram-config token="123456:ABC..." chat_id="987654"/>',
        ),
        ParserConfig(
            tags=["discord-config"],
            self_closing_tags=["discord-config"],
            strip_after_parse=["discord-config"],
            parse=parse_discord_config,
            description="Connect a Discord bot to a channel",
            usage='<discord-config token="MTk..." channel_id="123456789"/>',
        ),
    ]
