"""
Conversation control parsers.

Tags:
- <say to="telegram">message</say>  (alias say_message)
- <end message="..."/> or <end>final message</end>  (alias end_task)
- <continue/>  (alias continue_task)
"""

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, ContinueAction, EndAction, SayAction
from agent_actions.registry import ParserConfig

DEFAULT_END_MESSAGE = "Task completed."


def parse_say(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for opener, body in utils.find_blocks(content, "say"):
        message = utils.decode_entities(body.strip())
        if message:
            actions.append(SayAction(message=message, target=utils.first_attr(opener, "to", "target")))
    return actions


def parse_end(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "end"):
        if utils.is_self_closing(tag):
            message = (utils.extract_attr(tag, "message") or "").strip()
            actions.append(EndAction(message=utils.decode_entities(message) or DEFAULT_END_MESSAGE))

    for _, body in utils.find_blocks(content, "end"):
        actions.append(EndAction(message=utils.decode_entities(body.strip()) or DEFAULT_END_MESSAGE))
    return actions


def parse_continue(content: str, utils: ParserUtils) -> list[Action]:
    return [ContinueAction() for _ in utils.find_tags(content, "continue")]


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["say", "say_message"],
            pre_strip=True,
            parse=parse_say,
            description="Talk to the user while you keep working (optionally to a platform)",
            usage="<say>Running the test suite now.</say>",
        ),
        ParserConfig(
            tags=["end", "end_task"],
            pre_strip=True,
            parse=parse_end,
            description="Finish the task with a final message",
            usage="<end>All tests pass.</end>",
        ),
        ParserConfig(
            tags=["continue", "continue_task"],
            self_closing_tags=["continue", "continue_task"],
            parse=parse_continue,
            description="Keep working without waiting for the user",
            usage="<continue/>",
        ),
    ]
