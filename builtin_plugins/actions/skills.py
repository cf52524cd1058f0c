"""
Skill parsers: <skill name="..." args="..."/> and <skill-install url="..." name="..."/>.
"""

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, SkillAction, SkillInstallAction
from agent_actions.registry import ParserConfig


def parse_skill(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "skill"):
        name = (utils.extract_attr(tag, "name") or "").strip()
        if name:
            actions.append(SkillAction(name=name, args=utils.extract_attr(tag, "args") or None))
    return actions


def parse_skill_install(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "skill-install"):
        url = (utils.extract_attr(tag, "url") or "").strip()
        if url:
            actions.append(SkillInstallAction(url=url, name=utils.extract_attr(tag, "name") or None))
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["skill"],
            self_closing_tags=["skill"],
            parse=parse_skill,
            description="Run an installed skill",
            usage='<skill name="git-context" args="--short"/>',
        ),
        ParserConfig(
            tags=["skill-install"],
            self_closing_tags=["skill-install"],
            parse=parse_skill_install,
            description="Install a skill from a URL",
            usage='<skill-install url="https://github.com/org/skill" name="my-skill"/>',
        ),
    ]
