# Agent action language public exports
# Parsing, registration and execution of action tags in model output

from agent_actions.base import (
    Action,
    ActionHandlers,
    ActionResult,
    BashAction,
    ConnectorResult,
    ContinueAction,
    CreateAction,
    DiscordConfigAction,
    EditAction,
    EditHunk,
    EditResult,
    EditStatus,
    EndAction,
    ExecAction,
    ExploreAction,
    FetchAction,
    FormatAction,
    GitAction,
    GlobAction,
    GrepAction,
    KillAction,
    LSAction,
    MultiEditAction,
    NotifyAction,
    NotifyResult,
    PlanAction,
    PlanItemStatus,
    PlanResult,
    PsAction,
    ReadAction,
    SayAction,
    ScheduleAction,
    SearchAction,
    SkillAction,
    SkillInstallAction,
    TaskAction,
    TelegramConfigAction,
    WriteAction,
)
from agent_actions.executor import execute_action, execute_actions
from agent_actions.fixups import Fixup
from agent_actions.loader import discover_action_parsers
from agent_actions.parser import has_actions, parse_actions, strip_actions
from agent_actions.registry import (
    ParserConfig,
    ParserRegistry,
    clear_action_parsers,
    get_registry,
    get_system_prompt_for_actions,
    normalize_action_tag_variants,
    register_action_parser,
    unregister_action_parsers_for_tags,
)
from agent_actions.settings import ActionSettings, get_settings, load_settings

__all__ = [
    # Actions
    "Action",
    "ReadAction",
    "EditAction",
    "EditHunk",
    "MultiEditAction",
    "WriteAction",
    "CreateAction",
    "GlobAction",
    "GrepAction",
    "LSAction",
    "FormatAction",
    "BashAction",
    "ExecAction",
    "PsAction",
    "KillAction",
    "GitAction",
    "FetchAction",
    "SearchAction",
    "ScheduleAction",
    "NotifyAction",
    "SkillAction",
    "SkillInstallAction",
    "TaskAction",
    "ExploreAction",
    "PlanAction",
    "PlanItemStatus",
    "TelegramConfigAction",
    "DiscordConfigAction",
    "SayAction",
    "EndAction",
    "ContinueAction",
    # Results & handlers
    "ActionResult",
    "ActionHandlers",
    "EditResult",
    "EditStatus",
    "NotifyResult",
    "ConnectorResult",
    "PlanResult",
    # Registry
    "Fixup",
    "ParserConfig",
    "ParserRegistry",
    "get_registry",
    "register_action_parser",
    "unregister_action_parsers_for_tags",
    "clear_action_parsers",
    "normalize_action_tag_variants",
    "get_system_prompt_for_actions",
    "discover_action_parsers",
    # Parsing & execution
    "parse_actions",
    "has_actions",
    "strip_actions",
    "execute_action",
    "execute_actions",
    # Settings
    "ActionSettings",
    "get_settings",
    "load_settings",
]
