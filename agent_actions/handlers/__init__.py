"""
Execution functions for Agent Actions.

Each function takes ``(action, handlers)``, calls the host's handler for that
action type and shapes the ActionResult. A function returns None when the
host did not wire up the handler it needs.
"""

from typing import Callable

from ..base import Action


def short_text(text: str, limit: int = 60) -> str:
    """Collapse whitespace and truncate for labels and summaries."""
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


# Action type -> human-readable label, e.g. "Read: src/app.py"
_LABELS: dict[str, Callable[[Action], str]] = {
    "read": lambda a: f"Read: {a.path}",
    "edit": lambda a: f"Edit: {a.path}",
    "multi-edit": lambda a: f"MultiEdit: {a.path}",
    "write": lambda a: f"Write: {a.path}",
    "create": lambda a: f"Write: {a.path}",
    "glob": lambda a: f"Glob: {a.pattern}",
    "grep": lambda a: f"Grep: {a.pattern}",
    "ls": lambda a: f"LS: {a.path}",
    "format": lambda a: f"Format: {a.path or '.'}",
    "bash": lambda a: f"Bash: {short_text(a.command)}",
    "exec": lambda a: f"Exec: {short_text(a.command)}",
    "ps": lambda a: "Ps",
    "kill": lambda a: f"Kill: {a.target}",
    "git": lambda a: f"Git: {a.command}",
    "fetch": lambda a: f"Fetch: {a.url}",
    "search": lambda a: f"Search: {a.query}",
    "schedule": lambda a: f"Schedule: {a.name}",
    "notify": lambda a: "Notify",
    "skill": lambda a: f"Skill: {a.name}",
    "skill-install": lambda a: f"SkillInstall: {a.url}",
    "task": lambda a: f"Task: {short_text(a.prompt)}",
    "explore": lambda a: f"Explore: {a.query}",
    "plan": lambda a: f"Plan: {a.operation}",
    "telegram-config": lambda a: "TelegramConfig",
    "discord-config": lambda a: "DiscordConfig",
    "say": lambda a: "Says",
    "end": lambda a: "End",
    "continue": lambda a: "Continue",
}


def describe_action(action: Action) -> str:
    """Human-readable label for an action, used in its ActionResult."""
    label = _LABELS.get(action.type)
    if label is None:
        return action.type or type(action).__name__
    return label(action)
