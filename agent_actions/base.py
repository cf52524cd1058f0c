"""
Base types for Agent Actions.

Defines the Action variants extracted from model output, the ActionResult
returned by the executor, and the ActionHandlers bundle the host wires up.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Optional


class EditStatus(Enum):
    """Outcome of an edit as reported by the host's edit handler."""

    APPLIED = "applied"
    ALREADY_APPLIED = "already_applied"
    NOT_FOUND = "not_found"
    ERROR = "error"


class PlanItemStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


PLAN_OPERATIONS = ("add", "update", "complete", "remove", "show", "clear", "ask")
EXPLORE_DEPTHS = ("quick", "medium", "deep")


@dataclass(frozen=True)
class Action:
    """
    A single unit of host-side work requested by model output.

    Subclasses set the class-level ``type`` discriminator and carry only the
    fields relevant to that action. Instances are immutable.
    """

    type: ClassVar[str] = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["type"] = self.type
        return data


# ===== Core File Operations =====


@dataclass(frozen=True)
class ReadAction(Action):
    type: ClassVar[str] = "read"

    path: str
    offset: Optional[int] = None  # Line number to start reading from
    limit: Optional[int] = None  # Number of lines to read


@dataclass(frozen=True)
class EditAction(Action):
    type: ClassVar[str] = "edit"

    path: str
    search: str
    replace: str
    replace_all: Optional[bool] = None


@dataclass(frozen=True)
class EditHunk:
    """One search/replace pair inside a multi-edit."""

    search: str
    replace: str
    replace_all: Optional[bool] = None


@dataclass(frozen=True)
class MultiEditAction(Action):
    type: ClassVar[str] = "multi-edit"

    path: str
    edits: tuple[EditHunk, ...] = ()


@dataclass(frozen=True)
class WriteAction(Action):
    type: ClassVar[str] = "write"

    path: str
    content: str


@dataclass(frozen=True)
class CreateAction(Action):
    """Legacy alias of WriteAction."""

    type: ClassVar[str] = "create"

    path: str
    content: str


# ===== Search & Navigation =====


@dataclass(frozen=True)
class GlobAction(Action):
    type: ClassVar[str] = "glob"

    pattern: str
    path: Optional[str] = None


@dataclass(frozen=True)
class GrepAction(Action):
    type: ClassVar[str] = "grep"

    pattern: str
    path: Optional[str] = None  # File or directory to search in
    glob: Optional[str] = None  # Glob pattern to filter files
    output_mode: Optional[str] = None  # content | files_with_matches | count
    context: Optional[int] = None  # -C
    context_before: Optional[int] = None  # -B
    context_after: Optional[int] = None  # -A
    case_insensitive: Optional[bool] = None
    line_numbers: Optional[bool] = None
    head_limit: Optional[int] = None
    multiline: Optional[bool] = None

    def options(self) -> dict[str, Any]:
        """Grep options as passed to the host's on_grep handler."""
        data = asdict(self)
        data.pop("pattern")
        return data


@dataclass(frozen=True)
class LSAction(Action):
    type: ClassVar[str] = "ls"

    path: str
    ignore: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class FormatAction(Action):
    type: ClassVar[str] = "format"

    path: Optional[str] = None


# ===== Shell & Processes =====


@dataclass(frozen=True)
class BashAction(Action):
    type: ClassVar[str] = "bash"

    command: str
    timeout: Optional[int] = None  # Milliseconds
    description: Optional[str] = None
    run_in_background: Optional[bool] = None


@dataclass(frozen=True)
class ExecAction(Action):
    """Legacy alias of BashAction."""

    type: ClassVar[str] = "exec"

    command: str


@dataclass(frozen=True)
class PsAction(Action):
    type: ClassVar[str] = "ps"


@dataclass(frozen=True)
class KillAction(Action):
    type: ClassVar[str] = "kill"

    target: str  # Process ID or PID


@dataclass(frozen=True)
class GitAction(Action):
    type: ClassVar[str] = "git"

    command: str  # status, diff, log, commit, ...
    args: Optional[str] = None


# ===== Web Operations =====


@dataclass(frozen=True)
class FetchAction(Action):
    type: ClassVar[str] = "fetch"

    url: str
    prompt: Optional[str] = None


@dataclass(frozen=True)
class SearchAction(Action):
    type: ClassVar[str] = "search"

    query: str
    allowed_domains: Optional[tuple[str, ...]] = None
    blocked_domains: Optional[tuple[str, ...]] = None


# ===== Scheduling & Notifications =====


@dataclass(frozen=True)
class ScheduleAction(Action):
    """
    A recurring job.

    Exactly one of ``command`` (shell command) and ``prompt`` (LLM prompt) is
    set, chosen by the tag's ``type`` attribute.
    """

    type: ClassVar[str] = "schedule"

    cron: str
    name: str
    command: Optional[str] = None
    prompt: Optional[str] = None

    @property
    def is_prompt(self) -> bool:
        return self.prompt is not None


@dataclass(frozen=True)
class NotifyAction(Action):
    type: ClassVar[str] = "notify"

    message: str
    target: Optional[str] = None


# ===== Skills =====


@dataclass(frozen=True)
class SkillAction(Action):
    type: ClassVar[str] = "skill"

    name: str
    args: Optional[str] = None


@dataclass(frozen=True)
class SkillInstallAction(Action):
    type: ClassVar[str] = "skill-install"

    url: str
    name: Optional[str] = None


# ===== Sub-tasks, Exploration & Planning =====


@dataclass(frozen=True)
class TaskAction(Action):
    type: ClassVar[str] = "task"

    prompt: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ExploreAction(Action):
    type: ClassVar[str] = "explore"

    query: str
    path: Optional[str] = None
    depth: Optional[str] = None  # quick | medium | deep


@dataclass(frozen=True)
class PlanAction(Action):
    type: ClassVar[str] = "plan"

    operation: str  # one of PLAN_OPERATIONS
    id: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None
    status: Optional[PlanItemStatus] = None
    question: Optional[str] = None


# ===== Connector Configuration =====


@dataclass(frozen=True)
class TelegramConfigAction(Action):
    type: ClassVar[str] = "telegram-config"

    bot_token: str
    chat_id: Optional[str] = None  # Auto-detected by the host when missing


@dataclass(frozen=True)
class DiscordConfigAction(Action):
    type: ClassVar[str] = "discord-config"

    bot_token: str
    channel_id: str


# ===== Conversation Control =====


@dataclass(frozen=True)
class SayAction(Action):
    type: ClassVar[str] = "say"

    message: str
    target: Optional[str] = None


@dataclass(frozen=True)
class EndAction(Action):
    type: ClassVar[str] = "end"

    message: str = "Task completed."


@dataclass(frozen=True)
class ContinueAction(Action):
    type: ClassVar[str] = "continue"


# ===== Results =====


@dataclass
class ActionResult:
    """
    Result of executing one action.

    ``error`` is set if and only if ``success`` is false; construction
    enforces this so callers never see a failure without a reason.
    """

    action: str  # Human-readable label, e.g. "Read: src/app.py"
    success: bool
    result: str
    error: Optional[str] = None

    def __post_init__(self):
        if self.success:
            self.error = None
        elif not self.error:
            self.error = self.result or "Failed"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "action": self.action,
            "success": self.success,
            "result": self.result,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class EditResult:
    """Returned by the host's on_edit / on_multi_edit handlers."""

    success: bool
    status: EditStatus
    message: str = ""


@dataclass
class NotifyResult:
    """Returned by the host's on_notify handler."""

    sent: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()


@dataclass
class ConnectorResult:
    """Returned by connector configuration handlers."""

    success: bool
    message: str
    chat_id: Optional[str] = None


@dataclass
class PlanResult:
    """Returned by the host's on_plan handler."""

    success: bool
    message: str
    plan: list[dict] = field(default_factory=list)
    question: Optional[str] = None


# ===== Handler Interface =====

AsyncHandler = Optional[Callable[..., Awaitable[Any]]]


@dataclass
class ActionHandlers:
    """
    Capabilities the host wires up for the executor.

    Each field is an optional async callable. A missing callable means the
    corresponding action type is inert in this host configuration; the
    executor skips it rather than failing.

    Signatures:
        on_read(path, offset=None, limit=None) -> Optional[str]
        on_edit(path, search, replace, replace_all=False) -> EditResult
        on_multi_edit(path, edits: list[EditHunk]) -> EditResult
        on_write(path, content) -> bool
        on_create(path, content) -> bool
        on_glob(pattern, path=None) -> list[str]
        on_grep(pattern, **options) -> str
        on_ls(path, ignore=None) -> list[str]
        on_format(path=None) -> str
        on_bash(command, timeout=None, run_in_background=False) -> str
        on_exec(command) -> str
        on_ps() -> str
        on_kill(target) -> bool
        on_git(command, args=None) -> str
        on_fetch(url, prompt=None) -> str
        on_search(query, allowed_domains=None, blocked_domains=None) -> (str, list[str])
        on_schedule(cron, command_or_prompt, name, is_prompt=False) -> None
        on_notify(message, target=None) -> NotifyResult
        on_skill(name, args=None) -> str
        on_skill_install(url, name=None) -> dict with "name" and "path"
        on_task(prompt, description=None) -> str
        on_explore(query, path=None, depth=None) -> str
        on_plan(operation, **options) -> PlanResult
        on_telegram_config(bot_token, chat_id=None) -> ConnectorResult
        on_discord_config(bot_token, channel_id) -> ConnectorResult
        on_say(message) -> Optional[str]
        on_end(message) -> None
        on_continue() -> None
    """

    # File operations
    on_read: AsyncHandler = None
    on_edit: AsyncHandler = None
    on_multi_edit: AsyncHandler = None
    on_write: AsyncHandler = None
    on_create: AsyncHandler = None

    # Search & navigation
    on_glob: AsyncHandler = None
    on_grep: AsyncHandler = None
    on_ls: AsyncHandler = None
    on_format: AsyncHandler = None

    # Shell & processes
    on_bash: AsyncHandler = None
    on_exec: AsyncHandler = None
    on_ps: AsyncHandler = None
    on_kill: AsyncHandler = None
    on_git: AsyncHandler = None

    # Web
    on_fetch: AsyncHandler = None
    on_search: AsyncHandler = None

    # Scheduling & notifications
    on_schedule: AsyncHandler = None
    on_notify: AsyncHandler = None

    # Skills, sub-tasks and planning
    on_skill: AsyncHandler = None
    on_skill_install: AsyncHandler = None
    on_task: AsyncHandler = None
    on_explore: AsyncHandler = None
    on_plan: AsyncHandler = None

    # Connector configuration
    on_telegram_config: AsyncHandler = None
    on_discord_config: AsyncHandler = None

    # Conversation control
    on_say: AsyncHandler = None
    on_end: AsyncHandler = None
    on_continue: AsyncHandler = None
