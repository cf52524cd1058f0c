"""
Unit tests for agent_actions/handlers/
"""

from unittest.mock import AsyncMock

import pytest

from agent_actions.base import (
    ActionHandlers,
    ActionResult,
    ConnectorResult,
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
from agent_actions.executor import execute_action
from agent_actions.handlers import describe_action, short_text


class TestActionResult:
    """Tests for the ActionResult error invariant."""

    def test_failure_gets_an_error(self):
        assert ActionResult(action="x", success=False, result="Broken").error == "Broken"
        assert ActionResult(action="x", success=False, result="").error == "Failed"

    def test_success_drops_error(self):
        assert ActionResult(action="x", success=True, result="ok", error="stale").error is None

    def test_to_dict(self):
        assert ActionResult(action="x", success=True, result="ok").to_dict() == {
            "action": "x",
            "success": True,
            "result": "ok",
        }
        assert ActionResult(action="x", success=False, result="r", error="e").to_dict()["error"] == "e"


class TestLabels:
    """Tests for describe_action and short_text."""

    def test_labels(self):
        assert describe_action(ReadAction(path="a.py")) == "Read: a.py"
        assert describe_action(CreateAction(path="a.py", content="")) == "Write: a.py"
        assert describe_action(FormatAction()) == "Format: ."
        assert describe_action(SayAction(message="x")) == "Says"

    def test_short_text(self):
        assert short_text("a   b\n c") == "a b c"
        assert short_text("x" * 100, 10) == "xxxxxxx..."


class TestFileHandlers:
    """read, edit, multi-edit, write, create."""

    @pytest.mark.asyncio
    async def test_read_not_found(self):
        handlers = ActionHandlers(on_read=AsyncMock(return_value=None))
        result = await execute_action(ReadAction(path="missing.py"), handlers)
        assert result.success is False
        assert result.error == "File not found"

    @pytest.mark.asyncio
    async def test_read_empty_file_is_success(self):
        handlers = ActionHandlers(on_read=AsyncMock(return_value=""))
        result = await execute_action(ReadAction(path="empty.py", offset=5, limit=10), handlers)
        assert result.success is True
        handlers.on_read.assert_awaited_once_with("empty.py", offset=5, limit=10)

    @pytest.mark.asyncio
    async def test_edit_applied(self):
        handlers = ActionHandlers(on_edit=AsyncMock(return_value=EditResult(True, EditStatus.APPLIED)))
        result = await execute_action(EditAction(path="a.py", search="x", replace="y"), handlers)
        assert (result.success, result.result) == (True, "OK")
        handlers.on_edit.assert_awaited_once_with("a.py", "x", "y", replace_all=False)

    @pytest.mark.asyncio
    async def test_edit_already_applied(self):
        handlers = ActionHandlers(on_edit=AsyncMock(return_value=EditResult(True, EditStatus.ALREADY_APPLIED)))
        result = await execute_action(EditAction(path="a.py", search="x", replace="y"), handlers)
        assert result.result == "Skipped (already applied)"

    @pytest.mark.asyncio
    async def test_edit_not_found_hint(self):
        edit_result = EditResult(False, EditStatus.NOT_FOUND, "Search text not found")
        handlers = ActionHandlers(on_edit=AsyncMock(return_value=edit_result))
        result = await execute_action(EditAction(path="a.py", search="x", replace="y"), handlers)
        assert result.success is False
        assert result.error == 'Search text not found - Use <read path="a.py"/> first to see actual content'

    @pytest.mark.asyncio
    async def test_edit_missing_file_hint(self):
        edit_result = EditResult(False, EditStatus.NOT_FOUND, "File not found: a.py")
        handlers = ActionHandlers(on_edit=AsyncMock(return_value=edit_result))
        result = await execute_action(EditAction(path="a.py", search="x", replace="y"), handlers)
        assert "Use <read> to verify path or <write> to make new file" in result.error

    @pytest.mark.asyncio
    async def test_multi_edit_native(self):
        hunks = (EditHunk("a", "b"), EditHunk("c", "d"))
        handlers = ActionHandlers(
            on_multi_edit=AsyncMock(return_value=EditResult(True, EditStatus.APPLIED)),
            on_edit=AsyncMock(),
        )
        result = await execute_action(MultiEditAction(path="f.py", edits=hunks), handlers)

        assert result.result == "Applied 2 edits"
        handlers.on_multi_edit.assert_awaited_once_with("f.py", list(hunks))
        handlers.on_edit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_multi_edit_falls_back_to_sequential_edits(self):
        hunks = (EditHunk("a", "b"), EditHunk("c", "d", replace_all=True))
        handlers = ActionHandlers(on_edit=AsyncMock(return_value=EditResult(True, EditStatus.APPLIED)))

        result = await execute_action(MultiEditAction(path="f.py", edits=hunks), handlers)

        assert result.success is True
        assert handlers.on_edit.await_count == 2
        handlers.on_edit.assert_any_await("f.py", "c", "d", replace_all=True)

    @pytest.mark.asyncio
    async def test_multi_edit_fallback_stops_at_failure(self):
        hunks = (EditHunk("a", "b"), EditHunk("c", "d"), EditHunk("e", "f"))
        handlers = ActionHandlers(
            on_edit=AsyncMock(
                side_effect=[
                    EditResult(True, EditStatus.ALREADY_APPLIED),
                    EditResult(False, EditStatus.NOT_FOUND, "Search text not found"),
                    EditResult(True, EditStatus.APPLIED),
                ]
            )
        )

        result = await execute_action(MultiEditAction(path="f.py", edits=hunks), handlers)

        assert result.success is False
        assert result.error == "Search text not found"
        assert handlers.on_edit.await_count == 2

    @pytest.mark.asyncio
    async def test_write_falls_back_to_create(self):
        handlers = ActionHandlers(on_create=AsyncMock(return_value=True))
        result = await execute_action(WriteAction(path="a.py", content="x"), handlers)
        assert result.success is True
        handlers.on_create.assert_awaited_once_with("a.py", "x")

    @pytest.mark.asyncio
    async def test_write_failure(self):
        handlers = ActionHandlers(on_write=AsyncMock(return_value=False))
        result = await execute_action(WriteAction(path="a.py", content="x"), handlers)
        assert (result.success, result.error) == (False, "Failed to write file")

    @pytest.mark.asyncio
    async def test_create_prefers_on_create(self):
        handlers = ActionHandlers(on_write=AsyncMock(return_value=True), on_create=AsyncMock(return_value=True))
        await execute_action(CreateAction(path="a.py", content="x"), handlers)
        handlers.on_create.assert_awaited_once()
        handlers.on_write.assert_not_awaited()


class TestSearchHandlers:
    """glob, grep, ls, format."""

    @pytest.mark.asyncio
    async def test_glob(self):
        handlers = ActionHandlers(on_glob=AsyncMock(return_value=["a.py", "b.py"]))
        result = await execute_action(GlobAction(pattern="*.py"), handlers)
        assert result.result == "a.py\nb.py"

    @pytest.mark.asyncio
    async def test_glob_empty(self):
        handlers = ActionHandlers(on_glob=AsyncMock(return_value=[]))
        result = await execute_action(GlobAction(pattern="*.rs"), handlers)
        assert result.result == "No files found"

    @pytest.mark.asyncio
    async def test_grep_forwards_only_set_options(self):
        handlers = ActionHandlers(on_grep=AsyncMock(return_value="a.py:1:def main"))
        action = GrepAction(pattern="def main", path="src", case_insensitive=True)
        await execute_action(action, handlers)
        handlers.on_grep.assert_awaited_once_with("def main", path="src", case_insensitive=True)

    @pytest.mark.asyncio
    async def test_ls(self):
        handlers = ActionHandlers(on_ls=AsyncMock(return_value=[]))
        result = await execute_action(LSAction(path="src", ignore=("*.pyc",)), handlers)
        assert result.result == "Empty directory"
        handlers.on_ls.assert_awaited_once_with("src", ignore=["*.pyc"])

    @pytest.mark.asyncio
    async def test_format(self):
        handlers = ActionHandlers(on_format=AsyncMock(return_value=""))
        result = await execute_action(FormatAction(path="src"), handlers)
        assert result.result == "Formatted"


class TestShellHandlers:
    """bash, exec, ps, kill, git."""

    @pytest.mark.asyncio
    async def test_exec_falls_back_to_bash(self):
        handlers = ActionHandlers(on_bash=AsyncMock(return_value=""))
        result = await execute_action(ExecAction(command="make"), handlers)
        assert result.result == "(no output)"
        handlers.on_bash.assert_awaited_once_with("make")

    @pytest.mark.asyncio
    async def test_kill_failure(self):
        handlers = ActionHandlers(on_kill=AsyncMock(return_value=False))
        result = await execute_action(KillAction(target="proc-1"), handlers)
        assert (result.success, result.error) == (False, "Could not kill process proc-1")

    @pytest.mark.asyncio
    async def test_git(self):
        handlers = ActionHandlers(on_git=AsyncMock(return_value="On branch main"))
        result = await execute_action(GitAction(command="status"), handlers)
        assert (result.action, result.result) == ("Git: status", "On branch main")
        handlers.on_git.assert_awaited_once_with("status", args=None)


class TestWebHandlers:
    """fetch and search."""

    @pytest.mark.asyncio
    async def test_fetch(self):
        handlers = ActionHandlers(on_fetch=AsyncMock(return_value="<html>"))
        result = await execute_action(FetchAction(url="https://example.com", prompt="title?"), handlers)
        assert result.result == "<html>"
        handlers.on_fetch.assert_awaited_once_with("https://example.com", prompt="title?")

    @pytest.mark.asyncio
    async def test_search_citations(self):
        handlers = ActionHandlers(on_search=AsyncMock(return_value=("Answer", ["https://a.com", "https://b.com"])))
        action = SearchAction(query="q", allowed_domains=("a.com",))
        result = await execute_action(action, handlers)

        assert result.result == "Answer\n\nSources:\n- https://a.com\n- https://b.com"
        handlers.on_search.assert_awaited_once_with("q", allowed_domains=["a.com"], blocked_domains=None)


class TestSchedulingHandlers:
    """schedule and notify."""

    @pytest.mark.asyncio
    async def test_schedule_command(self):
        handlers = ActionHandlers(on_schedule=AsyncMock())
        action = ScheduleAction(cron="0 9 * * *", name="backup", command="./backup.sh")
        result = await execute_action(action, handlers)

        assert result.result == "Scheduled: 0 9 * * *"
        handlers.on_schedule.assert_awaited_once_with("0 9 * * *", "./backup.sh", "backup", is_prompt=False)

    @pytest.mark.asyncio
    async def test_schedule_prompt(self):
        handlers = ActionHandlers(on_schedule=AsyncMock())
        action = ScheduleAction(cron="0 8 * * *", name="news", prompt="Summarize news")
        result = await execute_action(action, handlers)
        assert result.result == "Scheduled: 0 8 * * * (AI-powered)"

    @pytest.mark.asyncio
    async def test_notify_partial_delivery(self):
        handlers = ActionHandlers(on_notify=AsyncMock(return_value=NotifyResult(sent=("telegram",), failed=("discord",))))
        result = await execute_action(NotifyAction(message="done"), handlers)
        assert result.success is True
        assert result.result == "Sent to telegram (failed: discord)"

    @pytest.mark.asyncio
    async def test_notify_nothing_sent(self):
        handlers = ActionHandlers(on_notify=AsyncMock(return_value=NotifyResult(failed=("discord",))))
        result = await execute_action(NotifyAction(message="done", target="discord"), handlers)
        assert (result.success, result.error) == (False, "Failed: discord")
        handlers.on_notify.assert_awaited_once_with("done", target="discord")

    @pytest.mark.asyncio
    async def test_notify_without_handler(self):
        assert await execute_action(NotifyAction(message="x"), ActionHandlers()) is None


class TestTaskHandlers:
    """skill, skill-install, task, explore, plan."""

    @pytest.mark.asyncio
    async def test_skill(self):
        handlers = ActionHandlers(on_skill=AsyncMock(return_value="skill output"))
        result = await execute_action(SkillAction(name="git-context"), handlers)
        assert result.result == "skill output"
        handlers.on_skill.assert_awaited_once_with("git-context", args=None)

    @pytest.mark.asyncio
    async def test_skill_install(self):
        handlers = ActionHandlers(on_skill_install=AsyncMock(return_value={"name": "lint", "path": "/skills/lint"}))
        result = await execute_action(SkillInstallAction(url="https://x/lint"), handlers)
        assert result.result == "Installed skill lint to /skills/lint"

    @pytest.mark.asyncio
    async def test_task(self):
        handlers = ActionHandlers(on_task=AsyncMock(return_value="report"))
        result = await execute_action(TaskAction(prompt="audit", description="Audit"), handlers)
        assert result.result == "report"
        handlers.on_task.assert_awaited_once_with("audit", description="Audit")

    @pytest.mark.asyncio
    async def test_explore(self):
        handlers = ActionHandlers(on_explore=AsyncMock(return_value=""))
        result = await execute_action(ExploreAction(query="auth", depth="quick"), handlers)
        assert result.result == "Nothing found"
        handlers.on_explore.assert_awaited_once_with("auth", path=None, depth="quick")

    @pytest.mark.asyncio
    async def test_plan_status_passed_as_value(self):
        handlers = ActionHandlers(on_plan=AsyncMock(return_value=PlanResult(True, "Updated")))
        action = PlanAction(operation="update", id="2", status=PlanItemStatus.IN_PROGRESS)
        result = await execute_action(action, handlers)

        assert result.result == "Updated"
        handlers.on_plan.assert_awaited_once_with(
            "update", id="2", content=None, description=None, status="in_progress", question=None
        )

    @pytest.mark.asyncio
    async def test_plan_ask(self):
        handlers = ActionHandlers(
            on_plan=AsyncMock(return_value=PlanResult(True, "Waiting", question="Which database?"))
        )
        result = await execute_action(PlanAction(operation="ask", question="Which database?"), handlers)
        assert result.result == "Waiting\n\nQuestion: Which database?"

    @pytest.mark.asyncio
    async def test_plan_failure(self):
        handlers = ActionHandlers(on_plan=AsyncMock(return_value=PlanResult(False, "No such item")))
        result = await execute_action(PlanAction(operation="complete", id="9"), handlers)
        assert (result.success, result.error) == (False, "No such item")


class TestConnectorAndConversationHandlers:
    """telegram-config, discord-config, say, end, continue."""

    @pytest.mark.asyncio
    async def test_telegram(self, caplog):
        handlers = ActionHandlers(
            on_telegram_config=AsyncMock(return_value=ConnectorResult(True, "Telegram connected", chat_id="42"))
        )
        with caplog.at_level("INFO", logger="agent_actions.handlers.connectors"):
            result = await execute_action(TelegramConfigAction(bot_token="t"), handlers)

        assert result.result == "Telegram connected"
        assert "Telegram configured (chat_id: 42)" in caplog.text
        handlers.on_telegram_config.assert_awaited_once_with("t", chat_id=None)

    @pytest.mark.asyncio
    async def test_discord_failure(self):
        handlers = ActionHandlers(on_discord_config=AsyncMock(return_value=ConnectorResult(False, "Invalid token")))
        result = await execute_action(DiscordConfigAction(bot_token="t", channel_id="1"), handlers)
        assert (result.success, result.error) == (False, "Invalid token")

    @pytest.mark.asyncio
    async def test_say_rendered_by_host(self):
        handlers = ActionHandlers(on_say=AsyncMock(return_value="[bot] hi"))
        result = await execute_action(SayAction(message="  hi  "), handlers)
        assert result.result == "[bot] hi"
        handlers.on_say.assert_awaited_once_with("hi")

    @pytest.mark.asyncio
    async def test_say_to_target_uses_notify(self):
        handlers = ActionHandlers(on_notify=AsyncMock(return_value=NotifyResult(sent=("telegram",))))
        result = await execute_action(SayAction(message="hi", target="telegram"), handlers)
        assert result.result == "Message to telegram: Sent to telegram"

    @pytest.mark.asyncio
    async def test_end_without_handler(self):
        assert await execute_action(EndAction(), ActionHandlers()) is None
