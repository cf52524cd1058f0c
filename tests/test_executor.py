"""
Unit tests for agent_actions/executor.py
"""

from dataclasses import dataclass
from typing import ClassVar
from unittest.mock import AsyncMock

import pytest

from agent_actions.base import (
    Action,
    ActionHandlers,
    BashAction,
    ContinueAction,
    EndAction,
    PsAction,
    ReadAction,
    SayAction,
    WriteAction,
)
from agent_actions.executor import EXECUTORS, TRANSPARENT_TYPES, execute_action, execute_actions, pending_notice
from agent_actions.parser import parse_actions


@dataclass(frozen=True)
class MysteryAction(Action):
    type: ClassVar[str] = "mystery"


def _read_handlers():
    return ActionHandlers(on_read=AsyncMock(side_effect=lambda path, **kw: f"contents of {path}"))


class TestDispatchTable:
    """Tests for the static executor table."""

    def test_every_action_type_has_an_executor(self):
        expected = {
            "read", "edit", "multi-edit", "write", "create", "glob", "grep", "ls", "format",
            "bash", "exec", "ps", "kill", "git", "fetch", "search", "schedule", "notify",
            "skill", "skill-install", "task", "explore", "plan", "telegram-config",
            "discord-config", "say", "end", "continue",
        }
        assert set(EXECUTORS) == expected

    def test_transparent_types(self):
        assert TRANSPARENT_TYPES == {"say", "continue"}


class TestExecuteAction:
    """Tests for execute_action."""

    @pytest.mark.asyncio
    async def test_unknown_type(self, caplog):
        assert await execute_action(MysteryAction(), ActionHandlers()) is None
        assert "No executor for action type: mystery" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_handler(self):
        assert await execute_action(ReadAction(path="a"), ActionHandlers()) is None

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self, caplog):
        handlers = ActionHandlers(on_bash=AsyncMock(side_effect=TimeoutError("command timed out")))
        result = await execute_action(BashAction(command="sleep 999"), handlers)

        assert result.success is False
        assert result.error == "command timed out"
        assert result.action == "Bash: sleep 999"
        assert "Action execution error: Bash: sleep 999" in caplog.text

    @pytest.mark.asyncio
    async def test_exception_without_message(self):
        handlers = ActionHandlers(on_ps=AsyncMock(side_effect=RuntimeError()))
        result = await execute_action(PsAction(), handlers)
        assert result.error == "RuntimeError"


class TestOneAtATime:
    """Tests for the one-at-a-time policy."""

    @pytest.mark.asyncio
    async def test_two_reads_default(self, registry):
        actions = parse_actions('<read path="/file1.ts"/><read path="/file2.ts"/>', registry)
        handlers = _read_handlers()

        results = await execute_actions(actions, handlers)

        assert len(actions) == 2
        assert len(results) == 1
        assert results[0].action == "Read: /file1.ts"
        assert results[0].result.startswith("contents of /file1.ts")
        handlers.on_read.assert_awaited_once_with("/file1.ts", offset=None, limit=None)

    @pytest.mark.asyncio
    async def test_all_actions_when_disabled(self):
        actions = [ReadAction(path=str(i)) for i in range(4)]
        results = await execute_actions(actions, _read_handlers(), one_at_a_time=False)
        assert [r.action for r in results] == ["Read: 0", "Read: 1", "Read: 2", "Read: 3"]

    @pytest.mark.asyncio
    async def test_default_comes_from_settings(self, monkeypatch):
        monkeypatch.setenv("AGENT_ACTIONS_ONE_AT_A_TIME", "false")
        actions = [ReadAction(path="a"), ReadAction(path="b")]
        results = await execute_actions(actions, _read_handlers())
        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_single_action_has_no_notice(self):
        results = await execute_actions([ReadAction(path="a")], _read_handlers())
        assert results[0].result == "contents of a"

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await execute_actions([], ActionHandlers()) == []


class TestPendingNotice:
    """Tests for the [PENDING: ...] notice."""

    def test_notice_names_skipped_actions(self):
        notice = pending_notice([BashAction(command="npm test"), WriteAction(path="a", content="x")])
        assert "[PENDING: 2 action(s) not yet executed: bash: npm test, write." in notice

    @pytest.mark.asyncio
    async def test_appended_to_last_result(self):
        handlers = ActionHandlers(
            on_read=AsyncMock(return_value="data"),
            on_bash=AsyncMock(return_value="ok"),
        )
        actions = [ReadAction(path="a"), BashAction(command="ls -la")]
        results = await execute_actions(actions, handlers)

        assert len(results) == 1
        assert results[0].result.startswith("data\n\n[PENDING: 1 action(s) not yet executed: bash: ls -la")
        handlers.on_bash.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notice_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("AGENT_ACTIONS_PENDING_NOTICE", "false")
        results = await execute_actions([ReadAction(path="a"), ReadAction(path="b")], _read_handlers())
        assert results[0].result == "contents of a"


class TestTransparentActions:
    """say and continue always run and never take the slot."""

    @pytest.mark.asyncio
    async def test_say_runs_first_and_does_not_consume_slot(self):
        handlers = _read_handlers()
        actions = [ReadAction(path="a"), SayAction(message="Looking now"), ReadAction(path="b")]

        results = await execute_actions(actions, handlers)

        assert [r.action for r in results] == ["Says", "Read: a"]
        assert results[0].result == "Looking now"

    @pytest.mark.asyncio
    async def test_continue_with_handler(self):
        handlers = ActionHandlers(on_continue=AsyncMock(), on_end=AsyncMock())
        results = await execute_actions([EndAction(message="done"), ContinueAction()], handlers)

        assert [r.action for r in results] == ["Continue", "End"]
        handlers.on_continue.assert_awaited_once()
        handlers.on_end.assert_awaited_once_with("done")

    @pytest.mark.asyncio
    async def test_only_transparent(self):
        results = await execute_actions([SayAction(message="a"), SayAction(message="b")], ActionHandlers())
        assert [r.result for r in results] == ["a", "b"]


class TestFailures:
    """One failing action never aborts the batch."""

    @pytest.mark.asyncio
    async def test_failure_then_success(self):
        handlers = ActionHandlers(
            on_bash=AsyncMock(side_effect=OSError("permission denied")),
            on_read=AsyncMock(return_value="ok"),
        )
        results = await execute_actions(
            [BashAction(command="./deploy"), ReadAction(path="a")], handlers, one_at_a_time=False
        )

        assert [r.success for r in results] == [False, True]
        assert results[0].error == "permission denied"

    @pytest.mark.asyncio
    async def test_skipped_handlers_produce_no_result(self):
        handlers = ActionHandlers(on_read=AsyncMock(return_value="ok"))
        results = await execute_actions(
            [BashAction(command="ls"), ReadAction(path="a"), MysteryAction()], handlers, one_at_a_time=False
        )
        assert [r.action for r in results] == ["Read: a"]
