"""Tests for ContextTracker against a fake event-emitting session."""

import asyncio
import pytest

from mcp_browser_context.tracker import ContextTracker
from mcp_browser_context.constants import NATIVE_APP, UNIT_TESTS_ENV

from _utils import FakeSession

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture(autouse=True)
def _tracking_allowed(monkeypatch):
    monkeypatch.delenv(UNIT_TESTS_ENV, raising=False)


class TestEnablement:

    @pytest.mark.parametrize("bidi,mobile", [(True, False), (False, True), (True, True)])
    def test_enabled_for_context_aware_sessions(self, bidi, mobile):
        session = FakeSession(bidi=bidi, mobile=mobile)
        tracker = ContextTracker(session)
        assert tracker.enabled
        assert len(session.listeners["command"]) == 1
        assert len(session.listeners["result"]) == 1

    def test_disabled_for_classic_session(self, event_loop):
        session = FakeSession(bidi=False, mobile=False)
        tracker = ContextTracker(session)

        assert not tracker.enabled
        assert session.listeners == {"command": [], "result": []}
        assert event_loop.run_until_complete(tracker.get_current_context()) == ""
        assert event_loop.run_until_complete(tracker.initialize()) == ""
        assert session.fetch_calls == 0
        assert tracker.current_context is None

    def test_disabled_in_unit_test_mode(self, monkeypatch, event_loop):
        monkeypatch.setenv(UNIT_TESTS_ENV, "1")
        session = FakeSession(bidi=True, mobile=True)
        tracker = ContextTracker(session)

        assert not tracker.enabled
        assert session.listeners == {"command": [], "result": []}
        assert event_loop.run_until_complete(tracker.get_current_context()) == ""
        assert session.fetch_calls == 0

    def test_enablement_is_not_reevaluated(self, monkeypatch):
        session = FakeSession(bidi=True)
        tracker = ContextTracker(session)
        monkeypatch.setenv(UNIT_TESTS_ENV, "1")
        session.supports_context_protocol = False
        assert tracker.enabled

    def test_disabled_setter_is_noop(self):
        session = FakeSession(bidi=False, mobile=False, native=False)
        tracker = ContextTracker(session)
        tracker.set_current_context(NATIVE_APP)
        assert tracker.current_context is None
        assert session.is_native_context is False


class TestLazyInitialization:

    def test_fetches_window_handle_once(self, event_loop):
        session = FakeSession(handle="h-main")
        tracker = ContextTracker(session)

        first = event_loop.run_until_complete(tracker.get_current_context())
        second = event_loop.run_until_complete(tracker.get_current_context())

        assert first == second == "h-main"
        assert session.fetch_calls == 1

    def test_native_session_uses_sentinel_without_fetch(self, event_loop):
        session = FakeSession(bidi=False, mobile=True, native=True)
        tracker = ContextTracker(session)

        assert event_loop.run_until_complete(tracker.get_current_context()) == NATIVE_APP
        assert session.fetch_calls == 0

    def test_fetch_failure_propagates_and_retries(self, event_loop):
        error = RuntimeError("no such window")
        session = FakeSession(fetch_error=error)
        tracker = ContextTracker(session)

        with pytest.raises(RuntimeError) as excinfo:
            event_loop.run_until_complete(tracker.get_current_context())
        assert excinfo.value is error
        assert tracker.current_context is None

        session.fetch_error = None
        assert event_loop.run_until_complete(tracker.get_current_context()) == "h-main"
        assert session.fetch_calls == 2

    def test_initialize_leaves_native_flag_alone(self, event_loop):
        session = FakeSession(handle="h-main", native=False)
        tracker = ContextTracker(session)
        event_loop.run_until_complete(tracker.initialize())
        assert session.is_native_context is False

    def test_initialize_overwrites_existing_context(self, event_loop):
        session = FakeSession(handle="h-main")
        tracker = ContextTracker(session)
        tracker.set_current_context("h1")
        assert event_loop.run_until_complete(tracker.initialize()) == "h-main"
        assert tracker.current_context == "h-main"

    def test_initialize_keeps_remembered_mobile_context(self, event_loop):
        session = FakeSession(bidi=False, mobile=True, native=True)
        tracker = ContextTracker(session)
        session.command("switchContext", name="WEBVIEW_1")
        event_loop.run_until_complete(tracker.initialize())
        assert tracker.mobile_context == "WEBVIEW_1"


class TestCommandEvents:

    def test_switch_to_window_sets_context_without_fetch(self, event_loop):
        session = FakeSession()
        tracker = ContextTracker(session)

        session.command("switchToWindow", handle="h1")

        assert event_loop.run_until_complete(tracker.get_current_context()) == "h1"
        assert session.fetch_calls == 0
        assert session.is_native_context is False

    @pytest.mark.parametrize("command", ["switchToParentFrame", "refresh"])
    def test_reset_commands_force_reinitialization(self, command, event_loop):
        session = FakeSession(handle="h-main")
        tracker = ContextTracker(session)
        session.command("switchToWindow", handle="h1")

        session.command(command)

        assert not tracker.current_context
        assert event_loop.run_until_complete(tracker.get_current_context()) == "h-main"
        assert session.fetch_calls == 1

    def test_reset_command_keeps_native_flag(self):
        session = FakeSession(mobile=True)
        tracker = ContextTracker(session)
        tracker.set_current_context(NATIVE_APP)
        session.command("refresh")
        assert session.is_native_context is True
        assert not tracker.current_context

    def test_reset_command_reapplies_handle_when_present(self):
        session = FakeSession()
        tracker = ContextTracker(session)
        session.command("switchToParentFrame", handle="h2")
        assert tracker.current_context == "h2"

    def test_switch_context_command_only_remembers_name(self):
        session = FakeSession(mobile=True)
        tracker = ContextTracker(session)
        session.command("switchContext", name="WEBVIEW_1")
        assert tracker.mobile_context == "WEBVIEW_1"
        assert tracker.current_context is None

    def test_unrelated_commands_are_ignored(self):
        session = FakeSession()
        tracker = ContextTracker(session)
        session.command("switchToWindow", handle="h1")
        session.command("get", url="https://example.com")
        session.command("findElement", using="css selector", value="a")
        assert tracker.current_context == "h1"

    def test_malformed_records_are_tolerated(self):
        session = FakeSession()
        tracker = ContextTracker(session)
        session.emit("command", {"command": "switchToWindow"})
        session.emit("command", {})
        session.emit("result", {"command": "getContext"})
        session.emit("result", None)
        assert not tracker.current_context

    def test_switch_context_result_without_value_keeps_context(self):
        session = FakeSession(bidi=False, mobile=True, native=True)
        tracker = ContextTracker(session)
        tracker.set_current_context(NATIVE_APP)
        session.command("switchContext", name="WEBVIEW_1")
        session.emit("result", {"command": "switchContext", "result": {}})
        session.emit("result", {"command": "switchContext"})
        assert tracker.current_context == NATIVE_APP
        assert session.is_native_context is True


class TestResultEvents:

    def test_get_context_result_sets_web_context(self):
        session = FakeSession(mobile=True, native=True)
        tracker = ContextTracker(session)
        session.result("getContext", "ctx-42")
        assert tracker.current_context == "ctx-42"
        assert session.is_native_context is False

    def test_get_context_result_sets_native_context(self):
        session = FakeSession(mobile=True, native=False)
        tracker = ContextTracker(session)
        session.result("getContext", "NATIVE_APP")
        assert tracker.current_context == NATIVE_APP
        assert session.is_native_context is True

    def test_null_switch_context_result_falls_back_to_requested_name(self, event_loop):
        session = FakeSession(mobile=True, native=True)
        tracker = ContextTracker(session)

        session.command("switchContext", name="WEBVIEW_1")
        session.result("switchContext", None)

        assert event_loop.run_until_complete(tracker.get_current_context()) == "WEBVIEW_1"
        assert session.is_native_context is False
        assert session.fetch_calls == 0

    def test_null_switch_context_result_without_request_is_ignored(self):
        session = FakeSession(mobile=True)
        tracker = ContextTracker(session)
        session.result("switchContext", None)
        assert tracker.current_context is None

    def test_non_null_switch_context_result_does_not_fall_back(self):
        session = FakeSession(mobile=True)
        tracker = ContextTracker(session)
        session.command("switchContext", name="WEBVIEW_1")
        session.result("switchContext", "ack")
        assert tracker.current_context is None

    def test_failed_switch_context_does_not_fall_back(self):
        session = FakeSession(mobile=True)
        tracker = ContextTracker(session)
        session.command("switchContext", name="WEBVIEW_9")
        session.emit("result", {"command": "switchContext", "result": {"error": "no such context"}})
        assert tracker.current_context is None
        assert tracker.mobile_context == "WEBVIEW_9"


class TestSetter:

    def test_empty_context_leaves_flag_and_forces_reinit(self, event_loop):
        session = FakeSession(handle="h-main", native=True, mobile=True)
        tracker = ContextTracker(session)
        session.is_native_context = False
        tracker.set_current_context("h1")

        session.is_native_context = True
        tracker.set_current_context("")

        assert session.is_native_context is True
        assert tracker.current_context == ""
        # native flag is set, so re-initialization resolves to the sentinel
        assert event_loop.run_until_complete(tracker.get_current_context()) == NATIVE_APP

    def test_overwrites_with_equal_value(self):
        session = FakeSession()
        tracker = ContextTracker(session)
        tracker.set_current_context("h1")
        tracker.set_current_context("h1")
        assert tracker.current_context == "h1"


class TestConcurrency:

    def test_initialization_overwrites_switch_observed_mid_fetch(self, event_loop):
        session = FakeSession(handle="h-main")
        tracker = ContextTracker(session)

        async def scenario():
            pending = asyncio.ensure_future(tracker.get_current_context())
            await asyncio.sleep(0)
            session.command("switchToWindow", handle="h-other")
            return await pending

        assert event_loop.run_until_complete(scenario()) == "h-main"
        assert tracker.current_context == "h-main"
