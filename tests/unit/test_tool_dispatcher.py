"""Unit tests for ToolDispatcher: session lifecycle, validation and step execution."""

import asyncio
import json
import logging

import pytest

from testrunnermcp.components.engine.interface import EngineConnectionError
from testrunnermcp.components.session_registry import SessionRegistry
from testrunnermcp.components.tool_dispatcher import ToolDispatcher
from testrunnermcp.models.session_models import EngineResult, SessionType
from tests.unit.helpers.fake_engine import FakeEngine


# =============================================================================
# open_session
# =============================================================================


class TestOpenSession:
    @pytest.mark.asyncio
    async def test_web_scenario_registers_session(self, dispatcher, registry, engine):
        response = await dispatcher.open_session(type="web", url="https://example.com")

        assert registry.current_id == "abc"
        assert registry.current_type() is SessionType.WEB
        assert response.structured_content == {"sessionType": "web", "sessionId": "abc"}
        assert "Session successfully created for type web with ID: abc !" in response.text

    @pytest.mark.asyncio
    async def test_web_without_url_never_calls_engine(self, dispatcher, registry, engine):
        response = await dispatcher.open_session(type="web")

        assert engine.calls == []
        assert registry.current is None
        assert response.structured_content["sessionId"] is None
        assert response.texts == ["Error: Url must be provided to open a web session."]

    @pytest.mark.asyncio
    async def test_web_without_browser_matches_explicit_chrome(self):
        implicit_engine, explicit_engine = FakeEngine(), FakeEngine()
        implicit = ToolDispatcher(SessionRegistry(), implicit_engine)
        explicit = ToolDispatcher(SessionRegistry(), explicit_engine)

        r1 = await implicit.open_session(type="web", url="https://example.com")
        r2 = await explicit.open_session(type="web", url="https://example.com", browser="chrome")

        assert implicit_engine.calls == explicit_engine.calls
        assert r1.to_dict() == r2.to_dict()
        run_data = implicit_engine.calls_to("open_session")[0]["run_data"]
        assert run_data["runConfiguration"]["sessions"][0]["browser"]["name"] == "chrome"

    @pytest.mark.asyncio
    async def test_mobile_session_needs_no_url(self, dispatcher, registry, engine):
        response = await dispatcher.open_session(type="mobile")

        run_data = engine.calls_to("open_session")[0]["run_data"]
        assert run_data["runConfiguration"]["sessions"] == [{"type": "mobile"}]
        assert registry.current_type() is SessionType.MOBILE
        assert response.structured_content == {"sessionType": "mobile", "sessionId": "abc"}

    @pytest.mark.asyncio
    async def test_engine_failure_leaves_registry_untouched(self, dispatcher, open_web_session, engine):
        engine.open_result = EngineResult(success=False, message="no driver")

        response = await dispatcher.open_session(type="api")

        assert open_web_session.current_id == "abc"
        assert open_web_session.current_type() is SessionType.WEB
        assert response.structured_content == {"sessionType": "api", "sessionId": None}
        assert "Failed to create session." in response.text

    @pytest.mark.asyncio
    async def test_success_without_session_id_counts_as_failure(self, dispatcher, registry, engine):
        engine.open_result = EngineResult(success=True, session_id=None)

        response = await dispatcher.open_session(type="api")

        assert registry.current is None
        assert response.structured_content["sessionId"] is None

    @pytest.mark.asyncio
    async def test_new_session_supersedes_previous(self, dispatcher, registry, engine, caplog):
        engine.next_session_ids = ["first", "second"]
        await dispatcher.open_session(type="web", url="https://a.example")

        with caplog.at_level(logging.WARNING):
            await dispatcher.open_session(type="api")

        assert registry.current_id == "second"
        assert registry.current_type() is SessionType.API
        # The previous runner session is not closed on our side
        assert engine.calls_to("close_session") == []
        assert "first" in caplog.text

    @pytest.mark.asyncio
    async def test_engine_exception_propagates(self, dispatcher, registry, engine):
        engine.raise_on["open_session"] = EngineConnectionError("runner down")

        with pytest.raises(EngineConnectionError):
            await dispatcher.open_session(type="api")
        assert registry.current is None


# =============================================================================
# close_session
# =============================================================================


class TestCloseSession:
    @pytest.mark.asyncio
    async def test_close_clears_registry(self, dispatcher, open_web_session, engine):
        response = await dispatcher.close_session("abc")

        assert engine.calls_to("close_session") == [{"session_id": "abc"}]
        assert open_web_session.current is None
        assert response.structured_content is None
        assert "Session successfully closed!" in response.text

    @pytest.mark.asyncio
    async def test_close_failure_keeps_registry(self, dispatcher, open_web_session, engine):
        engine.close_result = EngineResult(success=False)

        response = await dispatcher.close_session("abc")

        assert open_web_session.current_id == "abc"
        assert "Failed to close session." in response.text

    @pytest.mark.asyncio
    async def test_close_failure_reports_runner_message(self, dispatcher, open_web_session, engine):
        engine.close_result = EngineResult(success=False, message="driver crashed")

        response = await dispatcher.close_session("abc")

        assert response.text.endswith("Failed to close session. driver crashed")

    @pytest.mark.asyncio
    async def test_close_wrong_id_is_rejected(self, dispatcher, open_web_session, engine):
        response = await dispatcher.close_session("zzz")

        assert engine.calls == []
        assert open_web_session.current_id == "abc"
        assert response.structured_content is None
        assert 'Session ID "zzz"' in response.text

    @pytest.mark.asyncio
    async def test_closed_id_fails_validation_everywhere(self, dispatcher, open_web_session, engine):
        await dispatcher.close_session("abc")
        engine.calls.clear()

        ax = await dispatcher.get_accessibility_tree("abc")
        dom = await dispatcher.get_dom_tree("abc")
        step = await dispatcher.do_step("abc", "click")
        again = await dispatcher.close_session("abc")

        assert engine.calls == []
        assert ax.structured_content == {"axtree": None}
        assert dom.structured_content == {"domtree": None}
        assert step.structured_content == {"result": False}
        assert again.structured_content is None


# =============================================================================
# Tree retrieval
# =============================================================================


class TestTrees:
    @pytest.mark.asyncio
    async def test_accessibility_tree_success(self, dispatcher, open_web_session, engine):
        response = await dispatcher.get_accessibility_tree("abc", selector="#main")

        assert engine.calls_to("get_ax_tree") == [{"session_id": "abc", "selector": "#main"}]
        assert response.structured_content == {"axtree": engine.ax_result.tree}
        assert len(response.texts) == 2
        assert "Accessibility tree retrieved successfully!!" in response.texts[0]
        assert json.loads(response.texts[1]) == engine.ax_result.tree
        assert response.texts[1] == json.dumps(engine.ax_result.tree, indent=2)

    @pytest.mark.asyncio
    async def test_accessibility_tree_failure(self, dispatcher, open_web_session, engine):
        engine.ax_result = EngineResult(success=False)

        response = await dispatcher.get_accessibility_tree("abc")

        assert response.structured_content == {"axtree": None}
        assert len(response.texts) == 1
        assert "Failed to retrieve accessibility tree." in response.text

    @pytest.mark.asyncio
    async def test_accessibility_tree_failure_reports_runner_message(
        self, dispatcher, open_web_session, engine
    ):
        engine.ax_result = EngineResult(success=False, message="page not loaded")

        response = await dispatcher.get_accessibility_tree("abc")

        assert response.text.endswith("Failed to retrieve accessibility tree. page not loaded")
        assert response.structured_content == {"axtree": None}

    @pytest.mark.asyncio
    async def test_dom_tree_default_depth(self, dispatcher, open_web_session, engine):
        response = await dispatcher.get_dom_tree("abc")

        assert engine.calls_to("get_dom_tree") == [
            {"session_id": "abc", "depth": 30, "selector": None}
        ]
        assert response.structured_content == {"domtree": engine.dom_result.tree}

    @pytest.mark.asyncio
    async def test_dom_tree_depth_not_capped(self, dispatcher, open_web_session, engine):
        await dispatcher.get_dom_tree("abc", depth=5000, selector="body")
        assert engine.calls_to("get_dom_tree")[0]["depth"] == 5000

    @pytest.mark.asyncio
    async def test_dom_tree_none_depth_uses_default(self, dispatcher, open_web_session, engine):
        await dispatcher.get_dom_tree("abc", depth=None)
        assert engine.calls_to("get_dom_tree")[0]["depth"] == 30

    @pytest.mark.asyncio
    async def test_dom_tree_scenario_wrong_session(self, dispatcher, open_web_session, engine):
        response = await dispatcher.get_dom_tree("zzz")

        assert engine.calls == []
        assert response.structured_content == {"domtree": None}

    @pytest.mark.asyncio
    async def test_dom_tree_failure(self, dispatcher, open_web_session, engine):
        engine.dom_result = EngineResult(success=False)

        response = await dispatcher.get_dom_tree("abc")

        assert response.structured_content == {"domtree": None}
        assert "Failed to retrieve DOM tree." in response.text

    @pytest.mark.asyncio
    async def test_dom_tree_failure_reports_runner_message(self, dispatcher, open_web_session, engine):
        engine.dom_result = EngineResult(success=False, message="selector matched nothing")

        response = await dispatcher.get_dom_tree("abc", selector="#missing")

        assert response.text.endswith("Failed to retrieve DOM tree. selector matched nothing")
        assert response.structured_content == {"domtree": None}


# =============================================================================
# do_step
# =============================================================================


class TestDoStep:
    @pytest.mark.asyncio
    async def test_click_scenario(self, dispatcher, open_web_session, engine):
        response = await dispatcher.do_step(
            "abc",
            "click",
            selectors=["aria/Submit", "button=Submit"],
            position=-1,
        )

        call = engine.calls_to("run_session")[0]
        assert call["session_id"] == "abc"
        step = call["run_data"]["suites"][0]["tests"][0]["steps"][0]
        assert step == {"command": "click", "selectors": ["aria/Submit", "button=Submit"]}
        assert response.structured_content == {"result": True}
        assert "Step executed successfully!" in response.text

    @pytest.mark.asyncio
    async def test_uses_registry_type(self, dispatcher, registry, engine):
        registry.set_current("abc", SessionType.MOBILE)

        await dispatcher.do_step("abc", "tap")

        test = engine.calls_to("run_session")[0]["run_data"]["suites"][0]["tests"][0]
        assert test["type"] == "mobile"

    @pytest.mark.asyncio
    async def test_position_zero_is_sent(self, dispatcher, open_web_session, engine):
        await dispatcher.do_step("abc", "click", selectors=["li"], position=0)

        step = engine.calls_to("run_session")[0]["run_data"]["suites"][0]["tests"][0]["steps"][0]
        assert step["position"] == 0

    @pytest.mark.asyncio
    async def test_failure_appends_engine_message(self, dispatcher, open_web_session, engine):
        engine.run_result = EngineResult(success=False, message="element not found")

        response = await dispatcher.do_step("abc", "click", selectors=["#missing"])

        assert response.structured_content == {"result": False}
        assert "Failed to execute step: element not found" in response.text

    @pytest.mark.asyncio
    async def test_failure_without_message(self, dispatcher, open_web_session, engine):
        engine.run_result = EngineResult(success=False)

        response = await dispatcher.do_step("abc", "bogus-command")

        assert "Failed to execute step: Unknown error" in response.text

    @pytest.mark.asyncio
    async def test_wrong_session_rejected(self, dispatcher, open_web_session, engine):
        response = await dispatcher.do_step("zzz", "click")

        assert engine.calls == []
        assert response.structured_content == {"result": False}


# =============================================================================
# Interleaving on the shared slot
# =============================================================================


class TestInterleaving:
    @pytest.mark.asyncio
    async def test_close_during_step_clears_registry_before_step_returns(
        self, dispatcher, open_web_session, engine
    ):
        engine.run_gate = asyncio.Event()

        step_task = asyncio.create_task(dispatcher.do_step("abc", "click"))
        await engine.run_started.wait()

        close_response = await dispatcher.close_session("abc")
        assert open_web_session.current is None
        assert "Session successfully closed!" in close_response.text

        engine.run_gate.set()
        step_response = await step_task
        # The step had already passed validation, so it still reports the runner result
        assert step_response.structured_content == {"result": True}

    @pytest.mark.asyncio
    async def test_step_after_reopen_uses_new_type(self, dispatcher, registry, engine):
        engine.next_session_ids = ["abc", "abc"]
        await dispatcher.open_session(type="web", url="https://example.com")
        await dispatcher.open_session(type="api")

        await dispatcher.do_step("abc", "request")

        test = engine.calls_to("run_session")[0]["run_data"]["suites"][0]["tests"][0]
        assert test["type"] == "api"
