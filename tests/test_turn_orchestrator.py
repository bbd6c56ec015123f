import threading

import pytest

from copilot_assistant.config import AssistantConfig
from copilot_assistant.constants.assistant import NO_REPLY_FOUND
from copilot_assistant.exceptions import (
    AuthError,
    ConfigError,
    RunFailedError,
    RunTimeoutError,
    TransportError,
    TurnCancelledError,
)
from copilot_assistant.schemas.context import ContextPayload
from copilot_assistant.services.turn_orchestrator import TurnOrchestrator

from tests.fakes import FakeGateway


def test_first_turn_creates_exactly_one_thread(orchestrator, gateway):
    reply = orchestrator.submit_turn(1, "Hello")

    assert reply == "Hello from the assistant"
    assert gateway.count("create_thread") == 1
    assert orchestrator.session_store.get_thread(1) in gateway.threads


def test_following_turns_reuse_the_thread(orchestrator, gateway):
    orchestrator.submit_turn(1, "Hello")
    orchestrator.submit_turn(1, "And again")

    assert gateway.count("create_thread") == 1
    thread_id = orchestrator.session_store.get_thread(1)
    assert gateway.user_messages(thread_id) == ["Hello", "And again"]


def test_turn_call_order(orchestrator, gateway):
    orchestrator.submit_turn(1, "Hello")

    assert gateway.names() == [
        "create_thread",
        "append_message",
        "create_run",
        "retrieve_run",
        "list_messages",
    ]
    _, thread_id, run_id, order = gateway.calls[-1]
    assert run_id is not None
    assert order == "desc"


def test_polls_until_completed_then_fetches_once(config):
    gateway = FakeGateway(statuses=["queued", "in_progress", "completed"])
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        orchestrator.submit_turn(1, "Hello")

    assert gateway.count("retrieve_run") == 3
    assert gateway.count("list_messages") == 1


def test_no_assistant_message_returns_sentinel(config):
    gateway = FakeGateway(reply=None)
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        assert orchestrator.submit_turn(1, "Hello") == NO_REPLY_FOUND


def test_auth_error_on_thread_creation_aborts_turn(orchestrator, gateway):
    gateway.fail_on("create_thread", AuthError("Incorrect API key provided", status_code=401))

    with pytest.raises(AuthError):
        orchestrator.submit_turn(1, "Hello")

    assert gateway.count("append_message") == 0
    assert gateway.count("create_run") == 0
    assert orchestrator.session_store.get_thread(1) is None


def test_create_run_never_sees_an_empty_thread(orchestrator, gateway):
    for session_id in (1, 2, 3):
        orchestrator.submit_turn(session_id, "Hello")
        orchestrator.clear_session(session_id)
        orchestrator.submit_turn(session_id, "Hello again")

    assert gateway.count("create_run") == 6


def test_missing_configuration_fails_before_any_remote_call(gateway):
    config = AssistantConfig(api_key="sk-test", assistant_id=None, poll_interval=0.0)
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        with pytest.raises(ConfigError) as excinfo:
            orchestrator.submit_turn(1, "Hello")

    assert "assistant_id" in str(excinfo.value)
    assert gateway.calls == []


def test_configure_sets_credential_and_assistant(gateway):
    config = AssistantConfig(api_key=None, assistant_id=None, poll_interval=0.0)
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        orchestrator.configure("sk-new", "asst_new")
        orchestrator.submit_turn(1, "Hello")

    assert gateway.api_key == "sk-new"
    create_run = next(call for call in gateway.calls if call[0] == "create_run")
    assert create_run[2] == "asst_new"


def test_context_is_injected_only_on_first_turn(orchestrator, gateway):
    context = ContextPayload(key="Main.kt", content="fun main() {}")

    orchestrator.submit_turn(1, "What does this do?", context=context)
    orchestrator.submit_turn(1, "And now?", context=ContextPayload(key="Main.kt", content="changed"))

    thread_id = orchestrator.session_store.get_thread(1)
    assert gateway.user_messages(thread_id) == [
        "Project context:\nfun main() {}\n\nUser: What does this do?",
        "And now?",
    ]


def test_new_context_key_is_injected_on_later_turn(orchestrator, gateway):
    orchestrator.submit_turn(1, "First", context=ContextPayload(key="a.py", content="A"))
    orchestrator.submit_turn(1, "Second", context=ContextPayload(key="b.py", content="B"))

    thread_id = orchestrator.session_store.get_thread(1)
    assert gateway.user_messages(thread_id)[1] == "Project context:\nB\n\nUser: Second"
    assert orchestrator.context_tracker.injected_keys(1) == frozenset({"a.py", "b.py"})


def test_failed_append_keeps_context_pending(orchestrator, gateway):
    context = ContextPayload(key="main.py", content="x = 1")
    gateway.fail_on("append_message", TransportError("connection reset"))

    with pytest.raises(TransportError):
        orchestrator.submit_turn(1, "First", context=context)
    orchestrator.submit_turn(1, "Retry", context=context)

    thread_id = orchestrator.session_store.get_thread(1)
    assert gateway.user_messages(thread_id) == ["Project context:\nx = 1\n\nUser: Retry"]
    assert gateway.count("append_message") == 2


def test_clear_session_starts_a_fresh_thread_and_context(orchestrator, gateway):
    context = ContextPayload(key="main.py", content="x = 1")
    orchestrator.submit_turn(1, "First", context=context)
    first_thread = orchestrator.session_store.get_thread(1)

    orchestrator.clear_session(1)
    orchestrator.submit_turn(1, "Fresh start", context=context)
    second_thread = orchestrator.session_store.get_thread(1)

    assert second_thread != first_thread
    assert gateway.user_messages(second_thread) == ["Project context:\nx = 1\n\nUser: Fresh start"]


@pytest.mark.parametrize("terminal", ["failed", "cancelled", "expired"])
def test_unsuccessful_run_falls_back_to_no_reply(config, terminal):
    gateway = FakeGateway(statuses=["in_progress", terminal], reply=None)
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        assert orchestrator.submit_turn(1, "Hello") == NO_REPLY_FOUND

    assert gateway.count("list_messages") == 1


def test_failed_run_raises_with_diagnostics_when_enabled(config):
    config.raise_on_failed_run = True
    gateway = FakeGateway(
        statuses=["in_progress", "failed"],
        last_error={"code": "rate_limit_exceeded", "message": "Slow down"},
    )
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        with pytest.raises(RunFailedError) as excinfo:
            orchestrator.submit_turn(1, "Hello")

    assert excinfo.value.status == "failed"
    assert excinfo.value.last_error == "rate_limit_exceeded: Slow down"
    assert gateway.count("list_messages") == 0


def test_completed_run_is_unaffected_by_raise_flag(config, gateway):
    config.raise_on_failed_run = True
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        assert orchestrator.submit_turn(1, "Hello") == "Hello from the assistant"


def test_requires_action_run_is_cancelled_remotely(config):
    gateway = FakeGateway(statuses=["in_progress", "requires_action"], reply=None)
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        assert orchestrator.submit_turn(1, "Hello") == NO_REPLY_FOUND
        orchestrator.submit_turn(1, "Next question")

    assert gateway.count("cancel_run") == 2
    assert gateway.names()[4:6] == ["retrieve_run", "cancel_run"]


def test_clear_during_append_keeps_context_for_new_thread(orchestrator, gateway):
    context = ContextPayload(key="Main.kt", content="fun main() {}")
    append = gateway.append_message
    cleared = []

    def append_then_clear(thread_id, content, role="user"):
        message_id = append(thread_id, content, role)
        if not cleared:
            cleared.append(thread_id)
            orchestrator.clear_session(1)
        return message_id

    gateway.append_message = append_then_clear

    orchestrator.submit_turn(1, "before clear", context=context)
    orchestrator.submit_turn(1, "after clear", context=context)

    new_thread = orchestrator.session_store.get_thread(1)
    assert new_thread != cleared[0]
    assert gateway.user_messages(new_thread) == [
        "Project context:\nfun main() {}\n\nUser: after clear"
    ]
    assert orchestrator.context_tracker.injected_keys(1) == frozenset({"Main.kt"})


def test_timeout_cancels_remote_run(gateway):
    gateway.statuses = ["in_progress"]
    config = AssistantConfig(
        api_key="sk-test", assistant_id="asst_test", poll_interval=0.01, max_poll_wait=0.05
    )
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        with pytest.raises(RunTimeoutError):
            orchestrator.submit_turn(1, "Hello")

    assert gateway.count("cancel_run") == 1
    assert gateway.count("list_messages") == 0


def test_timeout_leaves_remote_run_when_disabled(gateway):
    gateway.statuses = ["in_progress"]
    config = AssistantConfig(
        api_key="sk-test",
        assistant_id="asst_test",
        poll_interval=0.01,
        max_poll_wait=0.05,
        cancel_remote_runs=False,
    )
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        with pytest.raises(RunTimeoutError):
            orchestrator.submit_turn(1, "Hello")

    assert gateway.count("cancel_run") == 0


def test_failed_remote_cancel_does_not_mask_timeout(gateway):
    gateway.statuses = ["in_progress"]
    gateway.fail_on("cancel_run", TransportError("connection reset"))
    config = AssistantConfig(
        api_key="sk-test", assistant_id="asst_test", poll_interval=0.01, max_poll_wait=0.03
    )
    with TurnOrchestrator(config=config, gateway=gateway) as orchestrator:
        with pytest.raises(RunTimeoutError):
            orchestrator.submit_turn(1, "Hello")


@pytest.mark.parametrize("session_id", ["1", 1.5, True, 2**63, -(2**63) - 1])
def test_rejects_invalid_session_ids(orchestrator, gateway, session_id):
    with pytest.raises(ValueError):
        orchestrator.submit_turn(session_id, "Hello")
    assert gateway.calls == []


def test_async_turn_returns_reply(orchestrator):
    handle = orchestrator.submit_turn_async(1, "Hello")

    assert handle.result(timeout=5) == "Hello from the assistant"
    assert handle.done()


def test_async_turn_surfaces_typed_errors(orchestrator, gateway):
    gateway.fail_on("create_thread", AuthError("Incorrect API key provided", status_code=401))

    handle = orchestrator.submit_turn_async(1, "Hello")

    with pytest.raises(AuthError):
        handle.result(timeout=5)


def test_cancel_in_flight_turn_releases_worker(gateway):
    gateway.statuses = ["in_progress"]
    config = AssistantConfig(
        api_key="sk-test", assistant_id="asst_test", poll_interval=0.01, max_poll_wait=None
    )
    with TurnOrchestrator(config=config, gateway=gateway, max_workers=1) as orchestrator:
        handle = orchestrator.submit_turn_async(1, "Hello")
        assert gateway.polled.wait(timeout=5)

        handle.cancel()

        with pytest.raises(TurnCancelledError):
            handle.result(timeout=5)
        assert handle.cancelled

        gateway.statuses = ["completed"]
        follow_up = orchestrator.submit_turn_async(2, "Still there?")
        assert follow_up.result(timeout=5) == "Hello from the assistant"

    assert gateway.count("cancel_run") == 1


def test_done_callback_receives_handle(orchestrator):
    seen = []
    finished = threading.Event()

    def on_done(handle):
        seen.append(handle.result())
        finished.set()

    orchestrator.submit_turn_async(1, "Hello").add_done_callback(on_done)

    assert finished.wait(timeout=5)
    assert seen == ["Hello from the assistant"]


def test_concurrent_sessions_do_not_interfere(orchestrator, gateway):
    context = ContextPayload(key="main.py", content="x = 1")

    handles = [orchestrator.submit_turn_async(sid, f"Hi from {sid}", context=context) for sid in (1, 2)]
    for handle in handles:
        handle.result(timeout=5)

    thread_1 = orchestrator.session_store.get_thread(1)
    thread_2 = orchestrator.session_store.get_thread(2)
    assert thread_1 != thread_2
    assert gateway.user_messages(thread_1) == ["Project context:\nx = 1\n\nUser: Hi from 1"]
    assert gateway.user_messages(thread_2) == ["Project context:\nx = 1\n\nUser: Hi from 2"]
    assert orchestrator.context_tracker.injected_keys(1) == frozenset({"main.py"})
    assert orchestrator.context_tracker.injected_keys(2) == frozenset({"main.py"})


def test_turns_for_one_session_are_serialized(gateway):
    gateway.statuses = ["in_progress", "in_progress", "completed"]
    config = AssistantConfig(
        api_key="sk-test", assistant_id="asst_test", poll_interval=0.01, max_poll_wait=5.0
    )
    with TurnOrchestrator(config=config, gateway=gateway, max_workers=4) as orchestrator:
        handles = [orchestrator.submit_turn_async(7, f"turn {i}") for i in range(3)]
        for handle in handles:
            handle.result(timeout=5)

    assert gateway.count("create_thread") == 1
    writes = [name for name in gateway.names() if name in ("append_message", "list_messages")]
    assert writes == ["append_message", "list_messages"] * 3


def test_available_assistants_passthrough(orchestrator, gateway):
    assistants = orchestrator.available_assistants()

    assert [a.id for a in assistants] == ["asst_1"]
    assert gateway.calls == [("list_assistants", "desc")]
