import pytest

from copilot_assistant.config import AssistantConfig
from copilot_assistant.services.turn_orchestrator import TurnOrchestrator

from tests.fakes import FakeGateway


@pytest.fixture
def config():
    return AssistantConfig(
        api_key="sk-test",
        assistant_id="asst_test",
        poll_interval=0.0,
        max_poll_wait=5.0,
        cancel_remote_runs=True,
        raise_on_failed_run=False,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def orchestrator(config, gateway):
    orchestrator = TurnOrchestrator(config=config, gateway=gateway, max_workers=4)
    yield orchestrator
    orchestrator.shutdown()
