from __future__ import annotations

from typing import Any

import pytest
from helpers import FakeAgent


@pytest.fixture
def fake_agent_factory():
    """Build fake agents and shut them down after the test."""
    agents: list[FakeAgent] = []

    def factory(lines: list[str], passphrase: str = "", **kwargs: Any) -> FakeAgent:
        agent = FakeAgent(lines, passphrase, **kwargs)
        agents.append(agent)
        return agent

    yield factory
    for agent in agents:
        agent.stop()
