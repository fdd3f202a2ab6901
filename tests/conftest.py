from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional

import pytest

from a2a_planner.agents import AgentBase, AgentRegistry, AgentResponse
from a2a_planner.notifications import NotificationSink


class StubAgent(AgentBase):
    """Records every call and replies with a canned response (or raises)."""

    id = "stub"
    name = "Stub Agent"

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else AgentResponse(text="stub reply")
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, conversation, *, context_id=None, task_id=None):
        self.calls.append({"conversation": conversation, "context_id": context_id, "task_id": task_id})
        if self.error is not None:
            raise self.error
        return self.response


class SequentialIds:
    """Deterministic id factory: id-1, id-2, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self._counter = itertools.count(1)
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


class RecordingSink(NotificationSink):
    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []

    async def notify(self, url, task, token=None):
        self.sent.append({"url": url, "task": task, "token": token})


@pytest.fixture
def stub_agent() -> StubAgent:
    return StubAgent()


@pytest.fixture
def registry(stub_agent: StubAgent) -> AgentRegistry:
    return AgentRegistry({"plannerAgent": stub_agent})


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


def make_request(
    text: str = "Plan my week",
    *,
    request_id: Any = "req-1",
    method: str = "message/send",
    message: Optional[Dict[str, Any]] = None,
    configuration: Optional[Dict[str, Any]] = None,
    **message_fields: Any,
) -> Dict[str, Any]:
    if message is None:
        message = {"kind": "message", "role": "user", "parts": [{"kind": "text", "text": text}]}
        message.update(message_fields)
    params: Dict[str, Any] = {"message": message}
    if configuration is not None:
        params["configuration"] = configuration
    return {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
