# SPDX-License-Identifier: Apache-2.0
"""
Agent contract and registry.

An agent takes a conversation (a list of `{"role", "content"}` dicts) and
returns an `AgentResponse`: the reply text plus any tool results produced
on the way. The registry resolves the `agentId` path segment of the A2A
route to an agent; it is injected into the request handler rather than
looked up globally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Protocol

from pydantic import AliasChoices, BaseModel, Field

if TYPE_CHECKING:
    from .config import Settings


class AgentResponse(BaseModel):
    text: str = ""
    tool_results: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tool_results", "toolResults"),
    )

    @classmethod
    def coerce(cls, value: Any) -> "AgentResponse":
        """Accept an AgentResponse, a plain string, or a dict with text/toolResults."""
        if isinstance(value, AgentResponse):
            return value
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(text=value)
        if isinstance(value, Mapping):
            return cls.model_validate({
                "text": value.get("text") or "",
                "tool_results": value.get("toolResults", value.get("tool_results")) or [],
            })
        return cls(
            text=getattr(value, "text", "") or "",
            tool_results=list(getattr(value, "tool_results", None) or []),
        )


class AgentBase:
    """All agents expose an id, a name and async generate()."""

    id: str = "base"
    name: str = "BaseAgent"
    description: str = ""
    ready: bool = True
    reason: str = ""

    async def generate(
        self,
        conversation: List[Dict[str, str]],
        *,
        context_id: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> AgentResponse:  # pragma: no cover - interface
        raise NotImplementedError


class AgentResolver(Protocol):
    def resolve(self, agent_id: str) -> Optional[AgentBase]: ...


class AgentRegistry:
    """In-process map of agent id -> agent."""

    def __init__(self, agents: Optional[Mapping[str, AgentBase]] = None) -> None:
        self._agents: Dict[str, AgentBase] = dict(agents or {})

    def register(self, agent: AgentBase, agent_id: Optional[str] = None) -> AgentBase:
        self._agents[agent_id or agent.id] = agent
        return agent

    def resolve(self, agent_id: str) -> Optional[AgentBase]:
        return self._agents.get(agent_id)

    def ids(self) -> List[str]:
        return list(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[AgentBase]:
        return iter(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)


def build_registry(settings: Optional["Settings"] = None) -> AgentRegistry:
    """Registry holding the planner agent, wired to the configured provider and memory."""
    from .config import settings as default_settings
    from .memory import ConversationMemory
    from .planner import PlannerAgent
    from .providers import build_provider

    cfg = settings or default_settings
    memory = ConversationMemory(cfg.memory_db_path) if cfg.memory_enabled else None
    planner = PlannerAgent(
        provider=build_provider(cfg.llm_provider),
        memory=memory,
        last_messages=cfg.memory_last_messages,
    )
    return AgentRegistry({planner.id: planner})
