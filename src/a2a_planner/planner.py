from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from .agents import AgentBase, AgentResponse
from .memory import ConversationMemory
from .providers import ProviderBase, call_provider

log = logging.getLogger("a2a.planner")

PLANNER_INSTRUCTIONS = """\
You help users turn a goal or problem into a clear, actionable plan.

Process:
- Ask concise clarifying questions to understand scope, constraints, timeline, and resources.
- Break the goal into milestones and then into daily or weekly tasks.
- Sequence tasks logically, estimate durations, and call out dependencies and risks.
- Provide a brief timeline (e.g., week-by-week) and a first 1-3 next actions.
- Keep outputs structured, concise, and easy to follow.

Output format:
1) Summary of goal and constraints
2) Milestones
3) Task plan (daily or weekly)
4) Risks and assumptions
5) Next actions (checklist)
"""

# A2A speaks of "agent" turns, chat models of "assistant" ones
_ROLE_MAP = {"agent": "assistant", "model": "assistant"}


def _chat_role(role: str) -> str:
    role = (role or "user").lower()
    return _ROLE_MAP.get(role, role if role in {"user", "assistant", "system"} else "user")


class PlannerAgent(AgentBase):
    id = "plannerAgent"
    name = "Planner Agent"
    description = "Turns a goal or problem into milestones, a task plan, risks and next actions."

    def __init__(
        self,
        provider: ProviderBase,
        memory: Optional[ConversationMemory] = None,
        instructions: str = PLANNER_INSTRUCTIONS,
        last_messages: int = 10,
    ) -> None:
        self.provider = provider
        self.memory = memory
        self.instructions = instructions
        self.last_messages = last_messages

    @property
    def ready(self) -> bool:  # type: ignore[override]
        return bool(getattr(self.provider, "ready", False))

    @property
    def reason(self) -> str:  # type: ignore[override]
        return getattr(self.provider, "reason", "")

    async def generate(
        self,
        conversation: List[Dict[str, str]],
        *,
        context_id: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> AgentResponse:
        turns = [{"role": _chat_role(m.get("role", "user")), "content": m.get("content") or ""} for m in conversation]

        history: List[Dict[str, str]] = []
        if self.memory is not None and context_id:
            history = await asyncio.to_thread(self.memory.recall, context_id, self.last_messages)

        messages = [{"role": "system", "content": self.instructions}, *history, *turns]
        text = await call_provider(self.provider, messages)

        if self.memory is not None and context_id:
            await asyncio.to_thread(
                self.memory.append, context_id, [*turns, {"role": "assistant", "content": text}]
            )

        log.debug(
            "planner.generate",
            extra={"context_id": context_id, "task_id": task_id, "history_len": len(history), "provider": self.provider.id},
        )
        return AgentResponse(text=text)
