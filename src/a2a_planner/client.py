from __future__ import annotations
import uuid
import httpx
from typing import Any, Dict, Optional

from .models import InboundMessage, RpcParams, RpcRequest


class A2AClientError(Exception):
    """The server answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.code = code
        self.data = data or {}
        super().__init__(f"[{code}] {message}")


class A2AClient:
    def __init__(self, base_url: str, agent_id: str = "plannerAgent"):
        self.base_url = base_url.rstrip("/")
        self.agent_id = agent_id

    @property
    def url(self) -> str:
        return f"{self.base_url}/a2a/agent/{self.agent_id}"

    def send(
        self,
        text: str,
        context_id: Optional[str] = None,
        task_id: Optional[str] = None,
        timeout: float = 60.0,
    ) -> Dict[str, Any]:
        """Send one user message and return the A2A task result."""
        message = InboundMessage(
            role="user",
            messageId=str(uuid.uuid4()),
            parts=[{"kind": "text", "text": text}],
            contextId=context_id or None,
            taskId=task_id or None,
        )
        request = RpcRequest(id=str(uuid.uuid4()), params=RpcParams(message=message))
        payload = request.model_dump(mode="json", exclude_none=True)

        r = httpx.post(self.url, json=payload, timeout=timeout)
        try:
            data = r.json()
        except ValueError as e:
            # Not a JSON-RPC reply (e.g. an HTML error page from a proxy)
            r.raise_for_status()
            raise A2AClientError(0, f"non-JSON response from {self.url}") from e
        if isinstance(data, dict) and "error" in data:
            err = data["error"] or {}
            raise A2AClientError(err.get("code", 0), err.get("message", ""), err.get("data"))
        r.raise_for_status()
        return data["result"]

    def ask(self, text: str, context_id: Optional[str] = None) -> str:
        """Send a message and return only the agent's reply text."""
        result = self.send(text, context_id=context_id)
        parts = ((result.get("status") or {}).get("message") or {}).get("parts", [])
        for p in parts:
            if p.get("kind") == "text":
                return p.get("text", "")
        return ""
