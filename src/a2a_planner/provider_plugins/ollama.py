from __future__ import annotations
import os
import httpx

from ..errors import ProviderError
from ..providers import ChatMessages, ProviderBase


class Provider(ProviderBase):
    id = "ollama"
    name = "Ollama"

    def __init__(self) -> None:
        self._base = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/")
        self._model = os.getenv("OLLAMA_MODEL", "llama3")
        self._timeout = float(os.getenv("OLLAMA_TIMEOUT", "60"))
        # Lazy-ready: assume daemon reachable; errors surface at call time
        self.ready = True
        self.reason = f"Ollama ready (model={self._model})"

    def generate(self, messages: ChatMessages) -> str:
        try:
            r = httpx.post(
                f"{self._base}/api/chat",
                json={"model": self._model, "messages": messages, "stream": False},
                timeout=self._timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.id, str(e)) from e
        return ((data.get("message") or {}).get("content") or "").strip()
