from __future__ import annotations
import os

from ..errors import ProviderError, ProviderNotReady
from ..providers import ChatMessages, ProviderBase


class Provider(ProviderBase):
    id = "openai"
    name = "OpenAI"

    def __init__(self) -> None:
        self._client = None
        self._model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            self.ready = False
            self.reason = "OPENAI_API_KEY not set"
            return
        try:
            from openai import OpenAI  # type: ignore
            self._client = OpenAI(api_key=api_key, base_url=os.getenv("OPENAI_BASE_URL") or None)
            self.ready = True
            self.reason = f"OpenAI client ready (model={self._model})"
        except Exception as e:
            self.ready = False
            self.reason = f"OpenAI SDK not available: {e}"

    def generate(self, messages: ChatMessages) -> str:
        if not self.ready or self._client is None:
            raise ProviderNotReady(self.id, self.reason)
        try:
            res = self._client.chat.completions.create(model=self._model, messages=messages)
        except Exception as e:
            raise ProviderError(self.id, str(e)) from e
        return (res.choices[0].message.content or "").strip()
