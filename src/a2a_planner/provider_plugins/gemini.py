from __future__ import annotations
import os

from ..errors import ProviderError, ProviderNotReady
from ..providers import ChatMessages, ProviderBase, split_system


class Provider(ProviderBase):
    id = "gemini"
    name = "Google Gemini"

    def __init__(self) -> None:
        self._genai = None
        self._model_id = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        api = os.getenv("GOOGLE_API_KEY") or os.getenv("GOOGLE_GENERATIVE_AI_API_KEY")
        if not api:
            self.ready = False
            self.reason = "GOOGLE_API_KEY not set"
            return
        try:
            import google.generativeai as genai  # type: ignore
            genai.configure(api_key=api)
            self._genai = genai
            self.ready = True
            self.reason = f"Gemini client ready (model={self._model_id})"
        except Exception as e:
            self.ready = False
            self.reason = f"google-generativeai not installed/usable: {e}"

    def generate(self, messages: ChatMessages) -> str:
        if not self.ready or self._genai is None:
            raise ProviderNotReady(self.id, self.reason)
        system, turns = split_system(messages)
        # Gemini names the assistant side 'model'
        contents = [
            {"role": "model" if m["role"] == "assistant" else "user", "parts": [m.get("content") or ""]}
            for m in turns
        ]
        try:
            model = self._genai.GenerativeModel(self._model_id, system_instruction=system or None)
            r = model.generate_content(contents)
        except Exception as e:
            raise ProviderError(self.id, str(e)) from e
        return (getattr(r, "text", "") or "").strip()
