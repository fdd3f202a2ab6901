from __future__ import annotations
from ..providers import ChatMessages, ProviderBase, last_user_text


class Provider(ProviderBase):
    """Offline provider: reflects the latest user turn. Useful for local runs and tests."""
    id = "echo"
    name = "Echo"
    ready = True
    reason = "Echo provider is always ready."

    def generate(self, messages: ChatMessages) -> str:
        text = last_user_text(messages).strip()
        return f"Let's plan this. You said: {text}" if text else "Tell me the goal you want to plan for."
