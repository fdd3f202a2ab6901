from __future__ import annotations
import asyncio
import importlib
import inspect
import logging
import pkgutil
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, List, Optional

from .errors import ProviderError, ProviderNotReady

log = logging.getLogger("a2a.providers")

ChatMessages = List[Dict[str, str]]


# ===== Base contract =====
class ProviderBase:
    """
    Base model-provider contract. Implementations override:
      - id (short identifier, e.g. 'gemini', 'openai', 'echo')
      - name (human-friendly)
      - ready / reason (readiness and why)
      - generate(messages) -> str

    `messages` is an OpenAI-style chat list: dicts with `role`
    ('system' | 'user' | 'assistant') and string `content`.
    Failures are raised as ProviderError, never returned as text.
    """
    id: str = "base"
    name: str = "BaseProvider"
    ready: bool = False
    reason: str = "Not initialized"

    def generate(self, messages: ChatMessages) -> str:
        raise NotImplementedError


class NotReadyProvider(ProviderBase):
    """A stub provider returned when a plugin fails to load or init."""
    def __init__(self, provider_id: str, reason: str) -> None:
        self.id = provider_id
        self.name = provider_id.capitalize()
        self.ready = False
        self.reason = reason

    def generate(self, messages: ChatMessages) -> str:
        raise ProviderNotReady(self.id, self.reason)


def split_system(messages: ChatMessages) -> tuple[str, ChatMessages]:
    """Separate system instructions from the turn list (for SDKs that take them apart)."""
    system = "\n\n".join(m["content"] for m in messages if m.get("role") == "system")
    turns = [m for m in messages if m.get("role") != "system"]
    return system, turns


def last_user_text(messages: ChatMessages) -> str:
    for m in reversed(messages):
        if m.get("role") == "user":
            return m.get("content") or ""
    return ""


async def call_provider(provider: ProviderBase, messages: ChatMessages) -> str:
    """
    Call provider.generate without blocking the event loop.

    Coroutine providers are awaited directly; sync providers run once in a
    worker thread. Unexpected exceptions are wrapped in ProviderError.
    """
    gen = getattr(provider, "generate", None)
    if gen is None or not callable(gen):
        raise ProviderError(getattr(provider, "id", "unknown"), "provider has no callable 'generate'")
    try:
        if inspect.iscoroutinefunction(gen):
            return await gen(messages)
        return await asyncio.to_thread(gen, messages)
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderError(getattr(provider, "id", "unknown"), str(e)) from e


# ===== Plugin discovery =====
PLUGIN_PACKAGE = "a2a_planner.provider_plugins"
ENTRY_POINT_GROUP = "a2a_planner.providers"
Factory = Callable[[], ProviderBase]


def _safe_factory_from_module(module_name: str, fallback_id: str) -> Factory:
    """
    Build a zero-arg factory for a provider module. The module is imported when
    the factory runs; if that fails or the module does not expose a usable
    Provider class, the factory makes a NotReadyProvider.
    """
    def _factory() -> ProviderBase:
        try:
            mod = importlib.import_module(module_name)
        except Exception as e:
            return NotReadyProvider(fallback_id, reason=f"Import error: {e}")
        cls = getattr(mod, "Provider", None)
        if not (inspect.isclass(cls) and issubclass(cls, ProviderBase)):
            return NotReadyProvider(fallback_id, reason="Module did not expose a Provider class.")
        try:
            return cls()
        except Exception as e:
            return NotReadyProvider(fallback_id, reason=f"Provider() init failed: {e}")
    return _factory


def _discover_builtin() -> Dict[str, Factory]:
    registry: Dict[str, Factory] = {}
    pkg = importlib.import_module(PLUGIN_PACKAGE)
    prefix = pkg.__name__ + "."
    for _, name, ispkg in pkgutil.iter_modules(pkg.__path__, prefix):
        if ispkg:
            continue
        short = name.rsplit(".", 1)[-1]   # e.g., 'gemini', 'ollama'
        registry[short] = _safe_factory_from_module(name, short)
    return registry


def _discover_entry_points() -> Dict[str, Factory]:
    registry: Dict[str, Factory] = {}
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        def _factory(ep: Any = ep) -> ProviderBase:
            try:
                obj = ep.load()
                # Accept: instance, subclass, or zero-arg callable returning instance
                if isinstance(obj, ProviderBase):
                    return obj
                if inspect.isclass(obj) and issubclass(obj, ProviderBase):
                    return obj()
                if callable(obj):
                    p = obj()
                    if isinstance(p, ProviderBase):
                        return p
                return NotReadyProvider(ep.name, reason="entry point did not yield ProviderBase")
            except Exception as e:
                return NotReadyProvider(ep.name, reason=f"entry point load error: {e}")
        registry[ep.name] = _factory
    return registry


# Cache registry at import time
_REGISTRY: Dict[str, Factory] = {}
_REGISTRY.update(_discover_builtin())
_REGISTRY.update(_discover_entry_points())

# Aliases allow friendly names (e.g., "google" -> "gemini")
_ALIASES: Dict[str, str] = {
    "echo": "echo",
    "gemini": "gemini",
    "google": "gemini",
    "openai": "openai",
    "gpt": "openai",
    "ollama": "ollama",
    "local": "ollama",
}


def list_providers() -> Dict[str, str]:
    """Returns {provider_id: 'builtin'|'entrypoint'} for discoverability."""
    out: Dict[str, str] = {}
    for k in _discover_builtin():
        out[k] = "builtin"
    for k in _discover_entry_points():
        out[k] = "entrypoint"
    return out


def build_provider(name: Optional[str] = None) -> ProviderBase:
    """
    Build the named provider, or the one selected by LLM_PROVIDER.
    Falls back to 'echo' when the requested provider is unknown.
    """
    if name is None:
        from .config import settings
        name = settings.llm_provider
    want = (name or "echo").lower().strip()
    want = _ALIASES.get(want, want)

    factory = _REGISTRY.get(want)
    if factory is not None:
        return factory()

    log.warning("provider.unknown", extra={"requested": want, "fallback": "echo"})
    if "echo" in _REGISTRY:
        return _REGISTRY["echo"]()
    return NotReadyProvider(want or "unknown", reason="No providers discovered")
