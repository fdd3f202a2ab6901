"""JSON-RPC error codes and the exceptions that map onto them."""

from __future__ import annotations

# JSON-RPC 2.0 reserved codes
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class A2AError(Exception):
    """Base error for failures reported back to the caller as a JSON-RPC error."""

    code: int = INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProtocolViolation(A2AError):
    """Malformed envelope, method or params. Never retried."""

    status_code = 400


class InvalidRequest(ProtocolViolation):
    code = INVALID_REQUEST


class MethodNotFound(ProtocolViolation):
    code = METHOD_NOT_FOUND

    def __init__(self, method: object) -> None:
        self.method = method
        super().__init__(f'Invalid method: expected "message/send", got "{method}"')


class InvalidParams(ProtocolViolation):
    code = INVALID_PARAMS


class AgentNotFound(A2AError):
    code = INVALID_PARAMS
    status_code = 404

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent '{agent_id}' not found")


class ProviderError(Exception):
    """A model provider failed to produce a completion."""

    def __init__(self, provider_id: str, detail: str = "") -> None:
        self.provider_id = provider_id
        self.detail = detail
        super().__init__(f"{provider_id} error" + (f": {detail}" if detail else ""))


class ProviderNotReady(ProviderError):
    """The selected model provider is not configured or its SDK is missing."""

    def __init__(self, provider_id: str, reason: str) -> None:
        self.provider_id = provider_id
        self.detail = reason
        Exception.__init__(self, f"{provider_id} not ready: {reason}")
