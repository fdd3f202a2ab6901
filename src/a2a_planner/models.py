from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Dict, List, Literal, Optional, Union


class TaskState(str, Enum):
    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    COMPLETED = "completed"
    CANCELED = "canceled"
    FAILED = "failed"
    REJECTED = "rejected"
    AUTH_REQUIRED = "auth-required"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Message parts
# ---------------------------------------------------------------------------

class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""


class DataPart(BaseModel):
    kind: Literal["data"] = "data"
    data: Any = None


class UnknownPart(BaseModel):
    """Any part whose kind we do not interpret; it contributes nothing to the prompt."""
    model_config = ConfigDict(extra="allow")
    kind: Optional[Any] = None


def parse_part(raw: Any) -> Union[TextPart, DataPart, UnknownPart]:
    """Read one raw message part, degrading to UnknownPart instead of failing."""
    if not isinstance(raw, dict):
        return UnknownPart()
    kind = raw.get("kind")
    try:
        if kind == "text":
            return TextPart.model_validate(raw)
        if kind == "data":
            return DataPart.model_validate(raw)
    except ValidationError:
        pass
    return UnknownPart.model_validate(raw)


# ---------------------------------------------------------------------------
# Inbound request
# ---------------------------------------------------------------------------

class InboundMessage(BaseModel):
    model_config = ConfigDict(extra="allow")
    kind: Literal["message"] = "message"
    role: str
    # Kept raw so the history can echo them back untouched
    parts: List[Any] = Field(min_length=1)
    messageId: Optional[str] = None
    taskId: Optional[str] = None
    contextId: Optional[str] = None


class PushNotificationConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    url: Optional[str] = None
    token: Optional[str] = None


class Configuration(BaseModel):
    model_config = ConfigDict(extra="allow")
    blocking: Optional[bool] = None
    pushNotificationConfig: Optional[PushNotificationConfig] = None

    @property
    def push_url(self) -> Optional[str]:
        return self.pushNotificationConfig.url if self.pushNotificationConfig else None


class RpcParams(BaseModel):
    model_config = ConfigDict(extra="allow")
    message: InboundMessage
    configuration: Optional[Configuration] = None


class RpcRequest(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: Union[str, int]
    method: Literal["message/send"] = "message/send"
    params: RpcParams


# ---------------------------------------------------------------------------
# Task result
# ---------------------------------------------------------------------------

class Message(BaseModel):
    kind: Literal["message"] = "message"
    role: str
    parts: List[Any]
    messageId: str
    taskId: Optional[str] = None


class Artifact(BaseModel):
    artifactId: str
    name: str
    parts: List[DataPart]


class StatusMessage(BaseModel):
    messageId: str
    role: str
    parts: List[TextPart]
    kind: Literal["message"] = "message"


class TaskStatus(BaseModel):
    state: TaskState = TaskState.COMPLETED
    timestamp: str
    message: StatusMessage


class TaskResult(BaseModel):
    id: str
    contextId: str
    status: TaskStatus
    artifacts: List[Artifact] = Field(default_factory=list)
    history: List[Message] = Field(default_factory=list)
    kind: Literal["task"] = "task"


# ---------------------------------------------------------------------------
# JSON-RPC envelopes
# ---------------------------------------------------------------------------

class JSONRPCSuccess(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: Any
    result: TaskResult


class JSONRPCErrorObj(BaseModel):
    code: int
    message: str
    data: Optional[Dict[str, Any]] = None


class JSONRPCError(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: Any = None
    error: JSONRPCErrorObj
