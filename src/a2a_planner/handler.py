"""
A2A `message/send` request handling.

One request runs straight through: parse, validate the envelope, method,
agent and message, translate the parts, invoke the agent, then wrap the
reply as an A2A task (status, artifacts, history) inside a JSON-RPC
response. `handle()` never raises; every failure becomes a JSON-RPC error.
"""

from __future__ import annotations

import inspect
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional

from pydantic import ValidationError

from .agents import AgentResolver, AgentResponse
from .errors import (
    INTERNAL_ERROR,
    A2AError,
    AgentNotFound,
    InvalidParams,
    InvalidRequest,
    MethodNotFound,
)
from .models import (
    Artifact,
    Configuration,
    DataPart,
    InboundMessage,
    JSONRPCError,
    JSONRPCErrorObj,
    JSONRPCSuccess,
    Message,
    StatusMessage,
    TaskResult,
    TaskState,
    TaskStatus,
    TextPart,
)
from .notifications import LoggingNotificationSink, NotificationSink
from .translator import to_agent_message

log = logging.getLogger("a2a.handler")

SUPPORTED_METHOD = "message/send"

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing 'Z'."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HandlerResult(NamedTuple):
    status_code: int
    body: Dict[str, Any]
    # Push delivery for non-blocking requests; run it after the response is sent.
    background: Optional[Callable[[], Awaitable[None]]] = None


def error_body(request_id: Any, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body = JSONRPCError(
        id=request_id or None,
        error=JSONRPCErrorObj(code=code, message=message, data=data),
    ).model_dump(mode="json")
    if data is None:
        body["error"].pop("data", None)
    return body


class A2ARequestHandler:
    """Turns one JSON-RPC `message/send` body into one JSON-RPC response."""

    def __init__(
        self,
        registry: AgentResolver,
        *,
        id_factory: IdFactory = new_id,
        notifier: Optional[NotificationSink] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.registry = registry
        self.new_id = id_factory
        self.notifier = notifier or LoggingNotificationSink()
        self.clock = clock

    async def handle(self, agent_id: str, body: bytes) -> HandlerResult:
        request_id: Any = None
        try:
            payload = json.loads(body)
            if isinstance(payload, dict):
                request_id = payload.get("id") or None
            return await self._dispatch(agent_id, payload, request_id)
        except A2AError as e:
            log.info(
                "a2a.rejected",
                extra={"agent_id": agent_id, "request_id": request_id, "code": e.code, "reason": e.message},
            )
            return HandlerResult(e.status_code, error_body(request_id, e.code, e.message))
        except Exception as e:
            log.exception("a2a.error", extra={"agent_id": agent_id, "request_id": request_id})
            return HandlerResult(
                500,
                error_body(request_id, INTERNAL_ERROR, "Internal error", {"details": str(e) or type(e).__name__}),
            )

    async def _dispatch(self, agent_id: str, payload: Any, request_id: Any) -> HandlerResult:
        if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0" or not request_id:
            raise InvalidRequest('Invalid Request: jsonrpc must be "2.0" and id is required')

        method = payload.get("method")
        if method != SUPPORTED_METHOD:
            raise MethodNotFound(method)

        agent = self.registry.resolve(agent_id)
        if agent is None:
            raise AgentNotFound(agent_id)

        params = payload.get("params")
        if not isinstance(params, dict):
            params = {}
        message = self._validate_message(params.get("message"))
        configuration = self._validate_configuration(params.get("configuration"))

        task_id = message.taskId or self.new_id()
        context_id = message.contextId or self.new_id()

        result = agent.generate([to_agent_message(message)], context_id=context_id, task_id=task_id)
        if inspect.isawaitable(result):
            result = await result
        response = AgentResponse.coerce(result)

        task = self._build_task(message, response, task_id, context_id)

        background = None
        if configuration is not None and configuration.blocking is False:
            background = self._defer(configuration, task)

        log.info(
            "a2a.request",
            extra={
                "agent_id": agent_id,
                "request_id": request_id,
                "task_id": task_id,
                "context_id": context_id,
                "artifacts": len(task.artifacts),
            },
        )
        body = JSONRPCSuccess(id=request_id, result=task).model_dump(mode="json")
        return HandlerResult(200, body, background)

    @staticmethod
    def _validate_message(raw: Any) -> InboundMessage:
        if not raw or not isinstance(raw, dict):
            raise InvalidParams("Invalid params: message is required")
        parts = raw.get("parts")
        if raw.get("kind") != "message" or not raw.get("role") or not parts or not isinstance(parts, list):
            raise InvalidParams('Invalid message: must have kind "message", role, and parts array')
        try:
            return InboundMessage.model_validate(raw)
        except ValidationError as e:
            raise InvalidParams(f"Invalid message: {_first_error(e)}") from e

    @staticmethod
    def _validate_configuration(raw: Any) -> Optional[Configuration]:
        if raw is None:
            return None
        try:
            return Configuration.model_validate(raw)
        except ValidationError as e:
            raise InvalidParams(f"Invalid params: configuration {_first_error(e)}") from e

    def _build_task(
        self,
        message: InboundMessage,
        response: AgentResponse,
        task_id: str,
        context_id: str,
    ) -> TaskResult:
        agent_text = response.text or ""
        reply_id = self.new_id()
        reply_parts = [TextPart(text=agent_text)]

        artifacts: List[Artifact] = [
            Artifact(
                artifactId=self.new_id(),
                name=_tool_result_name(result),
                parts=[DataPart(data=result)],
            )
            for result in response.tool_results
        ]

        history = [
            Message(
                role=message.role,
                parts=message.parts,
                messageId=message.messageId or self.new_id(),
                taskId=task_id,
            ),
            Message(role="agent", parts=reply_parts, messageId=reply_id, taskId=task_id),
        ]

        return TaskResult(
            id=task_id,
            contextId=context_id,
            status=TaskStatus(
                state=TaskState.COMPLETED,
                timestamp=iso_timestamp(self.clock()),
                message=StatusMessage(messageId=reply_id, role="agent", parts=reply_parts),
            ),
            artifacts=artifacts,
            history=history,
        )

    def _defer(self, configuration: Configuration, task: TaskResult) -> Optional[Callable[[], Awaitable[None]]]:
        url = configuration.push_url
        if not url:
            log.debug("a2a.nonblocking.no_webhook", extra={"task_id": task.id})
            return None
        token = configuration.pushNotificationConfig.token if configuration.pushNotificationConfig else None

        async def deliver() -> None:
            # The caller already has the completed task; a sink failure only gets logged.
            try:
                await self.notifier.notify(url, task, token=token)
            except Exception as e:
                log.warning("a2a.push.failed", extra={"url": url, "task_id": task.id, "error": str(e)})

        return deliver


def _tool_result_name(result: Any) -> str:
    name = result.get("name") if isinstance(result, dict) else getattr(result, "name", None)
    return str(name) if name else "ToolResult"


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    where = ".".join(str(p) for p in err.get("loc", ())) or "value"
    return f"{where}: {err.get('msg', 'invalid')}"
