from __future__ import annotations
import json
from typing import Optional

import typer

from .card import agent_card
from .client import A2AClient, A2AClientError
from .config import settings

app = typer.Typer(add_completion=False, help="A2A planner agent CLI")


def _base() -> str:
    return settings.agent_url_base


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (defaults to A2A_HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (defaults to A2A_PORT)."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
):
    """Run the A2A server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "a2a_planner.server:app",
        host=host or settings.a2a_host,
        port=port or settings.a2a_port,
        reload=reload,
        log_config=None,
    )


@app.command()
def send(
    text: str,
    agent: str = typer.Option("plannerAgent", help="Agent id to address."),
    context_id: Optional[str] = typer.Option(None, "--context-id", help="Continue an earlier conversation."),
    raw: bool = typer.Option(False, help="Print the full task JSON instead of the reply text."),
):
    """Send a message to a running server and print the reply."""
    client = A2AClient(_base(), agent_id=agent)
    try:
        result = client.send(text, context_id=context_id)
    except A2AClientError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    if raw:
        typer.echo(json.dumps(result, indent=2))
        return
    parts = result["status"]["message"]["parts"]
    typer.echo("\n".join(p.get("text", "") for p in parts if p.get("kind") == "text"))
    typer.echo(f"\n(contextId: {result['contextId']})", err=True)


@app.command()
def card():
    """Print the agent card."""
    typer.echo(json.dumps(agent_card(), indent=2))


@app.command()
def providers():
    """List discoverable model providers."""
    from .providers import list_providers

    for pid, source in sorted(list_providers().items()):
        typer.echo(f"{pid}\t{source}")


@app.command()
def agents():
    """List the agents this server would expose."""
    from .agents import build_registry

    for agent in build_registry(settings):
        state = "ready" if agent.ready else f"not ready: {agent.reason}"
        typer.echo(f"{agent.id}\t{agent.name}\t{state}")


if __name__ == "__main__":
    app()
