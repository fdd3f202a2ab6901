import json

from typer.testing import CliRunner

from a2a_planner import cli

runner = CliRunner()


def test_card_prints_json():
    result = runner.invoke(cli.app, ["card"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["preferredTransport"] == "JSONRPC"


def test_providers_lists_builtins():
    result = runner.invoke(cli.app, ["providers"])
    assert result.exit_code == 0
    assert "echo\tbuiltin" in result.stdout


def test_send_prints_reply(monkeypatch):
    def fake_send(self, text, context_id=None, task_id=None, timeout=60.0):
        return {"contextId": "C1", "status": {"message": {"parts": [{"kind": "text", "text": f"plan for {text}"}]}}}

    monkeypatch.setattr(cli.A2AClient, "send", fake_send)
    result = runner.invoke(cli.app, ["send", "a picnic"])
    assert result.exit_code == 0
    assert "plan for a picnic" in result.stdout
