import httpx, os, sys, uuid

BASE = os.getenv("A2A_BASE", "http://localhost:8000")
AGENT = os.getenv("A2A_AGENT", "plannerAgent")


def call_planner(text: str, context_id: str | None = None) -> tuple[str, str | None]:
    message = {
        "kind": "message",
        "role": "user",
        "messageId": str(uuid.uuid4()),
        "parts": [{"kind": "text", "text": text}],
    }
    if context_id:
        message["contextId"] = context_id
    payload = {"jsonrpc": "2.0", "id": str(uuid.uuid4()), "method": "message/send", "params": {"message": message}}
    try:
        r = httpx.post(f"{BASE}/a2a/agent/{AGENT}", json=payload, timeout=60.0)
    except httpx.ConnectError:
        return f"[Error] Could not connect to A2A server at {BASE}. Did you run `a2a-planner serve`?", None

    data = r.json()
    if "error" in data:
        return f"[Error {data['error']['code']}] {data['error']['message']}", None
    result = data["result"]
    for p in result["status"]["message"]["parts"]:
        if p.get("kind") == "text":
            return p.get("text", ""), result["contextId"]
    return "[No text part in A2A response]", result["contextId"]


if __name__ == "__main__":
    goal = " ".join(sys.argv[1:]) or "Help me prepare for a half marathon in 12 weeks"
    reply, ctx = call_planner(goal)
    print(reply)
    # Follow-up on the same conversation
    reply, _ = call_planner("I can train four days a week, mornings only.", context_id=ctx)
    print(reply)
