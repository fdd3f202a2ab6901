from __future__ import annotations
from typing import Any, Dict, Optional

from .config import Settings


def agent_card(settings: Optional[Settings] = None, agent_id: str = "plannerAgent") -> Dict[str, Any]:
    from .config import settings as default_settings

    cfg = settings or default_settings
    return {
        "protocolVersion": cfg.protocol_version,
        "name": cfg.agent_name,
        "description": cfg.agent_description,
        "version": cfg.agent_version,
        "preferredTransport": "JSONRPC",
        "url": f"{cfg.agent_url_base}/a2a/agent/{agent_id}",
        "capabilities": {
            "streaming": False,
            "pushNotifications": cfg.push_notifications == "webhook",
            "stateTransitionHistory": False,
        },
        "defaultInputModes": ["text/plain", "application/json"],
        "defaultOutputModes": ["text/plain", "application/json"],
        "skills": [
            {
                "id": "plan-goal",
                "name": "Plan a goal",
                "description": "Breaks a goal into milestones, a daily or weekly task plan, risks and next actions.",
                "tags": ["planning", "productivity", "milestones"],
                "examples": [
                    "Help me prepare for a marathon in 16 weeks",
                    "Plan the launch of a small online store",
                ],
            }
        ],
    }
