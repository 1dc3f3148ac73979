"""Default webhook message templates for new listeners."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict

DEFAULT_SERVICE = "Alert"


def _tradingview(bot_id: str) -> Dict[str, Any]:
    return {
        "bot_id": bot_id,
        "ticker": "{{ticker}}",
        "action": "{{strategy.order.action}}",
        "order_size": "100%",
        "position_size": "{{strategy.position_size}}",
        "schema": "2",
        "timestamp": "{{time}}",
    }


def _telegram(bot_id: str) -> Dict[str, Any]:
    return {"text": "\U0001F6A8 *{{ticker}}* is *{{action}}* at `{{close}}`"}


def _discord(bot_id: str) -> Dict[str, Any]:
    return {"content": "**{{ticker}}** is **{{action}}** at `{{close}}`"}


def _slack(bot_id: str) -> Dict[str, Any]:
    return {"text": ":rotating_light: *{{ticker}}* is *{{action}}* at `{{close}}`"}


def _generic(bot_id: str) -> Dict[str, Any]:
    return {"alert": "Alert: {{ticker}} is {{action}}"}


_TEMPLATES: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "TradingView": _tradingview,
    "Telegram": _telegram,
    "Discord": _discord,
    "Slack": _slack,
}


def default_message(service: str, bot_id: str) -> str:
    """Return the JSON payload template a listener of ``service`` starts with."""
    builder = _TEMPLATES.get(service, _generic)
    return json.dumps(builder(bot_id), indent=2, ensure_ascii=False)


def known_services() -> list[str]:
    return list(_TEMPLATES)
