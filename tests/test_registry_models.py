import json

import pytest
from pydantic import ValidationError as SchemaError

from core.models import (
    SENSITIVE_BOT_FIELDS,
    SENSITIVE_LISTENER_FIELDS,
    Bot,
    BotFilter,
    BotInsertArgs,
    BotPatch,
    BotView,
    Listener,
    ListenerFilter,
    ListenerPatch,
    ListenerView,
)


def _bot(**overrides) -> Bot:
    fields = {
        "bot_id": "a",
        "name": "TraderBot",
        "exchange": "Binance",
        "api_key": "key-123",
        "api_secret": "secret-456",
        "webhook_secret": "hook-789",
        "private_key": "0xdeadbeef",
        "trading_fee": 0.1,
        "listeners": {"l1": Listener(service="TradingView", secret="listener-secret", msg="{}")},
    }
    fields.update(overrides)
    return Bot(**fields)


def test_patch_only_changes_supplied_fields():
    bot = _bot()
    updated = BotPatch(name="Renamed").apply(bot)

    assert updated.name == "Renamed"
    assert updated.trading_fee == 0.1
    assert updated.exchange == "Binance"
    assert updated.listeners == bot.listeners
    assert bot.name == "TraderBot"


def test_empty_patch_is_detected():
    assert BotPatch().is_empty()
    assert ListenerPatch().is_empty()
    assert not ListenerPatch(msg="x").is_empty()


def test_bot_filter_requires_every_supplied_field():
    bot = _bot()

    assert BotFilter().matches_bot(bot)
    assert BotFilter(exchange="Binance").matches_bot(bot)
    assert BotFilter(exchange="Binance", trading_fee=0.1).matches_bot(bot)
    assert not BotFilter(exchange="Binance", name="nomatch").matches_bot(bot)


def test_listener_filter_matches_on_id_and_service():
    listener = Listener(service="Telegram")

    assert ListenerFilter(listener_id="l1").matches_listener("l1", listener)
    assert ListenerFilter(service="Telegram").matches_listener("l1", listener)
    assert not ListenerFilter(listener_id="l1", service="Slack").matches_listener("l1", listener)


def test_bot_view_never_serializes_sensitive_fields():
    view = BotView.from_record(_bot())

    dumped = view.model_dump()
    for field in SENSITIVE_BOT_FIELDS:
        assert field not in dumped
    for field in SENSITIVE_LISTENER_FIELDS:
        assert field not in dumped["listeners"]["l1"]

    raw = view.model_dump_json()
    for value in ("key-123", "secret-456", "hook-789", "0xdeadbeef", "listener-secret"):
        assert value not in raw
    assert json.loads(raw)["trading_fee"] == 0.1

    # still available in memory
    assert view.api_key == "key-123"


def test_listener_view_carries_owner_and_id():
    view = ListenerView.from_record("a", "l1", Listener(service="Discord", secret="s", msg="m"))

    assert view.model_dump() == {"bot_id": "a", "listener_id": "l1", "service": "Discord", "msg": "m"}
    for field in SENSITIVE_LISTENER_FIELDS:
        assert getattr(view, field) == "s"
        assert field not in view.model_dump_json()


def test_bot_equality_is_by_id():
    assert _bot() == _bot(name="Other")
    assert _bot() != _bot(bot_id="b")
    assert len({_bot(), _bot(name="Other")}) == 1


@pytest.mark.parametrize("fee", [float("nan"), float("inf"), float("-inf")])
def test_trading_fee_must_be_finite(fee):
    # NaN and infinity cannot be written to JSON, so they never enter the registry
    with pytest.raises(SchemaError):
        BotInsertArgs(name="TraderBot", exchange="Binance", trading_fee=fee)
    with pytest.raises(SchemaError):
        BotPatch(trading_fee=fee)
    with pytest.raises(SchemaError):
        BotFilter(trading_fee=fee)
    with pytest.raises(SchemaError):
        _bot(trading_fee=fee)

    assert BotPatch(trading_fee=0.2).trading_fee == 0.2
