import json

import pytest

from core.errors import AlreadyExistsError, NotFoundError, StorageIOError, ValidationError
from core.models import (
    BotFilter,
    BotInsertArgs,
    BotPatch,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
)
from core.registry import BotRegistry
from core.registry.store import load_registry


def _seed(registry: BotRegistry) -> None:
    registry.create_bot(BotInsertArgs(bot_id="a", name="Alpha", exchange="X", trading_fee=0.1))
    registry.create_bot(BotInsertArgs(bot_id="b", name="Beta", exchange="Y"))


# Bots

def test_create_bot_generates_id(registry):
    view = registry.create_bot(BotInsertArgs(name="TraderBot", exchange="Binance"))

    assert view.bot_id
    assert view.listeners == {}
    assert view.bot_id in registry


def test_duplicate_bot_id_is_rejected_once(registry):
    registry.create_bot(BotInsertArgs(bot_id="a", name="Alpha", exchange="X"))

    with pytest.raises(AlreadyExistsError):
        registry.create_bot(BotInsertArgs(bot_id="a", name="Other", exchange="Y"))

    assert registry.bot_count == 1
    assert registry.get_bot("a").name == "Alpha"


@pytest.mark.parametrize("name, exchange", [("", "X"), ("Alpha", ""), ("   ", "X")])
def test_create_bot_requires_name_and_exchange(registry, name, exchange):
    with pytest.raises(ValidationError):
        registry.create_bot(BotInsertArgs(name=name, exchange=exchange))

    assert registry.bot_count == 0


def test_partial_update_preserves_untouched_fields(registry):
    _seed(registry)

    view = registry.update_bot("a", BotPatch(name="Renamed"))

    assert view.name == "Renamed"
    assert view.trading_fee == 0.1
    assert view.exchange == "X"


def test_update_rejects_blank_required_fields(registry):
    _seed(registry)

    with pytest.raises(ValidationError):
        registry.update_bot("a", BotPatch(exchange=""))

    assert registry.get_bot("a").exchange == "X"


def test_update_unknown_bot_is_not_found(registry):
    with pytest.raises(NotFoundError):
        registry.update_bot("missing", BotPatch(name="x"))


def test_list_bots_uses_and_semantics(registry):
    _seed(registry)

    assert [bot.bot_id for bot in registry.list_bots(BotFilter(exchange="X"))] == ["a"]
    assert [bot.bot_id for bot in registry.list_bots()] == ["a", "b"]
    with pytest.raises(NotFoundError):
        registry.list_bots(BotFilter(exchange="X", name="nomatch"))


def test_list_bots_on_empty_registry_is_not_found(registry):
    with pytest.raises(NotFoundError):
        registry.list_bots()


def test_delete_bot_cascades_to_listeners(registry):
    _seed(registry)
    first = registry.add_listener("a", ListenerInsertArgs(service="TradingView"))
    second = registry.add_listener("a", ListenerInsertArgs(service="Telegram"))

    deleted = registry.delete_bot("a")

    assert set(deleted.listeners) == {first.listener_id, second.listener_id}
    for listener_id in (first.listener_id, second.listener_id):
        with pytest.raises(NotFoundError):
            registry.get_listener("a", listener_id)
    assert "a" not in load_registry(registry.path).bots


# Listeners

def test_add_listener_fills_defaults(registry):
    _seed(registry)

    view = registry.add_listener("a", ListenerInsertArgs(service="TradingView"))

    assert view.listener_id
    assert view.bot_id == "a"
    assert json.loads(view.msg)["bot_id"] == "a"
    assert view.secret == ""


def test_add_listener_keeps_explicit_message(registry):
    _seed(registry)

    view = registry.add_listener("a", ListenerInsertArgs(service="Slack", msg="custom"))

    assert view.msg == "custom"


def test_add_listener_validation(registry):
    _seed(registry)

    with pytest.raises(ValidationError):
        registry.add_listener("a", ListenerInsertArgs(service=""))
    with pytest.raises(NotFoundError):
        registry.add_listener("missing", ListenerInsertArgs(service="Slack"))

    registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="Slack"))
    with pytest.raises(AlreadyExistsError):
        registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="Discord"))


def test_list_listeners_errors(registry):
    _seed(registry)

    with pytest.raises(ValidationError):
        registry.list_listeners("")
    with pytest.raises(NotFoundError):
        registry.list_listeners("missing")
    with pytest.raises(NotFoundError):
        registry.list_listeners("a")


def test_list_listeners_filters(registry):
    _seed(registry)
    registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="TradingView"))
    registry.add_listener("a", ListenerInsertArgs(listener_id="l2", service="Telegram"))

    found = registry.list_listeners("a", ListenerFilter(service="Telegram"))

    assert [listener.listener_id for listener in found] == ["l2"]
    with pytest.raises(NotFoundError):
        registry.list_listeners("a", ListenerFilter(listener_id="l1", service="Telegram"))


def test_update_listener_merges_patch(registry):
    _seed(registry)
    registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="TradingView", secret="s3cret"))

    view = registry.update_listener("a", "l1", ListenerPatch(msg="new message"))

    assert view.msg == "new message"
    assert view.service == "TradingView"
    assert load_registry(registry.path).bots["a"].listeners["l1"].secret == "s3cret"

    with pytest.raises(NotFoundError):
        registry.update_listener("a", "missing", ListenerPatch(msg="x"))


def test_delete_listener_persists(registry):
    _seed(registry)
    registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="TradingView"))

    removed = registry.delete_listener("a", "l1")

    assert removed.listener_id == "l1"
    assert load_registry(registry.path).bots["a"].listeners == {}
    with pytest.raises(NotFoundError):
        registry.delete_listener("a", "l1")


def test_delete_listeners_by_filter(registry):
    _seed(registry)
    registry.add_listener("a", ListenerInsertArgs(listener_id="l1", service="TradingView"))
    registry.add_listener("a", ListenerInsertArgs(listener_id="l2", service="TradingView"))
    registry.add_listener("a", ListenerInsertArgs(listener_id="l3", service="Telegram"))

    removed = registry.delete_listeners("a", ListenerFilter(service="TradingView"))

    assert sorted(listener.listener_id for listener in removed) == ["l1", "l2"]
    assert [listener.listener_id for listener in registry.list_listeners("a")] == ["l3"]
    with pytest.raises(NotFoundError):
        registry.delete_listeners("a", ListenerFilter(service="TradingView"))


# Administrative

def test_clear_listeners_keeps_bots(registry):
    _seed(registry)
    registry.add_listener("a", ListenerInsertArgs(service="TradingView"))

    registry.clear_listeners()

    assert registry.bot_count == 2
    assert all(not bot.listeners for bot in load_registry(registry.path).bots.values())


def test_clear_bots(registry):
    _seed(registry)

    registry.clear_bots()

    assert registry.bot_count == 0
    assert load_registry(registry.path).bots == {}


# Persistence

def test_every_mutation_is_on_disk(state_file):
    registry = BotRegistry.open(state_file)
    _seed(registry)
    registry.update_bot("b", BotPatch(rest_endpoint="https://api.example.com"))
    registry.add_listener("b", ListenerInsertArgs(listener_id="l1", service="Discord"))

    reopened = BotRegistry.open(state_file)

    assert reopened.get_bot("b").model_dump() == registry.get_bot("b").model_dump()
    assert reopened.get_listener("b", "l1").service == "Discord"


def test_failed_save_leaves_memory_and_disk_unchanged(registry, monkeypatch):
    _seed(registry)
    before = registry.path.read_text()

    def _failing_save(document, path):
        raise StorageIOError("disk full")

    monkeypatch.setattr("core.registry.engine.save_registry", _failing_save)

    with pytest.raises(StorageIOError):
        registry.update_bot("a", BotPatch(name="Renamed"))
    with pytest.raises(StorageIOError):
        registry.delete_bot("b")
    with pytest.raises(StorageIOError):
        registry.add_listener("a", ListenerInsertArgs(service="Slack"))

    assert registry.get_bot("a").name == "Alpha"
    assert registry.get_bot("b").listeners == {}
    assert registry.get_bot("a").listeners == {}
    assert registry.path.read_text() == before
