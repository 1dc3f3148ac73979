import json

import pytest

from core.errors import (
    AlreadyExistsError,
    InternalError,
    NotFoundError,
    ParseError,
    PersistenceError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
    error_from_wire,
)
from core.logging import level_for_verbosity, log, setup_logging
from core.registry.pagination import paginate
from core.registry.templates import default_message, known_services


def test_paginate_slices_one_based_pages():
    items = list(range(25))

    assert paginate(items) == list(range(10))
    assert paginate(items, page=3, limit=10) == [20, 21, 22, 23, 24]
    assert paginate(items, page=4, limit=10) == []


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, 5)])
def test_paginate_rejects_non_positive_values(page, limit):
    with pytest.raises(ValidationError):
        paginate([1, 2, 3], page=page, limit=limit)


def test_tradingview_template_references_bot():
    template = json.loads(default_message("TradingView", "bot-1"))

    assert template["bot_id"] == "bot-1"
    assert template["ticker"] == "{{ticker}}"


def test_every_service_gets_a_json_template():
    for service in [*known_services(), "SomethingElse"]:
        assert json.loads(default_message(service, "bot-1"))


def test_unknown_service_uses_generic_alert():
    assert "alert" in json.loads(default_message("Webhook", "bot-1"))


@pytest.mark.parametrize(
    "status, kind, expected",
    [
        (400, "validation", ValidationError),
        (404, None, NotFoundError),
        (409, "already_exists", AlreadyExistsError),
        (500, "parse", ParseError),
        (500, None, InternalError),
        (504, None, TransportTimeoutError),
        (418, None, InternalError),
        (404, "unknown-kind", NotFoundError),
    ],
)
def test_error_from_wire(status, kind, expected):
    error = error_from_wire(status, "boom", kind)

    assert type(error) is expected
    assert error.message == "boom"


def test_error_hierarchy_status_codes():
    assert ParseError.status_code == 500
    assert issubclass(ParseError, PersistenceError)
    assert issubclass(TransportTimeoutError, TransportError)
    assert AlreadyExistsError.status_code == 409


@pytest.mark.parametrize("verbose, level", [(0, None), (1, "INFO"), (2, "DEBUG"), (3, "TRACE"), (7, "TRACE")])
def test_verbosity_levels(verbose, level):
    assert level_for_verbosity(verbose) == level


def test_log_level_setting_applies_without_verbose_flag(capsys, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging(level_for_verbosity(0), fallback="WARNING")
    log.debug("debug-visible")

    monkeypatch.delenv("LOG_LEVEL")
    setup_logging(level_for_verbosity(0), fallback="WARNING")
    log.info("info-hidden")
    log.warning("warning-visible")

    err = capsys.readouterr().err
    assert "debug-visible" in err
    assert "info-hidden" not in err
    assert "warning-visible" in err


def test_verbose_flag_overrides_log_level_setting(capsys, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    setup_logging(level_for_verbosity(1), fallback="WARNING")
    log.info("info-visible")

    assert "info-visible" in capsys.readouterr().err
