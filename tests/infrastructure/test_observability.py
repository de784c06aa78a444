"""Structured Logging — JSONFormatter output shape."""

import json
import logging

from fulfillment.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "fulfillment.services.order_store", logging.INFO, __file__, 1,
        "Order created", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_base_fields_present():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "fulfillment.services.order_store"
    assert log["message"] == "Order created"
    assert "timestamp" in log


def test_known_extra_fields_surfaced():
    log = json.loads(JSONFormatter().format(
        _record(order_id=3, status="pending", unrelated="x"),
    ))
    assert log["order_id"] == 3
    assert log["status"] == "pending"
    assert "unrelated" not in log


def test_none_extras_omitted():
    log = json.loads(JSONFormatter().format(_record(item_id=None)))
    assert "item_id" not in log


def test_service_name_stamped_on_every_line():
    log = json.loads(JSONFormatter("order-service").format(_record()))
    assert log["service"] == "order-service"


def test_record_service_extra_wins():
    log = json.loads(JSONFormatter("api-gateway").format(_record(service="Order")))
    assert log["service"] == "Order"


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "json", "inventory-service")
        setup_logging("DEBUG", "json", "inventory-service")
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
        root.setLevel(level)
