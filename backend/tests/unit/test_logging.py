"""Unit tests for correlation-id logging helpers."""

import logging

import pytest

from payments.utils.logging import (
    CorrelationIdFilter,
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_payment_operation,
    log_webhook_event,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _clear_context():
    clear_correlation_id()
    yield
    clear_correlation_id()


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)


class TestCorrelationId:
    def test_set_generates_id_when_missing(self):
        cid = set_correlation_id()

        assert cid
        assert get_correlation_id() == cid

    def test_set_keeps_incoming_id(self):
        assert set_correlation_id("req-123") == "req-123"
        assert get_correlation_id() == "req-123"

    def test_clear(self):
        set_correlation_id("req-123")
        clear_correlation_id()

        assert get_correlation_id() is None

    def test_filter_stamps_record(self):
        set_correlation_id("req-abc")
        record = _record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-abc"

    def test_filter_without_context(self):
        record = _record()
        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "no-correlation-id"


class TestStructuredFormatter:
    def test_prefixes_correlation_id(self):
        set_correlation_id("req-xyz")
        formatter = StructuredFormatter("%(levelname)s %(message)s")

        assert formatter.format(_record("Booking confirmed")) == "[req-xyz] INFO Booking confirmed"


class TestConfigureLogging:
    @pytest.fixture
    def root_logger(self):
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        yield root
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    def test_installs_formatter_on_existing_handlers(self, root_logger):
        handler = logging.StreamHandler()
        root_logger.handlers = [handler]

        configure_logging("DEBUG")

        assert root_logger.handlers == [handler]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert root_logger.level == logging.DEBUG

    def test_adds_handler_when_none(self, root_logger, monkeypatch):
        root_logger.handlers = []
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        configure_logging()

        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.WARNING


class TestGetLogger:
    def test_filter_added_once(self):
        get_logger("payments.test.once")
        logger = get_logger("payments.test.once")

        filters = [f for f in logger.filters if isinstance(f, CorrelationIdFilter)]
        assert len(filters) == 1


class TestLogHelpers:
    @pytest.fixture
    def logger(self):
        return get_logger("payments.test.helpers")

    def test_payment_operation_success_logs_info(self, logger, caplog):
        with caplog.at_level(logging.INFO, logger="payments.test.helpers"):
            log_payment_operation(
                logger,
                "create_payment_intent",
                payment_intent_id="pi_123",
                amount=2500,
                currency="eur",
                status="requires_payment_method",
            )

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "Payment operation: create_payment_intent" in record.getMessage()
        assert "amount=2500" in record.getMessage()
        assert record.payment_intent_id == "pi_123"

    def test_payment_operation_error_logs_error(self, logger, caplog):
        with caplog.at_level(logging.INFO, logger="payments.test.helpers"):
            log_payment_operation(logger, "create_payment_intent", error="card_declined")

        assert caplog.records[-1].levelno == logging.ERROR

    @pytest.mark.parametrize(
        ("result", "level"),
        [
            ("booking_confirmed", logging.INFO),
            ("received", logging.INFO),
            ("duplicate", logging.WARNING),
            ("skipped", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_webhook_event_level_by_result(self, logger, caplog, result, level):
        with caplog.at_level(logging.INFO, logger="payments.test.helpers"):
            log_webhook_event(
                logger,
                "payment_intent.succeeded",
                "evt_123",
                booking_id="bk_1",
                result=result,
            )

        record = caplog.records[-1]
        assert record.levelno == level
        assert "Webhook event: payment_intent.succeeded (evt_123)" in record.getMessage()
        assert record.event_id == "evt_123"
