# core/tests/test_logging_filters.py
import logging
from io import StringIO

from clinicpay.logging_filters import PIIRedactorFilter


def _isolated_logger(name):
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.INFO)
    handler.addFilter(PIIRedactorFilter())
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers = []  # isolate from global handlers
    logger.propagate = False
    logger.addHandler(handler)
    return logger, stream


def test_email_and_token_are_redacted_stream():
    logger, stream = _isolated_logger("test.pii.email")

    logger.info(
        "email=%s token=%s", "lin.mei@example.com", "Bearer eyJhbGciOiVeryLongToken..."
    )

    value = stream.getvalue()
    assert "***@example.com" in value
    assert "****" in value
    assert "lin.mei@example.com" not in value
    assert "eyJhbGciOiVeryLongToken" not in value


def test_national_id_is_redacted():
    logger, stream = _isolated_logger("test.pii.national_id")

    logger.info("worker id card A123456789 on file")

    value = stream.getvalue()
    assert "A123456789" not in value
    assert "worker id card **** on file" in value


def test_sensitive_keys_in_mapping_args():
    record = logging.LogRecord(
        "payroll", logging.INFO, __file__, 1, "%(name)s %(amount)s", None, None
    )
    record.args = {"name": "Lin Mei", "amount": 2136}

    assert PIIRedactorFilter().filter(record) is True
    assert record.args == {"name": "****", "amount": 2136}
    assert record.getMessage() == "**** 2136"


def test_plain_amounts_pass_through():
    logger, stream = _isolated_logger("test.pii.amounts")

    logger.info("net pay %s for %s hours", 46400, 10.5)

    assert stream.getvalue().strip() == "net pay 46400 for 10.5 hours"
