"""Tests for log masking and setup."""

import logging

from common.logging_config import LOG_FORMAT, SensitiveDataFilter, setup_logging


def make_record(msg, args=()):
    return logging.LogRecord('ledger', logging.INFO, __file__, 1, msg, args, None)


def test_masks_bearer_and_api_key():
    record = make_record("headers: Authorization=Bearer abc123 api_key=xyz")
    SensitiveDataFilter().filter(record)

    assert 'abc123' not in record.msg
    assert 'xyz' not in record.msg


def test_masks_secret_keys_in_args():
    secret = 'edsk' + '3' * 50
    record = make_record("loaded %s", (secret,))
    SensitiveDataFilter().filter(record)

    assert secret not in record.getMessage()


def test_leaves_ordinary_messages():
    record = make_record("Chunk 1/3 uploaded. Operation hash: ooABC")
    SensitiveDataFilter().filter(record)

    assert record.msg == "Chunk 1/3 uploaded. Operation hash: ooABC"


def test_setup_logging_configures_package_loggers():
    logger = setup_logging(log_level='DEBUG', packages=('pipeline',))

    assert logging.getLogger('pipeline').level == logging.DEBUG
    assert logger.name == 'cli'


def test_setup_logging_uses_standard_format():
    setup_logging(log_level='INFO', packages=('onchfs_format_check',))

    handler = logging.getLogger('onchfs_format_check').handlers[0]
    assert handler.formatter._fmt == LOG_FORMAT
    assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
