import pytest

from cashier import exceptions
from cashier.exceptions import (
    APPLE_VALIDATION_ERRORS,
    APPSTORE_STATUS_INVALID_JSON,
    APPSTORE_STATUS_MALFORMED_RECEIPT_DATA,
    APPSTORE_STATUS_RECEIPT_AUTHENTICATION,
    APPSTORE_STATUS_SHARED_SECRET_MISMATCH,
    APPSTORE_STATUS_RECEIPT_SERVER_DOWN,
    APPSTORE_STATUS_EXPIRED_SUBSCRIPTION,
    APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT,
    APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT,
)
from cashier.settings import ENVIRONMENTS, PRODUCTION, SANDBOX, other_environment
from cashier.status import (
    ENVIRONMENT_MISMATCH,
    EXPIRED_BUT_DECODABLE,
    PRODUCTION_RECEIPT_SENT_TO_SANDBOX,
    SANDBOX_RECEIPT_SENT_TO_PRODUCTION,
    SUCCESS,
    TERMINAL_ERROR,
    classify,
)


def test_status_table():
    assert APPSTORE_STATUS_INVALID_JSON == 21000
    assert APPSTORE_STATUS_MALFORMED_RECEIPT_DATA == 21002
    assert APPSTORE_STATUS_RECEIPT_AUTHENTICATION == 21003
    assert APPSTORE_STATUS_SHARED_SECRET_MISMATCH == 21004
    assert APPSTORE_STATUS_RECEIPT_SERVER_DOWN == 21005
    assert APPSTORE_STATUS_EXPIRED_SUBSCRIPTION == 21006
    assert APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT == 21007
    assert APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT == 21008
    assert sorted(APPLE_VALIDATION_ERRORS) == [
        21000,
        21002,
        21003,
        21004,
        21005,
        21006,
        21007,
        21008,
    ]


def test_classify_success():
    classification = classify(200, 0)
    assert classification.kind == SUCCESS
    assert classification.status == 0
    assert classification.error_class is None


def test_classify_expired_subscription():
    classification = classify(200, APPSTORE_STATUS_EXPIRED_SUBSCRIPTION)
    assert classification.kind == EXPIRED_BUT_DECODABLE
    assert classification.error_class is exceptions.SubscriptionExpired


def test_classify_environment_mismatch():
    classification = classify(200, APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT)
    assert classification.kind == ENVIRONMENT_MISMATCH
    assert classification.direction == SANDBOX_RECEIPT_SENT_TO_PRODUCTION
    assert classification.error_class is exceptions.TestReceiptInProductionEnvironment

    classification = classify(200, APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT)
    assert classification.kind == ENVIRONMENT_MISMATCH
    assert classification.direction == PRODUCTION_RECEIPT_SENT_TO_SANDBOX
    assert classification.error_class is exceptions.ProductionReceiptInTestEnvironment


def test_classify_terminal_errors():
    statuses_to_exceptions = [
        [APPSTORE_STATUS_INVALID_JSON, exceptions.BadJSON],
        [APPSTORE_STATUS_MALFORMED_RECEIPT_DATA, exceptions.MalformedReceiptData],
        [APPSTORE_STATUS_RECEIPT_AUTHENTICATION, exceptions.InvalidReceipt],
        [APPSTORE_STATUS_SHARED_SECRET_MISMATCH, exceptions.IncorrectSharedSecret],
        [APPSTORE_STATUS_RECEIPT_SERVER_DOWN, exceptions.ServerUnavailable],
    ]

    for status, exception in statuses_to_exceptions:
        classification = classify(200, status)
        assert classification.kind == TERMINAL_ERROR, status
        assert classification.direction is None
        assert classification.error_class is exception

    assert exceptions.ServerUnavailable.retryable
    assert not exceptions.IncorrectSharedSecret.retryable


def test_classify_unknown_status():
    for status in (1, 21001, 21009, 21010, 21199, -1):
        classification = classify(200, status)
        assert classification.kind == TERMINAL_ERROR
        assert classification.error_class is None


def test_classify_http_error():
    for http_status in (301, 404, 500, 503):
        classification = classify(http_status, 0)
        assert classification.kind == TERMINAL_ERROR
        assert classification.error_class is None


def test_environments():
    assert set(ENVIRONMENTS) == {PRODUCTION, SANDBOX}
    assert other_environment(PRODUCTION) == SANDBOX
    assert other_environment(SANDBOX) == PRODUCTION

    with pytest.raises(ValueError):
        other_environment("Staging")
