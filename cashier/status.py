from collections import namedtuple

from .exceptions import (
    APPLE_VALIDATION_ERRORS,
    APPSTORE_STATUS_OK,
    APPSTORE_STATUS_EXPIRED_SUBSCRIPTION,
    APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT,
    APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT,
)


SUCCESS = "success"
EXPIRED_BUT_DECODABLE = "expired_but_decodable"
ENVIRONMENT_MISMATCH = "environment_mismatch"
TERMINAL_ERROR = "terminal_error"

SANDBOX_RECEIPT_SENT_TO_PRODUCTION = "sandbox_receipt_sent_to_production"
PRODUCTION_RECEIPT_SENT_TO_SANDBOX = "production_receipt_sent_to_sandbox"

ENVIRONMENT_MISMATCH_DIRECTIONS = {
    APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT: SANDBOX_RECEIPT_SENT_TO_PRODUCTION,
    APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT: PRODUCTION_RECEIPT_SENT_TO_SANDBOX,
}


# `direction` is only set for ENVIRONMENT_MISMATCH. `error_class` is the
# AppleValidationError subclass for the status, or None when the status is
# not one Apple documents.
Classification = namedtuple(
    "Classification", ["kind", "status", "direction", "error_class"]
)


def classify(http_status, status):
    """
    Decide what to do with a verifyReceipt response.

    Apple answers every request with HTTP 200, so any other HTTP status is
    treated as an unknown terminal error, whatever the body says.
    """
    if not 200 <= http_status < 300:
        return Classification(TERMINAL_ERROR, status, None, None)

    if status == APPSTORE_STATUS_OK:
        return Classification(SUCCESS, status, None, None)

    error_class = APPLE_VALIDATION_ERRORS.get(status)

    if status == APPSTORE_STATUS_EXPIRED_SUBSCRIPTION:
        # The receipt data is still in the response
        return Classification(EXPIRED_BUT_DECODABLE, status, None, error_class)

    if status in ENVIRONMENT_MISMATCH_DIRECTIONS:
        return Classification(
            ENVIRONMENT_MISMATCH,
            status,
            ENVIRONMENT_MISMATCH_DIRECTIONS[status],
            error_class,
        )

    return Classification(TERMINAL_ERROR, status, None, error_class)
