APPSTORE_STATUS_OK = 0
APPSTORE_STATUS_INVALID_JSON = 21000
APPSTORE_STATUS_MALFORMED_RECEIPT_DATA = 21002
APPSTORE_STATUS_RECEIPT_AUTHENTICATION = 21003
APPSTORE_STATUS_SHARED_SECRET_MISMATCH = 21004
APPSTORE_STATUS_RECEIPT_SERVER_DOWN = 21005
APPSTORE_STATUS_EXPIRED_SUBSCRIPTION = 21006
APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT = 21007
APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT = 21008


class CashierError(Exception):
    pass


class RequestPreparationError(CashierError):
    pass


class ClientNetworkError(CashierError):
    def __init__(self, error, *args, **kwargs):
        self.error = error
        super(ClientNetworkError, self).__init__(error, *args, **kwargs)


class EmptyResponse(CashierError):
    pass


class JsonParsingFailed(CashierError):
    pass


class MissingFields(CashierError):
    def __init__(self, errors, *args, **kwargs):
        self.errors = errors
        super(MissingFields, self).__init__(
            "Missing or malformed fields: {}".format(", ".join(sorted(errors))),
            *args,
            **kwargs
        )


class UnknownResponseStatus(CashierError):
    def __init__(self, status, response, *args, **kwargs):
        self.status = status
        self.response = response
        super(UnknownResponseStatus, self).__init__(
            "Unknown response status {}".format(status), *args, **kwargs
        )


class AppleValidationError(CashierError):
    """
    An error status returned by the App Store in the `status` field.

    See https://developer.apple.com/documentation/appstorereceipts/status
    """

    status = None
    retryable = False

    def __init__(self, response, *args, **kwargs):
        self.response = response
        super(AppleValidationError, self).__init__(*args, **kwargs)


class BadJSON(AppleValidationError):
    # The App Store could not read the JSON object you provided.
    status = APPSTORE_STATUS_INVALID_JSON


class MalformedReceiptData(AppleValidationError):
    # The data in the receipt-data property was malformed or missing.
    status = APPSTORE_STATUS_MALFORMED_RECEIPT_DATA


class InvalidReceipt(AppleValidationError):
    # The receipt could not be authenticated.
    status = APPSTORE_STATUS_RECEIPT_AUTHENTICATION


class IncorrectSharedSecret(AppleValidationError):
    # NOTE: Only returned for iOS 6 style transaction receipts for
    # auto-renewable subscriptions.
    status = APPSTORE_STATUS_SHARED_SECRET_MISMATCH


class ServerUnavailable(AppleValidationError):
    # The receipt server is not currently available. Never retried by the
    # client, but the caller may try again later.
    status = APPSTORE_STATUS_RECEIPT_SERVER_DOWN
    retryable = True


class SubscriptionExpired(AppleValidationError):
    # The receipt is valid but the subscription has expired. The receipt
    # data is still returned with this status, so the client decodes it.
    status = APPSTORE_STATUS_EXPIRED_SUBSCRIPTION


class TestReceiptInProductionEnvironment(AppleValidationError):
    status = APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT


class ProductionReceiptInTestEnvironment(AppleValidationError):
    status = APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT


APPLE_VALIDATION_ERRORS = {
    error_class.status: error_class
    for error_class in (
        BadJSON,
        MalformedReceiptData,
        InvalidReceipt,
        IncorrectSharedSecret,
        ServerUnavailable,
        SubscriptionExpired,
        TestReceiptInProductionEnvironment,
        ProductionReceiptInTestEnvironment,
    )
}
