from collections import namedtuple

from .exceptions import APPSTORE_STATUS_EXPIRED_SUBSCRIPTION


InAppPurchaseReceipt = namedtuple(
    "InAppPurchaseReceipt",
    [
        "quantity",
        "product_identifier",
        "transaction_identifier",
        "original_transaction_identifier",
        "purchase_date",
        "original_purchase_date",
        "subscription_expiration_date",
        "cancellation_date",
        "is_trial_period",
        "app_item_id",
        "external_version_identifier",
        "web_order_line_item_id",
    ],
)


DecodedReceipt = namedtuple(
    "DecodedReceipt",
    [
        "bundle_identifier",
        "app_version",
        "original_app_version",
        "creation_date",
        "expiration_date",
        "in_app_receipts",
        # The receipt object exactly as Apple returned it, for the fields
        # that are not surfaced above.
        "json",
    ],
)


class ReceiptInfo(
    namedtuple(
        "ReceiptInfo",
        ["environment", "receipt", "latest_receipt", "latest_receipt_info", "status"],
    )
):
    """
    A decoded response from the App Store.

    `latest_receipt` and `latest_receipt_info` are only returned for iOS 6
    style transaction receipts for auto-renewable subscriptions and describe
    the most recent renewal.
    """

    __slots__ = ()

    @property
    def is_expired(self):
        return self.status == APPSTORE_STATUS_EXPIRED_SUBSCRIPTION


# The result of a validation. Exactly one of these is delivered per call.

Decoded = namedtuple("Decoded", ["receipt_info"])

# Apple accepted the receipt but the payload could not be decoded, so the
# original JSON is handed back instead.
RawPayload = namedtuple("RawPayload", ["payload"])

Failure = namedtuple("Failure", ["error"])
