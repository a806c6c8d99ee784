import datetime
import logging
import re

from django import forms
import pytz

from .exceptions import MissingFields
from .receipt import DecodedReceipt, InAppPurchaseReceipt, ReceiptInfo
from .widgets import IAPTrueStringInput

log = logging.getLogger(__name__)

DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
INTEGER_RE = re.compile(r"[-+]?[0-9]+")


def _date_from_ms(value):
    # Apple sends dates as strings holding milliseconds since the epoch
    if not isinstance(value, str) or not DECIMAL_RE.fullmatch(value):
        return None

    try:
        seconds = float(value) / 1000.0
        return datetime.datetime.fromtimestamp(seconds, tz=pytz.utc)
    except (ValueError, OverflowError, OSError):
        return None


def _clean_date(data, *names, required=True):
    # Try to get the value in ms, then the plain name. A required date is
    # taken from the first key present; only optional dates fall back to
    # the next candidate when a value does not parse.
    for name in names:
        for key in (name + "_ms", name):
            if key not in data:
                continue

            value = _date_from_ms(data[key])
            if value is not None:
                return value

            if required:
                raise forms.ValidationError(
                    "Unable to parse a date for {} from {!r}".format(key, data[key])
                )

    if required:
        raise forms.ValidationError("Unable to find a date for {}".format(names[0]))

    return None


def _clean_decoded(decode, name, value):
    try:
        return decode(value)
    except MissingFields as e:
        raise forms.ValidationError("Unable to parse {}: {}".format(name, e.errors))


def _clean_form_data(form_cls, data):
    if not isinstance(data, dict):
        raise MissingFields(
            {"__all__": [forms.ValidationError("Expected a JSON object")]}
        )

    form = form_cls(data)
    if not form.is_valid():
        log.info(
            "Unable to decode form data for {}".format(form_cls.__name__),
            extra={"data": {"errors": form.errors.as_data()}},
        )
        raise MissingFields(form.errors.as_data())
    return form.cleaned_data


class StringField(forms.Field):
    """
    A field that only accepts JSON strings.

    Anything that is not a string is treated as if it were missing, so an
    empty string is still a valid value.
    """

    def to_python(self, value):
        if isinstance(value, str):
            return value
        return None

    def validate(self, value):
        if value is None and self.required:
            raise forms.ValidationError(
                self.error_messages["required"], code="required"
            )


class InAppReceiptForm(forms.Form):
    """
    A Django form to validate an in-app purchase receipt

    See https://developer.apple.com/documentation/appstorereceipts/responsebody/receipt/in_app
    """

    # The number of consumable products purchased, sent as a string.
    quantity = StringField()

    # The unique identifier of the product purchased.
    product_id = StringField()

    # A unique identifier for a transaction such as a purchase, restore, or renewal.
    transaction_id = StringField()

    # The transaction identifier of the original purchase. All receipts in a
    # chain of renewals for an auto-renewable subscription share this value.
    original_transaction_id = StringField()

    # The time the App Store charged the user's account.
    purchase_date = forms.Field(required=False)

    # The time of the original purchase. For a restored transaction this is
    # the date of the transaction being restored.
    original_purchase_date = forms.Field(required=False)

    # The expiration date of an auto-renewable subscription.
    expires_date = forms.Field(required=False)

    # The time Apple customer support canceled the transaction. Treat a
    # canceled receipt as if no purchase had ever been made.
    cancellation_date = forms.Field(required=False)

    # Not documented by Apple. Sent as the string "true" or "false".
    is_trial_period = forms.BooleanField(required=False, widget=IAPTrueStringInput)

    # Only present in the production environment.
    app_item_id = StringField(required=False)

    # Only present in the production environment.
    version_external_identifier = StringField(required=False)

    # The primary key for identifying subscription purchases.
    web_order_line_item_id = StringField(required=False)

    def clean_quantity(self):
        value = self.cleaned_data["quantity"]
        if not INTEGER_RE.fullmatch(value):
            raise forms.ValidationError("Unable to parse quantity {!r}".format(value))
        return int(value)

    def clean_purchase_date(self):
        return _clean_date(self.data, "purchase_date")

    def clean_original_purchase_date(self):
        return _clean_date(self.data, "original_purchase_date")

    def clean_expires_date(self):
        # TODO: settle on one name once a receipt with receipt_expires_date
        # has been seen from the App Store.
        return _clean_date(
            self.data, "receipt_expires_date", "expires_date", required=False
        )

    def clean_cancellation_date(self):
        return _clean_date(
            self.data, "receipt_cancellation_date", "cancellation_date", required=False
        )


class ReceiptForm(forms.Form):
    """
    A Django form to validate the receipt returned by verifyReceipt

    See https://developer.apple.com/documentation/appstorereceipts/responsebody/receipt
    """

    # The bundle identifier for the app to which the receipt belongs.
    bundle_id = StringField()

    # The app's version number (CFBundleVersion).
    application_version = StringField()

    # The version of the app that the user originally purchased. Always
    # "1.0" in the sandbox.
    original_application_version = StringField()

    # The time the App Store generated the receipt.
    receipt_creation_date = forms.Field(required=False)

    # Only present for apps purchased through the Volume Purchase Program.
    expiration_date = forms.Field(required=False)

    # The in-app purchase receipts, in the order Apple sent them.
    in_app = forms.Field(required=False)

    def clean_receipt_creation_date(self):
        return _clean_date(self.data, "receipt_creation_date")

    def clean_expiration_date(self):
        # Apple documents this as expiration_date, but the creation date turned
        # out to be receipt_creation_date, so try both.
        return _clean_date(
            self.data, "receipt_expiration_date", "expiration_date", required=False
        )

    def clean_in_app(self):
        value = self.cleaned_data.get("in_app")
        if value is None:
            return ()

        if not isinstance(value, list):
            raise forms.ValidationError("Unable to parse non list in_app: {}".format(value))

        return tuple(
            _clean_decoded(decode_in_app_receipt, "in_app[{}]".format(i), item)
            for i, item in enumerate(value)
        )


class ReceiptInfoForm(forms.Form):
    """
    A Django form to validate the body of a successful verifyReceipt response

    See https://developer.apple.com/documentation/appstorereceipts/responsebody
    """

    # The decoded receipt that was sent for verification.
    receipt = forms.Field()

    # The latest Base64-encoded app receipt.
    latest_receipt = StringField(required=False)

    # The receipt for the most recent renewal. Only decoded when Apple sends
    # a single object; the iOS 7 style list is left on the raw JSON.
    latest_receipt_info = forms.Field(required=False)

    def clean_receipt(self):
        return _clean_decoded(decode_receipt, "receipt", self.cleaned_data["receipt"])

    def clean_latest_receipt_info(self):
        value = self.cleaned_data.get("latest_receipt_info")
        if not isinstance(value, dict):
            return None
        return _clean_decoded(decode_receipt, "latest_receipt_info", value)


def decode_in_app_receipt(data):
    cleaned = _clean_form_data(InAppReceiptForm, data)
    return InAppPurchaseReceipt(
        quantity=cleaned["quantity"],
        product_identifier=cleaned["product_id"],
        transaction_identifier=cleaned["transaction_id"],
        original_transaction_identifier=cleaned["original_transaction_id"],
        purchase_date=cleaned["purchase_date"],
        original_purchase_date=cleaned["original_purchase_date"],
        subscription_expiration_date=cleaned["expires_date"],
        cancellation_date=cleaned["cancellation_date"],
        is_trial_period=cleaned["is_trial_period"],
        app_item_id=cleaned["app_item_id"],
        external_version_identifier=cleaned["version_external_identifier"],
        web_order_line_item_id=cleaned["web_order_line_item_id"],
    )


def decode_receipt(data):
    cleaned = _clean_form_data(ReceiptForm, data)
    return DecodedReceipt(
        bundle_identifier=cleaned["bundle_id"],
        app_version=cleaned["application_version"],
        original_app_version=cleaned["original_application_version"],
        creation_date=cleaned["receipt_creation_date"],
        expiration_date=cleaned["expiration_date"],
        in_app_receipts=cleaned["in_app"],
        json=data,
    )


def decode_receipt_info(data, environment, status=0):
    cleaned = _clean_form_data(ReceiptInfoForm, data)
    return ReceiptInfo(
        environment=environment,
        receipt=cleaned["receipt"],
        latest_receipt=cleaned["latest_receipt"],
        latest_receipt_info=cleaned["latest_receipt_info"],
        status=status,
    )
