from .client import Cashier, validate, validate_receipt
from .exceptions import (
    AppleValidationError,
    CashierError,
    ClientNetworkError,
    EmptyResponse,
    IncorrectSharedSecret,
    JsonParsingFailed,
    MissingFields,
    RequestPreparationError,
    UnknownResponseStatus,
)
from .forms import decode_in_app_receipt, decode_receipt, decode_receipt_info
from .receipt import (
    Decoded,
    DecodedReceipt,
    Failure,
    InAppPurchaseReceipt,
    RawPayload,
    ReceiptInfo,
)
from .settings import PRODUCTION, SANDBOX
from .status import classify

__all__ = [
    'Cashier',
    'validate',
    'validate_receipt',
    'AppleValidationError',
    'CashierError',
    'ClientNetworkError',
    'EmptyResponse',
    'IncorrectSharedSecret',
    'JsonParsingFailed',
    'MissingFields',
    'RequestPreparationError',
    'UnknownResponseStatus',
    'decode_in_app_receipt',
    'decode_receipt',
    'decode_receipt_info',
    'Decoded',
    'DecodedReceipt',
    'Failure',
    'InAppPurchaseReceipt',
    'RawPayload',
    'ReceiptInfo',
    'PRODUCTION',
    'SANDBOX',
    'classify',
]
