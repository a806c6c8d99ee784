from concurrent.futures import Future
import json
import logging
import threading

import requests

from .exceptions import (
    CashierError,
    ClientNetworkError,
    EmptyResponse,
    JsonParsingFailed,
    MissingFields,
    RequestPreparationError,
    UnknownResponseStatus,
)
from .forms import decode_receipt_info
from .receipt import Decoded, Failure, RawPayload
from .settings import (
    ENVIRONMENTS,
    RETRY_IN_CORRECT_ENVIRONMENT,
    SHARED_SECRET,
    TIMEOUT,
    VERIFICATION_URLS,
    other_environment,
)
from .status import (
    ENVIRONMENT_MISMATCH,
    EXPIRED_BUT_DECODABLE,
    SUCCESS,
    classify,
)


log = logging.getLogger(__name__)

# The first request plus at most one retry in the other environment. Apple
# should never report the wrong environment from both endpoints, but if it
# does we stop instead of bouncing between them.
MAX_ATTEMPTS = 2


def _parse_response(response):
    if not response.content:
        raise EmptyResponse("Empty response from Apple")

    try:
        content = response.json()
    except ValueError:
        raise JsonParsingFailed("Unable to read response")

    if not isinstance(content, dict):
        raise JsonParsingFailed("Unknown response format")

    status = content.get("status")
    if not isinstance(status, int) or isinstance(status, bool):
        raise JsonParsingFailed("Unknown response format")

    return content


class Cashier(object):
    """
    Validates a single base64 encoded receipt with the App Store.

    Docs at https://developer.apple.com/documentation/appstorereceipts/verifyreceipt

    If validation fails because a sandbox receipt was sent to production or
    the other way around, the receipt is sent once more to the other
    environment unless `retry_in_correct_environment` is False.
    """

    def __init__(
        self,
        base64_receipt,
        environment,
        shared_secret=None,
        retry_in_correct_environment=None,
        session=None,
        timeout=None,
    ):
        if environment not in ENVIRONMENTS:
            raise ValueError("Unknown environment {!r}".format(environment))

        self.base64_receipt = base64_receipt
        self.environment = environment
        self.shared_secret = SHARED_SECRET if shared_secret is None else shared_secret
        self.retry_in_correct_environment = (
            RETRY_IN_CORRECT_ENVIRONMENT
            if retry_in_correct_environment is None
            else retry_in_correct_environment
        )
        self.session = session
        self.timeout = TIMEOUT if timeout is None else timeout

    def _prepare_body(self):
        payload = {"receipt-data": self.base64_receipt}

        if self.shared_secret:
            payload["password"] = self.shared_secret

        return json.dumps(payload)

    def _post(self, url, body):
        transport = self.session if self.session is not None else requests
        try:
            return transport.post(
                url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.warning("Unable to reach Apple at {}: {}".format(url, e))
            raise ClientNetworkError(e)

    def _decode(self, content, environment, status):
        try:
            receipt_info = decode_receipt_info(content, environment, status=status)
        except MissingFields as e:
            # Apple accepted the receipt, so hand back what it sent
            log.warning("Unable to decode receipt from Apple: {}".format(e))
            return RawPayload(content)

        log.info("Decoded receipt from the {} environment".format(environment))
        return Decoded(receipt_info)

    def validate_receipt(self):
        """
        Run the validation and return one of Decoded, RawPayload or Failure.

        Errors are returned, never raised.
        """
        try:
            body = self._prepare_body()
        except (TypeError, ValueError) as e:
            log.warning("Unable to serialize the receipt request: {}".format(e))
            return Failure(RequestPreparationError(str(e)))

        environment = self.environment
        attempts = 0

        while True:
            attempts += 1
            url = VERIFICATION_URLS[environment]

            log.info(
                "Validating receipt with Apple at the {} url".format(environment.lower())
            )

            try:
                response = self._post(url, body)
                content = _parse_response(response)
            except CashierError as e:
                return Failure(e)

            status = content["status"]

            log.info("Received status {} from Apple".format(status))

            classification = classify(response.status_code, status)

            if classification.kind in (SUCCESS, EXPIRED_BUT_DECODABLE):
                return self._decode(content, environment, status)

            if (
                classification.kind == ENVIRONMENT_MISMATCH
                and self.retry_in_correct_environment
                and attempts < MAX_ATTEMPTS
            ):
                environment = other_environment(environment)
                log.info(
                    "Receipt should be in the {} environment, retrying".format(
                        environment.lower()
                    )
                )
                continue

            if classification.error_class is None:
                log.warning(
                    "Unknown status {} (HTTP {}) from Apple".format(
                        status, response.status_code
                    )
                )
                return Failure(UnknownResponseStatus(status, content))

            log.warning("Receipt validation failed with status {}".format(status))
            return Failure(
                classification.error_class(
                    content, "Received status {} from Apple".format(status)
                )
            )

    def _run(self, future):
        if not future.set_running_or_notify_cancel():
            return

        try:
            outcome = self.validate_receipt()
        except Exception as e:
            log.exception("Unexpected error while validating receipt")
            outcome = Failure(e)

        future.set_result(outcome)

    def validate(self, callback=None, executor=None):
        """
        Validate in the background.

        Returns a Future that resolves to the outcome. `callback`, when given,
        is called once with the outcome on the thread that did the work.
        """
        future = Future()

        if callback is not None:

            def deliver(done):
                if not done.cancelled():
                    callback(done.result())

            future.add_done_callback(deliver)

        if executor is not None:
            try:
                executor.submit(self._run, future)
            except RuntimeError as e:
                # The executor has been shut down
                log.warning("Unable to schedule receipt validation: {}".format(e))
                future.set_result(Failure(e))
        else:
            thread = threading.Thread(target=self._run, args=(future,))
            thread.daemon = True
            thread.start()

        return future


def validate(
    base64_receipt,
    environment,
    shared_secret=None,
    retry_in_correct_environment=None,
    callback=None,
    session=None,
    timeout=None,
    executor=None,
):
    cashier = Cashier(
        base64_receipt,
        environment,
        shared_secret=shared_secret,
        retry_in_correct_environment=retry_in_correct_environment,
        session=session,
        timeout=timeout,
    )
    return cashier.validate(callback=callback, executor=executor)


def validate_receipt(
    base64_receipt,
    environment,
    shared_secret=None,
    retry_in_correct_environment=None,
    session=None,
    timeout=None,
):
    cashier = Cashier(
        base64_receipt,
        environment,
        shared_secret=shared_secret,
        retry_in_correct_environment=retry_in_correct_environment,
        session=session,
        timeout=timeout,
    )
    return cashier.validate_receipt()
