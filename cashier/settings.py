from django.conf import settings

CASHIER_SETTINGS = getattr(settings, 'CASHIER_SETTINGS', {})

SHARED_SECRET = CASHIER_SETTINGS.get('SHARED_SECRET')

RETRY_IN_CORRECT_ENVIRONMENT = CASHIER_SETTINGS.get(
    'RETRY_IN_CORRECT_ENVIRONMENT', True)

TIMEOUT = CASHIER_SETTINGS.get('TIMEOUT', 30)

PRODUCTION = 'Production'
SANDBOX = 'Sandbox'

ENVIRONMENTS = (PRODUCTION, SANDBOX)

PRODUCTION_VERIFICATION_URL = 'https://buy.itunes.apple.com/verifyReceipt'
SANDBOX_VERIFICATION_URL = 'https://sandbox.itunes.apple.com/verifyReceipt'

VERIFICATION_URLS = {
    PRODUCTION: PRODUCTION_VERIFICATION_URL,
    SANDBOX: SANDBOX_VERIFICATION_URL,
}


def other_environment(environment):
    if environment == PRODUCTION:
        return SANDBOX
    if environment == SANDBOX:
        return PRODUCTION
    raise ValueError("Unknown environment {!r}".format(environment))
