from django.forms.widgets import CheckboxInput


class IAPTrueStringInput(CheckboxInput):
    """
    A widget intended to be used with BooleanField for Apple's string flags.

    Only the exact string "true" is truthy. Booleans, "1" and "True" are all
    False, which is how the App Store has always sent `is_trial_period`.
    """

    def value_from_datadict(self, data, files, name):
        return data.get(name) == "true"
