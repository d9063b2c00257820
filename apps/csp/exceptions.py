from django.core.exceptions import ImproperlyConfigured


class InvalidValue(ValueError):
    """A content element field failed validation.

    ``code`` is stable across releases so callers can match on it instead
    of the message.
    """

    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


class InvalidConfiguration(ImproperlyConfigured):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code
