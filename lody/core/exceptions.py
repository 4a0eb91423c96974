"""
Custom exceptions for the waitlist service
"""

class BaseAppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(BaseAppException):
    """Raised when validation fails"""
    def __init__(self, message: str, details: str = None, error_code: str = None):
        super().__init__(message, details)
        self.error_code = error_code


class MissingEmailError(ValidationError):
    """Raised when a submission is attempted without an email address"""
    def __init__(self, details: str = None):
        super().__init__("Email required", details, error_code="missing_email")


class ExternalServiceError(BaseAppException):
    """Raised when external service calls fail"""
    pass


class RegistrationError(ExternalServiceError):
    """Raised for any failure of the Registration Service.

    Callers surface every cause with the same generic retry message.
    """
    pass
