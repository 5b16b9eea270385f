"""
Custom exceptions for the contact submission handler.
"""


class ContactBaseException(Exception):
    """Base exception for all custom exceptions in the contact handler."""
    def __init__(self, message="An error occurred while handling the contact submission"):
        self.message = message
        super().__init__(self.message)

class ValidationError(ContactBaseException):
    """Exception raised for errors in the input validation."""
    def __init__(self, message="Invalid input provided"):
        super().__init__(message)

class MissingFieldError(ValidationError):
    """Exception raised when one or more required fields are missing."""
    def __init__(self, field_names):
        self.field_names = list(field_names)
        message = "full_name, email, and message are required"
        super().__init__(message)

class InvalidEmailError(ValidationError):
    """Exception raised for invalid email addresses."""
    def __init__(self, email):
        self.email = email
        message = "A valid email address is required"
        super().__init__(message)

class MethodNotAllowedError(ContactBaseException):
    """Exception raised when the request uses a verb other than POST."""
    def __init__(self, method):
        self.method = method
        super().__init__("Only POST allowed")

class ConfigurationError(ContactBaseException):
    """Exception raised when required configuration is missing or invalid."""
    def __init__(self, message="Missing configuration"):
        super().__init__(message)

class SinkError(ContactBaseException):
    """Exception raised when the external sink (Sheets, webhook) fails."""
    def __init__(self, sink_name, message="Sink call failed"):
        self.sink_name = sink_name
        message = f"{sink_name} sink error: {message}"
        super().__init__(message)
