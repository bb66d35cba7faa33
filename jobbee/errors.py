# jobbee/errors.py


class ErrorHandler(Exception):
    """Application error carrying the HTTP status it should be answered with."""

    def __init__(self, message, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GeocodingError(Exception):
    """The geocoding provider failed or returned no match."""


class MailerError(Exception):
    """The email could not be handed to the SMTP server."""
