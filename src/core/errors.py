from __future__ import annotations


class WebshopError(Exception):
    """Base error for the webshop cache service."""


class ValidationError(WebshopError):
    """Raised when user input is invalid."""


class ExternalServiceError(WebshopError):
    """Raised when the hosted document database fails."""


class NotFoundError(WebshopError):
    """Raised when a requested record is not found."""
