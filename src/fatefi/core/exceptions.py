"""Domain exceptions raised by services and mapped to HTTP by the routers."""


class FateFiError(Exception):
    """Base class for client-visible domain errors."""


class InvalidPredictionError(FateFiError, ValueError):
    """Unknown prediction type/option or missing required field."""


class DrawNotFoundError(FateFiError):
    """No tarot draw exists for the requested date."""


class DuplicatePredictionError(FateFiError):
    """The user already predicted on this draw."""


class AuthError(FateFiError):
    """Missing, invalid, or unverifiable credentials."""
