"""Core domain errors and their HTTP mapping."""
from fatefi.core.error_mapper import ErrorMapper
from fatefi.core.exceptions import (AuthError, DrawNotFoundError,
                                    DuplicatePredictionError, FateFiError,
                                    InvalidPredictionError)

__all__ = [
    "AuthError",
    "DrawNotFoundError",
    "DuplicatePredictionError",
    "ErrorMapper",
    "FateFiError",
    "InvalidPredictionError",
]
