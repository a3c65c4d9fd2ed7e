"""Domain concept for mapping service and provider exceptions to HTTP responses."""
import asyncio
from dataclasses import dataclass

import httpx
from fastapi import HTTPException

from fatefi.core.exceptions import (AuthError, DrawNotFoundError,
                                    DuplicatePredictionError,
                                    InvalidPredictionError)


@dataclass(frozen=True)
class ErrorMapper:
    """Maps domain/provider exceptions to HTTP (status_code, detail).

    One instance per router (auth, predictions...) so upstream messages carry
    the right API name.
    """

    api_name: str = "API"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses.

        Args:
            exc: The exception raised by a service or provider.

        Returns:
            (status_code, detail) suitable for HTTPException(status_code=..., detail=...).
        """
        if isinstance(exc, DuplicatePredictionError):
            return (409, str(exc) or "You already submitted a prediction for today.")
        if isinstance(exc, (InvalidPredictionError, DrawNotFoundError)):
            return (400, str(exc))
        if isinstance(exc, AuthError):
            return (401, str(exc) or "Unauthorized")
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            if status >= 500:
                return (502, f"{self.api_name} error")
            return (status, f"{self.api_name} error")
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
            return (504, f"Request to {self.api_name} timed out")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        raise HTTPException(status_code=status_code, detail=detail) from exc
