"""Errors raised by the handler endpoints, rendered as ``{"error": message}``."""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class FunctionError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(FunctionError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidRequestError(FunctionError):
    status_code = status.HTTP_400_BAD_REQUEST


class FieldNotFoundError(FunctionError):
    status_code = status.HTTP_404_NOT_FOUND


class GeneratorConfigError(FunctionError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class GeneratorUpstreamError(FunctionError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def function_error_handler(request: Request, exc: FunctionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
