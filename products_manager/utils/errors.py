from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class RestError(HTTPException):
    """HTTPException carrying a machine readable error code."""
    status_code = 500
    code = "rest_error"
    message = "Something went wrong."

    def __init__(self, message: str = None, code: str = None, status_code: int = None):
        super().__init__(status_code=status_code or self.status_code, detail=message or self.message)
        if code:
            self.code = code


class Forbidden(RestError):
    status_code = 403
    code = "rest_forbidden"
    message = "Sorry, you are not allowed to access this endpoint."


class NotFound(RestError):
    status_code = 404
    code = "not_found"
    message = "Product not found."


class DeleteFailed(RestError):
    status_code = 500
    code = "delete_failed"
    message = "Failed to delete product."


class BadRequest(RestError):
    status_code = 400
    code = "rest_invalid_param"
    message = "Invalid parameter."


async def rest_error_handler(request: Request, exc: RestError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.detail, "data": {"status": exc.status_code}},
        headers=getattr(exc, "headers", None),
    )
