"""
FastAPI exception handlers: route every failure raised inside routing to the
application's ErrorNormalizer.

How to use:
    normalizer = ErrorNormalizer(hardened=settings.HARDENED_ERRORS)
    register_exception_handlers(app, normalizer)

Registered failure types:
    - starlette HTTPException     (unknown route 404, 405, HTTPException raised by code)
    - RequestValidationError      (body/query/path binding, rendered as "Validation failed")
    - AppError                    (DomainHttpError, ValidationFailedError, PersistenceError)

Nothing is registered for plain `Exception`: Starlette would run such a handler
outside every user middleware, i.e. outside the trace scope. Unexpected
failures propagate to TraceIdMiddleware instead, which hands them to the same
normalizer instance.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...exceptions.base import AppError
from ...exceptions.normalizer import ErrorNormalizer


def register_exception_handlers(app: FastAPI, normalizer: ErrorNormalizer) -> None:
    async def normalize_exception(request: Request, exc: Exception) -> JSONResponse:
        return normalizer.render(exc)

    app.add_exception_handler(StarletteHTTPException, normalize_exception)
    app.add_exception_handler(RequestValidationError, normalize_exception)
    app.add_exception_handler(AppError, normalize_exception)


"""
---------------------------------------------------------
What the client gets
---------------------------------------------------------
Service raises NotFoundError.for_resource("Student", student_id):
```
HTTP/1.1 404 Not Found
X-Trace-Id: 2b6c...
{"statusCode": 404, "message": "Student 7d1e... not found", "error": "Not Found", "traceId": "2b6c..."}
```

Body fails binding (age below minimum):
```
HTTP/1.1 400 Bad Request
{"statusCode": 400, "message": "Validation failed", "error": "Bad Request", "traceId": "...",
 "details": {"errors": [{"field": "age", "messages": ["age must be >= 6"]}]}}
```
"""
