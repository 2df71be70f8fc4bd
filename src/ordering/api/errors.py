"""HTTP error mapping for the Ordering API.

Protean's handlers cover validation (400), missing rows (404), invalid state
(409) and invalid operations (422). Restricted accounts are refused with 403,
which needs a handler of its own; Starlette resolves handlers by the
exception's MRO, so it takes precedence over the generic 422.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.exceptions import AccountRestricted


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    @app.exception_handler(AccountRestricted)
    async def account_restricted_handler(request: Request, exc: AccountRestricted) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={"error": str(exc), "reason": exc.reason},
        )
