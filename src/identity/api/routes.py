"""FastAPI endpoints for the Identity context."""

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from identity.api.schemas import LoginRequest, LoginResponse
from identity.auth.errors import InvalidCredentialsError, LoginBlockedError
from identity.auth.login import LoginService

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, request: Request) -> LoginResponse:
    service = LoginService(
        verifier=request.app.state.credential_verifier,
        limiter=request.app.state.login_rate_limiter,
    )
    client_ip = request.client.host if request.client else "unknown"
    claims = service.login(body.email, body.password, client_ip)
    return LoginResponse(
        user_id=claims.user_id,
        email=claims.subject,
        role=claims.role.value,
        display_name=claims.display_name,
    )


async def _blocked(request: Request, exc: LoginBlockedError):
    return JSONResponse(
        status_code=429,
        content={"error": exc.message, "retry_after_seconds": exc.remaining_seconds},
        headers={"Retry-After": str(exc.remaining_seconds)},
    )


async def _invalid_credentials(request: Request, exc: InvalidCredentialsError):
    return JSONResponse(status_code=401, content={"error": exc.message})


def register_auth_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LoginBlockedError, _blocked)
    app.add_exception_handler(InvalidCredentialsError, _invalid_credentials)
