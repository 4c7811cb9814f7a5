"""FastAPI endpoints for the Identity context: staff users and login codes."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from caviar.config import get_settings
from caviar.identity.api.schemas import (
    RegisterUserRequest,
    RequestCodeRequest,
    StatusResponse,
    UserIdResponse,
    UserResponse,
    VerifyCodeRequest,
)
from caviar.identity.login import LoginCodeService
from caviar.identity.otp import OTPStore
from caviar.identity.registration import RegisterUser
from caviar.identity.user import User
from caviar.shared.errors import AppError

router = APIRouter(tags=["identity"])

_otp_store: OTPStore | None = None


def get_otp_store() -> OTPStore:
    global _otp_store
    if _otp_store is None:
        settings = get_settings()
        _otp_store = OTPStore(
            ttl=settings.otp_ttl_seconds,
            sweep_interval=settings.otp_sweep_interval_seconds,
        )
    return _otp_store


@router.post("/users", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(**body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@router.post("/auth/otp/request", response_model=StatusResponse)
async def request_login_code(body: RequestCodeRequest) -> StatusResponse:
    LoginCodeService(get_otp_store()).request_code(body.telegram_id)
    return StatusResponse()


@router.post("/auth/otp/verify", response_model=UserResponse)
async def verify_login_code(body: VerifyCodeRequest) -> UserResponse:
    if not LoginCodeService(get_otp_store()).verify_code(body.telegram_id, body.code):
        raise AppError.unauthorized("invalid OTP code")

    user = current_domain.repository_for(User).get_by_telegram_id(body.telegram_id)
    return UserResponse(
        id=str(user.id),
        email=user.email,
        telegram_id=user.telegram_id,
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
        is_active=user.is_active,
        created_at=user.created_at,
    )
