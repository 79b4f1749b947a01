from fastapi import APIRouter, Depends, HTTPException

from expert_booking.api.errors import HANDLED_ERRORS, to_http_exception
from expert_booking.api.schemas import LoginRequestSchema, RegisterRequestSchema, UserSchema
from expert_booking.application.use_cases.authenticate import AuthenticateUseCase
from expert_booking.wiring.dependencies import get_authenticate_use_case

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=UserSchema)
def login(
    req: LoginRequestSchema,
    uc: AuthenticateUseCase = Depends(get_authenticate_use_case),
):
    try:
        session = uc.login(req.email, req.password)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return UserSchema.from_entity(session.user)


@router.post("/register", response_model=UserSchema)
def register(
    req: RegisterRequestSchema,
    uc: AuthenticateUseCase = Depends(get_authenticate_use_case),
):
    try:
        session = uc.register(req.name, req.email, req.password, req.role)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return UserSchema.from_entity(session.user)


@router.post("/logout", status_code=204)
def logout(uc: AuthenticateUseCase = Depends(get_authenticate_use_case)) -> None:
    try:
        uc.logout()
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)


@router.get("/me", response_model=UserSchema)
def me(uc: AuthenticateUseCase = Depends(get_authenticate_use_case)):
    user = uc.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return UserSchema.from_entity(user)
