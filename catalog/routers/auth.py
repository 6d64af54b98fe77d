from fastapi import APIRouter, Depends
from catalog.schemas.api_schemas import (
    MessageResponse,
    SendOtpRequest,
    SessionSchema,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from catalog.dependencies import get_otp_auth_service
from catalog.application.auth_service import OtpAuthService

router = APIRouter()

@router.post("/auth/send-otp", response_model=MessageResponse)
def send_otp(
    request: SendOtpRequest,
    auth: OtpAuthService = Depends(get_otp_auth_service)
):
    """
    Email a one-time code to the given address.
    """
    auth.send_otp(request.email)
    return MessageResponse(message="OTP sent to email.")

@router.post("/auth/verify-otp", response_model=VerifyOtpResponse)
def verify_otp(
    request: VerifyOtpRequest,
    auth: OtpAuthService = Depends(get_otp_auth_service)
):
    """
    Exchange a one-time code for a session.
    """
    session = auth.verify_otp(request.email, request.token)
    return VerifyOtpResponse(
        message="OTP verified. User session created.",
        session=SessionSchema.from_domain(session),
    )
