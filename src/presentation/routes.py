"""
FastAPI routes for issuing and checking verification codes.

Each route is thin: it hands the request to the VerificationManager and maps
the result onto an HTTP status code.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.application.verification_manager import (
    VerificationErrorKind,
    VerificationManager,
    VerificationResult,
)
from src.presentation.dependencies import get_verification_manager
from src.presentation.schemas import (
    SendVerificationRequest,
    VerificationResponse,
    VerifyVerificationCodeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/verification", tags=["verification"])

ERROR_STATUS_CODES = {
    VerificationErrorKind.INVALID_RECIPIENT: status.HTTP_400_BAD_REQUEST,
    VerificationErrorKind.DELIVERY_FAILED: status.HTTP_502_BAD_GATEWAY,
    VerificationErrorKind.INVALID_OR_EXPIRED_CODE: status.HTTP_400_BAD_REQUEST,
    VerificationErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_response(result: VerificationResult) -> VerificationResponse | JSONResponse:
    """
    Convert a manager result into an HTTP response.

    Successful results are returned as the response model (200). Failures get
    the status code for their error kind with the same body shape.
    """
    body = VerificationResponse(
        succeeded=result.succeeded, message=result.message, error=result.error
    )
    if result.succeeded:
        return body

    status_code = ERROR_STATUS_CODES.get(
        result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/send",
    response_model=VerificationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Verification email sent"},
        400: {"model": VerificationResponse, "description": "Invalid recipient"},
        502: {"model": VerificationResponse, "description": "Delivery failed"},
        500: {"model": VerificationResponse, "description": "Internal server error"},
    },
    summary="Send a verification code",
    description="""
    Generate a 6-digit code and email it to the given address.

    Business Rules:
    - Email must be a well-formed address
    - The code is stored only once the mail channel accepted it
    - A new request replaces any code still outstanding for the address
    - The code is valid for 5 minutes (configurable) and can be used once
    - The code is never returned in the response
    """,
)
async def send_verification_code(
    request: SendVerificationRequest,
    manager: Annotated[VerificationManager, Depends(get_verification_manager)],
) -> VerificationResponse | JSONResponse:
    result = await manager.send_verification_code(request.email)
    return to_response(result)


@router.post(
    "/verify",
    response_model=VerificationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Code verified"},
        400: {"model": VerificationResponse, "description": "Invalid or expired code"},
        500: {"model": VerificationResponse, "description": "Internal server error"},
    },
    summary="Verify a code",
    description="""
    Check a code previously sent to the given address.

    Business Rules:
    - Email matching is case-insensitive
    - A matching code is consumed: verifying it again fails
    - Wrong, expired and never-issued codes all return the same error
    """,
)
async def verify_verification_code(
    request: VerifyVerificationCodeRequest,
    manager: Annotated[VerificationManager, Depends(get_verification_manager)],
) -> VerificationResponse | JSONResponse:
    result = await manager.verify_verification_code(request.email, request.code)
    return to_response(result)
