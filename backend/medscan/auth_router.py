"""
Auth Router

Email/password sign-up and sign-in against the configured identity backend.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .application.services.account_service import AccountService
from .dependencies import get_account_service, get_access_token
from .domain.entities.auth import AuthOutcome


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class Credentials(BaseModel):
    email: str
    password: str


def outcome_response(outcome: AuthOutcome, failure_status: int = 400) -> JSONResponse:
    """Auth failures carry the backend's message and a 4xx status."""
    return JSONResponse(
        status_code=200 if outcome.success else failure_status,
        content=outcome.to_dict(),
    )


@router.post("/signup")
def sign_up(request: Credentials, accounts: AccountService = Depends(get_account_service)):
    outcome = accounts.sign_up(request.email, request.password)
    logger.info(f"Sign-up {'succeeded' if outcome.success else 'failed'}")
    return outcome_response(outcome)


@router.post("/signin")
def sign_in(request: Credentials, accounts: AccountService = Depends(get_account_service)):
    outcome = accounts.sign_in(request.email, request.password)
    return outcome_response(outcome, failure_status=401)


@router.post("/signout")
def sign_out(
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    return outcome_response(accounts.sign_out(access_token))


@router.get("/me")
def current_user(
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    """The user the Bearer token belongs to."""
    return accounts.require_user(access_token).to_dict()
