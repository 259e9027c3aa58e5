"""
Records Router

The signed-in user's scan history, saved medications and profile.
Every endpoint here needs a Bearer token.
"""

import logging
from typing import Optional, Dict, Any, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .application.services.account_service import AccountService
from .dependencies import get_account_service, get_access_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["Records"])


# ============ Request/Response Models ============

class SaveMedicationRequest(BaseModel):
    medication_id: str
    notes: Optional[str] = None
    reminder_enabled: bool = False
    reminder_frequency: Optional[Any] = None


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    is_healthcare_provider: Optional[bool] = None
    preferences: Optional[Dict[str, Any]] = None


# ============ Scan history ============

@router.get("/history")
def get_scan_history(
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
) -> List[Dict[str, Any]]:
    """Scans with their linked medication, most recent first."""
    return [entry.to_dict() for entry in accounts.get_scan_history(access_token)]


# ============ Saved medications ============

@router.get("/saved")
def get_saved_medications(
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
) -> List[Dict[str, Any]]:
    return [saved.to_dict() for saved in accounts.get_saved_medications(access_token)]


@router.post("/saved", status_code=201)
def save_medication(
    request: SaveMedicationRequest,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    saved = accounts.save_medication(
        access_token,
        request.medication_id,
        notes=request.notes,
        reminder_enabled=request.reminder_enabled,
        reminder_frequency=request.reminder_frequency,
    )
    return saved.to_dict()


@router.delete("/saved/{saved_id}")
def remove_saved_medication(
    saved_id: str,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    return {"success": accounts.remove_saved_medication(access_token, saved_id)}


# ============ Profile ============

@router.get("/profile")
def get_profile(
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    profile = accounts.get_profile(access_token)
    return {**profile.to_dict(), "display_name": profile.display_name}


@router.patch("/profile")
def update_profile(
    request: ProfileUpdate,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    profile = accounts.update_profile(access_token, request.model_dump(exclude_unset=True))
    return {**profile.to_dict(), "display_name": profile.display_name}
