"""
Medications Router

Drug-label catalog searches (normalized), and the stored medications table.
"""

import logging
from typing import Optional, Dict, Any, List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from .application.lookup.medication_lookup import MedicationLookup
from .application.services.account_service import AccountService
from .dependencies import get_medication_lookup, get_account_service, get_access_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medications", tags=["Medications"])


# ============ Request/Response Models ============

class CatalogResponse(BaseModel):
    """Normalized catalog hits."""
    query: str
    count: int
    results: List[Dict[str, Any]] = Field(default_factory=list)


class MedicationCreate(BaseModel):
    name: str
    ndc: Optional[str] = None
    gtin: Optional[str] = None
    imprint: Optional[str] = None
    shape: Optional[str] = None
    color: Optional[str] = None
    size: Optional[float] = None
    manufacturer: Optional[str] = None
    active_ingredients: Optional[Any] = None
    dosage: Optional[str] = None
    route: Optional[str] = None
    packaging: Optional[str] = None
    image_url: Optional[str] = None
    verified: bool = False


class MedicationUpdate(BaseModel):
    name: Optional[str] = None
    ndc: Optional[str] = None
    gtin: Optional[str] = None
    imprint: Optional[str] = None
    shape: Optional[str] = None
    color: Optional[str] = None
    size: Optional[float] = None
    manufacturer: Optional[str] = None
    active_ingredients: Optional[Any] = None
    dosage: Optional[str] = None
    route: Optional[str] = None
    packaging: Optional[str] = None
    image_url: Optional[str] = None
    verified: Optional[bool] = None


def normalized(query: str, records: List[Dict[str, Any]]) -> CatalogResponse:
    results = []
    for record in records:
        info = MedicationLookup.format_medication_data(record)
        if info is not None:
            results.append(info.to_dict())
    return CatalogResponse(query=query, count=len(results), results=results)


# ============ Catalog search ============

@router.get("/search", response_model=CatalogResponse)
def search_by_name(
    name: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    lookup: MedicationLookup = Depends(get_medication_lookup),
):
    """Brand and generic name search."""
    return normalized(name, lookup.search_by_name(name, limit))


@router.get("/ingredient", response_model=CatalogResponse)
def search_by_ingredient(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    lookup: MedicationLookup = Depends(get_medication_lookup),
):
    return normalized(q, lookup.search_by_active_ingredient(q, limit))


@router.get("/generic", response_model=CatalogResponse)
def search_generic(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    lookup: MedicationLookup = Depends(get_medication_lookup),
):
    """Free-text label search."""
    return normalized(q, lookup.search_generic(q, limit))


@router.get("/manufacturer", response_model=CatalogResponse)
def search_by_manufacturer(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    lookup: MedicationLookup = Depends(get_medication_lookup),
):
    return normalized(q, lookup.get_by_manufacturer(q, limit))


@router.get("/ndc/{code}")
def get_by_ndc(code: str, lookup: MedicationLookup = Depends(get_medication_lookup)):
    info = lookup.format_medication_data(lookup.search_by_ndc(code))
    if info is None:
        raise HTTPException(status_code=404, detail="No medication found with this barcode.")
    return info.to_dict()


@router.get("/application/{number}")
def get_by_application_number(number: str, lookup: MedicationLookup = Depends(get_medication_lookup)):
    info = lookup.format_medication_data(lookup.get_by_application_number(number))
    if info is None:
        raise HTTPException(status_code=404, detail=f"No medication found for application {number}")
    return info.to_dict()


# ============ Stored medications ============

@router.get("/stored")
def search_stored(
    name: Optional[str] = None,
    ndc: Optional[str] = None,
    gtin: Optional[str] = None,
    imprint: Optional[str] = None,
    shape: Optional[str] = None,
    color: Optional[str] = None,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    filters = {"name": name, "ndc": ndc, "gtin": gtin, "imprint": imprint, "shape": shape, "color": color}
    medications = accounts.search_medications(filters, access_token)
    return [m.to_dict() for m in medications]


@router.get("/stored/{medication_id}")
def get_stored(
    medication_id: str,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    return accounts.get_medication(medication_id, access_token).to_dict()


@router.post("/stored", status_code=201)
def create_stored(
    request: MedicationCreate,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    return accounts.create_medication(access_token, request.model_dump()).to_dict()


@router.patch("/stored/{medication_id}")
def update_stored(
    medication_id: str,
    request: MedicationUpdate,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    changes = request.model_dump(exclude_unset=True)
    return accounts.update_medication(access_token, medication_id, changes).to_dict()


@router.delete("/stored/{medication_id}")
def delete_stored(
    medication_id: str,
    accounts: AccountService = Depends(get_account_service),
    access_token: Optional[str] = Depends(get_access_token),
):
    return {"success": accounts.delete_medication(access_token, medication_id)}
