"""
Scan Router

Endpoints for barcode, pill and imprint scans. Images arrive either as
base64 JSON (as the mobile client sends them) or as a multipart upload.
"""

import logging
from typing import Optional, Dict, Any, List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from .application.services.scan_service import ScanService
from .dependencies import get_scan_service, get_access_token, get_optional_user, get_vision_service, get_label_search
from .domain.entities.auth import AuthUser
from .domain.entities.scan_result import ScanResult
from .domain.ports.label_search import LabelSearchPort
from .domain.ports.vision_service import VisionServicePort


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["Scan"])


# ============ Request/Response Models ============

class BarcodeScanRequest(BaseModel):
    """Decoded barcode from the scanner."""
    data: str = Field(..., description="Decoded barcode content")
    type: Optional[str] = Field(None, description="Barcode symbology, e.g. ean13")


class ImageScanRequest(BaseModel):
    """Photo for a pill or imprint scan."""
    scan_type: str = Field(..., description="pill or imprint")
    image_base64: str = Field(..., description="Base64 image or data URL")
    format: Optional[str] = "jpeg"
    image_uri: Optional[str] = Field(None, description="Client-side URI, stored with the scan")


class ScanIssueModel(BaseModel):
    stage: str
    message: str


class ScanResponse(BaseModel):
    scan_type: str
    success: bool
    recorded: bool = False
    history_id: Optional[str] = None
    scan_data: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    medication: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    issues: List[ScanIssueModel] = Field(default_factory=list)
    processing_time_ms: float = 0.0


class ScanHealthResponse(BaseModel):
    status: str
    vision_provider: str
    vision_available: Optional[bool] = None
    label_provider: str


def to_response(result: ScanResult) -> ScanResponse:
    body = result.get_user_response()
    return ScanResponse(
        **body,
        issues=[ScanIssueModel(stage=i.stage.value, message=i.message) for i in result.issues],
        processing_time_ms=round(result.total_processing_time_ms, 2),
    )


# ============ Endpoints ============

@router.get("/health", response_model=ScanHealthResponse)
def scan_health(
    vision: VisionServicePort = Depends(get_vision_service),
    label_search: LabelSearchPort = Depends(get_label_search),
):
    """Which providers the scan flow is wired to."""
    available = vision.is_available()
    return ScanHealthResponse(
        status="degraded" if available is False else "healthy",
        vision_provider=vision.provider_name,
        vision_available=available,
        label_provider=label_search.provider_name,
    )


@router.post("/barcode", response_model=ScanResponse)
def scan_barcode(
    request: BarcodeScanRequest,
    service: ScanService = Depends(get_scan_service),
    user: Optional[AuthUser] = Depends(get_optional_user),
    access_token: Optional[str] = Depends(get_access_token),
):
    """
    Identify a medication from a scanned barcode.

    10-13 digit codes are looked up as NDC/UPC; anything else comes back
    as a low-confidence record named after the scanned text.
    """
    result = service.scan_barcode(request.data, request.type, user=user, access_token=access_token)
    return to_response(result)


@router.post("/image", response_model=ScanResponse)
def scan_image(
    request: ImageScanRequest,
    service: ScanService = Depends(get_scan_service),
    user: Optional[AuthUser] = Depends(get_optional_user),
    access_token: Optional[str] = Depends(get_access_token),
):
    """Identify a pill by color and shape, or by its imprint."""
    result = service.scan_from_base64(
        request.scan_type,
        request.image_base64,
        format=request.format,
        uri=request.image_uri,
        user=user,
        access_token=access_token,
    )
    return to_response(result)


@router.post("/upload", response_model=ScanResponse)
def scan_upload(
    scan_type: str = Form(..., description="pill or imprint"),
    file: UploadFile = File(..., description="Pill photo (JPEG/PNG, max 10MB)"),
    service: ScanService = Depends(get_scan_service),
    user: Optional[AuthUser] = Depends(get_optional_user),
    access_token: Optional[str] = Depends(get_access_token),
):
    """Same as /scan/image, with the photo as a multipart upload."""
    contents = file.file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    image_format = None
    if file.content_type and file.content_type.startswith("image/"):
        image_format = file.content_type.split("/", 1)[1]

    result = service.scan_from_bytes(
        scan_type,
        contents,
        format=image_format,
        uri=file.filename,
        user=user,
        access_token=access_token,
    )
    return to_response(result)
