"""
Medication Scanner - FastAPI Backend

Barcode, pill and imprint identification with scan history.
CAPTURE → VISION → CLASSIFY → LOOKUP → PERSIST
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .auth_router import router as auth_router
from .cross_cutting.logging import setup_logging
from .dependencies import get_config
from .domain.exceptions import DomainException
from .medications_router import router as medications_router
from .records_router import router as records_router
from .scan_router import router as scan_router


config = get_config()
setup_logging(
    level=config.logging.level,
    log_file=config.logging.log_file,
    format_string=config.logging.format,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Medication Scanner API",
    description="Identify medications from barcodes, pill photos and imprints",
    version=__version__,
)

# Allowing credentials with a wildcard origin is rejected by browsers
wildcard = "*" in config.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials=not wildcard,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan_router)
app.include_router(medications_router)
app.include_router(records_router)
app.include_router(auth_router)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/")
async def root():
    return {
        "status": "ok",
        "message": "Medication Scanner API is running",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "vision": config.vision.type,
        "label_search": config.label_search.type,
        "storage": config.storage.type,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
