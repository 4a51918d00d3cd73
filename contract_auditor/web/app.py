"""
HTTP interface for the contract auditor.

``POST /api/audit`` accepts the same multipart form the upload page sends:
``files`` (any number of uploads), ``directCode`` and ``githubUrl``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ..errors import AuditError, SourceReadError
from ..models.sources import AuditRequest, SourceUnit
from ..pipeline.audit import AuditService

STATUS_BY_CATEGORY = {
    "no_input": 400,
    "unsupported_input": 400,
    "read_failure": 400,
    "configuration": 503,
    "backend_unavailable": 502,
    "repository_fetch_failure": 502,
    "internal_error": 500,
}

router = APIRouter(prefix="/api", tags=["api"])


def get_audit_service(request: Request) -> AuditService:
    service = getattr(request.app.state, "audit_service", None)
    if service is None:
        service = AuditService()
        request.app.state.audit_service = service
    return service


def error_response(error: AuditError) -> JSONResponse:
    return JSONResponse(
        {"error": error.to_dict()},
        status_code=STATUS_BY_CATEGORY.get(error.category, 500),
    )


async def read_upload(upload: UploadFile) -> SourceUnit:
    """Decode one uploaded file into a source unit"""
    filename = upload.filename or "upload.sol"
    try:
        data = await upload.read()
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        raise SourceReadError(filename, "file is not valid UTF-8 text")
    except OSError as e:
        raise SourceReadError(filename, str(e))
    finally:
        await upload.close()
    return SourceUnit(label=filename, text=text)


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/audit")
async def audit(
    files: List[UploadFile] = File(default=[]),
    directCode: Optional[str] = Form(default=None),
    githubUrl: Optional[str] = Form(default=None),
    service: AuditService = Depends(get_audit_service),
):
    """Audit the submitted contracts and return the compiled report"""
    try:
        units = [await read_upload(upload) for upload in files]
        request = AuditRequest(
            files=units,
            direct_code=directCode,
            repository_url=githubUrl or None,
        )
        report = await service.audit(request)
    except AuditError as e:
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error while auditing")
        return error_response(AuditError("Analysis failed due to an internal error"))

    return {"analysis": report.report}


def create_app(service: Optional[AuditService] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        service: Audit service to use; created lazily on first request if omitted
    """
    app = FastAPI(
        title="Contract Auditor",
        description="LLM-assisted smart contract audits",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.audit_service = service
    app.include_router(router)
    return app
