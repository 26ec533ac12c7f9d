from typing import Any

import anyio
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from deepscan.http.dependencies import RateLimit, get_services
from deepscan.http.errors import error_response
from deepscan.http.services import Services
from deepscan.logging.logger import Log
from deepscan.providers.exceptions import ProviderRequestError
from deepscan.ratelimit.models import RemainingCalls

router = APIRouter(prefix="/api", dependencies=[Depends(RateLimit("general"))])


def _single_upload(files: list[Any]) -> UploadFile | None:
    uploads = [f for f in files if isinstance(f, UploadFile)]
    return uploads[0] if uploads else None


def _rate_limit_headers(remaining: RemainingCalls) -> dict[str, str]:
    return {
        "X-RateLimit-Remaining-Minute": str(remaining.minute),
        "X-RateLimit-Remaining-Hour": str(remaining.hour),
        "X-RateLimit-Remaining-Day": str(remaining.day),
        "X-RateLimit-Reset": str(int(remaining.next_reset)),
    }


@router.get("/ping")
async def ping(services: Services = Depends(get_services)) -> dict[str, str]:
    return {"message": services.settings.ping_message}


@router.get("/status", dependencies=[Depends(RateLimit("status"))])
async def status(services: Services = Depends(get_services)) -> dict[str, Any]:
    """Report whether real provider credentials are configured."""
    settings = services.settings
    return {
        "sightengineConfigured": settings.sightengine_configured,
        "resembleConfigured": settings.resemble_configured,
        "message": "Deepfake Detection API Ready",
    }


@router.post("/analyze", dependencies=[Depends(RateLimit("analysis"))])
async def analyze(request: Request, services: Services = Depends(get_services)) -> JSONResponse:
    """Persist the uploaded file, analyze it and return the verdict."""
    async with request.form(max_files=1) as form:
        upload = _single_upload(form.getlist("file"))
        uploaded = await services.intake.save(upload)
    result = await services.orchestrator.handle(uploaded)

    headers: dict[str, str] = {}
    if result.type in ("image", "video"):
        headers = _rate_limit_headers(services.api_limiter.remaining("sightengine"))
    return JSONResponse({"success": True, "result": result.to_dict()}, headers=headers)


@router.post("/debug-upload", dependencies=[Depends(RateLimit("upload"))])
async def debug_upload(
    request: Request,
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """Accept an upload the same way /analyze does and report what was stored."""
    async with request.form(max_files=1) as form:
        upload = _single_upload(form.getlist("file"))
        uploaded = await services.intake.save(upload)
    try:
        stat = await anyio.Path(uploaded.path).stat()
        file_info = {
            "originalname": uploaded.original_name,
            "mimetype": uploaded.mime_type,
            "size": uploaded.size_bytes,
            "storedName": uploaded.path.name,
            "exists": True,
            "sizeOnDisk": stat.st_size,
            "category": uploaded.category,
        }
    finally:
        await services.intake.discard(uploaded)
    Log.info(f"Debug upload: {file_info}")
    return {
        "success": True,
        "message": "File upload debug completed",
        "fileInfo": file_info,
    }


@router.get("/test-sightengine", dependencies=[Depends(RateLimit("status"))])
async def test_sightengine(services: Services = Depends(get_services)) -> Any:
    """Diagnostic credential check; not part of the analysis path."""
    try:
        return await services.credential_checker.check()
    except ProviderRequestError as exc:
        Log.error(f"Sightengine API test error: {exc}")
        return error_response(502, "Sightengine API test failed", str(exc))
