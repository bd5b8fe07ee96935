import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query

from .config import get_settings
from .errors import ImportPreviewError
from .models import FileCheckResult, HealthResponse, PreviewResult
from .preview import check_file, parse_for_preview
from .rules import get_rule_set

ALLOWED_EXTENSIONS = (".csv", ".txt")

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(level=settings.log_level)
    yield


app = FastAPI(
    title="csv-import-preview",
    description="Encoding-aware preview and validation of uploaded tabular files",
    version="0.1.0",
    lifespan=lifespan,
)


async def _read_upload(file: UploadFile) -> bytes:
    filename = (file.filename or "").lower()
    if not filename.endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only CSV or TXT files are supported")

    raw = await file.read()
    if len(raw) > settings.max_upload_size:
        raise HTTPException(status_code=413, detail="File exceeds the upload size limit")
    return raw


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/preview", response_model=PreviewResult)
async def preview_csv(
    file: UploadFile = File(...),
    max_rows: Optional[int] = Query(default=None, ge=1),
    rule_set: Optional[str] = Query(default=None),
):
    raw = await _read_upload(file)
    try:
        rules = get_rule_set(rule_set) if rule_set else None
        result = parse_for_preview(raw, max_rows=max_rows, rules=rules)
    except ImportPreviewError as exc:
        logger.info("Rejected upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc))

    logger.info(
        "Previewed %s: encoding=%s (%d), rows=%d/%d",
        file.filename, result.encoding, result.encoding_confidence,
        len(result.rows), result.total_rows,
    )
    return result


@app.post("/check", response_model=FileCheckResult)
async def check_csv(
    file: UploadFile = File(...),
    required: List[str] = Query(default=[]),
):
    raw = await _read_upload(file)
    return check_file(raw, required_headers=required)
