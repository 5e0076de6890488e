from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from .errors import SpreadsheetError
from .logging_config import setup_logging
from .models import ReadResponse, HealthResponse
from .normalize import UnsupportedFileType, read_upload_bytes
from .settings import settings

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="tabread",
    description="Delimited text and spreadsheet workbooks as generic table datasets",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/read", response_model=ReadResponse)
async def read_file(
    file: UploadFile = File(...),
    table: Optional[List[str]] = Query(default=None),
):
    raw = await file.read()
    try:
        return read_upload_bytes(raw, file.filename or "", table)
    except UnsupportedFileType:
        raise HTTPException(status_code=422, detail="Only delimited text and xlsx workbooks are supported")
    except SpreadsheetError as exc:
        raise HTTPException(status_code=422, detail={"kind": exc.kind.value, "message": str(exc)})
