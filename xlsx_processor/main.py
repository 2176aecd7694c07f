from typing import Optional, Tuple

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import HTMLResponse, Response
from starlette.concurrency import run_in_threadpool

from .identifiers import decode_text_bytes
from .models import ProcessResponse, ErrorResponse, HealthResponse
from .page import INDEX_HTML
from .process import InputValidationError, filter_spreadsheet, process_spreadsheet, summary_of
from .rules import OUTPUT_FILENAME, XLSX_MEDIA_TYPE
from .workbook import SpreadsheetReadError

app = FastAPI(
    title="xlsx-processor",
    description="Remove spreadsheet rows whose identifier is in a pasted list",
    version="0.1.0",
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "The file could not be read"},
    422: {"model": ErrorResponse, "description": "File or identifiers missing"},
}


async def _collect_inputs(
    file: Optional[UploadFile],
    identifiers: Optional[str],
    identifiers_file: Optional[UploadFile],
) -> Tuple[Optional[bytes], Optional[str], str]:
    raw = await file.read() if file is not None else None
    filename = file.filename if file is not None else None

    text = identifiers or ""
    if identifiers_file is not None:
        extra = await identifiers_file.read()
        if extra:
            text = text + "\n" + decode_text_bytes(extra)

    return raw, filename, text


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InputValidationError):
        return HTTPException(status_code=422, detail=exc.message)
    return HTTPException(status_code=400, detail=exc.message)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def index():
    return INDEX_HTML


@app.post("/process", response_model=ProcessResponse, responses=ERROR_RESPONSES)
async def process(
    file: Optional[UploadFile] = File(None),
    identifiers: Optional[str] = Form(None),
    identifiers_file: Optional[UploadFile] = File(None),
):
    raw, filename, text = await _collect_inputs(file, identifiers, identifiers_file)
    try:
        return await run_in_threadpool(process_spreadsheet, raw, filename, text)
    except (InputValidationError, SpreadsheetReadError) as e:
        raise _http_error(e) from e


@app.post("/process/download", responses=ERROR_RESPONSES)
async def process_download(
    file: Optional[UploadFile] = File(None),
    identifiers: Optional[str] = Form(None),
    identifiers_file: Optional[UploadFile] = File(None),
):
    raw, filename, text = await _collect_inputs(file, identifiers, identifiers_file)
    try:
        content, result = await run_in_threadpool(filter_spreadsheet, raw, filename, text)
    except (InputValidationError, SpreadsheetReadError) as e:
        raise _http_error(e) from e

    summary = summary_of(result)
    headers = {
        "Content-Disposition": f'attachment; filename="{OUTPUT_FILENAME}"',
        "X-Total-Rows": str(summary["total_rows"]),
        "X-Removed-Rows": str(summary["removed_rows"]),
        "X-Remaining-Rows": str(summary["remaining_rows"]),
    }
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=headers)
