import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from .errors import TextConventionError
from .models import InspectResponse, LineEnding, NormalizeResponse, HealthResponse
from .normalize import guess_encoding, inspect_bytes, normalize_text_bytes
from .settings import get_settings

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="textconv",
    description="Line-ending and UTF-8 BOM detection and convention-preserving normalization",
    version="0.1.0",
)


async def _read_upload(file: UploadFile) -> bytes:
    limit = get_settings().max_upload_bytes
    raw = await file.read(limit + 1)
    if len(raw) > limit:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {limit} bytes")
    return raw


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/inspect", response_model=InspectResponse)
async def inspect_text(file: UploadFile = File(...)):
    raw = await _read_upload(file)
    return inspect_bytes(raw)


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_text(
    file: UploadFile = File(...),
    line_ending: Optional[str] = Form(None),
    bom: Optional[bool] = Form(None),
):
    raw = await _read_upload(file)

    fallback = get_settings().default_convention()
    try:
        if line_ending is not None:
            fallback = fallback.model_copy(update={"line_ending": LineEnding.parse(line_ending)})
        if bom is not None:
            fallback = fallback.model_copy(update={"has_bom": bom})
        return normalize_text_bytes(raw, fallback)
    except TextConventionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except UnicodeDecodeError:
        guess = guess_encoding(raw)
        logger.info("rejected non-UTF-8 upload %s (looks like %s)", file.filename, guess)
        raise HTTPException(
            status_code=422,
            detail=f"Only UTF-8 text is supported (detected: {guess or 'unknown'})",
        )
