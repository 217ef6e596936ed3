from typing import Callable, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from lxml import etree
from pydantic import BaseModel, Field, ValidationError

from core.assembler import translate_document
from core.logger import get_logger
from core.options import TranslateOptions
from providers.factory import PROVIDERS, build_translator

logger = get_logger(__name__)

app = FastAPI(title="xlf-auto-translate")

# Allow CORS for dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TranslateParams(BaseModel):
    source_lang: str = Field(min_length=1)
    target_lang: str = Field(min_length=1)
    rate: int = Field(default=500, ge=0)
    concurrent: int = Field(default=4, ge=1)
    proxy: Optional[str] = None
    auto_proxy: bool = False
    skip: bool = False
    clear_state: bool = False
    add_approved: bool = False
    provider: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def get_translator_factory() -> Callable:
    return build_translator


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


# Plain def: translation blocks on worker threads, FastAPI runs this in its threadpool
@app.post("/api/translate")
def translate_upload(
    file: UploadFile = File(...),
    source_lang: str = Form(...),
    target_lang: str = Form(...),
    rate: int = Form(500),
    concurrent: int = Form(4),
    proxy: Optional[str] = Form(None),
    auto_proxy: bool = Form(False),
    skip: bool = Form(False),
    clear_state: bool = Form(False),
    add_approved: bool = Form(False),
    provider: Optional[str] = Form(None),
    translator_factory: Callable = Depends(get_translator_factory),
):
    try:
        params = TranslateParams(
            source_lang=source_lang, target_lang=target_lang, rate=rate, concurrent=concurrent,
            proxy=proxy, auto_proxy=auto_proxy, skip=skip, clear_state=clear_state,
            add_approved=add_approved, provider=provider,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))

    if params.provider and params.provider not in PROVIDERS:
        raise HTTPException(status_code=422, detail=f"Unknown provider: {params.provider}")

    options = TranslateOptions(
        source_lang=params.source_lang,
        target_lang=params.target_lang,
        min_interval_ms=params.rate,
        max_concurrent=params.concurrent,
        proxy=params.proxy,
        auto_proxy=params.auto_proxy,
        skip=params.skip,
        clear_state=params.clear_state,
        add_approved_to_state_final=params.add_approved,
    )
    translator = None if options.skip else translator_factory(params.provider)

    data = file.file.read()
    try:
        outcome = translate_document(data, options, translator)
    except etree.XMLSyntaxError as e:
        logger.warning(f"Rejected malformed upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Malformed XLIFF: {e}")

    logger.info(f"Translated upload {file.filename}: {outcome.number_of_translated} ok, {outcome.failed} failed")
    return Response(
        content=outcome.xml,
        media_type="application/xml",
        headers={
            "X-Translated-Count": str(outcome.number_of_translated),
            "X-Failed-Count": str(outcome.failed),
            "Content-Disposition": f'attachment; filename="translated_{file.filename}"',
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
