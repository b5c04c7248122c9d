"""FastAPI server for the Lumière editorial studio.

Serves the browser front end with:
- upload slots for one portrait and up to three product photos
- the style picker
- generation start, cancel and progress polling
- the result gallery with full-size view and download
"""

import logging
from enum import Enum

from fastapi import BackgroundTasks, FastAPI, File, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from lumiere.config import StudioConfig
from lumiere.exceptions import GenerationInProgressError, InvalidImageError, MissingInputError
from lumiere.models import FashionStyle, GeneratedResult, UploadedImage
from lumiere.pipeline import EditorialPipeline
from lumiere.services import EnvironmentCredentialProvider, GeminiImageClient
from lumiere.studio import StudioSession

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Lumière Editorial API",
    description="Synthesize a model portrait and product photos into ten editorial shots",
    version=VERSION,
)

# Enable CORS for the browser front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SlotName(str, Enum):
    PORTRAIT = "portrait"
    PRODUCTS = "products"


class StyleSelection(BaseModel):
    """Request body for picking a style, by enum name (e.g. 'STREETWEAR')."""
    style: str


class UploadView(BaseModel):
    id: str
    filename: str
    preview_url: str


class StyleOption(BaseModel):
    name: str
    label: str
    value: str
    selected: bool


class ResultView(BaseModel):
    id: str
    url: str
    prompt: str
    download_url: str


class CredentialStatus(BaseModel):
    ready: bool


class StudioView(BaseModel):
    """Everything the front end needs to render the studio screen."""
    api_key_ready: bool
    portrait: list[UploadView]
    products: list[UploadView]
    styles: list[StyleOption]
    selected_style: str
    can_generate: bool
    is_generating: bool
    generate_label: str
    progress: float  # percent, 0-100
    progress_label: str
    results: list[ResultView]
    pending: int  # placeholders for shots still being synthesized
    shots_label: str
    error: str | None = None


# Initialize studio (will be done on first request)
_studio: StudioSession | None = None


def get_studio() -> StudioSession:
    """Get or create the studio session."""
    global _studio
    if _studio is None:
        config = StudioConfig()  # Loads from .env automatically via pydantic-settings
        logging.basicConfig(
            level=config.log_level.upper(),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        credentials = EnvironmentCredentialProvider(config)
        generator = GeminiImageClient(config.generation, credentials)
        _studio = StudioSession(EditorialPipeline(generator), credentials, config)
    return _studio


def _upload_view(image: UploadedImage) -> UploadView:
    return UploadView(id=image.id, filename=image.filename, preview_url=image.preview_url)


def _result_view(result: GeneratedResult) -> ResultView:
    return ResultView(
        id=result.id,
        url=result.url,
        prompt=result.prompt,
        download_url=f"/api/results/{result.id}/download",
    )


def _style_options(studio: StudioSession) -> list[StyleOption]:
    return [
        StyleOption(
            name=style.name,
            label=style.label,
            value=style.value,
            selected=style is studio.selected_style,
        )
        for style in FashionStyle
    ]


def studio_view(studio: StudioSession) -> StudioView:
    """Render the studio state as a view model."""
    percent = studio.progress * 100
    pending = max(0, studio.total_poses - len(studio.results)) if studio.is_generating else 0
    return StudioView(
        api_key_ready=studio.api_key_ready,
        portrait=[_upload_view(img) for img in studio.portrait.images],
        products=[_upload_view(img) for img in studio.products.images],
        styles=_style_options(studio),
        selected_style=studio.selected_style.name,
        can_generate=studio.can_generate,
        is_generating=studio.is_generating,
        generate_label="Synthesizing..." if studio.is_generating else "Generate 10 Variations",
        progress=percent,
        progress_label=f"{round(percent)}%",
        results=[_result_view(r) for r in studio.results],
        pending=pending,
        shots_label=f"VOL. 01 / {len(studio.results)} SHOTS",
        error=studio.generation_error,
    )


async def _require_credential(studio: StudioSession) -> None:
    """Gate the main screen on a connected API key."""
    if not await studio.check_credentials():
        raise HTTPException(status_code=403, detail="API key not connected")


def _get_result_or_404(studio: StudioSession, result_id: str) -> GeneratedResult:
    result = studio.get_result(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No result with id {result_id}")
    return result


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Lumière Editorial API", "version": VERSION}


@app.get("/health")
async def health():
    """Detailed health check."""
    studio = get_studio()
    key_ok = await studio.check_credentials()

    return {
        "status": "ok" if key_ok else "degraded",
        "api_key": "configured" if key_ok else "missing",
    }


@app.get("/api/credentials", response_model=CredentialStatus)
async def credential_status():
    studio = get_studio()
    return CredentialStatus(ready=await studio.check_credentials())


@app.post("/api/credentials/connect", response_model=CredentialStatus)
async def connect_credentials():
    """Re-run key selection (the 'Connect' / 'API Key' buttons)."""
    studio = get_studio()
    return CredentialStatus(ready=await studio.connect())


@app.get("/api/studio", response_model=StudioView)
async def get_studio_view():
    studio = get_studio()
    await studio.check_credentials()
    return studio_view(studio)


@app.get("/api/styles", response_model=list[StyleOption])
async def list_styles():
    return _style_options(get_studio())


@app.put("/api/style", response_model=StudioView)
async def select_style(selection: StyleSelection):
    studio = get_studio()
    await _require_credential(studio)

    try:
        studio.selected_style = FashionStyle[selection.style]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown style: {selection.style}")

    return studio_view(studio)


@app.post("/api/uploads/{slot}", response_model=StudioView)
async def upload_images(slot: SlotName, files: list[UploadFile] = File(...)):
    """Add images to a slot. Extra files beyond the slot capacity are dropped."""
    studio = get_studio()
    await _require_credential(studio)

    payloads = [(f.filename or "upload", await f.read()) for f in files]
    try:
        studio.slot(slot.value).add(payloads)
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return studio_view(studio)


@app.delete("/api/uploads/{slot}/{image_id}", response_model=StudioView)
async def remove_image(slot: SlotName, image_id: str):
    studio = get_studio()
    await _require_credential(studio)

    if not studio.slot(slot.value).remove(image_id):
        raise HTTPException(status_code=404, detail=f"No image with id {image_id}")

    return studio_view(studio)


@app.get("/api/uploads/{slot}/{image_id}/preview")
async def preview_image(slot: SlotName, image_id: str):
    studio = get_studio()
    image = studio.slot(slot.value).get(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail=f"No image with id {image_id}")
    return Response(content=image.data, media_type=image.content_type)


@app.post("/api/generate", response_model=StudioView, status_code=202)
async def generate(background_tasks: BackgroundTasks):
    """Start a ten-pose batch. Poll /api/studio for progress and results."""
    studio = get_studio()
    await _require_credential(studio)

    try:
        request = studio.begin_generation()
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    background_tasks.add_task(studio.run_generation, request)
    return studio_view(studio)


@app.post("/api/generate/cancel")
async def cancel_generation():
    studio = get_studio()
    return {"cancelled": studio.cancel_generation()}


@app.get("/api/results/{result_id}/image")
async def result_image(result_id: str):
    """Full-size view of one result."""
    result = _get_result_or_404(get_studio(), result_id)
    return Response(content=result.image_bytes, media_type="image/png")


@app.get("/api/results/{result_id}/download")
async def download_result(result_id: str):
    studio = get_studio()
    result = _get_result_or_404(studio, result_id)
    filename = studio.download_filename(result)
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=result.image_bytes, media_type="image/png", headers=headers)


@app.post("/api/reset", response_model=StudioView)
async def reset_studio():
    studio = get_studio()
    studio.reset()
    return studio_view(studio)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
