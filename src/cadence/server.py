import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from cadence.application.config import resolve_config
from cadence.application.factory import build_review_service
from cadence.application.log_setup import setup_logging
from cadence.application.review.service import ReviewService
from cadence.consts import VERSION
from cadence.domain.errors import StoreError, UnknownTierError
from cadence.domain.review.models import DifficultyTier, ReviewState

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cadence.server")

_service: ReviewService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"cadence server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("cadence server shutting down...")


app = FastAPI(
    title="cadence",
    description="Spaced-repetition scheduling and adaptive difficulty API.",
    version=VERSION,
    lifespan=lifespan,
)


def get_service() -> ReviewService:
    """
    The ReviewService shared by all requests.

    Built on first use from the resolved config (CADENCE_BACKEND selects the store).
    """
    global _service
    if _service is None:
        config = resolve_config()
        setup_logging(config)
        _service = build_review_service(config)
    return _service


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class AnswerRequest(BaseModel):
    owner_id: str
    item_id: str
    was_correct: bool
    response_time_seconds: float = Field(default=0.0)
    # Derived from answer history when omitted
    confidence_percent: int | None = None


class ReviewStateResponse(BaseModel):
    item_id: str
    owner_id: str
    next_review_at: int
    interval_days: int
    ease_factor: float
    repetition_count: int
    last_reviewed_at: int

    @classmethod
    def from_state(cls, state: ReviewState) -> "ReviewStateResponse":
        return cls(**state.to_dict())


class StatsResponse(BaseModel):
    total: int
    due_count: int
    new_count: int
    learning_count: int
    mature_count: int
    average_ease_factor: float | None
    recommendations: list[str]


class SuggestRequest(BaseModel):
    current_tier: str


class SuggestResponse(BaseModel):
    current_tier: DifficultyTier
    suggested_tier: DifficultyTier


start_time = time.time()


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Review store failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.post("/reviews", response_model=ReviewStateResponse)
async def record_answer(req: AnswerRequest, service: ReviewService = Depends(get_service)):
    """
    Record one answer and return the item's new schedule.
    """
    state = await service.record_answer(
        req.owner_id,
        req.item_id,
        req.was_correct,
        req.response_time_seconds,
        req.confidence_percent,
    )
    return ReviewStateResponse.from_state(state)


@app.get("/reviews/{owner_id}/{item_id}", response_model=ReviewStateResponse)
async def get_review_state(
    owner_id: str, item_id: str, service: ReviewService = Depends(get_service)
):
    state = await service.get_state(owner_id, item_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"No schedule for {owner_id}/{item_id}")
    return ReviewStateResponse.from_state(state)


@app.put("/reviews/{owner_id}/{item_id}", response_model=ReviewStateResponse)
async def enroll_item(
    owner_id: str, item_id: str, service: ReviewService = Depends(get_service)
):
    """
    Register an item as new for the owner. Existing schedules are left as they are.
    """
    return ReviewStateResponse.from_state(await service.enroll_item(owner_id, item_id))


@app.get("/owners/{owner_id}/due", response_model=list[ReviewStateResponse])
async def get_due(owner_id: str, service: ReviewService = Depends(get_service)):
    return [ReviewStateResponse.from_state(s) for s in await service.due_items(owner_id)]


@app.get("/owners/{owner_id}/stats", response_model=StatsResponse)
async def get_stats(owner_id: str, service: ReviewService = Depends(get_service)):
    summary = await service.summarize(owner_id)
    recommendations = await service.recommendations(owner_id, summary)
    return StatsResponse(
        total=summary.total,
        due_count=summary.due_count,
        new_count=summary.new_count,
        learning_count=summary.learning_count,
        mature_count=summary.mature_count,
        average_ease_factor=summary.average_ease_factor,
        recommendations=recommendations,
    )


@app.post("/owners/{owner_id}/suggest", response_model=SuggestResponse)
async def suggest_tier(
    owner_id: str, req: SuggestRequest, service: ReviewService = Depends(get_service)
):
    try:
        current = DifficultyTier.parse(req.current_tier)
    except UnknownTierError as e:
        raise HTTPException(status_code=422, detail=str(e))
    suggested = await service.suggest_tier(owner_id, current)
    return SuggestResponse(current_tier=current, suggested_tier=suggested)


@app.get("/owners/{owner_id}/queue")
async def get_queue(
    owner_id: str, limit: int | None = None, service: ReviewService = Depends(get_service)
):
    """
    Due items first, then new ones. Without `limit` the configured max_queue_size applies.
    """
    return {"owner_id": owner_id, "items": await service.build_session_queue(owner_id, limit)}
