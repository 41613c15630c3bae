"""FastAPI main application."""

import logging
from typing import List, Optional, Tuple

import structlog
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.pipeline import WorldGenOptions
from .jobs import GenerationJob, GenerationService


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure structlog on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_format)
logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="World Generator API",
    description="Procedural continents and political regions",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_service: Optional[GenerationService] = None


def get_service() -> GenerationService:
    """Return the process-wide generation service, creating it on first use."""
    global _service
    if _service is None:
        _service = GenerationService(
            kind=settings.executor_kind,
            max_workers=settings.generation_workers,
            history_limit=settings.job_history_limit,
        )
    return _service


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new world."""

    width: int = Field(default_factory=lambda: settings.default_map_width, ge=1, description="Map width in cells")
    height: int = Field(default_factory=lambda: settings.default_map_height, ge=1, description="Map height in cells")
    country_count: int = Field(default_factory=lambda: settings.default_country_count, ge=1, description="Number of regions")
    options: Optional[WorldGenOptions] = Field(None, description="Generation options")


class JobResponse(BaseModel):
    """Response with job information."""

    job_id: str
    generation: int
    status: str
    message: str
    seed: Optional[int] = None
    error_message: Optional[str] = None


class MapSummary(BaseModel):
    """Summary information about the latest world."""

    job_id: str
    seed: int
    width: int
    height: int
    land_cells: int
    regions_count: int
    continents: List[List[int]]


class RegionSummary(BaseModel):
    """Region information for game-state consumers."""

    id: int
    name: str
    size: int
    center: Tuple[float, float]
    neighbors: List[int]
    coastal: bool
    border_cells: int
    ocean_border_cells: int


class GridResponse(BaseModel):
    width: int
    height: int
    grid: List[List[int]]


def _job_response(job: GenerationJob) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        generation=job.generation,
        status=job.status.value,
        message=f"Job {job.status.value}",
        seed=job.seed,
        error_message=job.error_message,
    )


def _latest_world(service: GenerationService):
    world = service.latest
    if world is None:
        raise HTTPException(status_code=404, detail="No map generated yet")
    return world


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down World Generator API")
    if _service is not None:
        _service.shutdown()


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "World Generator API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check(service: GenerationService = Depends(get_service)):
    """Health check endpoint."""
    return {"status": "healthy", "generation": service.generation}


@app.post("/maps/generate", response_model=JobResponse)
async def generate_map(
    request: MapGenerationRequest, service: GenerationService = Depends(get_service)
):
    """
    Start world generation.

    Returns immediately with a job ID. A newer request supersedes this one;
    use /jobs/{job_id} to check status.
    """
    logger.info("Map generation requested", request=request.model_dump())

    if request.width > settings.max_map_width or request.height > settings.max_map_height:
        raise HTTPException(
            status_code=400,
            detail=f"Map size limited to {settings.max_map_width}x{settings.max_map_height}",
        )
    if request.country_count > settings.max_country_count:
        raise HTTPException(
            status_code=400,
            detail=f"country_count limited to {settings.max_country_count}",
        )

    options = request.options.model_dump() if request.options else None
    job = service.submit(request.width, request.height, request.country_count, options)
    return _job_response(job)


@app.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job_status(job_id: str, service: GenerationService = Depends(get_service)):
    """Get status of a generation job."""
    job = service.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_response(job)


@app.get("/maps/latest", response_model=MapSummary)
async def get_latest_map(service: GenerationService = Depends(get_service)):
    """Summary of the most recently generated world."""
    world = _latest_world(service)
    return MapSummary(
        job_id=service.latest_job_id,
        seed=world.seed,
        width=world.width,
        height=world.height,
        land_cells=world.land_cells,
        regions_count=len(world.regions),
        continents=world.continents,
    )


@app.get("/maps/latest/regions", response_model=List[RegionSummary])
async def get_latest_regions(service: GenerationService = Depends(get_service)):
    """Regions of the most recently generated world."""
    world = _latest_world(service)
    return [
        RegionSummary(
            id=region.id,
            name=region.name,
            size=region.size,
            center=region.center(),
            neighbors=region.neighbors,
            coastal=region.is_coastal,
            border_cells=len(region.border),
            ocean_border_cells=len(region.ocean_border),
        )
        for region in world.regions
    ]


@app.get("/maps/latest/grid", response_model=GridResponse)
async def get_latest_grid(service: GenerationService = Depends(get_service)):
    """Cell grid of the most recently generated world (-1 is ocean)."""
    world = _latest_world(service)
    return GridResponse(width=world.width, height=world.height, grid=world.grid.tolist())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
