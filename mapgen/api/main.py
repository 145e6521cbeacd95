"""FastAPI main application."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import list_templates, settings
from ..core.biomes import BIOME_NAMES
from ..core.errors import ConfigurationError, InvariantViolation
from ..core.heightmap_generator import generate_heightmap
from ..core.pipeline import PipelineOptions, generate_world
from ..core.world import PROFILES, IslandSettings, WorldGenerationParams, WorldType
from ..export import SCHEMA_VERSION, build_world_payload, encode_float32
from ..utils.logging import configure_logging
from .schemas import HeightmapRequest, WorldConfig

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_format)
    logger.info("Starting map generation API", version=__version__)
    yield
    logger.info("Shutting down map generation API")


# Initialize FastAPI app
app = FastAPI(
    title="Map Generation API",
    description="Procedural world maps with provinces and regions",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Invalid configuration", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=422, content={"detail": str(exc), "code": "invalid_configuration"}
    )


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation):
    logger.error("Generation failed", path=request.url.path, stage=exc.stage, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "code": "internal_error", "stage": exc.stage},
    )


def _check_dimensions(width: int, height: int) -> None:
    if width > settings.max_map_width or height > settings.max_map_height:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Map size {width}x{height} exceeds the limit of "
                f"{settings.max_map_width}x{settings.max_map_height}"
            ),
        )


# API endpoints
@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Map Generation API",
        "version": __version__,
        "schemaVersion": SCHEMA_VERSION,
        "status": "running",
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/world-types")
def world_types():
    """Available world types and the template each one uses."""
    return [
        {"name": world_type.value, "template": PROFILES[world_type].template}
        for world_type in WorldType
    ]


@app.get("/templates")
def templates():
    """Names of the heightmap templates."""
    return list_templates()


@app.get("/biomes")
def biomes():
    """Biome code to name table."""
    return {str(int(code)): name for code, name in BIOME_NAMES.items()}


@app.post("/heightmap")
def heightmap(request: HeightmapRequest, binary: bool = False):
    """Generate only the heightmap of an EarthLike world."""
    width = request.width or settings.default_map_width
    height = request.height or settings.default_map_height
    _check_dimensions(width, height)

    logger.info("Heightmap requested", seed=request.seed, width=width, height=height)
    result = generate_heightmap(
        request.seed,
        width,
        height,
        WorldType.EARTH_LIKE,
        IslandSettings().island_density,
    )
    data = result.data
    return {
        "width": result.width,
        "height": result.height,
        "encoding": "base64" if binary else "json",
        "data": encode_float32(data) if binary else data.tolist(),
    }


@app.post("/worlds/generate")
def generate(config: WorldConfig, binary: bool = False):
    """
    Generate a complete world.

    The pipeline runs synchronously in the worker threadpool. Invalid
    configuration yields 422, a broken internal invariant 500.
    """
    params = WorldGenerationParams.from_config(
        config.generation_config(settings.default_map_width, settings.default_map_height)
    )
    _check_dimensions(params.width, params.height)

    include_rivers = (
        settings.include_rivers if config.include_rivers is None else config.include_rivers
    )
    options = PipelineOptions(
        region_target_size=settings.region_target_size, include_rivers=include_rivers
    )

    logger.info("World generation requested", seed=params.seed, world_type=params.world_type.value)
    result = generate_world(params, options)
    return build_world_payload(result, binary=binary)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
