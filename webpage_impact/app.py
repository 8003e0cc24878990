"""
Server entry point: FastAPI app setup and route configuration.
Exposes batch measurement as JSON and single-URL measurement as an SSE stream.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from typing import Any

import dotenv
import fastapi
import pydantic
import uvicorn
from fastapi.middleware import cors
from starlette import responses

from webpage_impact import settings
from webpage_impact.models import config as config_mod
from webpage_impact.pipeline import measure, stream
from webpage_impact.utils import logger

dotenv.load_dotenv()

log = logger.create_logger("Server")

server_settings = settings.ServerSettings()
runner = measure.WebpageImpact(global_config=settings.MeasurementDefaults().to_config_dict())


class MeasureRequest(pydantic.BaseModel):
    """Body of ``POST /api/measure``."""

    inputs: list[dict[str, Any]]
    config: dict[str, Any] | None = None


class MeasureResponse(pydantic.BaseModel):
    """Response of ``POST /api/measure``: one output row per input row."""

    outputs: list[dict[str, Any]]


@contextlib.asynccontextmanager
async def lifespan(_app: fastapi.FastAPI) -> AsyncGenerator[None]:
    """Log server start on startup."""
    log.section("Webpage Impact Server Started")
    log.info("Environment", {"env": server_settings.environment})
    yield


app = fastapi.FastAPI(title="Webpage Impact Server", lifespan=lifespan)

# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    cors.CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# API Routes
# ============================================================================


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/measure")
async def measure_endpoint(request: MeasureRequest) -> MeasureResponse:
    """Measure every input row and return the enriched rows."""
    log.info("Incoming measurement request", {"inputs": len(request.inputs)})
    try:
        outputs = await runner.execute(request.inputs, request.config)
    except config_mod.ConfigValidationError as exc:
        raise fastapi.HTTPException(status_code=422, detail=str(exc)) from exc
    return MeasureResponse(outputs=outputs)


@app.get("/api/measure-stream")
async def measure_stream_endpoint(
    url: str = fastapi.Query(..., description="The URL to measure"),
    device: str | None = fastapi.Query(None, description="Mobile device to emulate"),
    network: str | None = fastapi.Query(None, description="Network conditions preset"),
    scroll: bool = fastapi.Query(False, description="Scroll to the bottom after each load"),
) -> responses.StreamingResponse:
    """
    Measure a single URL with streaming progress via SSE.
    """
    log.info("Incoming stream request", {"url": url, "device": device})
    call_config: dict[str, Any] = {"scrollToBottom": scroll}
    if device:
        call_config["mobileDevice"] = device
    if network:
        call_config["emulateNetworkConditions"] = network
    try:
        measurement_config = runner.resolve_config(call_config)
    except config_mod.ConfigValidationError as exc:
        raise fastapi.HTTPException(status_code=422, detail=str(exc)) from exc

    return responses.StreamingResponse(
        stream.measure_url_stream(url, measurement_config),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


# ============================================================================
# Start Server
# ============================================================================


def main() -> None:
    """Entry point for running the server."""
    log.success(f"Server listening on {server_settings.host}:{server_settings.port}")
    uvicorn.run(
        "webpage_impact.app:app",
        host=server_settings.host,
        port=server_settings.port,
        reload=not server_settings.is_production,
    )


if __name__ == "__main__":
    main()
