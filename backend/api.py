"""
FastAPI Backend for the Rocket Launch Feasibility Calculator.

Provides HTTP API access to the feasibility engine, the AI weather analysis
and the support chat relay. CLI (main.py) continues to work independently.
"""

from fastapi import FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
import sys
import os
import logging
import traceback
from logging.handlers import RotatingFileHandler

# Add parent directory to path for imports
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from data_models import Coordinates
from backend.models.request import AnalysisRequest, WeatherRequest, ChatRequest
from backend.models.response import AnalysisResponse, ErrorResponse, WeatherAnalysisResponse
from backend.models.geo_context import LocationContext
from backend.services.analysis_service import run_analysis
from backend.services.reverse_geocoder import reverse_geocode
from backend.services.ai_gateway import (
    GatewayError, analyze_weather, open_chat_stream, relay_stream,
)

# ============================================================================
# APPLICATION LOGS: CONSOLE (ALONGSIDE UVICORN) + ROTATING FILE
# ============================================================================
app_logger = logging.getLogger("backend")
app_logger.setLevel(logging.DEBUG)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)

# Colored so it stands out from Uvicorn's access log
formatter = logging.Formatter(
    '\033[96m%(asctime)s\033[0m - %(name)s - \033[93m%(levelname)s\033[0m - %(message)s',
    datefmt='%H:%M:%S'
)
console_handler.setFormatter(formatter)

app_logger.addHandler(console_handler)

# Prevent double-logging if Uvicorn also catches it
app_logger.propagate = False

log_dir = os.getenv("ROCKET_LOG_DIR", os.path.join(parent_dir, "logs"))
os.makedirs(log_dir, exist_ok=True)
log_file = os.path.join(log_dir, "backend.log")

file_handler = RotatingFileHandler(log_file, maxBytes=10*1024*1024, backupCount=5)  # 10MB per file, keep 5 backups
file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
root_logger.addHandler(file_handler)
app_logger.addHandler(file_handler)

logger = logging.getLogger(__name__)
logger.info("Backend API starting - Logging configured to file and console")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

GATEWAY_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    402: {"model": ErrorResponse, "description": "AI gateway credits exhausted"},
    429: {"model": ErrorResponse, "description": "AI gateway rate limit"},
    500: {"model": ErrorResponse},
}

app = FastAPI(
    title="Rocket Launch Feasibility API",
    description="Location feasibility scoring, AI weather analysis and support chat",
    version="1.0.0"
)

# Any origin may call the API; no cookies are involved
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with clear messages."""
    error_messages = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        error_messages.append(f"{field}: {error['msg']}")

    return error_response(400, "; ".join(error_messages))


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    """429 and 402 pass through unchanged; everything else is a 500."""
    return error_response(exc.status_code, exc.message)


@app.options("/{rest_of_path:path}")
async def preflight(rest_of_path: str):
    """OPTIONS requests that are not full CORS preflights still get an empty 200."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Rocket Launch Feasibility API",
        "version": "1.0.0",
        "endpoints": {
            "POST /analyze-location": "Score launch feasibility for a location",
            "POST /analyze-weather": "AI weather and launch-window analysis",
            "POST /chat-support": "Streamed support chat",
            "GET /reverse-geocode": "Place name for a coordinate pair",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(
    "/analyze-location",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze_location(request: AnalysisRequest):
    """
    Score launch feasibility for the selected location.

    Args:
        request: AnalysisRequest with location, coordinates and rocket type

    Returns:
        AnalysisResponse keyed by category
    """
    try:
        coordinates = Coordinates(lat=request.coordinates.lat, lng=request.coordinates.lng)
        report = run_analysis(
            location=request.location,
            coordinates=coordinates,
            rocket_type=request.rocket_type,
            model_sub_type=request.model_sub_type,
        )
        return report.to_dict()

    except ValueError as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Analysis error: {e}\n{traceback.format_exc()}")
        return error_response(500, str(e) or "Unknown error")


@app.post("/analyze-weather", response_model=WeatherAnalysisResponse, responses=GATEWAY_ERROR_RESPONSES)
def analyze_weather_endpoint(request: WeatherRequest):
    """
    Narrative weather analysis for a launch site.

    Gateway 429/402 are returned with the same status code.
    """
    try:
        analysis = analyze_weather(
            latitude=request.latitude,
            longitude=request.longitude,
            location_name=request.location_name,
        )
        return {"analysis": analysis}

    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"Error in analyze-weather: {e}\n{traceback.format_exc()}")
        return error_response(500, str(e) or "Unknown error")


@app.post("/chat-support", responses=GATEWAY_ERROR_RESPONSES)
def chat_support(request: ChatRequest):
    """
    Relay the support conversation to the AI gateway.

    The upstream event stream is passed through unchanged. The upstream
    request is closed once the response ends, including on client disconnect.
    """
    try:
        upstream = open_chat_stream([message.model_dump() for message in request.messages])
    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"Chat support error: {e}\n{traceback.format_exc()}")
        return error_response(500, str(e) or "Unknown error")

    return StreamingResponse(
        relay_stream(upstream),
        media_type="text/event-stream",
        headers=CORS_HEADERS,
        background=BackgroundTask(upstream.close),
    )


@app.get("/reverse-geocode", response_model=LocationContext, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
def reverse_geocode_endpoint(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    """Place name for a map click (falls back to the coordinates)."""
    try:
        return reverse_geocode(lat, lng)

    except Exception as e:
        logger.error(f"Reverse geocoding error: {e}\n{traceback.format_exc()}")
        return error_response(500, str(e) or "Unknown error")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
