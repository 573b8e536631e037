"""Health check and monitoring endpoints.

This module provides:
- GET /health - Basic health check
- GET /healthz - Kubernetes-style health check
- GET /metrics - Prometheus metrics
"""
import logging

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from chatrelay import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str = __version__


class StatusResponse(BaseModel):
    """Simple status response model."""

    status: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint for load balancers and monitoring."""
    return HealthResponse(status="ok")


@router.get("/healthz", response_model=StatusResponse)
async def healthz() -> StatusResponse:
    """Kubernetes-style health check endpoint."""
    return StatusResponse(status="healthy")


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
