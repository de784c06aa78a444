"""Metrics Endpoint — Prometheus text exposition, recomputed on every scrape."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from fulfillment.api.routes.dependencies import get_metrics_exporter
from fulfillment.infrastructure.metrics_exposition import MetricsExporter

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("")
async def scrape_metrics(exporter: MetricsExporter = Depends(get_metrics_exporter)):
    return Response(content=exporter.render(), media_type=exporter.content_type)
