"""Вывод диагностики времени по стадиям.

Принципы:
- SRP: только представление результатов, без логики конвейера.
- Весь вывод идёт через `logging`; формат задаётся при настройке логгера в CLI.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from canvasfit.models.image_model import Raster, SizeRequest

if TYPE_CHECKING:
    from canvasfit.controllers.pipeline_controller import PipelineSummary, SizeOutcome

logger = logging.getLogger("canvasfit.report")


def _fmt_seconds(seconds: float) -> str:
    return f"{seconds * 1000:.2f} ms"


class TimingReport:
    """Пишет одну строку на каждую стадию запуска."""

    def loaded(self, raster: Raster, seconds: float) -> None:
        logger.info(
            "Loaded main image w=%d h=%d channels=%d time=%s",
            raster.width,
            raster.height,
            raster.channels,
            _fmt_seconds(seconds),
        )

    def size_done(self, outcome: "SizeOutcome") -> None:
        logger.info(
            "Created image w=%d h=%d buffer=%d bytes time=%s -> %s",
            outcome.width,
            outcome.height,
            outcome.size_bytes,
            _fmt_seconds(outcome.seconds),
            outcome.path.name,
        )

    def size_failed(self, request: SizeRequest, error: Exception) -> None:
        logger.error("Size %g (#%d) failed: %s", request.edge, request.index, error)

    def finished(self, summary: "PipelineSummary") -> None:
        logger.info(
            "All process %d images in time=%s, check files in directory %s",
            len(summary.outcomes),
            _fmt_seconds(summary.total_seconds),
            summary.source.parent,
        )
        if summary.failures:
            logger.warning("%d size(s) failed", len(summary.failures))
