"""Контроллер конвейера: порядок размеров, свёртка по размерам, замер времени.

SOLID:
- SRP: класс связывает сервисы в конвейер, но сам пиксели не обрабатывает.
- DIP: зависит от сервисов как от ролей; конкретные реализации подставляются полями.
Clean Code:
- Одна итерация цикла = один выходной файл; тяжёлая логика в сервисах.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from canvasfit.config import PipelineSettings, SizePolicy
from canvasfit.errors import CanvasFitError
from canvasfit.models.image_model import FitResult, QualitySetting, Raster, SizeRequest
from canvasfit.services.image_service import ImageService
from canvasfit.services.process_service import ProcessService
from canvasfit.ui.report import TimingReport

logger = logging.getLogger("canvasfit.pipeline")


@dataclass(frozen=True)
class SizeOutcome:
    """Результат обработки одного размера."""
    request: SizeRequest
    path: Path
    width: int
    height: int
    size_bytes: int
    seconds: float


@dataclass(frozen=True)
class SizeFailure:
    """Размер, пропущенный в режиме `keep_going`."""
    request: SizeRequest
    error: str


@dataclass
class PipelineSummary:
    source: Path
    outcomes: List[SizeOutcome] = field(default_factory=list)
    failures: List[SizeFailure] = field(default_factory=list)
    load_seconds: float = 0.0

    @property
    def total_seconds(self) -> float:
        return self.load_seconds + sum(o.seconds for o in self.outcomes)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class PipelineController:
    """Проводит одно изображение через все запрошенные размеры.

    Ответственности:
    - Сортировка размеров от большего к меньшему.
    - Однократное чтение и декодирование исходника.
    - Свёртка state_{i+1} = resize(state_i, size_i) либо, при политике ORIGINAL,
      resize(decoded, size_i).
    - Замер времени (без учёта записи на диск) и передача его в `TimingReport`.
    """
    settings: PipelineSettings = field(default_factory=PipelineSettings)
    report: TimingReport = field(default_factory=TimingReport)

    _image_service: ImageService = field(default_factory=ImageService)
    _process_service: ProcessService = field(default_factory=ProcessService)

    def run(self, file_path: str | Path, sizes: Iterable[float]) -> PipelineSummary:
        """Обрабатывает файл для всех размеров.

        Raises:
            CanvasFitError: первая ошибка любой стадии, если `keep_going` выключен.
        """
        requests = SizeRequest.ordered(sizes)
        source = Path(file_path)
        quality = QualitySetting(quality=self.settings.quality)
        summary = PipelineSummary(source=source)

        started = time.perf_counter()
        state = self._image_service.load_image(source)
        summary.load_seconds = time.perf_counter() - started
        self.report.loaded(state, summary.load_seconds)

        # при ORIGINAL исходник живёт весь запуск, иначе только до первой итерации
        original: Optional[Raster] = state if self.settings.policy is SizePolicy.ORIGINAL else None

        for request in requests:
            started = time.perf_counter()
            try:
                canvas, fit = self._process_size(original if original is not None else state, request)
                data = self._image_service.encode(canvas, quality)
                seconds = time.perf_counter() - started
                target = self._image_service.output_path(source, self.settings.tag, request.index)
                self._image_service.write_bytes(target, data)
            except CanvasFitError as exc:
                if not self.settings.keep_going:
                    raise
                summary.failures.append(SizeFailure(request=request, error=str(exc)))
                self.report.size_failed(request, exc)
                continue

            outcome = SizeOutcome(
                request=request,
                path=target,
                width=canvas.width,
                height=canvas.height,
                size_bytes=len(data),
                seconds=seconds,
            )
            summary.outcomes.append(outcome)
            self.report.size_done(outcome)
            logger.debug(
                "Size %g -> %dx%d, square edge=%d", request.edge, fit.width, fit.height, fit.edge
            )

            if original is None:
                state = canvas

        self.report.finished(summary)
        return summary

    # ---- Helpers ----
    def _process_size(self, source: Raster, request: SizeRequest) -> Tuple[Raster, FitResult]:
        """Fit -> Resize -> (альфа) -> Pad для одного размера."""
        fit = self._process_service.fit(source.width, source.height, request.edge)
        raster = self._process_service.resize(source, fit.width, fit.height, self.settings.interpolation)

        # в цепочке альфа остаётся только до первого удачного размера
        if raster.has_alpha:
            raster = self._process_service.flatten_alpha(raster, self.settings.flatten)

        if fit.needs_padding:
            raster = self._process_service.pad(raster, fit.vertical_border, fit.horizontal_border)
        return raster, fit
