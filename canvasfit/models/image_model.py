"""Модели данных конвейера.

Принципы:
- SRP: только структуры данных и их инварианты, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from canvasfit.config import CODEC, DEFAULT_QUALITY
from canvasfit.errors import FitError


@dataclass(frozen=True)
class Raster:
    """Декодированное изображение: сетка пикселей с 1, 3 или 4 каналами.

    Fields:
        pixels: Массив numpy формы (H, W) или (H, W, C).
    """
    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if arr.ndim not in (2, 3):
            raise ValueError(f"Ожидался массив 2D/3D, получено измерений: {arr.ndim}")
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise ValueError(f"Пустое изображение: {arr.shape}")
        if self.channels not in (1, 3, 4):
            raise ValueError(f"Неподдерживаемое число каналов: {self.channels}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        if self.pixels.ndim == 2:
            return 1
        return int(self.pixels.shape[2])

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4


@dataclass(frozen=True)
class FitResult:
    """Результат вписывания в квадрат.

    Fields:
        width: Ширина после масштабирования, px.
        height: Высота после масштабирования, px.
        vertical_border: Рамка сверху и снизу (каждая), px.
        horizontal_border: Рамка слева и справа (каждая), px.
    """
    width: int
    height: int
    vertical_border: int = 0
    horizontal_border: int = 0

    @property
    def edge(self) -> int:
        """Сторона квадрата после добавления рамки."""
        return self.width + 2 * self.horizontal_border

    @property
    def needs_padding(self) -> bool:
        return self.vertical_border > 0 or self.horizontal_border > 0


@dataclass(frozen=True)
class SizeRequest:
    """Запрошенная сторона квадрата и её номер в порядке обработки."""
    edge: float
    index: int

    @staticmethod
    def ordered(sizes: Iterable[float]) -> List["SizeRequest"]:
        """Сортирует размеры от большего к меньшему и нумерует их.

        Raises:
            FitError: если список пуст или размер не является конечным положительным числом.
        """
        values: List[float] = []
        for raw in sizes:
            try:
                value = float(raw)
            except (TypeError, ValueError) as exc:
                raise FitError(f"Размер не является числом: {raw!r}") from exc
            if not math.isfinite(value) or value <= 0:
                raise FitError(f"Размер должен быть положительным: {raw!r}")
            values.append(value)
        if not values:
            raise FitError("Не задано ни одного размера")

        # sorted() стабилен: равные размеры сохраняют исходный порядок
        ordered = sorted(values, reverse=True)
        return [SizeRequest(edge=edge, index=i) for i, edge in enumerate(ordered)]


@dataclass(frozen=True)
class QualitySetting:
    """Параметры кодирования, постоянные на время запуска."""
    quality: int = DEFAULT_QUALITY
    codec: str = CODEC
