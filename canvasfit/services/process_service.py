"""Геометрия и композитинг: вписывание в квадрат, ресемплинг, сведение альфы, рамка.

Принципы:
- SRP: только вычисления над `Raster`, без ввода-вывода.
- Входной `Raster` никогда не изменяется; каждая операция возвращает новый.
"""
from __future__ import annotations

import logging
import math

import numpy as np
from PIL import Image

from canvasfit.config import ALPHA_CUTOFF, WHITE, FlattenMode, Interpolation
from canvasfit.errors import AlphaError, FitError, PadError, ResizeError
from canvasfit.models.image_model import FitResult, Raster

logger = logging.getLogger("canvasfit.process_service")

_RESAMPLE = {
    Interpolation.AREA: Image.Resampling.BOX,
    Interpolation.LINEAR: Image.Resampling.BILINEAR,
}


class ProcessService:
    # ---------- 1) Вписывание в квадрат ----------
    def fit(self, src_width: int, src_height: int, target_edge: float) -> FitResult:
        """
        Пропорциональное вписывание в квадрат со стороной `target_edge`.

        Коэффициент один на обе оси: r = min(T / W, T / H). Новые размеры
        округляются вниз. Разница сторон делится на две рамки; при нечётной
        разнице дробная половина пикселя возвращается короткой стороне, так что
        после рамки получается точный квадрат со стороной max(new_w, new_h).
        """
        if src_width <= 0 or src_height <= 0:
            raise FitError(f"Недопустимый размер исходника: {src_width}x{src_height}")
        target = float(target_edge)
        if not math.isfinite(target) or target < 1.0:
            raise FitError(f"Сторона квадрата должна быть не меньше 1 px: {target_edge!r}")

        # W * T / max(W, H) == W * min(T / W, T / H), но без промежуточного округления
        longest = max(src_width, src_height)
        new_width = max(1, math.floor(src_width * target / longest))
        new_height = max(1, math.floor(src_height * target / longest))

        if new_width == new_height:
            return FitResult(width=new_width, height=new_height)

        if new_height > new_width:
            border = (new_height - new_width) / 2.0
            horizontal = math.floor(border)
            new_width += int((border - horizontal) * 2)
            return FitResult(width=new_width, height=new_height, horizontal_border=horizontal)

        border = (new_width - new_height) / 2.0
        vertical = math.floor(border)
        new_height += int((border - vertical) * 2)
        return FitResult(width=new_width, height=new_height, vertical_border=vertical)

    # ---------- 2) Ресемплинг ----------
    def resize(
        self,
        raster: Raster,
        width: int,
        height: int,
        interpolation: Interpolation = Interpolation.AREA,
    ) -> Raster:
        """Масштабирует до ровно `width` x `height` средствами Pillow."""
        if width <= 0 or height <= 0:
            raise ResizeError(f"Недопустимый размер ресемплинга: {width}x{height}")
        if (raster.width, raster.height) == (width, height):
            return raster

        pil_image = Image.fromarray(np.ascontiguousarray(raster.pixels))
        resized = pil_image.resize((int(width), int(height)), resample=_RESAMPLE[Interpolation(interpolation)])
        return Raster(np.array(resized, dtype=np.uint8))

    # ---------- 3) Сведение альфа-канала ----------
    def flatten_alpha(self, raster: Raster, mode: FlattenMode = FlattenMode.BLEND) -> Raster:
        """
        Композитинг RGBA на белый фон; результат непрозрачный RGB.

        Raises:
            AlphaError: если у изображения не 4 канала.
        """
        if raster.channels != 4:
            raise AlphaError(f"Ожидалось 4 канала (RGBA), получено: {raster.channels}")

        if FlattenMode(mode) is FlattenMode.THRESHOLD:
            out = self._flatten_threshold(raster.pixels)
        else:
            out = self._flatten_blend(raster.pixels)
        logger.debug("Flattened alpha (%s) on %dx%d", FlattenMode(mode).value, raster.width, raster.height)
        return Raster(out)

    def _flatten_blend(self, rgba: np.ndarray) -> np.ndarray:
        """
        Линейная интерполяция к белому по маске альфы:
        out = rgb * a/255 + 255 * (1 - a/255).
        """
        rgb = rgba[:, :, :3].astype(np.float32)
        alpha = rgba[:, :, 3:4].astype(np.float32) / 255.0
        out = rgb * alpha + float(WHITE) * (1.0 - alpha)
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)

    def _flatten_threshold(self, rgba: np.ndarray) -> np.ndarray:
        """
        Жёсткий край: альфа бинаризуется по порогу, непрозрачные пиксели
        сохраняют цвет, остальные становятся белыми.
        """
        mask = self._apply_binary_mask(rgba[:, :, 3] > ALPHA_CUTOFF)
        opaque = (mask == 255)[:, :, np.newaxis]
        return np.where(opaque, rgba[:, :, :3], np.uint8(WHITE)).astype(np.uint8)

    def _apply_binary_mask(self, mask_bool: np.ndarray) -> np.ndarray:
        """
        Преобразует булеву маску в 8-битную бинарную (0/255).
        """
        return np.where(mask_bool, 255, 0).astype(np.uint8)

    # ---------- 4) Рамка до квадрата ----------
    def pad(self, raster: Raster, vertical_border: int, horizontal_border: int) -> Raster:
        """
        Добавляет белую рамку: `vertical_border` сверху и снизу,
        `horizontal_border` слева и справа. Без рамки возвращает вход как есть.
        """
        if vertical_border < 0 or horizontal_border < 0:
            raise PadError(f"Отрицательная рамка: v={vertical_border}, h={horizontal_border}")
        if vertical_border == 0 and horizontal_border == 0:
            return raster

        widths = [(vertical_border, vertical_border), (horizontal_border, horizontal_border)]
        if raster.pixels.ndim == 3:
            widths.append((0, 0))
        out = np.pad(raster.pixels, widths, mode="constant", constant_values=WHITE)
        return Raster(out)
