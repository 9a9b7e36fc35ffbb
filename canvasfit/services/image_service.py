"""Граница хранилища и кодеков: чтение, декодирование, кодирование и запись.

Принципы:
- SRP: класс отвечает только за байты и их преобразование в `Raster` и обратно.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- Декодирование и кодирование делегируются Pillow; своих кодеков нет.
"""
from __future__ import annotations

import io
import logging
import os
import tempfile
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from canvasfit.config import OUTPUT_SUFFIX
from canvasfit.errors import DecodeError, EncodeError, IoError
from canvasfit.models.image_model import QualitySetting, Raster

logger = logging.getLogger("canvasfit.image_service")

_KEEP_MODES = ("L", "RGB", "RGBA")
_SIXTEEN_BIT_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")


class ImageService:
    def read_bytes(self, file_path: str | Path) -> bytes:
        """Читает файл изображения целиком.

        Raises:
            IoError: если путь не существует, не является файлом или не читается.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise IoError(f"Файл не найден: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise IoError(f"Не удалось прочитать файл: {path}") from exc

    def decode(self, data: bytes) -> Raster:
        """Декодирует буфер в `Raster`, сохраняя альфа-канал.

        Режимы L, RGB и RGBA остаются как есть. Остальные приводятся к ближайшему
        из них: всё, что несёт прозрачность, к RGBA, цветное к RGB, одноканальное
        высокой разрядности к L. Для анимаций берётся первый кадр.

        Raises:
            DecodeError: если буфер пуст, не распознан или обрезан.
        """
        if not data:
            raise DecodeError("Пустой буфер изображения")
        try:
            with Image.open(io.BytesIO(data)) as pil_image:
                pil_image.load()
                pixels = self._to_pixels(pil_image)
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise DecodeError("Буфер не является изображением") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            # Pillow сообщает об обрезанных и битых файлах через OSError/SyntaxError
            raise DecodeError(f"Изображение повреждено: {exc}") from exc

        raster = Raster(pixels)
        logger.debug("Decoded %dx%d, channels=%d", raster.width, raster.height, raster.channels)
        return raster

    def load_image(self, file_path: str | Path) -> Raster:
        """Читает и декодирует изображение с диска за один проход."""
        return self.decode(self.read_bytes(file_path))

    def encode(self, raster: Raster, quality: QualitySetting | None = None) -> bytes:
        """Кодирует `Raster` в JPEG.

        Одно- и трёхканальные изображения кодируются напрямую. У четырёхканальных
        альфа-плоскость отбрасывается: в JPEG её нет.

        Raises:
            EncodeError: если тип данных не uint8 или кодек отказал.
        """
        quality = quality or QualitySetting()
        pixels = raster.pixels
        if pixels.dtype != np.uint8:
            raise EncodeError(f"Неподдерживаемый тип пикселей: {pixels.dtype}")
        if raster.has_alpha:
            pixels = pixels[:, :, :3]

        pil_image = Image.fromarray(np.ascontiguousarray(pixels))
        buffer = io.BytesIO()
        try:
            pil_image.save(buffer, format=quality.codec, quality=quality.quality)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Не удалось закодировать {quality.codec}: {exc}") from exc
        return buffer.getvalue()

    def output_path(self, source: str | Path, tag: str, index: int) -> Path:
        """Путь выходного файла: `<имя до первой точки>_<tag>_<index>.jpg` рядом с исходником.

        Raises:
            IoError: если итоговый путь совпадает с исходным файлом.
        """
        source = Path(source)
        base = source.name.split(".", 1)[0]
        target = source.parent / f"{base}_{tag}_{index}{OUTPUT_SUFFIX}"
        if target.resolve() == source.resolve():
            raise IoError(f"Выходной файл перезаписал бы исходный: {source}")
        return target

    def write_bytes(self, file_path: str | Path, data: bytes) -> Path:
        """Атомарно записывает байты: временный файл в той же папке, затем переименование.

        Недописанный файл под итоговым именем не появляется никогда.

        Raises:
            IoError: при любой ошибке записи.
        """
        path = Path(file_path)
        temp_fd = None
        temp_path = None
        try:
            temp_fd, temp_path = tempfile.mkstemp(suffix=".tmp", prefix=f".{path.stem}_", dir=str(path.parent))
            with os.fdopen(temp_fd, "wb") as f:
                temp_fd = None  # закрывается контекстным менеджером
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
            temp_path = None
        except OSError as exc:
            raise IoError(f"Не удалось записать файл: {path}") from exc
        finally:
            if temp_fd is not None:
                os.close(temp_fd)
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

        logger.debug("Wrote %d bytes to %s", len(data), path)
        return path

    # ---------- Вспомогательные функции ----------
    def _to_pixels(self, pil_image: Image.Image) -> np.ndarray:
        """Приводит кадр Pillow к массиву uint8 с 1, 3 или 4 каналами."""
        mode = pil_image.mode
        # цветовой ключ PNG (tRNS) у L/RGB/P: прозрачность есть, альфа-плоскости нет
        if mode in ("L", "RGB", "P") and "transparency" in pil_image.info:
            return np.array(pil_image.convert("RGBA"), dtype=np.uint8)
        if mode in _KEEP_MODES:
            return np.array(pil_image, dtype=np.uint8)
        if mode in _SIXTEEN_BIT_MODES:
            arr = np.clip(np.asarray(pil_image, dtype=np.int64), 0, 65535)
            return (arr >> 8).astype(np.uint8)
        if mode == "F":
            arr = np.asarray(pil_image, dtype=np.float32)
            return np.clip(np.rint(arr), 0, 255).astype(np.uint8)
        if mode == "1":
            return np.array(pil_image.convert("L"), dtype=np.uint8)
        if mode == "P":
            return np.array(pil_image.convert("RGB"), dtype=np.uint8)
        # LA, PA, RGBa, La, CMYK, YCbCr, LAB, HSV ...
        target = "RGBA" if "A" in pil_image.getbands() or mode.endswith("a") else "RGB"
        return np.array(pil_image.convert(target), dtype=np.uint8)
