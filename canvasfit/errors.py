"""Иерархия ошибок конвейера.

Принципы:
- Каждая стадия поднимает только свой тип ошибки.
- Совместимость со встроенными исключениями: ошибки данных наследуют `ValueError`,
  ошибки ввода-вывода наследуют `OSError`.
"""
from __future__ import annotations


class CanvasFitError(Exception):
    """Базовая ошибка конвейера: любая из них прерывает запуск."""


class DecodeError(CanvasFitError, ValueError):
    """Буфер не распознан как изображение или повреждён."""


class FitError(CanvasFitError, ValueError):
    """Недопустимая геометрия: размер цели или исходника."""


class ResizeError(CanvasFitError, ValueError):
    """Недопустимые размеры для ресемплинга."""


class AlphaError(CanvasFitError, ValueError):
    """Неожиданное число каналов при сведении альфа-канала."""


class PadError(CanvasFitError, ValueError):
    """Отрицательная ширина рамки."""


class EncodeError(CanvasFitError, ValueError):
    """Раскладку каналов нельзя сериализовать в JPEG."""


class IoError(CanvasFitError, OSError):
    """Ошибка чтения или записи на границе хранилища."""
