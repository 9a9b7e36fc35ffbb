"""Настройки конвейера: константы по умолчанию и режимы работы.

Конфигурация задаётся только аргументами командной строки; переменные окружения
и файлы настроек не читаются.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_QUALITY = 90
DEFAULT_TAG = "square"
CODEC = "JPEG"
OUTPUT_SUFFIX = ".jpg"

# Белый фон для рамки и сведения альфы
WHITE = 255
# alpha > ALPHA_CUTOFF считается непрозрачным в пороговом режиме
ALPHA_CUTOFF = 254


class Interpolation(str, Enum):
    """Политика интерполяции; одна на весь запуск."""

    AREA = "area"
    LINEAR = "linear"


class FlattenMode(str, Enum):
    """Алгоритм сведения альфа-канала на белый фон."""

    BLEND = "blend"
    THRESHOLD = "threshold"


class SizePolicy(str, Enum):
    """Источник для каждого следующего размера.

    CHAIN: размер i+1 строится из результата размера i (по умолчанию).
    ORIGINAL: каждый размер строится из декодированного исходника.
    """

    CHAIN = "chain"
    ORIGINAL = "original"


@dataclass(frozen=True)
class PipelineSettings:
    """Неизменяемые параметры одного запуска.

    Fields:
        quality: Качество JPEG (1–100), одно для всех размеров.
        tag: Метка в имени выходного файла.
        interpolation: Режим ресемплинга.
        flatten: Алгоритм сведения альфа-канала.
        policy: Цепочка или независимые копии.
        keep_going: Продолжать при ошибке отдельного размера.
    """
    quality: int = DEFAULT_QUALITY
    tag: str = DEFAULT_TAG
    interpolation: Interpolation = Interpolation.AREA
    flatten: FlattenMode = FlattenMode.BLEND
    policy: SizePolicy = SizePolicy.CHAIN
    keep_going: bool = False

    def __post_init__(self) -> None:
        if not 1 <= int(self.quality) <= 100:
            raise ValueError(f"Качество JPEG вне диапазона 1..100: {self.quality}")
        if not self.tag or "/" in self.tag or "\\" in self.tag:
            raise ValueError(f"Недопустимая метка имени файла: {self.tag!r}")
