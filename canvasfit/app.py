"""Приложение командной строки: разбор аргументов, настройка логирования, коды выхода."""
from __future__ import annotations

import argparse
import logging
import math
from typing import List, Optional, Sequence

from canvasfit.config import (
    DEFAULT_QUALITY,
    DEFAULT_TAG,
    FlattenMode,
    Interpolation,
    PipelineSettings,
    SizePolicy,
)
from canvasfit.controllers.pipeline_controller import PipelineController
from canvasfit.errors import CanvasFitError

logger = logging.getLogger("canvasfit")

EXIT_OK = 0
EXIT_FAILURE = 1


def _positive_size(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"размер должен быть числом: {text!r}") from exc
    if not math.isfinite(value) or value < 1:
        raise argparse.ArgumentTypeError(f"размер должен быть не меньше 1 px: {text!r}")
    return value


def _quality(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"качество должно быть целым: {text!r}") from exc
    if not 1 <= value <= 100:
        raise argparse.ArgumentTypeError(f"качество вне диапазона 1..100: {value}")
    return value


class CanvasFitApp:
    def __init__(self) -> None:
        self._parser = self._build_parser()

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Разбирает аргументы и запускает конвейер. Возвращает код выхода.

        Ошибки argparse (мало аргументов, неверный размер) завершают процесс
        с кодом 2 через `SystemExit`.
        """
        args = self._parser.parse_args(argv)
        self._configure_logging(args.verbose, args.quiet)

        try:
            settings = PipelineSettings(
                quality=args.quality,
                tag=args.tag,
                interpolation=Interpolation(args.interpolation),
                flatten=FlattenMode(args.flatten),
                policy=SizePolicy(args.policy),
                keep_going=args.keep_going,
            )
        except ValueError as exc:
            self._parser.error(str(exc))
        controller = PipelineController(settings=settings)
        try:
            summary = controller.run(args.path, args.sizes)
        except CanvasFitError as exc:
            logger.error("%s", exc)
            return EXIT_FAILURE
        return EXIT_OK if summary.ok else EXIT_FAILURE

    # ---- Internals ----
    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="canvasfit",
            description="Вписывает изображение в квадраты заданных размеров и сохраняет JPEG рядом с исходником.",
            epilog="Пример: canvasfit /home/user/Pictures/image.jpg 700 300",
        )
        parser.add_argument("path", help="путь к изображению")
        parser.add_argument("sizes", nargs="+", type=_positive_size, metavar="SIZE", help="сторона квадрата, px")
        parser.add_argument("--tag", default=DEFAULT_TAG, help=f"метка в имени файла (по умолчанию {DEFAULT_TAG})")
        parser.add_argument(
            "--quality", type=_quality, default=DEFAULT_QUALITY, help=f"качество JPEG (по умолчанию {DEFAULT_QUALITY})"
        )
        parser.add_argument(
            "--interpolation", choices=_values(Interpolation), default=Interpolation.AREA.value, help="режим ресемплинга"
        )
        parser.add_argument(
            "--flatten", choices=_values(FlattenMode), default=FlattenMode.BLEND.value, help="сведение альфа-канала"
        )
        parser.add_argument(
            "--policy",
            choices=_values(SizePolicy),
            default=SizePolicy.CHAIN.value,
            help="chain: каждый размер из предыдущего; original: каждый из исходника",
        )
        parser.add_argument(
            "--keep-going", action="store_true", help="не прерывать запуск при ошибке отдельного размера"
        )
        parser.add_argument("-v", "--verbose", action="store_true", help="подробный лог")
        parser.add_argument("-q", "--quiet", action="store_true", help="только предупреждения и ошибки")
        return parser

    def _configure_logging(self, verbose: bool, quiet: bool) -> None:
        level = logging.INFO
        if verbose:
            level = logging.DEBUG
        elif quiet:
            level = logging.WARNING
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        logging.getLogger("canvasfit").setLevel(level)


def _values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]
