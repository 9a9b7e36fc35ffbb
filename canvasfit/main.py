"""Точка входа в приложение."""
import sys

from canvasfit.app import CanvasFitApp


def main() -> None:
    """Создаёт приложение, запускает конвейер и завершает процесс с его кодом."""
    app = CanvasFitApp()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
