from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from web_optimizer.logger import Logger


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log(log_stream: io.StringIO) -> Logger:
    return Logger(stream=log_stream, color=False)


def write_image(path: Path, size: tuple[int, int] = (100, 100), mode: str = "RGB",
                color=(200, 30, 30)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if mode == "RGBA" and len(color) == 3:
        color = (*color, 128)
    Image.new(mode, size, color).save(path)
    return path


def write_svg(path: Path, body: str | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if body is None:
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<!-- Generator: test -->\n"
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24.000 24.000" width="24" height="24">\n'
            "  <g>\n"
            '    <path d="M 0.50000 1.25000 L 10.123456 20.000001 Z" fill="#FFFFFF" stroke-width="2"/>\n'
            "  </g>\n"
            "</svg>\n"
        )
    path.write_text(body, encoding="utf-8")
    return path
