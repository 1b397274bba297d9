"""
Colored console output.

Every line goes to stdout through print(), prefixed with the program name.
Errors are only reported here; the caller decides whether the run fails.
"""

import os
import sys
from typing import Optional, TextIO

from .constants import PROG_NAME

COLORS = {
    'info': '\033[36m',
    'warn': '\033[33m',
    'error': '\033[31m',
    'success': '\033[32m',
}
RESET = '\033[0m'


def supports_color(stream: TextIO) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


class Logger:
    """Prints info/warn/error/success lines and counts errors."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.color = supports_color(self.stream) if color is None else color
        self.error_count = 0

    def _emit(self, level: str, message: str) -> None:
        line = f'[{PROG_NAME}] {message}'
        if self.color:
            line = f'{COLORS[level]}{line}{RESET}'
        print(line, file=self.stream)

    def info(self, message: str) -> None:
        self._emit('info', message)

    def warn(self, message: str) -> None:
        self._emit('warn', message)

    def error(self, message: str) -> None:
        self.error_count += 1
        self._emit('error', message)

    def success(self, message: str) -> None:
        self._emit('success', message)

    def rule(self, char: str = '=', width: int = 60) -> None:
        print(char * width, file=self.stream)
