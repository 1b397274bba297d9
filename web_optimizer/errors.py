"""
Exception types raised by the optimizer.

Nothing here terminates the process: callers collect these and the CLI
entry point decides the exit code.
"""

from typing import Any, Optional


class OptimizerError(Exception):
    """Base class for every error the optimizer reports."""


class AssetNotFoundError(OptimizerError):
    def __init__(self, path: str):
        super().__init__(f'{path} does not exist or is not readable')
        self.path = path


class MissingExtensionError(OptimizerError):
    def __init__(self, path: str):
        super().__init__(f'{path} does not have an extension')
        self.path = path


class UnsupportedAssetError(OptimizerError):
    def __init__(self, path: str, extension: str):
        super().__init__(f'{path}: .{extension} files are not supported')
        self.path = path
        self.extension = extension


class FlagValidationError(OptimizerError):
    """A CLI flag value failed validation."""

    def __init__(self, flag: str, value: Any, message: str):
        super().__init__(f'--{flag} {value!r}: {message}')
        self.flag = flag
        self.value = value


class SvgParseError(OptimizerError):
    pass


class ProcessingError(OptimizerError):
    """Writing the outputs for one asset failed."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f': {cause}' if cause is not None else ''
        super().__init__(f'failed to optimize {path}{detail}')
        self.path = path
        self.cause = cause
