"""
Error Handling Utilities

Exception hierarchy for the density engine and a decorator that logs
failures with context before re-raising them.

Every error carries a stable ``code`` string so callers can tell failure
kinds apart without parsing messages.
"""

import logging
import traceback
from functools import wraps
from typing import Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class DensityError(Exception):
    """Base class for all recoverable density engine errors."""

    default_code = "density_error"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)


class SceneConfigError(DensityError, ValueError):
    """Raised when a scene, spread radius or mapping is configured with invalid values."""

    default_code = "invalid_configuration"


class LengthMismatchError(DensityError, ValueError):
    """Raised when batch source and destination collections differ in length."""

    default_code = "length_mismatch"

    def __init__(self, expected: int, actual: int, context: str = "batch"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{context}: source has {expected} entries but destination has {actual}; "
            f"lengths must match"
        )


class InputDataError(DensityError, ValueError):
    """Raised when a point file is missing required columns or cannot be parsed."""

    default_code = "invalid_input"


class RenderError(DensityError):
    """Raised when a render call cannot produce an image. No partial image is returned."""

    default_code = "render_failed"


class MappingMissingError(RenderError):
    """Raised when render is called without a color mapping."""

    default_code = "mapping_missing"

    def __init__(self):
        super().__init__("Color mapping must not be None when rendering an image")


class MappingResultError(RenderError):
    """Raised when a color mapping returns None or entries that are not RGBA colors."""

    default_code = "mapping_invalid_result"


class MappingLengthError(RenderError):
    """Raised when a color mapping returns the wrong number of colors."""

    default_code = "mapping_length_mismatch"

    def __init__(self, expected: int, actual: int, width: int, height: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Color mapping returned {actual} pixels, but expected {expected} "
            f"for a ({width} * {height}) image"
        )


def handle_specific_exceptions(
    exceptions: Tuple[Type[Exception], ...],
    error_context: str = "",
    log_level: int = logging.ERROR,
    reraise: bool = True
) -> Callable:
    """
    Decorator for handling specific exceptions with context.

    Args:
        exceptions: Tuple of exception types to catch
        error_context: Context string for error messages
        log_level: Logging level for errors
        reraise: Whether to reraise the exception

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exceptions as e:
                context = f"{error_context}: " if error_context else ""
                code = getattr(e, "code", None)
                suffix = f" [{code}]" if code else ""
                logger.log(log_level, f"{context}{type(e).__name__}: {e}{suffix}")
                logger.debug(f"Error details for {func.__name__}: {traceback.format_exc()}")
                if reraise:
                    raise
                return None
        return wrapper
    return decorator
