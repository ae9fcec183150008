"""
Run-level logging utility

Provides file-based logging to {log_root}/{run_id}/logs/render.log for a
single render run, so a run's log can be reviewed next to its output.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pointdensity.utils.constants import LOG_DATE_FORMAT, LOG_FORMAT

logger = logging.getLogger(__name__)


def generate_run_id() -> str:
    """Return a short unique run identifier."""
    return uuid.uuid4().hex[:12]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class RenderLogHandler:
    """
    Context manager for run-level file logging.

    Attaches a file handler to the root logger for the duration of the
    ``with`` block and writes start/end markers around it.
    """

    def __init__(self, run_id: str, log_root: Union[str, Path]):
        """
        Initialize run log handler.

        Args:
            run_id: Unique run identifier
            log_root: Directory under which {run_id}/logs/ is created
        """
        self.run_id = run_id
        self.log_dir = Path(log_root) / run_id / "logs"
        self.log_file = self.log_dir / "render.log"
        self.file_handler: Optional[logging.FileHandler] = None
        self.root_logger = logging.getLogger()
        self._started = 0.0

    def __enter__(self):
        """Set up file logging for this run."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.file_handler = logging.FileHandler(self.log_file, mode='w', encoding='utf-8')
        except OSError as e:
            # Non-blocking: the render still runs with console logging only
            logger.warning(f"Failed to initialize run logging for {self.run_id}: {e}")
            self.file_handler = None
            return self

        self.file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        self.file_handler.setLevel(self.root_logger.level or logging.INFO)
        self.root_logger.addHandler(self.file_handler)

        self._started = time.perf_counter()
        self.root_logger.info("=" * 80)
        self.root_logger.info(f"Run started: {self.run_id}")
        self.root_logger.info(f"Start time: {_utc_now()}")
        self.root_logger.info(f"Log file: {self.log_file}")
        self.root_logger.info("=" * 80)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Write the end marker and detach the file handler."""
        if not self.file_handler:
            return
        try:
            elapsed = time.perf_counter() - self._started
            self.root_logger.info("=" * 80)
            if exc_type is None:
                self.root_logger.info(f"Run completed successfully: {self.run_id} ({elapsed:.2f}s)")
            else:
                self.root_logger.error(f"Run failed: {self.run_id} - {exc_type.__name__}: {exc_val}")
            self.root_logger.info(f"End time: {_utc_now()}")
            self.root_logger.info("=" * 80)
            self.file_handler.flush()
            self.file_handler.close()
        finally:
            self.root_logger.removeHandler(self.file_handler)
            self.file_handler = None

    def get_log_path(self) -> Optional[Path]:
        """Get the path to the log file if it was written."""
        if self.log_file.exists():
            return self.log_file
        return None
