"""
Logging Configuration

All module loggers hang off the "medscan" logger (module ``__name__``
values already start with it), so one call configures the package.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union


ROOT_LOGGER_NAME = "medscan"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Send package logs to stdout and, optionally, to a file.

    Args:
        level: Level as an int or a name such as "DEBUG". Unknown names fall back to INFO.
        log_file: Optional path of a UTF-8 log file
        format_string: Overrides DEFAULT_FORMAT
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace, whether or not ``name`` is already prefixed."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class ScanLogger:
    """
    Per-scan logger that times each stage.

        scan_logger = ScanLogger(request_id, "pill")
        with scan_logger.stage("Vision") as outcome:
            outcome["success"] = executor.run(context)
    """

    def __init__(self, request_id: str, scan_type: str = ""):
        self.request_id = request_id
        self.scan_type = scan_type
        self.logger = get_logger(f"scan.{request_id[:8]}")
        self.timings_ms: Dict[str, float] = {}

    @contextmanager
    def stage(self, stage_name: str) -> Iterator[Dict[str, bool]]:
        outcome = {"success": True}
        self.logger.debug(f"[{self.scan_type}] {stage_name} started")
        started = time.perf_counter()
        try:
            yield outcome
        except Exception as e:
            outcome["success"] = False
            self.logger.error(f"[{self.scan_type}] {stage_name} raised: {e}")
            raise
        finally:
            elapsed = (time.perf_counter() - started) * 1000
            self.timings_ms[stage_name] = elapsed
            state = "ok" if outcome["success"] else "failed"
            self.logger.info(f"[{self.scan_type}] {stage_name} {state} ({elapsed:.1f}ms)")

    @property
    def total_ms(self) -> float:
        return sum(self.timings_ms.values())
