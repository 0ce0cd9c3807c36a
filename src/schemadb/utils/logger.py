import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s"


def _file_handler(log_file: str) -> logging.Handler:
  Path(log_file).parent.mkdir(parents=True, exist_ok=True)
  handler = logging.FileHandler(log_file, encoding='utf-8')
  handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
  return handler


def setup_logger(
  name: str = "schemadb",
  log_file: Optional[str] = "logs/schemadb.log",
  level: str = "INFO"
) -> logging.Logger:
  """
  Route the package logger to stdout and, optionally, a log file

  Args:
    name: Logger name
    log_file: Path to log file; None logs to the console only
    level: Log level name (DEBUG, INFO, WARNING, ERROR)
  """
  target = logging.getLogger(name)
  target.setLevel(level.upper())

  # Calling again replaces the handlers instead of stacking them
  for handler in list(target.handlers):
    target.removeHandler(handler)
    handler.close()

  console = logging.StreamHandler(sys.stdout)
  console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
  target.addHandler(console)

  if log_file:
    target.addHandler(_file_handler(log_file))
  return target


def configure_logging(config: Dict[str, Any], debug: bool = False) -> logging.Logger:
  """Apply the `logging` section of a loaded config"""
  section = config.get('logging') or {}
  return setup_logger(
    log_file=section.get('log_file'),
    level="DEBUG" if debug else section.get('level', "INFO")
  )


# Package-wide logger
logger = logging.getLogger("schemadb")
