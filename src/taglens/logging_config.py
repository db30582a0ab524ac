# TagLens — Logging configuration (rotating file + stdout)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import logging.handlers
import os
from typing import Iterable

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", log_dir: str = "logs", quiet: Iterable[str] = NOISY_LOGGERS) -> str:
	"""Configure root logger with a rotating file handler and stdout.

	Lines are tab-separated: time, level, logger, message. Loggers named in
	``quiet`` are raised to WARNING. Returns the log file path.
	"""
	os.makedirs(log_dir, exist_ok=True)
	log_path = os.path.join(log_dir, "taglens.log")
	formatter = logging.Formatter("%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s")

	root = logging.getLogger()
	root.setLevel(getattr(logging, level.upper(), logging.INFO))

	# Re-init replaces handlers instead of stacking them
	for h in list(root.handlers):
		root.removeHandler(h)

	handlers = [
		logging.StreamHandler(),
		logging.handlers.RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"),
	]
	for handler in handlers:
		handler.setFormatter(formatter)
		root.addHandler(handler)

	for name in quiet:
		logging.getLogger(name).setLevel(logging.WARNING)
	return log_path
