"""
Logging setup for scraper runs.

Console output keeps ANSI colors; the log file gets the same records
with color codes stripped.
"""

import logging
import re


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


# Third-party loggers that flood INFO with per-request lines
NOISY_LOGGERS = ('httpx', 'httpcore', 'asyncio')


def setup_logging(settings, level: str = None, log_to_file: bool = True):
    """
    Configure root logging for a scraper run.

    Args:
        settings: Settings instance (log_level, log_format, log_file)
        level: Overrides settings.log_level
        log_to_file: Also write to settings.log_file
    """
    level_name = (level or settings.log_level).upper()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.log_format))
    handlers = [console_handler]

    if log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
        file_handler.setFormatter(ColorStripFormatter(settings.log_format))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
