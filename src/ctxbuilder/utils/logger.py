"""
Root logger setup for the `ctxb` command line.

Console output goes to stderr, colored with colorlog when stderr is a
terminal and NO_COLOR is unset. Handlers installed here are named, so calling
`setup_logger` again (e.g. once per CLI invocation in the same process)
replaces them instead of stacking duplicates, and leaves foreign handlers
alone.
"""

import logging
import os
import sys
from typing import Dict, Optional

import colorlog

from .. import constants

logger = logging.getLogger(__name__)


def setup_logger(debug: bool = False, module_levels: Optional[Dict[str, str]] = None,
                 log_file: Optional[str] = None):
    """
    Configure the root logger.

    Args:
        debug: DEBUG instead of INFO on the root logger
        module_levels: per-logger levels, keys may be aliases from
            `constants.LOG_ALIAS_MAP`; falls back to $CTXB_LOG_LEVELS
        log_file: also write plain-text records to this file (truncated)
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    _replace_handler(root, constants.CONSOLE_HANDLER_NAME, _console_handler())
    if log_file:
        try:
            handler = _file_handler(log_file)
        except OSError as e:
            logger.error(f"Cannot log to '{log_file}': {e}")
        else:
            _replace_handler(root, constants.FILE_HANDLER_NAME, handler)
            logger.info(f"Logging to file: {log_file}")

    if module_levels is None:
        module_levels = parse_module_levels(os.environ.get(constants.LOG_LEVELS_ENV))
    for name, level_name in (module_levels or {}).items():
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            logger.warning(f"Ignoring invalid log level '{level_name}' for '{name}'")
            continue
        logging.getLogger(resolve_logger_name(name)).setLevel(level)


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if sys.stderr.isatty() and not os.environ.get("NO_COLOR"):
        handler.setFormatter(colorlog.ColoredFormatter(
            constants.COLOR_LOG_FORMAT, log_colors=constants.LOG_COLORS, reset=True,
        ))
    else:
        handler.setFormatter(logging.Formatter(constants.CONSOLE_LOG_FORMAT))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    handler.setFormatter(logging.Formatter(constants.FILE_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def _replace_handler(root: logging.Logger, name: str, handler: logging.Handler):
    for old in [h for h in root.handlers if h.get_name() == name]:
        root.removeHandler(old)
        old.close()
    handler.set_name(name)
    root.addHandler(handler)


def parse_module_levels(text: Optional[str]) -> Optional[Dict[str, str]]:
    """Parse 'orch=DEBUG,store=WARNING'; malformed pairs are dropped."""
    if not text:
        return None
    levels = {}
    for pair in text.split(','):
        name, sep, level = pair.partition('=')
        if sep and name.strip() and level.strip():
            levels[name.strip()] = level.strip()
    return levels


def resolve_logger_name(name: str) -> str:
    """
    Map a user-supplied module name to a logger name.

    `orch` -> `ctxbuilder.docker.orchestrator` (alias), `docker.*` ->
    `ctxbuilder.docker`, and names outside the package are left as given.
    """
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    name = name.removesuffix('.*')
    if name.split('.', 1)[0] in constants.KNOWN_TOP_MODULES:
        return f'ctxbuilder.{name}'
    return name
