"""Small collection of helpers shared by the runner, hooks and step definitions.

Contains logging setup, duration formatting and placeholder substitution for
step arguments.
"""
import os
import re
import logging
from typing import Any

import config

LOG_FORMAT = '%(asctime)s [%(label)s] %(levelname)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# every harness logger is a child of this one; only it carries handlers
ROOT_LOGGER = 'harness'


class LabelFormatter(logging.Formatter):
    """Shows a child logger's own name, e.g. [ParallelRunner] for harness.ParallelRunner."""

    def format(self, record):
        prefix = ROOT_LOGGER + '.'
        record.label = record.name[len(prefix):] if record.name.startswith(prefix) else record.name
        return super().format(record)


def _build_handlers(logs_dir=None):
    logs_dir = logs_dir or config.LOGS_DIR
    os.makedirs(logs_dir, exist_ok=True)
    formatter = LabelFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)

    combined = logging.FileHandler(os.path.join(logs_dir, 'combined.log'), encoding='utf-8')
    combined.setFormatter(formatter)

    errors = logging.FileHandler(os.path.join(logs_dir, 'error.log'), encoding='utf-8')
    errors.setLevel(logging.ERROR)
    errors.setFormatter(formatter)
    return [console, combined, errors]


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        for h in _build_handlers():
            root.addHandler(h)
        root.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
        # not passed on to the root logger
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the `name` logger, writing to console, combined.log and error.log."""
    _root_logger()
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


def format_duration(seconds: float) -> str:
    """Format elapsed seconds as '<m>m <s>s'."""
    total = int(seconds)
    minutes = total // 60
    return f"{minutes}m {total % 60}s"


# Scenario variables are looked up through the per-scenario proxy.
from variables import variables

PLACEHOLDER_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_\-]+)\s*\}\}")


def substitute_variables(val: Any) -> Any:
    """Replace {{name}} occurrences in a string with the current scenario's variables."""
    if not isinstance(val, str):
        return val

    def repl(m):
        key = m.group(1)
        try:
            return str(variables.get(key, '') or '')
        except NameError:
            return ''

    return PLACEHOLDER_RE.sub(repl, val)


__all__ = [
    'get_logger',
    'format_duration',
    'substitute_variables',
    'LOG_FORMAT',
    'DATE_FORMAT',
    'ROOT_LOGGER',
    'LabelFormatter',
]
