"""Registry of page objects, keyed by page name.

The page name is the same name used for the page's locator CSV file, so a
step such as `User navigates to "google"` can find both.
"""
from __future__ import annotations

import importlib
import threading
from typing import Callable

from runner_utils import get_logger

logger = get_logger('PageRegistry')


class PageRegistry:
    def __init__(self):
        self._lock = threading.RLock()
        self._pages: dict[str, Callable] = {}

    def register(self, name: str, cls: Callable):
        with self._lock:
            if name in self._pages:
                logger.warning(f"Page {name} already registered; overwriting")
            self._pages[name] = cls

    def get(self, name: str) -> Callable:
        with self._lock:
            return self._pages[name]

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._pages


# global registry instance
registry = PageRegistry()


def page_object(name: str | None = None):
    """Decorator to register a class as the page object for `name`.

    Registered classes are constructed with the Playwright page.
    """

    def deco(cls: Callable):
        registry.register(name or getattr(cls, "page_name", None) or cls.__name__, cls)
        return cls

    return deco


def import_by_path(path: str) -> Callable:
    """Import an object given a path like 'pkg.module:Class' or 'pkg.module.Class'."""
    if ":" in path:
        module_path, attr = path.split(":", 1)
    elif path.count(".") >= 1:
        module_path, attr = path.rsplit(".", 1)
    else:
        raise ImportError(f"Invalid import path: {path}")

    mod = importlib.import_module(module_path)
    return getattr(mod, attr)
