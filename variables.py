"""Context-local scenario variables.

This module provides a ContextVar-backed mapping proxy so step definitions can
use `from variables import variables` and keep values (such as text captured
from the page) isolated to the scenario that produced them.
"""
from __future__ import annotations

import contextvars
from typing import Any

# internal context var
_variables_ctx = contextvars.ContextVar('scenario_variables', default=None)


class VariablesProxy:
    def _get(self):
        v = _variables_ctx.get()
        if v is None:
            raise NameError("variables is not set for the current scenario")
        return v

    def __getitem__(self, key: str) -> Any:
        return self._get()[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._get()[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._get()

    def get(self, key: str, default: Any = None) -> Any:
        return self._get().get(key, default)

    def items(self):
        return self._get().items()

    def keys(self):
        return self._get().keys()

    def update(self, *args, **kwargs):
        return self._get().update(*args, **kwargs)

    def clear(self):
        return self._get().clear()


# public proxy instance
variables = VariablesProxy()


def set_variables_dict(d: dict) -> contextvars.Token:
    """Set a new dict for the current context and return the token."""
    return _variables_ctx.set(d)


def reset_variables_token(token: contextvars.Token) -> None:
    """Reset the context var using the given token."""
    _variables_ctx.reset(token)


__all__ = ['variables', 'set_variables_dict', 'reset_variables_token']
