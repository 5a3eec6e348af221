# utils/session.py
"""
Helpers over the Starlette session (signed cookie, see SessionMiddleware in main.py).

- link state: stored by the account-linking start step, popped exactly once
- flash: one-shot values that are read and removed by the next view
"""
from typing import Any, Optional

from fastapi import Request

FLASH_KEY = "_flash"


def pop_value(request: Request, key: str) -> Optional[Any]:
     """Read and remove a session value, so it can only be used once."""
     return request.session.pop(key, None)


def flash(request: Request, key: str, value: Any = True) -> None:
     messages = dict(request.session.get(FLASH_KEY) or {})
     messages[key] = value
     request.session[FLASH_KEY] = messages


def pop_flash(request: Request, key: str) -> Optional[Any]:
     messages = dict(request.session.get(FLASH_KEY) or {})
     value = messages.pop(key, None)
     if messages:
          request.session[FLASH_KEY] = messages
     else:
          request.session.pop(FLASH_KEY, None)
     return value
