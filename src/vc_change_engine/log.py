"""
Logging capability consumed by the engine components.

Components receive a :class:`Logger` through their constructor rather
than reaching for a module global, so tests can pass a mock and hosts can
route messages wherever they like. :class:`StdLogger` is the default
implementation and simply forwards to the standard :mod:`logging` module.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from vc_change_engine.result import AppError


class Logger(ABC):
    """Four-level logger taking a message, a context label and optional data."""

    @abstractmethod
    def debug(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        ...

    @abstractmethod
    def info(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        ...

    @abstractmethod
    def warn(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        ...

    @abstractmethod
    def error(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        ...


class StdLogger(Logger):
    """:class:`Logger` backed by a standard library logger.

    The context label is rendered as a ``[context]`` prefix. Structured
    data is appended to the message (``AppError`` payloads as
    ``code: message``) and also attached to the record via ``extra`` so
    custom handlers can pick it up.
    """

    def __init__(self, name: str = "vc_change_engine") -> None:
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        self._log(logging.DEBUG, message, context, data)

    def info(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        self._log(logging.INFO, message, context, data)

    def warn(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        self._log(logging.WARNING, message, context, data)

    def error(self, message: str, context: Optional[str] = None, data: Any = None) -> None:
        self._log(logging.ERROR, message, context, data)

    def _log(self, level: int, message: str, context: Optional[str], data: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        text = f"[{context}] {message}" if context else message
        if isinstance(data, AppError):
            text = f"{text} ({data})"
        elif data is not None:
            text = f"{text} {data!r}"
        self._logger.log(level, text, extra={"context": context, "data": data})
