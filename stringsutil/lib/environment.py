#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Settings that are read from environment variables with the prefix `STRINGSUTIL_`, and the logging
configuration that depends on them. All settings are read once, when this module is imported.
"""
from __future__ import annotations

import os
import logging
import sys

from enum import IntEnum
from typing import Generic, Optional, TypeVar

from colorama import Fore, Style

_T = TypeVar('_T')

PREFIX = 'STRINGSUTIL_'


class LogLevel(IntEnum):
    """
    The log levels of `stringsutil`. Besides the standard levels, there are two levels above
    `CRITICAL` which silence all log output.
    """
    DETACHED = logging.CRITICAL + 100
    """
    The library is used from code rather than from the command line; problems are only reported
    by raising exceptions.
    """
    NONE = logging.CRITICAL + 50
    """
    Log output was disabled on the command line.
    """
    NOTSET   = logging.NOTSET    # noqa
    CRITICAL = logging.CRITICAL  # noqa
    ERROR    = logging.ERROR     # noqa
    WARNING  = logging.WARNING   # noqa
    INFO     = logging.INFO      # noqa
    DEBUG    = logging.DEBUG     # noqa

    @classmethod
    def FromVerbosity(cls, verbosity: int) -> LogLevel:
        """
        Convert the number of `-v` switches to a log level. A negative count detaches the logger.
        """
        if verbosity < 0:
            return cls.DETACHED
        return (cls.WARNING, cls.INFO)[verbosity] if verbosity < 2 else cls.DEBUG


class StringsFormatter(logging.Formatter):
    """
    Formats log records with the custom level names `failure`, `warning`, `comment` and `verbose`.
    The level names are optionally colored.
    """
    LEVELS = {
        logging.CRITICAL : ('failure', Fore.LIGHTRED_EX),     # noqa
        logging.ERROR    : ('failure', Fore.LIGHTRED_EX),     # noqa
        logging.WARNING  : ('warning', Fore.LIGHTYELLOW_EX),  # noqa
        logging.INFO     : ('comment', Fore.LIGHTBLUE_EX),    # noqa
        logging.DEBUG    : ('verbose', Fore.LIGHTBLACK_EX),   # noqa
    }

    def __init__(self, format, colorize: bool = False, **kwargs):
        super().__init__(format, **kwargs)
        self.colorize = colorize

    def formatMessage(self, record: logging.LogRecord) -> str:
        name, color = self.LEVELS.get(record.levelno, (record.levelname.lower(), ''))
        if self.colorize and color:
            name = F'{color}{name}{Style.RESET_ALL}'
        record.custom_level_name = name
        return super().formatMessage(record)


def logger(name: str) -> logging.Logger:
    """
    Obtain a logger that writes to standard error in the `stringsutil` format. Level names are
    colored when standard error is a terminal, unless `STRINGSUTIL_COLORLESS` is set.
    """
    logger = logging.getLogger(name)
    if not logger.hasHandlers():
        colorize = sys.stderr is not None and sys.stderr.isatty() and not EVBool('COLORLESS').value
        stream = logging.StreamHandler()
        stream.setFormatter(StringsFormatter(
            '({asctime}) {custom_level_name} in {name}: {message}',
            colorize=colorize,
            style='{',
            datefmt='%H:%M:%S',
        ))
        logger.addHandler(stream)
    logger.propagate = False
    return logger


class EnvironmentVariableSetting(Generic[_T]):
    """
    A setting that is read from the variable with the given name and the `STRINGSUTIL_` prefix.
    Subclasses implement `parse` to convert the text of the variable; an unset variable yields
    the `default` value.
    """
    key: str
    value: Optional[_T]
    default: Optional[_T] = None

    def __init__(self, name: str):
        self.key = F'{PREFIX}{name}'
        raw = os.environ.get(self.key)
        self.value = self.default if raw is None else self.parse(raw)

    def parse(self, raw: str) -> Optional[_T]:
        raise NotImplementedError


class EVBool(EnvironmentVariableSetting[bool]):
    default = False

    def parse(self, raw: str):
        raw = raw.strip().lower()
        if raw.isdigit():
            return int(raw) != 0
        return raw not in {'', 'no', 'off', 'false'}


class EVInt(EnvironmentVariableSetting[int]):
    default = 0

    def parse(self, raw: str):
        try:
            return int(raw, 0)
        except ValueError:
            return 0


class EVLog(EnvironmentVariableSetting[LogLevel]):
    def parse(self, raw: str):
        if raw.isdigit():
            return LogLevel.FromVerbosity(int(raw))
        try:
            return LogLevel[raw.upper()]
        except KeyError:
            levels = ', '.join(level.name for level in LogLevel)
            logger(__name__).warning(F'ignoring unknown verbosity {raw!r}; pick from: {levels}')
            return None


class environment:
    verbosity = EVLog('VERBOSITY')
    lenient = EVBool('LENIENT')
    term_size = EVInt('TERM_SIZE')
    colorless = EVBool('COLORLESS')
