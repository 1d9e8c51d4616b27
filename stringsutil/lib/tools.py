"""
Miscellaneous helper functions.
"""
from __future__ import annotations

import os
import sys
import textwrap


def get_terminal_size(default=0):
    """
    Returns the size of the currently attached terminal. If the environment variable
    `STRINGSUTIL_TERM_SIZE` is set to an integer value, it takes prescedence. If the width of the
    terminal cannot be determined or if the width is less than 8 characters, the function
    returns the default.
    """
    from stringsutil.lib.environment import environment
    ev_terminal_size = environment.term_size.value
    if ev_terminal_size and ev_terminal_size > 0:
        return ev_terminal_size
    width = default
    for stream in (sys.stderr, sys.stdout):
        try:
            if not stream.isatty():
                continue
            width = os.get_terminal_size(stream.fileno()).columns
        except Exception:
            width = default
        else:
            break
    return default if width < 8 else width - 1


def terminalfit(text: str, delta: int = 0, width: int = 0, parsep: str = '\n\n', **kw) -> str:
    """
    Reformats text to fit the given width. Paragraphs are separated by blank lines; paragraphs that
    start with whitespace or with a bullet are left as they are.
    """
    width = width or get_terminal_size(80)
    width = width - delta

    def fitted(paragraphs: list[str]):
        for p in paragraphs:
            if p.startswith(' ') or p.lstrip().startswith(('-', '*')):
                yield p
                continue
            yield '\n'.join(textwrap.wrap(p, width, **kw))

    return parsep.join(fitted(text.replace('\r', '').split('\n\n')))


def exception_to_string(exception: BaseException, default=None) -> str:
    """
    Attempts to convert a given exception to a good description that can be exposed to the user.
    """
    if not exception.args:
        return exception.__class__.__name__
    it = (a for a in exception.args if isinstance(a, str))
    if default is None:
        default = str(exception)
    return max(it, key=len, default=default).strip()
