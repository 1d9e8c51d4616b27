"""
Provides a customized argument parser for the `stringsutil` command line interface.
"""
from __future__ import annotations

from argparse import ArgumentParser, RawDescriptionHelpFormatter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from _typeshed import SupportsWrite

import sys

from stringsutil.lib.tools import get_terminal_size, terminalfit


class ArgparseError(ValueError):
    """
    This custom exception type is thrown from the custom argument parser rather than terminating
    program execution immediately. The `parser` parameter is a reference to the argument parser
    that threw the original argument parsing exception with the given `message`.
    """
    def __init__(self, parser: ArgumentParserWithErrorHooks, message: str):
        self.parser = parser
        super().__init__(message)


class LineWrapRawTextHelpFormatter(RawDescriptionHelpFormatter):
    """
    The help text formatter uses the full width of the terminal and prints argument options only
    once after the long name of the option.
    """

    def __init__(self, prog, indent_increment=2, max_help_position=30, width=None):
        super().__init__(prog, indent_increment, max_help_position, width=get_terminal_size() or None)

    def add_text(self, text):
        if isinstance(text, str):
            text = terminalfit(text, width=get_terminal_size())
        return super().add_text(text)

    def _format_action_invocation(self, action):
        if not action.option_strings:
            metavar, = self._metavar_formatter(action, action.dest)(1)
            return metavar
        parts = []
        if action.nargs == 0:
            parts.extend(action.option_strings)
        else:
            default = action.dest.upper()
            args_string = self._format_args(action, default)
            parts.extend(str(option) for option in action.option_strings)
            parts[-1] += F' {args_string}'
        switches = ', '.join(parts)
        if all(opt.startswith('--') for opt in action.option_strings):
            switches = '\x20' * 4 + switches
        return switches


class ArgumentParserWithErrorHooks(ArgumentParser):
    """
    An argument parser that raises `stringsutil.lib.argparser.ArgparseError` instead of exiting
    the interpreter when the command line cannot be parsed. This leaves the decision about the
    exit code and the output streams to the caller.
    """

    def __init__(self, prog=None, description=None, add_help=True):
        super().__init__(
            prog=prog,
            description=description,
            add_help=add_help,
            formatter_class=LineWrapRawTextHelpFormatter,
        )
        if sys.version_info >= (3, 14):
            self.color = False

    def print_usage_error(self, message: str, file: SupportsWrite[str] | None = None) -> None:
        """
        Print the usage line followed by the error message in the same format that the standard
        argument parser uses before it exits.
        """
        out = file or sys.stderr
        self.print_usage(out)
        out.write(F'{self.prog}: error: {message}\n')

    def error_commandline(self, message):
        super().error(message)

    def error(self, message):
        raise ArgparseError(self, message)
