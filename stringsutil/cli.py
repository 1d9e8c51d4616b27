"""
The command line interface of `stringsutil`:

    stringsutil [-h] [-V] [-v] [-Q] [-L] path [pattern ...]

The path can be a class file, an archive or a directory. Every pattern is an include glob, unless
it is prefixed by an exclamation mark, in which case it is an exclude glob. String constants are
written to standard output and the class names to standard error.
"""
from __future__ import annotations

import sys

from pathlib import Path
from typing import Sequence, TextIO

import colorama

import stringsutil

from stringsutil.lib.argparser import ArgparseError, ArgumentParserWithErrorHooks
from stringsutil.lib.environment import LogLevel, environment
from stringsutil.lib.exceptions import StringsException
from stringsutil.strings import Strings


def argparser() -> ArgumentParserWithErrorHooks:
    argp = ArgumentParserWithErrorHooks(
        prog='stringsutil',
        description=(
            'Print the string constants of Java class files. The path can be a class file, an '
            'archive like JAR, WAR or EAR, or a directory. Archives within archives are processed '
            'as well. The class name of each processed class file is printed to the error stream.'
        ),
    )
    argp.add_argument(
        'path',
        nargs='?',
        help='A class file, an archive or a directory.'
    )
    argp.add_argument(
        'patterns',
        metavar='pattern',
        nargs='*',
        help='Glob patterns for the paths of files and archive members that should be processed; '
             'prefix a pattern with an exclamation mark to exclude matching paths instead. The '
             'default is to process everything.'
    )
    argp.add_argument(
        '-V', '--version',
        action='store_true',
        help='Only show the currently installed version and exit.'
    )
    argp.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Specify up to two times to increase log level.'
    )
    argp.add_argument(
        '-Q', '--quiet',
        action='store_true',
        help='Disable all log output.'
    )
    argp.add_argument(
        '-L', '--lenient',
        action='store_true',
        default=environment.lenient.value,
        help='Skip resources that cannot be processed instead of aborting.'
    )
    return argp


def _log_level(args) -> LogLevel:
    if args.quiet:
        return LogLevel.NONE
    if args.verbose:
        return LogLevel.FromVerbosity(args.verbose)
    return environment.verbosity.value or LogLevel.WARNING


def _utf8_output() -> TextIO:
    stdout = sys.stdout
    try:
        stdout.reconfigure(encoding='utf8', errors='surrogatepass', newline='\n')
    except AttributeError:
        pass
    return stdout


def main(
    argv: Sequence[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """
    Main routine of the command line interface; returns the exit code.
    """
    colorama.just_fix_windows_console()

    if stderr is None:
        stderr = sys.stderr

    argp = argparser()

    try:
        args = argp.parse_args(argv)
        if args.version:
            print(stringsutil.__version__, file=stdout)
            return 0
        if args.path is None:
            argp.error('the following arguments are required: path')
        if not Path(args.path).exists():
            argp.error(F'path does not exist: {args.path}')
    except ArgparseError as error:
        error.parser.print_usage_error(str(error), stderr)
        return 1

    if stdout is None:
        stdout = _utf8_output()

    strings = Strings(args.patterns, lenient=args.lenient, output=stdout, diagnostics=stderr)
    strings.log_level = _log_level(args)

    try:
        strings.run(args.path)
    except StringsException as error:
        strings.log_fail(F'failed to process {error.resource}:', error)
        return 1
    finally:
        stdout.flush()

    if strings.failures:
        strings.log_info(F'skipped {strings.failures} resources that could not be processed')
    return 0
