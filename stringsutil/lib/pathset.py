"""
Compilation of include and exclude wildcard patterns into a predicate over relative paths. The
supported syntax is the following:

- `**` matches any sequence of characters including the path separator. When it is followed by a
  slash, as in `**/*.class`, the slash is optional, so the pattern also matches `Foo.class`.
- `*` matches any sequence of characters except the path separator.
- `?` matches any single character except the path separator.
- `[abc]` matches one of the given characters, `[!abc]` matches any character not in the set.
- `{a,b}` matches any of the comma-separated alternatives, which may contain wildcards.

Paths are normalized to use forward slashes before they are matched. A path matches a set if it
matches at least one include pattern and none of the exclude patterns; exclude patterns always win.
"""
from __future__ import annotations

import re

from typing import Callable, Iterable

__all__ = ['PathSet', 'pathspec', 'translate']


def pathspec(expression: str) -> str:
    """
    Normalizes a path which is separated by backward or forward slashes to be separated by forward
    slashes.
    """
    return '/'.join(re.split(R'[\\\/]', expression))


def _closing(pattern: str, start: int, bracket: str) -> int:
    end = start
    if bracket == ']':
        if end < len(pattern) and pattern[end] in '!^':
            end += 1
        if end < len(pattern) and pattern[end] == ']':
            end += 1
    return pattern.find(bracket, end)


def translate(pattern: str) -> str:
    """
    Translate a wildcard pattern into a regular expression. The expression has to match the entire
    path, i.e. it is meant to be used with `re.fullmatch`.
    """
    pattern = pathspec(pattern).lstrip('/')
    output = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == '*':
            if pattern[i:i + 1] == '*':
                i += 1
                while pattern[i:i + 1] == '*':
                    i += 1
                if pattern[i:i + 1] == '/':
                    i += 1
                    output.append('(?:.*/)?')
                else:
                    output.append('.*')
            else:
                output.append('[^/]*')
        elif c == '?':
            output.append('[^/]')
        elif c == '[':
            j = _closing(pattern, i, ']')
            if j < 0:
                output.append(re.escape(c))
                continue
            chars = pattern[i:j].replace('\\', '\\\\')
            i = j + 1
            if chars[:1] == '!':
                chars = F'^{chars[1:]}'
            elif chars[:1] == '^':
                chars = F'\\{chars}'
            output.append(F'[{chars}]')
        elif c == '{':
            j = _closing(pattern, i, '}')
            if j < 0:
                output.append(re.escape(c))
                continue
            alternatives = pattern[i:j].split(',')
            i = j + 1
            output.append('(?:{})'.format('|'.join(translate(a) for a in alternatives)))
        else:
            output.append(re.escape(c))
    return ''.join(output)


def _compile(patterns: Iterable[str]) -> Callable[[str], re.Match[str] | None] | None:
    expressions = [F'(?:{translate(p)})' for p in patterns]
    if not expressions:
        return None
    return re.compile('|'.join(expressions), flags=re.DOTALL).fullmatch


class PathSet:
    """
    A set of include and exclude patterns. The methods `include` and `exclude` return the path set
    itself so that calls can be chained. Use `stringsutil.lib.pathset.PathSet.matches` to compile
    the set into a predicate.
    """
    def __init__(self, includes: Iterable[str] = (), excludes: Iterable[str] = ()):
        self.includes: list[str] = list(includes)
        self.excludes: list[str] = list(excludes)

    @classmethod
    def FromPatterns(cls, patterns: Iterable[str]) -> PathSet:
        """
        Create a path set from command line patterns: A pattern that is prefixed with an exclamation
        mark is an exclude pattern, every other pattern is an include pattern.
        """
        pathset = cls()
        for pattern in patterns:
            if pattern.startswith('!'):
                pathset.exclude(pattern[1:])
            else:
                pathset.include(pattern)
        return pathset

    def include(self, *patterns: str) -> PathSet:
        self.includes.extend(patterns)
        return self

    def exclude(self, *patterns: str) -> PathSet:
        self.excludes.extend(patterns)
        return self

    def matches(self, *defaults: str) -> Callable[[str], bool]:
        """
        Compile the path set into a predicate. The given default patterns are used as includes when
        the set itself has no include patterns.
        """
        includes = _compile(self.includes or defaults)
        excludes = _compile(self.excludes)

        def matches(path: str) -> bool:
            path = pathspec(path)
            if excludes and excludes(path):
                return False
            return bool(includes and includes(path))

        return matches

    def __repr__(self):
        patterns = [*self.includes, *(F'!{p}' for p in self.excludes)]
        return F'<PathSet:{",".join(patterns)}>'
