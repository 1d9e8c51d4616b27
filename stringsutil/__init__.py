"""
Extract string constants from Java class files. The package can scan a single class file, a
directory tree or (nested) archives such as JAR, WAR or EAR files and prints each string constant
it finds in the constant pool of a class file. Contrary to the classic `strings` utility, only
genuine `CONSTANT_String` entries are reported, which avoids the noise of naive byte scanning.

The most relevant modules are:

1. `stringsutil.strings`: the traversal driver and the class file and archive processors
2. `stringsutil.lib.java`: the constant pool reader
3. `stringsutil.lib.id`: identification of resources from their first four bytes
4. `stringsutil.lib.pathset`: compilation of include and exclude glob patterns
5. `stringsutil.cli`: the command line interface
"""
from __future__ import annotations

__version__ = '0.4.2'
__distribution__ = 'stringsutil'

from stringsutil.strings import Strings

__all__ = ['Strings', '__version__', '__distribution__']
