"""
Library modules used by `stringsutil`; everything in here is independent of the command line
interface and can be used from code.
"""
