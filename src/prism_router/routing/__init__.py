"""Routing — route definitions, module discovery and extraction, dispatch table.

Route files are discovered on disk, executed, and their route objects
normalized into ``ApiRoute`` values that the compiler and the dispatch
table both consume.
"""
