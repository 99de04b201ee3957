"""
chemist Command-Line Interface
==============================

- **chemcc**: mini-C compiler (source → FASM assembly → executable)

Implemented as a Click application with help and error reporting.
"""

__all__ = ["chemcc"]
