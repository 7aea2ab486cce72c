"""
ninecc Command-Line Interface
=============================

This package provides the `ninecc` command, a Click-based front end that
compiles one expression given on the command line and writes the
generated assembly to stdout.
"""

__all__ = ["ninecc"]
