"""
exprcc Command-Line Interface
=============================

This package provides the command-line tool for exprcc:

- **exprcc**: compile an arithmetic expression to x86-64 assembly

The tool is a Click-based CLI application with help text and
consistent error reporting and exit codes.
"""

__all__ = ["exprcc"]
