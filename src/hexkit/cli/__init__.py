"""
hexkit Command-Line Interface
=============================

This package provides the `hexkit` command-line tool for inspecting
Intel HEX firmware images:

- **records**: List decoded records in file order
- **linear**: Address-ordered view of a 16-bit image
- **segments**: Per-segment summary of a 32-bit image
- **range**: Records within an inclusive address range
- **validate**: Check a file and report problems

The tool is a Click-based application with a shared error handler.
"""

__all__ = ["main"]
