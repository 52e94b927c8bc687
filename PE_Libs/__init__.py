"""
PE_Libs - Portrait Editor Library Modules

This package contains the non-destructive portrait editing engine,
organized into specialized sub-packages:

- ImageEditingLib: Rasters, adjustment parameters, transform planning,
  rendering and export
- SessionLib: Edit sessions, render coalescing and the host-facing editor
"""

__version__ = "0.1.0"
