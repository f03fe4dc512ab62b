"""
Top-level package for vc_change_engine.

The engine turns a set of pending working-tree changes into grouped,
described commits and inspects a remote branch for conflicts before a
pull. The command line entry point lives in ``vc_change_engine.cli``;
the programmatic entry point is :class:`vc_change_engine.service.ChangeEngine`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
