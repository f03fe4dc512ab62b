"""
Configuration loading for vc_change_engine.

Provides a loader for the optional ``.smartcheckin.json`` file located in
the repository root. See :mod:`vc_change_engine.config.loader` for
implementation details.
"""

from .loader import DEFAULT_CONFIG, ConfigError, load_config  # noqa: F401
