"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins under ``.eiplint/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from eiplint.plugins.hookspecs import hookimpl
from eiplint.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
