"""Resolve assembly options into an immutable configuration record.

User options (from Python or a YAML file) are deep-merged over
:data:`DEFAULTS`, validated, and returned as :class:`AssemblyConfig`, which
every other component reads for its patterns, keys, and conventions.

Examples
--------
>>> from pattern_assembly.config import resolve_options
>>> config = resolve_options({"logErrors": True})
>>> config.log_errors
True
>>> config.beautifier.indent
'\\t'
"""

from .helpers import DEFAULTS
from .loader import load_config_file, resolve_options
from .models import AssemblyConfig, BeautifierConfig, KeysConfig

__all__ = [
    "DEFAULTS",
    "AssemblyConfig",
    "BeautifierConfig",
    "KeysConfig",
    "load_config_file",
    "resolve_options",
]
