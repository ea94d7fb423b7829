"""Common literal values used across pattern_assembly.

These constants keep file conventions and engine limits centralized so the
catalog builder, renderer, and tests import the same values without drifting.
Intended for internal use within the pattern_assembly package.

Examples
--------
>>> from pattern_assembly import _constants
>>> _constants.PAGE_EXTENSION
'.html'
>>> "button--large".split(_constants.VARIANT_SEPARATOR)
['button', 'large']
"""

PAGE_EXTENSION = ".html"
VARIANT_SEPARATOR = "--"
MAX_INCLUDE_DEPTH = 32
ERROR_LABEL = "pattern-assembly"
