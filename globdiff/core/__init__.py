"""globdiff Core - constants shared by every layer.

Import specific names from submodules:
    from globdiff.core.constants import ErrorCode, Wildcards
"""

from globdiff.core import constants

__all__ = [
    "constants",
]
