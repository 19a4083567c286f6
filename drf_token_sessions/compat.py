"""
Single import point for the typing names used across the package.

'Self' only joined the standard library in Python 3.11, so older
interpreters take it from 'typing_extensions'.
"""

import sys
from typing import (
    Any,
    Dict,
    Type,
    Tuple,
    Optional,
    Callable,
    NamedTuple,
    TYPE_CHECKING,
)

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

__all__ = [
    "Any",
    "Self",
    "Dict",
    "Type",
    "Tuple",
    "Callable",
    "Optional",
    "NamedTuple",
    "TYPE_CHECKING",
]
