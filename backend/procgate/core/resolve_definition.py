"""Definition Resolution — picks exactly one active definition from lookup matches.

Invariants:
    - Zero matches → DefinitionNotFoundError
    - One match → returned as-is
    - Two or more → AmbiguousDefinitionError (caller must add a function name)
"""

from typing import Sequence, TypeVar

from procgate.core.errors import (
    AmbiguousDefinitionError, DefinitionNotFoundError, ErrorContext,
)

T = TypeVar("T")


def select_single_definition(
    matches: Sequence[T], context: ErrorContext | None = None,
) -> T:
    """Return the only match or raise; never picks one of several silently."""
    if not matches:
        raise DefinitionNotFoundError(context)
    if len(matches) > 1:
        raise AmbiguousDefinitionError(len(matches), context)
    return matches[0]
