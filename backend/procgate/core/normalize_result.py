"""Result Normalizer — collapses 0/1/N stored-procedure result sets into a response shape.

Invariants:
    - Non list-like input is returned unchanged
    - Only list groups count as result sets; status/metadata groups are dropped
    - No qualifying group → raw input returned unchanged
    - One group → that group, unwrapped
    - Several groups → list of groups in execution order
"""

from typing import Any


def normalize_result(raw: Any) -> Any:
    """Shape the executor's result groups proportionally to what the procedure returned."""
    if not isinstance(raw, (list, tuple)):
        return raw

    datasets = [group for group in raw if isinstance(group, list)]
    if not datasets:
        return raw
    if len(datasets) == 1:
        return datasets[0]
    return datasets
