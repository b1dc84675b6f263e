"""
Objective value domains.

Enumerates the legal values of an objective and folds several domains
into the ordered cross-product a score table has to cover.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable, List, Sequence, Tuple

from ..models import AnyObjective, ObjectiveType

YESNO_VALUES = ["no", "yes"]

Combination = Tuple[str, ...]


def all_values(objective: AnyObjective) -> List[str]:
    """
    Retrieve all legal values of an objective as strings.

    Number ranges are inclusive; a range with min > max yields an empty
    list, which callers must treat as a malformed objective.

    Args:
        objective: The objective to enumerate.

    Returns:
        Values in display order.
    """
    kind = ObjectiveType(objective.type)
    if kind is ObjectiveType.NUMBER:
        return [str(value) for value in range(objective.min, objective.max + 1)]
    if kind is ObjectiveType.YESNO:
        return list(YESNO_VALUES)
    # Repeated option names collapse onto their first declaration
    return list(dict.fromkeys(option.name for option in objective.options))


def merge_values(
    combinations: Sequence[Combination],
    values_to_add: Iterable[str]
) -> List[Combination]:
    """
    Extend every partial combination with every value of one more domain.

    An empty list of combinations is the starting point of the fold, so the
    first domain turns into one-element tuples.
    """
    values = list(values_to_add)
    if not combinations:
        return [(value,) for value in values]
    return [combination + (value,) for combination in combinations for value in values]


def cross_product(domains: Sequence[Sequence[str]]) -> List[Combination]:
    """Ordered cross-product of the given domains, one tuple per combination."""
    if any(len(domain) == 0 for domain in domains):
        return []
    return reduce(merge_values, domains, [])


def format_combination(indexes: Sequence[str], combination: Combination) -> str:
    """Render a combination as ``objective = value, ...``."""
    return ", ".join(
        f"{index} = {value}" for index, value in zip(indexes, combination)
    )
