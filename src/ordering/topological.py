"""
Stable topological sort.

Every dependency is emitted before its dependents, and elements that are not
ordered relative to each other keep the order they were given in. Elements
caught in a cycle are appended in their original order instead of failing.
"""

import logging
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def topological_sort(
    elements: Sequence[T],
    dependencies: Mapping[T, Iterable[T]],
) -> list[T]:
    """
    Order ``elements`` so that dependencies precede dependents.

    Repeatedly emits the earliest remaining element whose dependencies have
    all been emitted. When no remaining element is ready, the rest form (or
    depend on) a cycle and are appended in their original relative order.

    Args:
        elements: Elements in their original order
        dependencies: Element to the elements it depends on; entries for
            unknown elements and self-references are ignored

    Returns:
        A new list containing every element exactly once

    Example:
        >>> topological_sort(["orders", "users"], {"orders": {"users"}})
        ['users', 'orders']
    """
    if len(elements) <= 1:
        return list(elements)

    present = set(elements)
    pending = {
        element: {d for d in dependencies.get(element, ()) if d in present and d != element}
        for element in elements
    }

    remaining = list(elements)
    emitted: set[T] = set()
    ordered: list[T] = []

    while remaining:
        for index, element in enumerate(remaining):
            if pending[element] <= emitted:
                ordered.append(element)
                emitted.add(element)
                del remaining[index]
                break
        else:
            logger.warning(
                f"Dependency cycle among {remaining}, keeping their original order"
            )
            ordered.extend(remaining)
            break

    return ordered
