from __future__ import annotations

import logging
from typing import Dict, Iterator, List

LOGGER = logging.getLogger("stabel.registry")


class VariableRegistry:
    """
    Set of declared variable names for one transpilation pass.

    Insertion order is kept so the declared names can be reported in source
    order. Names are never removed.
    """

    def __init__(self) -> None:
        self._names: Dict[str, None] = {}

    def declare(self, name: str) -> bool:
        """Record ``name``; returns True when this is its first declaration."""
        if name in self._names:
            return False
        self._names[name] = None
        LOGGER.debug("declared variable %s", name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def names(self) -> List[str]:
        return list(self._names)
