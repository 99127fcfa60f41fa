"""Resource dependency DAG built from descriptor references.

The graph enforces:
- Every referenced logical name is declared (otherwise the pass aborts).
- Logical names are unique.
- The references form a DAG, so the engine can create resources in order.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from skyforge.models.base import ResourceDescriptor


class DeclarationError(RuntimeError):
    """Raised when declarations cannot form a graph."""


class UnresolvedReferenceError(DeclarationError):
    """Raised when a descriptor references a logical name nobody declared."""


class DuplicateDeclarationError(DeclarationError):
    """Raised when two descriptors share a logical name."""


class CyclicDependencyError(ValueError):
    """Raised when the resource graph contains a cycle."""


class ResourceGraph:
    """Directed acyclic graph of resource descriptors.

    Built from ``ResourceDescriptor.references()`` at the end of a
    composition pass, and again by the engine adapter before declaring.
    """

    def __init__(self, descriptors: Iterable[ResourceDescriptor]) -> None:
        self._descriptors: dict[str, ResourceDescriptor] = {}
        self._ordinal: dict[str, int] = {}
        for index, d in enumerate(descriptors):
            if d.logical_name in self._descriptors:
                raise DuplicateDeclarationError(
                    f"Logical name {d.logical_name!r} is declared twice"
                )
            self._descriptors[d.logical_name] = d
            self._ordinal[d.logical_name] = index

        # Forward edges: name -> names it references
        self._references: dict[str, list[str]] = {
            name: d.references() for name, d in self._descriptors.items()
        }
        # Reverse edges: name -> names that reference it
        self._dependents: dict[str, list[str]] = {name: [] for name in self._descriptors}
        for name, targets in self._references.items():
            for target in targets:
                if target not in self._descriptors:
                    raise UnresolvedReferenceError(
                        f"{name!r} references {target!r}, which was never declared"
                    )
                self._dependents[target].append(name)

        self._validate_no_cycles()

    def _validate_no_cycles(self) -> None:
        """Raise ``CyclicDependencyError`` unless every resource can be ordered."""
        in_degree = {name: len(refs) for name, refs in self._references.items()}
        ready = deque(name for name, deg in in_degree.items() if deg == 0)
        ordered = 0
        while ready:
            ordered += 1
            for dependent in self._dependents.get(ready.popleft(), []):
                in_degree[dependent] -= 1
                if not in_degree[dependent]:
                    ready.append(dependent)

        unordered = len(self._descriptors) - ordered
        if unordered:
            stuck = sorted(n for n, deg in in_degree.items() if deg > 0)
            raise CyclicDependencyError(
                f"reference cycle among {', '.join(stuck)} "
                f"({unordered} of {len(self._descriptors)} resources unordered)"
            )

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, logical_name: object) -> bool:
        return logical_name in self._descriptors

    def get_descriptor(self, logical_name: str) -> ResourceDescriptor:
        return self._descriptors[logical_name]

    def get_references(self, logical_name: str) -> list[str]:
        """Return the names *logical_name* directly depends on."""
        return list(self._references.get(logical_name, []))

    def get_dependents(self, logical_name: str) -> list[str]:
        """Names of every resource that depends on *logical_name*, nearest first.

        Includes resources that reach it only through other resources.
        """
        result = []
        queue = deque(self._dependents.get(logical_name, []))
        visited: set[str] = set()
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            result.append(node)
            queue.extend(self._dependents.get(node, []))
        return result

    @property
    def logical_names(self) -> list[str]:
        """Return all names in topological order, ties broken by declaration order."""
        in_degree = {name: len(refs) for name, refs in self._references.items()}
        ready = sorted(
            (name for name, deg in in_degree.items() if deg == 0),
            key=self._ordinal.__getitem__,
        )
        result = []
        while ready:
            node = ready.pop(0)
            result.append(node)
            for dep in self._dependents.get(node, []):
                in_degree[dep] -= 1
                if in_degree[dep] == 0:
                    ready.append(dep)
            ready.sort(key=self._ordinal.__getitem__)
        return result

    def ordered(self) -> list[ResourceDescriptor]:
        """Return the descriptors in creation order."""
        return [self._descriptors[name] for name in self.logical_names]
