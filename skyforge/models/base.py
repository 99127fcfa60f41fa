"""Base class for every resource descriptor handed to the engine."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from skyforge.models.references import Ref, iter_refs


class ResourceDescriptor(BaseModel):
    """An immutable declaration of one desired resource.

    Subclasses set ``resource_type`` to the engine's type token and
    implement ``inputs()``, returning the engine arguments. Inputs may hold
    ``Ref`` values pointing at other descriptors; those references, plus
    ``depends_on``, are the edges of the resource graph.
    """

    model_config = ConfigDict(frozen=True)

    resource_type: ClassVar[str] = ""

    logical_name: str
    depends_on: tuple[str, ...] = ()  # ordering-only edges, no value flows

    def inputs(self) -> dict[str, Any]:
        """Return the engine arguments for this resource.

        Subclasses must override this. Values may be plain data or ``Ref``
        objects; every ``Ref`` found here becomes a graph edge.
        """
        raise NotImplementedError

    def ref(self, attribute: str = "id", key: str | None = None) -> Ref:
        """Return a deferred reference to one of this resource's attributes."""
        return Ref(target=self.logical_name, attribute=attribute, key=key)

    def references(self) -> list[str]:
        """Return the logical names this descriptor depends on, in order."""
        names: list[str] = []
        for target in [r.target for r in iter_refs(self.inputs())] + list(self.depends_on):
            if target not in names:
                names.append(target)
        return names

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.logical_name!r}>"
