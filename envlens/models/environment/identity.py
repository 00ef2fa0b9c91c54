"""Environment identity model."""

from pydantic import BaseModel, ConfigDict


class EnvironmentIdentity(BaseModel):
    """Which environment to display.

    Either ``id`` or the ``(stack_name, cluster_name)`` pair identifies the
    environment. Instances are immutable; an explicit re-pick replaces the
    identity wholesale.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    stack_name: str | None = None
    cluster_name: str | None = None

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    @property
    def has_names(self) -> bool:
        return bool(self.stack_name and self.cluster_name)

    def with_id(self, cluster_id: str) -> "EnvironmentIdentity":
        """Return a copy carrying the canonical id."""
        return self.model_copy(update={"id": cluster_id})
