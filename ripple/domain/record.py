from pydantic import BaseModel, Field

# Columns of the projection besides the key. Stores reject any other field.
PROJECTION_FIELDS = frozenset({"title", "contact_address"})


class ProjectionRecord(BaseModel):
    """Derived, per-entity state kept by the reactor between creation and a terminal event.

    Attributes:
        entity_id: Unique key of the entity (the aggregate id of its events)
        title: Human readable title, used in notification messages
        contact_address: Where to notify on completion; empty or None disables it
    """

    entity_id: str = Field(min_length=1)
    title: str | None = None
    contact_address: str | None = None

    @property
    def has_contact_address(self) -> bool:
        return bool(self.contact_address)
