"""AffirmationRepository protocol — defines affirmation persistence contract."""

from typing import Any, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ...models.affirmation import Affirmation


@runtime_checkable
class AffirmationRepository(Protocol):
    """Repository interface for Affirmation records."""

    async def get_all(self) -> List[Affirmation]:
        """Get every record, ordered by ``sort_order``."""
        ...

    async def get_active(self) -> List[Affirmation]:
        """Get records with ``is_active`` set, ordered by ``sort_order``."""
        ...

    async def get_by_id(self, affirmation_id: str) -> Optional[Affirmation]:
        """Look up a record.

        Returns:
            The Affirmation, or None if not found.
        """
        ...

    async def create(self, affirmation: Affirmation) -> Affirmation:
        """Persist a new record.

        Generates an id when ``affirmation.id`` is empty and assigns
        ``sort_order`` one past the highest value ever assigned (0 for a
        fresh store); values freed by deletes are not reused.

        Returns:
            The persisted Affirmation.
        """
        ...

    async def update(self, affirmation: Affirmation) -> Affirmation:
        """Stamp ``updated_at`` and persist (last write wins)."""
        ...

    async def modify(
        self, affirmation_id: str, changes: Mapping[str, Any]
    ) -> Optional[Affirmation]:
        """Read, apply *changes* and persist as one serialized write.

        Returns:
            The updated Affirmation, or None if not found.
        """
        ...

    async def delete(self, affirmation_id: str) -> bool:
        """Remove a record.

        Returns:
            True if a record existed and was removed, False otherwise.
        """
        ...

    async def delete_all(self) -> None:
        ...

    async def reorder(self, ordered_ids: Sequence[str]) -> None:
        """Assign ``sort_order`` by index; unlisted records are untouched."""
        ...

    async def count(self) -> int:
        ...

    async def increment_display_count(self, affirmation_id: str) -> Optional[Affirmation]:
        ...
