"""In-memory holder of the four recipe collections.

Single source of truth for UI binding: `own`, `saved`, `all`, `suggested`
plus the derived `saved_ids` index. Every mutation is synchronous and
recomputes the index in the same call, so
`saved_ids == {r.id for r in saved}` holds at every observable point.
Observers are notified once per changed field, after the change is complete.
"""

from typing import Callable, Iterable

from cookbook.models.models import Recipe, SaveAction
from cookbook.utils.logger import logger


OWN = "own"
SAVED = "saved"
ALL = "all"
SUGGESTED = "suggested"
FIELDS = (OWN, SAVED, ALL, SUGGESTED)

Observer = Callable[[str], None]


class CollectionStore:
    """Owned, observable state for the recipe collections."""

    def __init__(self) -> None:
        self._own: tuple[Recipe, ...] = ()
        self._saved: tuple[Recipe, ...] = ()
        self._all: tuple[Recipe, ...] = ()
        self._suggested: tuple[Recipe, ...] = ()
        self._saved_ids: frozenset[str] = frozenset()
        self._observers: list[Observer] = []

    # Read access

    @property
    def own(self) -> tuple[Recipe, ...]:
        return self._own

    @property
    def saved(self) -> tuple[Recipe, ...]:
        return self._saved

    @property
    def all(self) -> tuple[Recipe, ...]:
        return self._all

    @property
    def suggested(self) -> tuple[Recipe, ...]:
        return self._suggested

    @property
    def saved_ids(self) -> frozenset[str]:
        return self._saved_ids

    def is_saved(self, recipe_id: str) -> bool:
        return recipe_id in self._saved_ids

    # Observation

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback receiving the name of each changed field.

        Returns:
            A function that removes the callback.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, field: str) -> None:
        for observer in list(self._observers):
            try:
                observer(field)
            except Exception as e:
                # An observer must not undo or interrupt a completed mutation
                logger.warning(f"Collection observer failed on '{field}': {e}", exc_info=True)

    # Full-replace setters

    def set_own(self, items: Iterable[Recipe]) -> None:
        self._own = tuple(items)
        self._notify(OWN)

    def set_saved(self, items: Iterable[Recipe]) -> None:
        self._saved = tuple(items)
        self._saved_ids = frozenset(r.id for r in self._saved)
        self._notify(SAVED)

    def set_all(self, items: Iterable[Recipe]) -> None:
        self._all = tuple(items)
        self._notify(ALL)

    def set_suggested(self, items: Iterable[Recipe]) -> None:
        self._suggested = tuple(items)
        self._notify(SUGGESTED)

    def clear(self) -> None:
        """Empty every collection (sign-out)."""
        self.set_own(())
        self.set_saved(())
        self.set_all(())
        self.set_suggested(())

    # Save state machine

    def toggle_saved(self, recipe: Recipe) -> SaveAction:
        """Flip the saved state of `recipe`.

        A saved recipe is removed from `saved`; an unsaved one is appended to
        the end (not reinserted at any earlier position). Persistence is the
        caller's job, driven by the returned action.

        Returns:
            SaveAction.UNSAVED if it was saved, else SaveAction.SAVED.
        """
        if recipe.id in self._saved_ids:
            self._saved = tuple(r for r in self._saved if r.id != recipe.id)
            action = SaveAction.UNSAVED
        else:
            self._saved = self._saved + (recipe,)
            action = SaveAction.SAVED

        self._saved_ids = frozenset(r.id for r in self._saved)
        self._notify(SAVED)
        logger.debug(f"toggle_saved({recipe.id}) -> {action.value}, saved={len(self._saved)}")
        return action
