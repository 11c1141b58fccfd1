"""Refresh policy: which external triggers recompute AI suggestions.

Trigger Pipeline:
1. SESSION_STARTED - fetch own/saved/all, then refresh once
2. LOCATION_CHANGED - refresh only when the description differs from the last one used
3. SAVE_TOGGLED - toggle locally, attempt the remote write, refresh regardless
4. RECIPE_ADDED - (optionally create the draft), re-fetch own/all, then refresh
5. SIGNED_OUT - clear every collection

Each refresh builds a fresh SuggestionContext from the store. Refreshes from
rapid triggers may overlap; there is no queue and no cancellation, and the
last AI reply to complete wins.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Optional

from cookbook.engine.suggestion_engine import SuggestionEngine
from cookbook.errors import DraftValidationError, PersistenceError
from cookbook.models.models import Alert, Recipe, RecipeDraft, SaveAction, SuggestionContext
from cookbook.state.collection_store import CollectionStore
from cookbook.sync.location import UNKNOWN_LOCATION
from cookbook.sync.repository import RecipeRepository
from cookbook.utils.logger import logger


class TriggerEvent(str, Enum):
    SESSION_STARTED = "session_started"
    LOCATION_CHANGED = "location_changed"
    SAVE_TOGGLED = "save_toggled"
    RECIPE_ADDED = "recipe_added"
    SIGNED_OUT = "signed_out"


class SyncController:
    """Keeps the collections and the suggestion list in step with user actions."""

    def __init__(
        self,
        store: CollectionStore,
        engine: SuggestionEngine,
        repository: RecipeRepository,
        current_user: Callable[[], Optional[str]],
        location_description: str = UNKNOWN_LOCATION,
        on_alert: Optional[Callable[[Alert], None]] = None,
        max_context_recipes: int = 5,
    ) -> None:
        self.store = store
        self.engine = engine
        self.repository = repository
        self.current_user = current_user
        self.location_description = location_description
        self.last_used_description: Optional[str] = None
        self.on_alert = on_alert
        self.max_context_recipes = max_context_recipes
        self.alerts: list[Alert] = []
        self._uploading = 0

    @property
    def is_uploading(self) -> bool:
        """True while a new recipe is being written to the store."""
        return self._uploading > 0

    # Context and refresh

    def build_context(self) -> SuggestionContext:
        """Snapshot the current location and recent own/saved recipes."""
        return SuggestionContext.build(
            self.location_description,
            self.store.own,
            self.store.saved,
            limit=self.max_context_recipes,
        )

    async def refresh_suggestions(self) -> list[Recipe]:
        context = self.build_context()
        # Recorded before the await so an identical update arriving mid-flight is a no-op
        self.last_used_description = context.location_description
        return await self.engine.refresh(context)

    def _alert(self, title: str, message: str) -> None:
        alert = Alert(title=title, message=message)
        self.alerts.append(alert)
        logger.warning(f"Alert: {title}: {message}")
        if self.on_alert is None:
            return
        try:
            self.on_alert(alert)
        except Exception as e:
            logger.error(f"Alert handler failed for '{title}': {e}", exc_info=True)

    def _log_extra(self, trigger: TriggerEvent, user_id: Optional[str] = None) -> dict:
        return {"trigger": trigger.value, "user_id": user_id}

    # Fetches: a failed fetch leaves its collection empty, never stale

    async def _fetch_into(self, name: str, fetch, setter: Callable[[list[Recipe]], None]) -> None:
        try:
            items = await fetch
        except PersistenceError as e:
            logger.error(f"Error fetching {name} recipes: {e}")
            setter([])
            return
        setter(items)
        logger.info(f"Fetched {name} recipes: {len(items)}")

    async def _fetch_own(self, user_id: str) -> None:
        await self._fetch_into("own", self.repository.fetch_own(user_id), self.store.set_own)

    async def _fetch_saved(self, user_id: str) -> None:
        await self._fetch_into("saved", self.repository.fetch_saved(user_id), self.store.set_saved)

    async def _fetch_all(self) -> None:
        await self._fetch_into("all", self.repository.fetch_all(), self.store.set_all)

    # Triggers

    async def session_started(self) -> list[Recipe]:
        """Load every collection for the signed-in user, then suggest once."""
        user_id = self.current_user()
        if user_id is None:
            logger.info(
                "No signed-in user at session start, clearing collections",
                extra=self._log_extra(TriggerEvent.SESSION_STARTED),
            )
            self.store.clear()
            return []

        logger.info(
            "Session started, loading collections",
            extra=self._log_extra(TriggerEvent.SESSION_STARTED, user_id),
        )
        await asyncio.gather(
            self._fetch_own(user_id),
            self._fetch_saved(user_id),
            self._fetch_all(),
        )
        return await self.refresh_suggestions()

    async def location_changed(self, description: str) -> bool:
        """Record a new location description.

        Returns:
            True if a refresh ran, False for a repeat of the last-used description.
        """
        self.location_description = description
        if description == self.last_used_description:
            logger.debug(
                f"Location unchanged ('{description}'), skipping refresh",
                extra=self._log_extra(TriggerEvent.LOCATION_CHANGED, self.current_user()),
            )
            return False

        logger.info(
            f"Location changed to '{description}', refreshing suggestions",
            extra=self._log_extra(TriggerEvent.LOCATION_CHANGED, self.current_user()),
        )
        await self.refresh_suggestions()
        return True

    async def save_toggled(self, recipe: Recipe) -> Optional[SaveAction]:
        """Save or unsave `recipe`, persist it, and refresh suggestions.

        The local toggle is kept even when persistence fails; the failure is
        surfaced as an alert and the refresh still runs.

        Returns:
            The applied action, or None when nobody is signed in.
        """
        user_id = self.current_user()
        if user_id is None:
            self._alert("Not Signed In", "Please sign in to save recipes.")
            return None

        action = self.store.toggle_saved(recipe)
        try:
            if action is SaveAction.SAVED:
                await self.repository.save_recipe(user_id, recipe)
            else:
                await self.repository.delete_saved(user_id, recipe.id)
            logger.info(
                f"{action.value.capitalize()} recipe: {recipe.id}",
                extra=self._log_extra(TriggerEvent.SAVE_TOGGLED, user_id),
            )
        except PersistenceError as e:
            logger.error(
                f"Error persisting {action.value} recipe {recipe.id}: {e}",
                extra=self._log_extra(TriggerEvent.SAVE_TOGGLED, user_id),
            )
            self._alert(e.title, e.message)

        await self.refresh_suggestions()
        return action

    async def recipe_added(self, draft: Optional[RecipeDraft] = None) -> Optional[Recipe]:
        """Create `draft` when given, then reload own/all and refresh.

        Without a draft the recipe is assumed to be persisted already.

        Returns:
            The created recipe, or None (no draft, or creation failed).
        """
        user_id = self.current_user()
        if user_id is None:
            self._alert("Not Signed In", "Please sign in to create recipes.")
            return None

        created: Optional[Recipe] = None
        if draft is not None:
            try:
                draft.check()
                created = draft.to_recipe(self.repository.new_recipe_id(), user_id)
                self._uploading += 1
                try:
                    await self.repository.add_recipe(created)
                finally:
                    self._uploading -= 1
                logger.info(
                    f"Created recipe: {created.id}",
                    extra=self._log_extra(TriggerEvent.RECIPE_ADDED, user_id),
                )
            except (DraftValidationError, PersistenceError) as e:
                self._alert(e.title, e.message)
                return None

        await asyncio.gather(self._fetch_own(user_id), self._fetch_all())
        await self.refresh_suggestions()
        return created

    async def signed_out(self) -> None:
        """Drop all per-user state so nothing leaks into the next session."""
        self.store.clear()
        self.last_used_description = None
        logger.info("Signed out, collections cleared", extra=self._log_extra(TriggerEvent.SIGNED_OUT))

    async def handle(self, event: TriggerEvent, payload: Any = None) -> Any:
        """Dispatch a trigger event to its handler."""
        if event is TriggerEvent.SESSION_STARTED:
            return await self.session_started()
        if event is TriggerEvent.LOCATION_CHANGED:
            return await self.location_changed(payload)
        if event is TriggerEvent.SAVE_TOGGLED:
            return await self.save_toggled(payload)
        if event is TriggerEvent.RECIPE_ADDED:
            return await self.recipe_added(payload)
        if event is TriggerEvent.SIGNED_OUT:
            return await self.signed_out()
        raise ValueError(f"Unknown trigger event: {event}")
