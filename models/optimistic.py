"""Optimistic mutation reducer and store.

The reducer applies a local create/update/delete to an event list before the
provider confirms it. The store layers pending actions over the last
confirmed collection; what the UI shows is always
``project(confirmed, pending)``, so rolling back is just dropping the action.
"""

import bisect
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Iterable, Literal, Optional, Sequence, TypeVar, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from models.calendar_event import CalendarEvent
from models.collection import EventCollectionItem, build_collection
from models.errors import MutationNotFoundError
from models.temporal import instant_key


logger = logging.getLogger(__name__)

Entry = TypeVar("Entry", CalendarEvent, EventCollectionItem)


class CreateAction(BaseModel):
    """Add a new event; the id is generated by the client."""

    type: Literal["create"] = "create"
    event: CalendarEvent = Field(description="Event to add")

    @property
    def event_id(self) -> str:
        return self.event.id


class UpdateAction(BaseModel):
    """Replace an event with the same id (inserts it if absent)."""

    type: Literal["update"] = "update"
    event: CalendarEvent = Field(description="Updated event")

    @property
    def event_id(self) -> str:
        return self.event.id


class DeleteAction(BaseModel):
    """Remove an event by id."""

    type: Literal["delete"] = "delete"
    event_id: str = Field(description="Id of the event to remove")


OptimisticAction = Annotated[
    Union[CreateAction, UpdateAction, DeleteAction], Field(discriminator="type")
]


def _entry_id(entry: Union[CalendarEvent, EventCollectionItem]) -> str:
    return entry.id


def _entry_start(entry: Union[CalendarEvent, EventCollectionItem]) -> datetime:
    if isinstance(entry, EventCollectionItem):
        return instant_key(entry.start)
    return entry.start_key()


def apply_optimistic_action(
    state: Sequence[Entry],
    action: Union[CreateAction, UpdateAction, DeleteAction],
    time_zone: Optional[Union[str, ZoneInfo]] = None,
) -> list[Entry]:
    """Apply one action to an event list, returning a new list.

    ``state`` is assumed to be sorted by start instant and stays sorted:
    created and updated entries are inserted by binary search rather than
    appended, ahead of any entries with the same start.

    The result holds the same kind of entry as ``state``. A list of
    CalendarEvents stays a list of CalendarEvents whatever ``time_zone`` is.

    Args:
        state: Current events, or collection items.
        action: The action to apply.
        time_zone: Zone used to normalize the action's event when ``state``
            holds collection items; defaults to the zone of the first item.
            For an empty ``state``, passing a zone yields collection items.

    Returns:
        The new list. ``state`` is never modified.

    Raises:
        InvalidTimeZoneError: If ``time_zone`` cannot be resolved.
    """
    remaining = [entry for entry in state if _entry_id(entry) != action.event_id]

    if isinstance(action, DeleteAction):
        if len(remaining) == len(state):
            logger.debug(f"Delete of unknown event {action.event_id} ignored")
        return remaining

    holds_items = isinstance(state[0], EventCollectionItem) if state else time_zone is not None
    if holds_items:
        zone = time_zone if time_zone is not None else state[0].start.tzinfo
        new_entry = build_collection([action.event], zone)[0]
    else:
        new_entry = action.event

    index = bisect.bisect_left(remaining, _entry_start(new_entry), key=_entry_start)
    remaining.insert(index, new_entry)
    return remaining


def project(
    confirmed: Sequence[Entry],
    pending: Iterable[Union[CreateAction, UpdateAction, DeleteAction]],
    time_zone: Optional[Union[str, ZoneInfo]] = None,
) -> list[Entry]:
    """Fold pending actions, oldest first, over the confirmed collection.

    Args:
        confirmed: Collection from the last successful fetch.
        pending: Actions not yet confirmed, in dispatch order.
        time_zone: Passed through to apply_optimistic_action.

    Returns:
        The collection to display.
    """
    displayed = list(confirmed)
    for action in pending:
        displayed = apply_optimistic_action(displayed, action, time_zone)
    return displayed


class MutationStatus(str, Enum):
    """Lifecycle of an optimistic mutation."""

    OPTIMISTIC_APPLIED = "optimistic-applied"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled-back"


class PendingMutation(BaseModel):
    """An action dispatched to the store, with the view it replaced.

    Args:
        mutation_id: Identifier used to confirm or roll back the action.
        action: The dispatched action.
        status: Current lifecycle state.
        created_at: When the action was applied.
        snapshot: Displayed events immediately before the action was applied.
    """

    mutation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    action: OptimisticAction
    status: MutationStatus = Field(default=MutationStatus.OPTIMISTIC_APPLIED)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    snapshot: list[CalendarEvent] = Field(default_factory=list)


class OptimisticEventStore(BaseModel):
    """Confirmed events plus a queue of pending optimistic mutations.

    Mutations move ``optimistic-applied -> confirmed`` or
    ``optimistic-applied -> rolled-back``; only applied mutations stay in the
    queue and contribute to ``displayed``.

    Args:
        confirmed: Events from the last successful fetch, sorted by start.
        pending: Applied mutations awaiting confirmation, oldest first.

    Examples:
        store = OptimisticEventStore()
        store.replace_confirmed(fetched_events)

        mutation = store.apply(UpdateAction(event=edited))
        try:
            saved = provider.save(edited)
        except ProviderError:
            store.rollback(mutation.mutation_id)
        else:
            store.confirm(mutation.mutation_id)
    """

    confirmed: list[CalendarEvent] = Field(
        default_factory=list,
        description="Server-confirmed events, sorted by start",
    )
    pending: list[PendingMutation] = Field(
        default_factory=list,
        description="Applied mutations awaiting confirmation, oldest first",
    )

    @property
    def displayed(self) -> list[CalendarEvent]:
        """Confirmed events with every pending action applied."""
        return project(self.confirmed, (mutation.action for mutation in self.pending))

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def snapshot(self) -> list[CalendarEvent]:
        """Copy of the displayed collection."""
        return [event.model_copy() for event in self.displayed]

    def replace_confirmed(self, events: Iterable[CalendarEvent]) -> None:
        """Install a fresh server collection; pending actions still apply on top.

        Args:
            events: The authoritative collection, in any order.
        """
        self.confirmed = sorted(events, key=lambda event: event.start_key())
        logger.debug(f"Confirmed collection replaced ({len(self.confirmed)} events)")

    def apply(self, action: Union[CreateAction, UpdateAction, DeleteAction]) -> PendingMutation:
        """Apply an action optimistically.

        Args:
            action: The action to queue.

        Returns:
            The queued mutation in ``optimistic-applied`` state.
        """
        mutation = PendingMutation(action=action, snapshot=self.snapshot())
        self.pending.append(mutation)
        logger.debug(f"Applied {action.type} of {action.event_id} as {mutation.mutation_id}")
        return mutation

    def _take(self, mutation_id: str) -> PendingMutation:
        for index, mutation in enumerate(self.pending):
            if mutation.mutation_id == mutation_id:
                return self.pending.pop(index)
        raise MutationNotFoundError(mutation_id)

    def confirm(
        self, mutation_id: str, confirmed: Optional[Iterable[CalendarEvent]] = None
    ) -> PendingMutation:
        """Mark a mutation as confirmed by the provider.

        Args:
            mutation_id: Mutation to confirm.
            confirmed: Fresh server collection, if the caller refetched. When
                omitted the action is folded into the confirmed collection.

        Returns:
            The mutation, now ``confirmed``.

        Raises:
            MutationNotFoundError: If no pending mutation has this id.
        """
        mutation = self._take(mutation_id)
        if confirmed is not None:
            self.replace_confirmed(confirmed)
        else:
            self.confirmed = apply_optimistic_action(self.confirmed, mutation.action)
        mutation.status = MutationStatus.CONFIRMED
        return mutation

    def rollback(self, mutation_id: str) -> PendingMutation:
        """Drop a failed mutation from the queue.

        Later pending actions stay applied; ``displayed`` is recomputed from
        the confirmed collection without this one.

        Args:
            mutation_id: Mutation to roll back.

        Returns:
            The mutation, now ``rolled-back``.

        Raises:
            MutationNotFoundError: If no pending mutation has this id.
        """
        mutation = self._take(mutation_id)
        mutation.status = MutationStatus.ROLLED_BACK
        logger.info(f"Rolled back {mutation.action.type} of {mutation.action.event_id}")
        return mutation

    def resolve_selected_events(
        self, selected: Iterable[Union[CalendarEvent, str]]
    ) -> list[CalendarEvent]:
        """Re-read a selection from the displayed collection.

        Selected events that were deleted are dropped; updated ones are
        returned in their current form.

        Args:
            selected: Events or event ids.

        Returns:
            Current versions of the still-present selected events.
        """
        by_id = {event.id: event for event in self.displayed}
        resolved = []
        for entry in selected:
            event_id = entry if isinstance(entry, str) else entry.id
            if event_id in by_id:
                resolved.append(by_id[event_id])
        return resolved
