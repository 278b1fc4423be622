"""Optimistic event store endpoints.

These endpoints let a client install the confirmed collection, dispatch
optimistic create/update/delete actions, and confirm or roll them back once
the provider call resolves.
"""

from fastapi import APIRouter

from api.dependencies import EventStoreDep
from api.models import (
    ActionRequest,
    ConfirmMutationRequest,
    EventListResponse,
    MutationResponse,
    ReplaceEventsRequest,
    SelectionRequest,
)
from models.calendar_event import CalendarEvent
from models.optimistic import OptimisticEventStore, PendingMutation

# Create router for event store endpoints
router = APIRouter(
    prefix="/events",
    tags=["events"],
)


def _event_list(store: OptimisticEventStore) -> EventListResponse:
    displayed = store.displayed
    return EventListResponse(
        events=displayed,
        total=len(displayed),
        pending_count=store.pending_count,
    )


def _mutation_response(
    mutation: PendingMutation, store: OptimisticEventStore, message: str
) -> MutationResponse:
    return MutationResponse(
        mutation_id=mutation.mutation_id,
        status=mutation.status,
        action=mutation.action,
        events=store.displayed,
        message=message,
    )


# Route Handlers


@router.get("", response_model=EventListResponse)
async def list_events(store: EventStoreDep):
    """List the displayed collection.

    Args:
        store: The OptimisticEventStore instance (injected by FastAPI).

    Returns:
        Confirmed events with every pending action applied, sorted by start.
    """
    return _event_list(store)


@router.put("", response_model=EventListResponse)
async def replace_events(request: ReplaceEventsRequest, store: EventStoreDep):
    """Install a freshly fetched confirmed collection.

    Pending actions are kept and still apply on top of the new collection.

    Args:
        request: The authoritative events.
        store: The OptimisticEventStore instance (injected by FastAPI).

    Returns:
        The displayed collection after the replacement.
    """
    store.replace_confirmed(request.events)
    return _event_list(store)


@router.post("/actions", response_model=MutationResponse)
async def apply_action(request: ActionRequest, store: EventStoreDep):
    """Apply a create, update or delete optimistically.

    Args:
        request: Action tagged by ``type``.
        store: The OptimisticEventStore instance (injected by FastAPI).

    Returns:
        The pending mutation and the displayed collection.
    """
    action = request.action
    mutation = store.apply(action)
    return _mutation_response(
        mutation, store, f"Applied {action.type} of event {action.event_id}"
    )


@router.post("/actions/{mutation_id}/confirm", response_model=MutationResponse)
async def confirm_action(
    mutation_id: str,
    store: EventStoreDep,
    request: ConfirmMutationRequest | None = None,
):
    """Confirm a pending mutation.

    Args:
        mutation_id: Mutation to confirm.
        store: The OptimisticEventStore instance (injected by FastAPI).
        request: Optional refetched server collection.

    Returns:
        The confirmed mutation and the displayed collection.

    Raises:
        MutationNotFoundError: If the mutation is not pending (404).
    """
    refetched = request.events if request is not None else None
    mutation = store.confirm(mutation_id, refetched)
    return _mutation_response(mutation, store, f"Confirmed mutation {mutation_id}")


@router.post("/actions/{mutation_id}/rollback", response_model=MutationResponse)
async def rollback_action(mutation_id: str, store: EventStoreDep):
    """Roll back a pending mutation after the provider call failed.

    Args:
        mutation_id: Mutation to roll back.
        store: The OptimisticEventStore instance (injected by FastAPI).

    Returns:
        The rolled-back mutation and the displayed collection.

    Raises:
        MutationNotFoundError: If the mutation is not pending (404).
    """
    mutation = store.rollback(mutation_id)
    return _mutation_response(mutation, store, f"Rolled back mutation {mutation_id}")


@router.post("/selection", response_model=list[CalendarEvent])
async def resolve_selection(request: SelectionRequest, store: EventStoreDep):
    """Re-read selected events from the displayed collection.

    Args:
        request: Ids of the currently selected events.
        store: The OptimisticEventStore instance (injected by FastAPI).

    Returns:
        Current versions of the selected events that still exist.
    """
    return store.resolve_selected_events(request.event_ids)
