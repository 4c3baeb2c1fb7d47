"""
Status lifecycles for jobs and applications.
ALL status changes must go through this module.
"""
import logging
from enum import Enum
from typing import Dict, Optional, TypeVar

from app.errors import InvalidTransitionError, NotFoundError
from app.models.application import ApplicationStatus
from app.models.job import JobStatus
from app.services.store import DocumentStore

# Configure logger
logger = logging.getLogger(__name__)

T = TypeVar("T")


# Define allowed status transitions. Decisions are terminal: no re-opening.
JOB_TRANSITIONS: Dict[JobStatus, list[JobStatus]] = {
    JobStatus.PENDING: [JobStatus.APPROVED, JobStatus.REJECTED],
    JobStatus.APPROVED: [],  # Terminal state
    JobStatus.REJECTED: [],  # Terminal state
}

APPLICATION_TRANSITIONS: Dict[ApplicationStatus, list[ApplicationStatus]] = {
    ApplicationStatus.PENDING: [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED],
    ApplicationStatus.ACCEPTED: [],  # Terminal state
    ApplicationStatus.REJECTED: [],  # Terminal state
}


def can_transition(transitions: Dict[Enum, list], from_state: Enum, to_state: Enum) -> bool:
    """
    Check if a transition is allowed without modifying the store.

    Re-applying the current status is allowed; it becomes a no-op write.
    """
    if from_state == to_state:
        return True
    return to_state in transitions.get(from_state, [])


async def transition_status(
    store: DocumentStore,
    model: type[T],
    record_id: str,
    to_state: Enum,
    transitions: Dict[Enum, list],
    actor: Optional[str] = None,
) -> T:
    """
    Move a record to a new status with validation.

    Args:
        store: Document store for this request
        model: Job or Application
        record_id: ID of the record to transition
        to_state: Target status
        transitions: JOB_TRANSITIONS or APPLICATION_TRANSITIONS
        actor: Identity id of the caller, for the audit log

    Returns:
        The updated record (``updated_at`` refreshed)

    Raises:
        NotFoundError: If the record does not exist
        InvalidTransitionError: If the transition is not allowed
    """
    record = await store.get(model, record_id)
    if record is None:
        raise NotFoundError(f"{model.__name__} {record_id} not found")

    from_state = record.status
    if not can_transition(transitions, from_state, to_state):
        raise InvalidTransitionError(
            f"Invalid transition from {from_state.value} to {to_state.value}"
        )

    updated = await store.update(model, record_id, {"status": to_state})
    if updated is None:
        # Deleted between the read and the write
        raise NotFoundError(f"{model.__name__} {record_id} not found")

    log_data = {
        "record_id": record_id,
        "from_state": from_state.value,
        "to_state": to_state.value,
        "actor": actor,
    }
    logger.info(f"{model.__name__} status transition: {from_state.value} → {to_state.value}", extra=log_data)

    return updated
