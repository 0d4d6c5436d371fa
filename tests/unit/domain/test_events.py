"""Tests for inbound and outbound event models."""

import pytest
from pydantic import ValidationError

from ripple.domain import EventIdentity, InboundEvent, OutboundEvent
from tests.factories import inbound


def test_inbound_event_identity():
    """Test identity is the aggregate id and sequence number."""
    event = inbound("T1", "todo_added", sequence_number=7, title="Buy milk")

    assert event.identity == EventIdentity("T1", 7)
    assert str(event.identity) == "T1@7"


def test_inbound_event_defaults():
    """Test id, timestamp and body are filled in."""
    event = InboundEvent(aggregate_id="T1", type="todo_completed", sequence_number=1)

    assert event.body == {}
    assert event.id is not None
    assert event.timestamp.tzinfo is not None


def test_inbound_event_is_immutable():
    """Test inbound events cannot be modified once created."""
    event = inbound("T1", "todo_added", title="Buy milk")

    with pytest.raises(ValidationError):
        event.type = "todo_completed"


@pytest.mark.parametrize("sequence_number", [0, -1])
def test_inbound_event_rejects_non_positive_sequence_number(sequence_number):
    """Test sequence numbers are 1-indexed."""
    with pytest.raises(ValidationError):
        InboundEvent(aggregate_id="T1", type="todo_added", sequence_number=sequence_number)


def test_inbound_event_requires_aggregate_id():
    """Test an empty aggregate id is rejected."""
    with pytest.raises(ValidationError):
        InboundEvent(aggregate_id="", type="todo_added", sequence_number=1)


def test_outbound_event_links_to_cause():
    """Test outbound events record the identity of the inbound event that caused them."""
    cause = inbound("T1", "todo_completed", sequence_number=3)

    event = OutboundEvent(
        aggregate_id="T1",
        type="stakeholder-notified",
        caused_by=cause.identity,
    )

    assert event.caused_by == EventIdentity("T1", 3)
    assert event.caused_by.sequence_number == 3
