"""Unit tests for the MongoDB backends against mocked collections."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from ripple.domain import (
    DuplicateKey,
    EventIdentity,
    MalformedEvent,
    NotFound,
    OutboundEvent,
    ProjectionRecord,
)
from ripple.integrations.mongodb import (
    IndexDirection,
    MongoDBCheckpointBackend,
    MongoDBEventLog,
    MongoDBEventSink,
    MongoDBProjectionStore,
)
from ripple.processing import Checkpoint

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs
        self.sort_spec = None
        self.limit_value = None

    def sort(self, spec):
        self.sort_spec = spec
        return self

    def limit(self, value):
        self.limit_value = value
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


def mock_collection() -> MagicMock:
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.update_one = AsyncMock(
        return_value=SimpleNamespace(matched_count=1, modified_count=1)
    )
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.create_index = AsyncMock()
    collection.with_options.return_value = collection
    return collection


@pytest.fixture
def collection() -> MagicMock:
    return mock_collection()


@pytest.fixture
def config(collection) -> SimpleNamespace:
    return SimpleNamespace(
        events=collection,
        projection=collection,
        checkpoints=collection,
        outbound_events=collection,
    )


@pytest.mark.asyncio
async def test_projection_schema_creates_unique_entity_index(config, collection):
    store = MongoDBProjectionStore(config)

    await store.initialize_schema()

    collection.create_index.assert_awaited_once_with(
        [("entity_id", IndexDirection.ASC)], unique=True
    )


@pytest.mark.asyncio
async def test_projection_runtime_operations_do_not_create_indexes(config, collection):
    store = MongoDBProjectionStore(config)

    await store.insert("T1", {"title": "Buy milk", "contact_address": None})
    await store.delete("T1")

    collection.create_index.assert_not_awaited()


@pytest.mark.asyncio
async def test_projection_insert_writes_record_document(config, collection):
    store = MongoDBProjectionStore(config)

    await store.insert("T1", {"title": "Buy milk", "contact_address": "a@x.com"})

    collection.insert_one.assert_awaited_once_with(
        {"entity_id": "T1", "title": "Buy milk", "contact_address": "a@x.com"}
    )


@pytest.mark.asyncio
async def test_projection_insert_maps_duplicate_key(config, collection):
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    store = MongoDBProjectionStore(config)

    with pytest.raises(DuplicateKey) as exc_info:
        await store.insert("T1", {"title": "Buy milk"})

    assert exc_info.value.entity_id == "T1"


@pytest.mark.asyncio
async def test_projection_insert_rejects_unknown_fields(config, collection):
    store = MongoDBProjectionStore(config)

    with pytest.raises(ValueError):
        await store.insert("T1", {"priority": "high"})

    collection.insert_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_projection_update_sets_only_given_fields(config, collection):
    store = MongoDBProjectionStore(config)

    await store.update("T1", {"title": "Buy oat milk"})

    collection.update_one.assert_awaited_once_with(
        {"entity_id": "T1"}, {"$set": {"title": "Buy oat milk"}}
    )


@pytest.mark.asyncio
async def test_projection_update_missing_record(config, collection):
    collection.update_one.return_value = SimpleNamespace(matched_count=0, modified_count=0)
    store = MongoDBProjectionStore(config)

    with pytest.raises(NotFound):
        await store.update("T1", {"title": "Buy oat milk"})


@pytest.mark.asyncio
async def test_projection_get(config, collection):
    collection.find_one.return_value = {
        "entity_id": "T1",
        "title": "Buy milk",
        "contact_address": None,
    }
    store = MongoDBProjectionStore(config)

    record = await store.get("T1")

    assert record == ProjectionRecord(entity_id="T1", title="Buy milk")
    collection.find_one.assert_awaited_once_with({"entity_id": "T1"}, projection={"_id": 0})


@pytest.mark.asyncio
async def test_projection_get_missing_record(config):
    store = MongoDBProjectionStore(config)

    with pytest.raises(NotFound):
        await store.get("T1")


@pytest.mark.asyncio
async def test_checkpoint_save_upserts_by_processor(config, collection):
    backend = MongoDBCheckpointBackend(config)
    checkpoint = Checkpoint(
        processor_name="todo_completed_notifier", position=7, events_processed=7, updated_at=NOW
    )

    await backend.save_checkpoint(checkpoint)

    collection.replace_one.assert_awaited_once_with(
        {"processor_name": "todo_completed_notifier"},
        {
            "processor_name": "todo_completed_notifier",
            "position": 7,
            "events_processed": 7,
            "updated_at": NOW,
        },
        upsert=True,
    )


@pytest.mark.asyncio
async def test_checkpoint_uses_journaled_writes(config, collection):
    MongoDBCheckpointBackend(config)

    write_concern = collection.with_options.call_args.kwargs["write_concern"]
    assert write_concern.document == {"j": True}


@pytest.mark.asyncio
async def test_checkpoint_load(config, collection):
    collection.find_one.return_value = {
        "processor_name": "todo_completed_notifier",
        "position": 7,
        "events_processed": 6,
        "updated_at": NOW,
    }
    backend = MongoDBCheckpointBackend(config)

    checkpoint = await backend.load_checkpoint("todo_completed_notifier")

    assert checkpoint == Checkpoint(
        processor_name="todo_completed_notifier", position=7, events_processed=6, updated_at=NOW
    )


@pytest.mark.asyncio
async def test_checkpoint_load_missing(config):
    backend = MongoDBCheckpointBackend(config)

    assert await backend.load_checkpoint("todo_completed_notifier") is None


@pytest.mark.asyncio
async def test_sink_append_stores_cause(config, collection):
    sink = MongoDBEventSink(config)
    event = OutboundEvent(
        aggregate_id="T1",
        type="stakeholder-notified",
        body={"notified_at": NOW},
        caused_by=EventIdentity("T1", 3),
        timestamp=NOW,
    )

    await sink.append(event)

    doc = collection.insert_one.await_args.args[0]
    assert doc["caused_by"] == {"aggregate_id": "T1", "sequence_number": 3}
    assert doc["event_id"] == str(event.id)
    assert doc["type"] == "stakeholder-notified"


@pytest.mark.asyncio
async def test_sink_duplicate_append_is_success(config, collection, caplog):
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    sink = MongoDBEventSink(config)

    await sink.append(
        OutboundEvent(aggregate_id="T1", type="stakeholder-notified", caused_by=("T1", 3))
    )

    assert "already appended" in caplog.text


@pytest.mark.asyncio
async def test_sink_other_failures_propagate(config, collection):
    collection.insert_one.side_effect = TimeoutError()
    sink = MongoDBEventSink(config)

    with pytest.raises(TimeoutError):
        await sink.append(
            OutboundEvent(aggregate_id="T1", type="stakeholder-notified", caused_by=("T1", 3))
        )


@pytest.mark.asyncio
async def test_event_log_reads_in_sequence_order(config, collection):
    cursor = FakeCursor(
        [
            {
                "event_id": "01ARZ3NDEKTSV4RRFFQ69G5FAV",
                "aggregate_id": "T1",
                "type": "todo_added",
                "body": {"title": "Buy milk"},
                "sequence_number": 4,
                "timestamp": NOW,
            },
            {"aggregate_id": "T1", "type": "todo_completed", "sequence_number": 5},
        ]
    )
    collection.find.return_value = cursor
    log = MongoDBEventLog(config)

    events = await log.read(after=3, limit=2)

    collection.find.assert_called_once_with({"sequence_number": {"$gt": 3}})
    assert cursor.sort_spec == [("sequence_number", IndexDirection.ASC)]
    assert cursor.limit_value == 2
    assert [e.sequence_number for e in events] == [4, 5]
    assert str(events[0].id) == "01ARZ3NDEKTSV4RRFFQ69G5FAV"
    assert events[0].timestamp == NOW
    assert events[1].body == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "doc",
    [
        {"aggregate_id": "T1", "body": {}, "sequence_number": 4},
        {"aggregate_id": "T1", "type": "todo_added", "body": ["x"], "sequence_number": 4},
        {"aggregate_id": "T1", "type": "todo_added", "event_id": "nope", "sequence_number": 4},
    ],
)
async def test_event_log_undecodable_document_is_malformed(config, collection, doc):
    collection.find.return_value = FakeCursor([doc])
    log = MongoDBEventLog(config)

    with pytest.raises(MalformedEvent) as exc_info:
        await log.read(after=3, limit=10)

    assert exc_info.value.identity == EventIdentity("T1", 4)


@pytest.mark.asyncio
async def test_event_log_returns_events_before_undecodable_document(config, collection):
    collection.find.return_value = FakeCursor(
        [
            {"aggregate_id": "T1", "type": "todo_added", "sequence_number": 4},
            {"aggregate_id": "T1", "sequence_number": 5},
        ]
    )
    log = MongoDBEventLog(config)

    events = await log.read(after=3, limit=10)

    assert [e.sequence_number for e in events] == [4]
