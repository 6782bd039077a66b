"""
Unit tests for the storage layer.
"""

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone

from maintlog.core.exceptions import NotFoundError
from maintlog.models import ChatMessage, MaintenanceRecord, MessageRole
from maintlog.storage import RecordStorage
from maintlog.storage.keys import safe_segment, timestamp_key

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class TestLocalStorage:
    """Tests for LocalStorage."""

    @pytest.mark.asyncio
    async def test_save_and_load_text(self, storage):
        assert await storage.save("a/b.json", '{"x": 1}')
        assert await storage.load("a/b.json") == b'{"x": 1}'
        assert await storage.exists("a/b.json")

    @pytest.mark.asyncio
    async def test_save_and_load_bytes(self, storage):
        assert await storage.save("uploads/u/1_doc.pdf", b"%PDF-1.4")
        assert await storage.load("uploads/u/1_doc.pdf") == b"%PDF-1.4"

    @pytest.mark.asyncio
    async def test_load_missing(self, storage):
        assert await storage.load("missing.json") is None
        assert not await storage.exists("missing.json")

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        await storage.save("x.json", "{}")
        assert await storage.delete("x.json")
        assert not await storage.delete("x.json")

    @pytest.mark.asyncio
    async def test_list_is_sorted_and_filtered(self, storage):
        await storage.save("dir/b.json", "{}")
        await storage.save("dir/a.json", "{}")
        await storage.save("dir/c.txt", "")
        await storage.save("dir/sub/d.json", "{}")

        assert await storage.list("dir", pattern="*.json") == ["dir/a.json", "dir/b.json"]
        assert await storage.list("dir", pattern="*.json", recursive=True) == [
            "dir/a.json", "dir/b.json", "dir/sub/d.json",
        ]
        assert await storage.list("nothing-here") == []

    @pytest.mark.asyncio
    async def test_path_traversal_is_rejected(self, storage):
        assert not await storage.save("../escape.json", "{}")
        assert await storage.load("../../etc/passwd") is None


class TestKeys:
    """Tests for key helpers."""

    def test_safe_segment_accepts_ids(self):
        assert safe_segment("0b7c1c5e-2d4f-4a51-9d0a-3b1f2e6c7d8e") == "0b7c1c5e-2d4f-4a51-9d0a-3b1f2e6c7d8e"

    @pytest.mark.parametrize("value", ["", "..", "a/b", "a.json", "x y"])
    def test_safe_segment_rejects_others(self, value):
        with pytest.raises(NotFoundError):
            safe_segment(value)

    def test_timestamp_key_orders_like_time(self):
        earlier = timestamp_key(BASE_TIME)
        later = timestamp_key(BASE_TIME + timedelta(microseconds=1))
        assert earlier < later


class TestChatStorage:
    """Tests for ChatStorage message ordering."""

    @pytest.mark.asyncio
    async def test_messages_are_ordered_by_time(self, chat_storage):
        for index, offset in enumerate([3, 1, 2]):
            await chat_storage.append_message(ChatMessage(
                id=f"m{index}",
                session_id="s1",
                role=MessageRole.USER,
                content=f"message {offset}",
                created_at=BASE_TIME + timedelta(seconds=offset),
            ))

        messages = await chat_storage.list_messages("s1")

        assert [m.content for m in messages] == ["message 1", "message 2", "message 3"]

    @pytest.mark.asyncio
    async def test_delete_messages_counts(self, chat_storage):
        for index in range(2):
            await chat_storage.append_message(ChatMessage(
                id=f"m{index}", session_id="s1", role=MessageRole.USER, content="x",
            ))
        assert await chat_storage.delete_messages("s1") == 2
        assert await chat_storage.list_messages("s1") == []


def make_record(record_id, equipment_id="eq-1", days=0, symptom="Noise",
                cause="Loose bolt", solution="Tightened"):
    created = BASE_TIME + timedelta(days=days)
    return MaintenanceRecord(
        id=record_id,
        equipment_id=equipment_id,
        symptom=symptom,
        cause=cause,
        solution=solution,
        created_by="user-1",
        created_at=created,
        updated_at=created,
    )


class TestRecordStorage:
    """Tests for RecordStorage queries."""

    @pytest_asyncio.fixture
    async def records(self, storage):
        record_storage = RecordStorage(storage)
        await record_storage.save(make_record("r1", days=0))
        await record_storage.save(make_record("r2", days=1, equipment_id="eq-2", symptom="Oil LEAK"))
        await record_storage.save(make_record("r3", days=2, solution="Replaced seal"))
        return record_storage

    @pytest.mark.asyncio
    async def test_query_newest_first(self, records):
        assert [r.id for r in await records.query()] == ["r3", "r2", "r1"]

    @pytest.mark.asyncio
    async def test_query_by_equipment(self, records):
        assert [r.id for r in await records.query(equipment_id="eq-1")] == ["r3", "r1"]

    @pytest.mark.asyncio
    async def test_query_by_inclusive_range(self, records):
        result = await records.query(
            created_from=BASE_TIME + timedelta(days=1),
            created_to=BASE_TIME + timedelta(days=2),
        )
        assert [r.id for r in result] == ["r3", "r2"]

    @pytest.mark.asyncio
    async def test_query_with_only_lower_bound(self, records):
        result = await records.query(created_from=BASE_TIME + timedelta(days=2))
        assert [r.id for r in result] == ["r3"]

    @pytest.mark.asyncio
    async def test_query_keyword_is_case_insensitive(self, records):
        assert [r.id for r in await records.query(keyword="leak")] == ["r2"]
        assert [r.id for r in await records.query(keyword="SEAL")] == ["r3"]

    @pytest.mark.asyncio
    async def test_query_limit(self, records):
        assert [r.id for r in await records.query(limit=1)] == ["r3"]

    @pytest.mark.asyncio
    async def test_has_records_for_equipment(self, records):
        assert await records.has_records_for_equipment("eq-2")
        assert not await records.has_records_for_equipment("eq-3")
