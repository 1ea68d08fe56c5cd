# tests/test_modules/test_moderation/conftest.py

import asyncio
from collections import defaultdict
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.modules.moderation.service import ModerationService
from app.modules.reports.service import ReportService

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ============================================
# IN-MEMORY STORAGE
# ============================================

class FakeDatabase:
    """
    Committed state plus one lock per user row.

    A repository holds the row lock from its first write until commit or
    rollback, the way an UPDATE holds it in Postgres.
    """

    def __init__(self):
        self.users = {}
        self.items = {}
        self.sessions = {}
        self.warnings = []
        self.reports = []
        self.row_locks = defaultdict(asyncio.Lock)

    def add_user(self, warning_count=0):
        user_id = uuid4()
        self.users[user_id] = {
            "warning_count": warning_count,
            "is_banned": False,
            "ban_reason": None,
            "banned_at": None,
        }
        return user_id

    def add_item(self, seller_id, is_available=True):
        item_id = uuid4()
        self.items[item_id] = {"seller_id": seller_id, "is_available": is_available}
        return item_id

    def add_session(self, user_id):
        session_id = uuid4()
        self.sessions[session_id] = user_id
        return session_id


class FakeModerationRepository:
    """Stages writes like a single transaction; `failures` injects errors per method."""

    def __init__(self, database, failures=None):
        self.database = database
        self.failures = failures or {}
        self.commits = 0
        self.rollbacks = 0
        self._held = set()
        self._reset_stage()

    def _reset_stage(self):
        self._counts = {}
        self._bans = {}
        self._delist = set()
        self._drop_sessions = set()
        self._warnings = []
        self._reports = []

    def _maybe_fail(self, name):
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)

    async def _lock(self, user_id):
        if user_id not in self._held:
            await self.database.row_locks[user_id].acquire()
            self._held.add(user_id)

    def _release(self):
        for user_id in self._held:
            self.database.row_locks[user_id].release()
        self._held.clear()

    async def increment_warning_count(self, user_id):
        self._maybe_fail("increment_warning_count")
        if user_id not in self.database.users:
            return None
        await self._lock(user_id)
        # Let other tasks interleave between lock and read
        await asyncio.sleep(0)
        current = self._counts.get(user_id, self.database.users[user_id]["warning_count"])
        self._counts[user_id] = current + 1
        return current + 1

    async def add_warning(self, user_id, reason, created_at):
        self._maybe_fail("add_warning")
        self._warnings.append({"user_id": user_id, "reason": reason, "created_at": created_at})

    async def mark_banned(self, user_id, reason, banned_at):
        self._maybe_fail("mark_banned")
        if user_id not in self.database.users:
            return False
        await self._lock(user_id)
        self._bans[user_id] = (reason, banned_at)
        return True

    async def delist_items(self, seller_id):
        self._maybe_fail("delist_items")
        matched = {
            item_id for item_id, item in self.database.items.items()
            if item["seller_id"] == seller_id and item["is_available"]
        }
        self._delist |= matched
        return len(matched)

    async def delete_sessions(self, user_id):
        self._maybe_fail("delete_sessions")
        matched = {sid for sid, owner in self.database.sessions.items() if owner == user_id}
        self._drop_sessions |= matched
        return len(matched)

    async def get_moderation_state(self, user_id):
        self._maybe_fail("get_moderation_state")
        user = self.database.users.get(user_id)
        return (user["warning_count"], user["is_banned"]) if user else None

    async def commit(self):
        self._maybe_fail("commit")
        for user_id, count in self._counts.items():
            self.database.users[user_id]["warning_count"] = count
        for user_id, (reason, banned_at) in self._bans.items():
            self.database.users[user_id].update(
                is_banned=True, ban_reason=reason, banned_at=banned_at
            )
        for item_id in self._delist:
            self.database.items[item_id]["is_available"] = False
        for session_id in self._drop_sessions:
            self.database.sessions.pop(session_id, None)
        self.database.warnings.extend(self._warnings)
        self.database.reports.extend(self._reports)
        self.commits += 1
        self._reset_stage()
        self._release()

    async def rollback(self):
        self.rollbacks += 1
        self._reset_stage()
        self._release()


class FakeReportRepository:
    """Writes reports into the moderation repository's transaction, like a shared AsyncSession."""

    def __init__(self, moderation_repo):
        self.moderation_repo = moderation_repo

    async def add(self, report):
        self.moderation_repo._maybe_fail("add_report")
        database = self.moderation_repo.database
        if report.reported_user_id and report.reported_user_id not in database.users:
            raise IntegrityError("INSERT INTO report ...", {}, Exception("foreign key violation"))
        self.moderation_repo._reports.append(report)
        return report

    async def commit(self):
        await self.moderation_repo.commit()

    async def rollback(self):
        await self.moderation_repo.rollback()


# ============================================
# FIXTURES
# ============================================

@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def make_service(database):
    """Build a service on a fresh repository, one per simulated request."""
    def _make(failures=None, **kwargs):
        repo = FakeModerationRepository(database, failures=failures)
        kwargs.setdefault("ban_threshold", 3)
        kwargs.setdefault("max_retries", 2)
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        return ModerationService(repo, **kwargs), repo
    return _make


@pytest.fixture
def make_report_service(make_service):
    """Report and moderation services writing through one transaction."""
    def _make(failures=None):
        moderation_service, repo = make_service(failures=failures)
        return ReportService(FakeReportRepository(repo), moderation_service), repo
    return _make
