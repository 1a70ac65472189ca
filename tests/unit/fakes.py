"""
In-memory repositories for tests that need real state transitions.

Every method yields to the event loop once, so concurrent use cases driven
with asyncio.gather interleave between reads and writes the way two
requests against a database would.
"""

import asyncio
from typing import Dict, List

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SessionRevocation


class _Store:
    def __init__(self):
        self.users: Dict = {}
        self.role_grants: Dict = {}
        self.sessions: Dict = {}
        self.refresh_tokens: Dict = {}
        self.session_revocations: Dict = {}
        self.audit_events: List = []
        self.login_attempts: List = []


class FakeUserRepository:
    def __init__(self, store: _Store):
        self.store = store

    async def get_by_email(self, email):
        await asyncio.sleep(0)
        return next(
            (u for u in self.store.users.values() if u.email == email and u.deleted_at is None),
            None,
        )

    async def get_by_id(self, user_id):
        await asyncio.sleep(0)
        return self.store.users.get(user_id)

    async def create(self, user):
        self.store.users[user.id] = user
        return user

    async def update(self, user):
        self.store.users[user.id] = user
        return user


class FakeRoleGrantRepository:
    def __init__(self, store: _Store):
        self.store = store

    async def get_by_user_and_role(self, user_id, role):
        await asyncio.sleep(0)
        return self.store.role_grants.get((user_id, role))

    async def create(self, grant):
        self.store.role_grants[(grant.user_id, grant.role)] = grant
        return grant

    async def update(self, grant):
        return await self.create(grant)


class FakeSessionRepository:
    def __init__(self, store: _Store):
        self.store = store

    async def get_by_id(self, session_id):
        await asyncio.sleep(0)
        return self.store.sessions.get(session_id)

    async def get_active_by_user_id(self, user_id, now):
        await asyncio.sleep(0)
        active = [
            s
            for s in self.store.sessions.values()
            if s.user_id == user_id
            and s.revoked_at is None
            and s.deleted_at is None
            and s.expires_at > now
        ]
        return sorted(active, key=lambda s: (s.issued_at, str(s.id)))

    async def create(self, session):
        self.store.sessions[session.id] = session
        return session

    async def update(self, session):
        self.store.sessions[session.id] = session
        return session

    async def revoke_if_active(self, session_id, reason, now):
        await asyncio.sleep(0)
        session = self.store.sessions.get(session_id)
        if session is None or session.revoked_at is not None or session.deleted_at is not None:
            return False
        session.revoked_at = now
        session.revoked_reason = reason
        return True


class FakeRefreshTokenRepository:
    def __init__(self, store: _Store):
        self.store = store

    async def get_by_token_hash(self, token_hash):
        await asyncio.sleep(0)
        return next(
            (t for t in self.store.refresh_tokens.values() if t.token_hash == token_hash),
            None,
        )

    async def create(self, token):
        self.store.refresh_tokens[token.id] = token
        return token

    async def mark_rotated(self, token_id, now):
        await asyncio.sleep(0)
        # Check and set with no await in between
        token = self.store.refresh_tokens[token_id]
        if token.rotated_at is not None or token.revoked_at is not None:
            return False
        token.rotated_at = now
        return True

    async def revoke_by_session_ids(self, session_ids, reason, now):
        await asyncio.sleep(0)
        count = 0
        for token in self.store.refresh_tokens.values():
            if token.session_id in session_ids and token.revoked_at is None:
                token.revoked_at = now
                token.revoked_reason = reason
                count += 1
        return count


class FakeSessionRevocationRepository:
    def __init__(self, store: _Store):
        self.store = store

    async def get_by_session_id(self, session_id):
        return self.store.session_revocations.get(session_id)

    async def upsert(self, session_id, revoked_at, revoked_by, reason):
        record = self.store.session_revocations.get(session_id)
        if record is None:
            record = SessionRevocation(
                session_id=session_id,
                revoked_at=revoked_at,
                revoked_by=revoked_by,
                reason=reason,
            )
            self.store.session_revocations[session_id] = record
        else:
            record.revoked_at = revoked_at
            record.revoked_by = revoked_by
            record.reason = reason
        return record


class _AppendOnly:
    def __init__(self, items: List):
        self.items = items

    async def create(self, entity):
        self.items.append(entity)
        return entity


class FakeUnitOfWork(UnitOfWork):
    """Writes land in the shared store immediately; commit only counts calls"""

    def __init__(self, store: _Store = None):
        self.store = store or _Store()
        self.commits = 0
        self.users = FakeUserRepository(self.store)
        self.role_grants = FakeRoleGrantRepository(self.store)
        self.sessions = FakeSessionRepository(self.store)
        self.refresh_tokens = FakeRefreshTokenRepository(self.store)
        self.session_revocations = FakeSessionRevocationRepository(self.store)
        self.audit_events = _AppendOnly(self.store.audit_events)
        self.login_attempts = _AppendOnly(self.store.login_attempts)

    def sibling(self) -> "FakeUnitOfWork":
        """Another unit of work over the same store, as a second request would get"""
        return FakeUnitOfWork(self.store)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        pass
