# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Fakes for the auth provider, the repositories and the Tk timer, so the
# resolver and the guard run without network or display.
# =============================================================================

import io
import os
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# entregas.config is cached on first use; keep it offline and out of cwd.

os.environ.setdefault("SUPABASE_URL", "")
os.environ.setdefault("SUPABASE_ANON_KEY", "")
os.environ.setdefault(
    "LOG_FILE", os.path.join(tempfile.gettempdir(), "entregas-tests.log"),
)

import itertools
from typing import Callable, Optional

import pytest

from entregas.exceptions import (
    AuthLookupFailure,
    MembershipLookupFailure,
    ProfileNotFound,
    RepositoryError,
    UserLookupFailure,
)
from entregas.logger import StructuredLogger
from entregas.models.enums import AuthEvent
from entregas.models.membership import StoreMembership
from entregas.models.profile import ResolvedProfile
from entregas.models.user import UserRecord, UserSession
from entregas.services.role_resolver import RoleResolver
from entregas.utils.subscription import Subscription


# =============================================================================
# Fakes
# =============================================================================

class FakeAuthProvider:
    """In-memory ``AuthProvider``.

    ``on_lookup`` runs inside ``get_current_user`` before it returns,
    which lets a test fire a session event mid-resolution.
    """

    def __init__(self, user: Optional[UserSession] = None):
        self.user = user
        self.error: Optional[str] = None
        self.on_lookup: Optional[Callable[[], None]] = None
        self.sign_out_calls = 0
        self._listeners = []

    def get_current_user(self):
        if self.on_lookup is not None:
            hook, self.on_lookup = self.on_lookup, None
            hook()
        if self.error is not None:
            raise AuthLookupFailure(self.error)
        return self.user

    def on_auth_state_change(self, listener):
        self._listeners.append(listener)
        return Subscription(lambda: self._listeners.remove(listener), name="fake-auth")

    def sign_out(self):
        self.sign_out_calls += 1
        self.user = None
        self.emit(AuthEvent.SIGNED_OUT, None)

    def emit(self, event, session):
        for listener in list(self._listeners):
            listener(event, session)

    @property
    def listener_count(self):
        return len(self._listeners)


class FakeUserRepo:
    """``usuarios`` keyed by uid.  Missing rows raise ``ProfileNotFound``;
    setting ``error`` makes the query itself fail.
    """

    def __init__(self):
        self.records: dict[str, UserRecord] = {}
        self.error: Optional[str] = None
        self.write_error: Optional[str] = None
        self.lookups = 0
        self.updates: list[tuple[str, dict]] = []

    def add(self, uid, **fields):
        record = UserRecord(uid=uid, **fields)
        self.records[uid] = record
        return record

    def get_by_uid(self, uid):
        self.lookups += 1
        if self.error is not None:
            raise UserLookupFailure(self.error)
        if uid not in self.records:
            raise ProfileNotFound(f"no usuarios row for uid={uid}")
        return self.records[uid]

    def update_profile(self, uid, changes):
        if self.write_error is not None:
            raise RepositoryError(self.write_error)
        self.updates.append((uid, dict(changes)))


class FakeMembershipRepo:
    """``loja_associada`` rows per uid, filtered by status like the real query."""

    def __init__(self):
        self.rows: dict[str, list[StoreMembership]] = {}
        self.failures_left = 0
        self.lookups = 0
        self.on_lookup: Optional[Callable[[], None]] = None

    def add(self, uid, id_loja, funcao, status="ativo"):
        membership = StoreMembership(
            uid_usuario=uid, id_loja=id_loja, funcao=funcao, status_vinculacao=status,
        )
        self.rows.setdefault(uid, []).append(membership)
        return membership

    def list_active_for_user(self, uid, status="ativo"):
        self.lookups += 1
        if self.on_lookup is not None:
            hook, self.on_lookup = self.on_lookup, None
            hook()
        if self.failures_left > 0:
            self.failures_left -= 1
            raise MembershipLookupFailure("connection reset by peer")
        return [m for m in self.rows.get(uid, []) if m.status_vinculacao == status]


class FakeScheduler:
    """Tk-shaped ``after`` / ``after_cancel`` driven by hand."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.jobs: dict[str, tuple[int, Callable[[], None]]] = {}
        self.cancelled: list[str] = []

    def after(self, ms, func):
        job_id = f"after#{next(self._ids)}"
        self.jobs[job_id] = (ms, func)
        return job_id

    def after_cancel(self, job_id):
        self.cancelled.append(job_id)
        self.jobs.pop(job_id, None)

    def run_all(self):
        jobs, self.jobs = self.jobs, {}
        for _, func in jobs.values():
            func()


class FakeProfileSource:
    """Stand-in for the resolver as seen by an ``AccessGuard``."""

    def __init__(self, profile: Optional[ResolvedProfile] = None):
        self.profile = profile or ResolvedProfile()
        self._listeners = []

    def subscribe(self, listener):
        self._listeners.append(listener)
        return Subscription(lambda: self._listeners.remove(listener), name="fake-source")

    def publish(self, profile):
        self.profile = profile
        for listener in list(self._listeners):
            listener(profile)

    @property
    def listener_count(self):
        return len(self._listeners)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def logger(request, tmp_path):
    """Logger writing to an in-memory stream and a file under tmp_path."""
    return StructuredLogger(
        name=f"tests.{request.node.name}",
        stream=io.StringIO(),
        log_file=str(tmp_path / "test.log"),
    )


@pytest.fixture
def session():
    return UserSession(id="user-1", email="ana@example.com")


@pytest.fixture
def auth():
    return FakeAuthProvider()


@pytest.fixture
def user_repo():
    return FakeUserRepo()


@pytest.fixture
def membership_repo():
    return FakeMembershipRepo()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def source():
    return FakeProfileSource()


@pytest.fixture
def resolver(auth, user_repo, membership_repo, logger):
    resolver = RoleResolver(
        auth=auth,
        user_repo=user_repo,
        membership_repo=membership_repo,
        logger=logger,
    )
    yield resolver
    resolver.stop()
