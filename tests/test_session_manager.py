import pytest

from app.application.errors import DataUnavailable, SessionNotFound
from app.infrastructure.game_engine.models import GameState, UserContext
from app.infrastructure.game_engine.session_manager import GameSessionManager
from tests.doubles import FakeQuestionStore, ManualScheduler, RecordingSink, make_question

ALICE = UserContext(user_id=1)
BOB = UserContext(user_id=2)


@pytest.fixture
def manager():
    return GameSessionManager(points_sink=RecordingSink(), scheduler=ManualScheduler())


@pytest.fixture
def store():
    return FakeQuestionStore([make_question(1), make_question(2)])


def test_create_registers_ready_session(manager, store):
    live = manager.create(3, ALICE, store)

    assert live.engine.state is GameState.READY
    assert live.engine.user == ALICE
    assert manager.get(live.session_id, ALICE.user_id) is live
    assert len(manager) == 1


def test_create_without_questions_registers_nothing(manager):
    with pytest.raises(DataUnavailable):
        manager.create(3, ALICE, FakeQuestionStore([]))
    assert len(manager) == 0


def test_sessions_are_private(manager, store):
    live = manager.create(3, ALICE, store)
    with pytest.raises(SessionNotFound):
        manager.get(live.session_id, BOB.user_id)
    with pytest.raises(SessionNotFound):
        manager.get("missing", ALICE.user_id)


def test_new_session_discards_the_old_one(store):
    scheduler = ManualScheduler()
    manager = GameSessionManager(points_sink=RecordingSink(), scheduler=scheduler)
    old = manager.create(3, ALICE, store)
    old.engine.start_session("timed")
    tick = scheduler.pending[0]

    manager.create(3, ALICE, store)

    assert tick.cancelled
    assert len(manager) == 1
    with pytest.raises(SessionNotFound):
        manager.get(old.session_id, ALICE.user_id)


def test_discard_and_discard_all(manager, store):
    alice = manager.create(3, ALICE, store)
    manager.create(3, BOB, store)

    manager.discard(alice.session_id, ALICE.user_id)
    assert len(manager) == 1
    with pytest.raises(SessionNotFound):
        manager.discard(alice.session_id, ALICE.user_id)

    manager.discard_all()
    assert len(manager) == 0
