import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.infrastructure.assistant.chat_relay import ChatRelay
from app.infrastructure.db.base import Base
from app.infrastructure.db.models import Lesson, QuestionModel, Subject, UserProfile
from app.infrastructure.game_engine.session_manager import GameSessionManager
from app.infrastructure.repositories.progress_repository import SessionScopedPointsSink
from app.presentation.dependencies import get_chat_relay, get_db, get_game_manager
from main import app
from tests.doubles import FakeLLM, ManualScheduler

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


# ---------------------------
# Database fixtures
# ---------------------------

@pytest.fixture
def db():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="student", points=0, email=None):
        counter["n"] += 1
        user = UserProfile(
            email=email or f"user{counter['n']}@studyforge.test",
            full_name=f"User {counter['n']}",
            role=role,
            points=points,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_subject(db):
    def _make(name="Chemistry", name_ar="الكيمياء"):
        subject = Subject(name=name, name_ar=name_ar, icon="flask", color="#10b981")
        db.add(subject)
        db.commit()
        db.refresh(subject)
        return subject

    return _make


@pytest.fixture
def make_db_question(db):
    def _make(subject_id, text="What is H2O?", answer="Water", options=("Water", "Salt"),
              question_type="multiple_choice", difficulty=1, points=10):
        question = QuestionModel(
            subject_id=subject_id,
            question_text=text,
            question_type=question_type,
            options=list(options),
            correct_answer=answer,
            explanation="Two hydrogens, one oxygen",
            difficulty_level=difficulty,
            points=points,
        )
        db.add(question)
        db.commit()
        db.refresh(question)
        return question

    return _make


@pytest.fixture
def make_lesson(db):
    def _make(subject_id, title="Atoms", title_ar="الذرات", published=True, points_reward=10,
              description=None, difficulty=1):
        lesson = Lesson(
            subject_id=subject_id,
            title=title,
            title_ar=title_ar,
            description=description,
            content={"sections": [{"type": "text", "content": "Atoms are small."}]},
            difficulty_level=difficulty,
            points_reward=points_reward,
            is_published=published,
        )
        db.add(lesson)
        db.commit()
        db.refresh(lesson)
        return lesson

    return _make


# ---------------------------
# HTTP fixtures
# ---------------------------

@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def game_manager(scheduler, session_factory):
    manager = GameSessionManager(
        points_sink=SessionScopedPointsSink(session_factory),
        scheduler=scheduler,
    )
    yield manager
    manager.discard_all()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(db, game_manager, fake_llm):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_game_manager] = lambda: game_manager
    app.dependency_overrides[get_chat_relay] = lambda: ChatRelay(fake_llm)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(user):
        return {"X-User-Id": str(user.id)}

    return _headers
