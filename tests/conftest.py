"""
Shared fixtures: Flask app/client on an in-memory SQLite database and model factories.
"""
import os

# Must be set before the app is imported (config is read at import time)
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('RATELIMIT_ENABLED', 'false')
os.environ.setdefault('SECRET_KEY', 'test-secret-key')

import uuid
from datetime import datetime, timedelta

import pytest
from werkzeug.security import generate_password_hash

from oceancollect.app import app as flask_app
from oceancollect import database
from oceancollect.models_db import (
    Base, User, Profile, UserRole,
    Establishment, EstablishmentStatus,
    Question, QuestionType, QuestionStatus,
    QuestionTemplate, QuestionTemplateItem,
)


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    flask_app.config['WTF_CSRF_ENABLED'] = False
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session():
    """Session bound to a fresh schema; the schema is rebuilt after each test."""
    Base.metadata.create_all(bind=database.engine)
    session = database.db_session()
    yield session
    database.db_session.remove()
    Base.metadata.drop_all(bind=database.engine)
    Base.metadata.create_all(bind=database.engine)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

_clock = {'now': datetime(2024, 1, 1, 12, 0, 0)}


def _next_timestamp():
    """Strictly increasing created_at so newest-first ordering is deterministic."""
    _clock['now'] += timedelta(seconds=1)
    return _clock['now']


class UserFactory:

    @staticmethod
    def create(session, email=None, password='password123', role=UserRole.MEMBER,
               first_name='Test', last_name='User', with_profile=True, is_active=True):
        user = User(
            id=uuid.uuid4(),
            email=email or f'user-{uuid.uuid4().hex[:8]}@test.com',
            password_hash=generate_password_hash(password),
            is_active=is_active,
        )
        if with_profile:
            user.profile = Profile(
                first_name=first_name,
                last_name=last_name,
                role=role,
                created_at=_next_timestamp(),
            )
        session.add(user)
        session.commit()
        return user


class EstablishmentFactory:

    @staticmethod
    def create(session, name=None, status=EstablishmentStatus.ACTIVE, created_by=None, **kwargs):
        est = Establishment(
            id=uuid.uuid4(),
            name=name or f'Lycée {uuid.uuid4().hex[:6]}',
            type=kwargs.pop('type', 'Lycée'),
            status=status,
            created_by=created_by,
            created_at=_next_timestamp(),
            **kwargs,
        )
        session.add(est)
        session.commit()
        return est


class QuestionFactory:

    @staticmethod
    def create(session, question_text=None, question_type=QuestionType.SHORT_TEXT,
               status=QuestionStatus.VALIDATED, category=None, created_by=None, options=None):
        question = Question(
            id=uuid.uuid4(),
            question_text=question_text or f'Question {uuid.uuid4().hex[:6]} ?',
            question_type=question_type,
            category=category,
            options=options,
            status=status,
            created_by=created_by,
            created_at=_next_timestamp(),
        )
        session.add(question)
        session.commit()
        return question


class TemplateFactory:

    @staticmethod
    def create(session, title=None, description=None, created_by=None):
        template = QuestionTemplate(
            id=uuid.uuid4(),
            title=title or f'Modèle {uuid.uuid4().hex[:6]}',
            description=description,
            version=1,
            created_by=created_by,
            created_at=_next_timestamp(),
        )
        session.add(template)
        session.commit()
        return template


class TemplateItemFactory:

    @staticmethod
    def create(session, template, question, item_order=0):
        item = QuestionTemplateItem(
            template_id=template.id,
            question_id=question.id,
            item_order=item_order,
        )
        session.add(item)
        session.commit()
        return item


@pytest.fixture
def user_factory():
    return UserFactory


@pytest.fixture
def establishment_factory():
    return EstablishmentFactory


@pytest.fixture
def question_factory():
    return QuestionFactory


@pytest.fixture
def template_factory():
    return TemplateFactory


@pytest.fixture
def template_item_factory():
    return TemplateItemFactory


# ---------------------------------------------------------------------------
# Authenticated clients on the real (SQLite) database
# ---------------------------------------------------------------------------

def login_as(client, user_id):
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user_id)
        sess['_fresh'] = True


@pytest.fixture
def admin_client(client, db_session, user_factory):
    admin = user_factory.create(db_session, email='admin@ocean.test', role=UserRole.ADMIN,
                                first_name='Alice', last_name='Admin')
    client.admin_id = admin.id
    login_as(client, admin.id)
    return client


@pytest.fixture
def member_client(client, db_session, user_factory):
    member = user_factory.create(db_session, email='membre@ocean.test', role=UserRole.MEMBER,
                                 first_name='Marc', last_name='Membre')
    client.member_id = member.id
    login_as(client, member.id)
    return client
