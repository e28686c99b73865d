"""Unit tests for authentication and role routing.

Tests cover:
- GET/POST /login (failure, success per role, next handling, inactive account)
- GET /logout
- GET / (role home, missing profile)
- Route guards for /admin/* and /member/*
"""

import logging
import uuid
from unittest.mock import MagicMock, patch

import pytest

from oceancollect.models_db import UserRole, ADMIN_ROLES


class MockUser:
    """Mock user that satisfies Flask-Login requirements."""

    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.email = kwargs.get('email', 'user@test.com')
        self.role = kwargs.get('role', UserRole.MEMBER)
        self.profile = kwargs.get('profile', MagicMock(first_name='Test', full_name='Test User', initials='TU'))
        self.is_admin = self.role in ADMIN_ROLES
        self.is_active = True
        self.is_authenticated = True
        self.is_anonymous = False

    def get_id(self):
        return str(self.id)


def _setup_session(client, user, mock_auth_uow):
    auth_uow = MagicMock()
    auth_uow.users.get_by_id.return_value = user
    mock_auth_uow.return_value = auth_uow

    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.id)

    return auth_uow


# ===================================================================
#  LOGIN / LOGOUT
# ===================================================================

class TestLogin:

    def test_login_page_renders(self, client):
        response = client.get('/login')
        assert response.status_code == 200
        assert 'Connexion' in response.get_data(as_text=True)

    def test_wrong_password_rerenders_with_error(self, client, db_session, user_factory):
        user_factory.create(db_session, email='membre@ocean.fr', password='secret123')

        response = client.post('/login', data={'email': 'membre@ocean.fr', 'password': 'mauvais'})

        assert response.status_code == 200
        assert 'Adresse e-mail ou mot de passe incorrect.' in response.get_data(as_text=True)

    def test_unknown_email(self, client, db_session):
        response = client.post('/login', data={'email': 'personne@ocean.fr', 'password': 'x'})
        assert response.status_code == 200
        assert 'mot de passe incorrect' in response.get_data(as_text=True)

    def test_failed_login_is_logged(self, client, db_session, caplog):
        with caplog.at_level(logging.WARNING, logger='oceancollect'):
            client.post('/login', data={'email': 'Personne@Ocean.fr', 'password': 'x'})

        assert 'Falha de login para personne@ocean.fr' in caplog.text

    def test_inactive_account_rejected(self, client, db_session, user_factory):
        user_factory.create(db_session, email='inactif@ocean.fr', password='secret123', is_active=False)

        response = client.post('/login', data={'email': 'inactif@ocean.fr', 'password': 'secret123'})
        assert response.status_code == 200

    @pytest.mark.parametrize('role, home', [
        (UserRole.SUPER_ADMIN, '/admin/dashboard'),
        (UserRole.ADMIN, '/admin/dashboard'),
        (UserRole.MANAGER, '/member/dashboard'),
        (UserRole.MEMBER, '/member/dashboard'),
        (UserRole.OBSERVER, '/member/dashboard'),
    ])
    def test_success_redirects_to_role_home(self, client, db_session, user_factory, role, home):
        user_factory.create(db_session, email='role@ocean.fr', password='secret123', role=role)

        response = client.post('/login', data={'email': 'Role@Ocean.fr ', 'password': 'secret123'})

        assert response.status_code == 302
        assert response.location.endswith(home)

    def test_success_honours_relative_next(self, client, db_session, user_factory):
        user_factory.create(db_session, email='admin@ocean.fr', password='secret123', role=UserRole.ADMIN)

        response = client.post('/login?next=/admin/questions',
                               data={'email': 'admin@ocean.fr', 'password': 'secret123'})

        assert response.location.endswith('/admin/questions')

    def test_success_ignores_external_next(self, client, db_session, user_factory):
        user_factory.create(db_session, email='admin@ocean.fr', password='secret123', role=UserRole.ADMIN)

        response = client.post('/login?next=https://evil.example.com/',
                               data={'email': 'admin@ocean.fr', 'password': 'secret123'})

        assert 'evil.example.com' not in response.location
        assert response.location.endswith('/admin/dashboard')

    def test_success_flashes(self, client, db_session, user_factory):
        user_factory.create(db_session, email='membre@ocean.fr', password='secret123')

        response = client.post('/login', data={'email': 'membre@ocean.fr', 'password': 'secret123'},
                               follow_redirects=True)

        assert 'Connexion réussie !' in response.get_data(as_text=True)

    @patch('oceancollect.auth.get_uow')
    def test_authenticated_user_sent_to_root(self, mock_auth_uow, client):
        _setup_session(client, MockUser(), mock_auth_uow)

        response = client.get('/login')
        assert response.status_code == 302
        assert response.location.endswith('/')

    @patch('oceancollect.auth.get_uow')
    def test_logout(self, mock_auth_uow, client):
        _setup_session(client, MockUser(), mock_auth_uow)

        response = client.get('/logout')

        assert response.status_code == 302
        assert '/login' in response.location
        with client.session_transaction() as sess:
            assert '_user_id' not in sess


# ===================================================================
#  ROOT ROUTING
# ===================================================================

class TestRoot:

    def test_unauthenticated_goes_to_login(self, client):
        response = client.get('/')
        assert response.status_code == 302
        assert '/login' in response.location

    @pytest.mark.parametrize('role, home', [
        (UserRole.SUPER_ADMIN, '/admin/dashboard'),
        (UserRole.ADMIN, '/admin/dashboard'),
        (UserRole.MANAGER, '/member/dashboard'),
        (UserRole.MEMBER, '/member/dashboard'),
        (UserRole.OBSERVER, '/member/dashboard'),
    ])
    @patch('oceancollect.auth.get_uow')
    def test_role_home(self, mock_auth_uow, client, role, home):
        _setup_session(client, MockUser(role=role), mock_auth_uow)

        response = client.get('/')
        assert response.location.endswith(home)

    @patch('oceancollect.auth.get_uow')
    def test_missing_profile_signs_out(self, mock_auth_uow, client):
        _setup_session(client, MockUser(role=None, profile=None), mock_auth_uow)

        response = client.get('/', follow_redirects=True)

        body = response.get_data(as_text=True)
        assert 'Erreur critique: Impossible de charger le profil.' in body
        with client.session_transaction() as sess:
            assert '_user_id' not in sess


# ===================================================================
#  GUARDS
# ===================================================================

class TestGuards:

    @pytest.mark.parametrize('path', [
        '/admin/dashboard', '/admin/users', '/admin/establishments', '/admin/questions', '/admin/templates',
        '/member/dashboard', '/member/propose-question', '/member/contributions',
    ])
    def test_unauthenticated_redirected_to_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert '/login' in response.location

    @patch('oceancollect.auth.get_uow')
    def test_member_cannot_reach_admin(self, mock_auth_uow, client):
        _setup_session(client, MockUser(role=UserRole.MEMBER), mock_auth_uow)

        response = client.get('/admin/dashboard')

        assert response.status_code == 302
        assert response.location.endswith('/member/dashboard')

    @patch('oceancollect.auth.get_uow')
    def test_manager_cannot_reach_admin(self, mock_auth_uow, client):
        _setup_session(client, MockUser(role=UserRole.MANAGER), mock_auth_uow)

        response = client.post('/admin/users/new', data={})
        assert response.location.endswith('/member/dashboard')

    @patch('oceancollect.auth.get_uow')
    def test_admin_can_reach_member_area(self, mock_auth_uow, client):
        _setup_session(client, MockUser(role=UserRole.ADMIN), mock_auth_uow)

        response = client.get('/member/dashboard')
        assert response.status_code == 200


@pytest.fixture
def enabled_limiter():
    from oceancollect.infrastructure.security import limiter
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


class TestLoginThrottle:

    def _bad_login(self, client, forwarded_for):
        return client.post('/login', data={'email': 'intrus@ocean.test', 'password': 'x'},
                           headers={'X-Forwarded-For': forwarded_for})

    def test_rotating_forwarded_for_is_still_throttled(self, client, db_session, enabled_limiter):
        # the load balancer appends the real client address after whatever the client sent
        statuses = [
            self._bad_login(client, f'10.0.0.{i}, 203.0.113.9').status_code
            for i in range(25)
        ]

        assert statuses[:20] == [200] * 20
        assert statuses[20:] == [429] * 5

    def test_distinct_clients_have_separate_budgets(self, client, db_session, enabled_limiter):
        for _ in range(20):
            self._bad_login(client, '203.0.113.9')

        assert self._bad_login(client, '203.0.113.9').status_code == 429
        assert self._bad_login(client, '198.51.100.7').status_code == 200
