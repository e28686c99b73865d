"""Tests for DashboardService."""
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from oceancollect.application.dashboard_service import DashboardService
from oceancollect.repositories.unit_of_work import UnitOfWork
from oceancollect.models_db import QuestionStatus


class TestDashboardService:

    def test_get_kpis(self, db_session, user_factory, establishment_factory, question_factory, template_factory):
        user_factory.create(db_session)
        user_factory.create(db_session)
        establishment_factory.create(db_session)
        question_factory.create(db_session, status=QuestionStatus.VALIDATED)
        question_factory.create(db_session, status=QuestionStatus.PROPOSAL)
        template_factory.create(db_session)

        kpis = DashboardService(UnitOfWork(db_session)).get_kpis()

        assert kpis == {'users': 2, 'establishments': 1, 'validated_questions': 1, 'templates': 1}

    def test_failing_count_does_not_hide_others(self):
        uow = MagicMock()
        uow.users.count_profiles.return_value = 3
        uow.establishments.count.side_effect = OperationalError('SELECT', {}, Exception('timeout'))
        uow.questions.count_by_status.return_value = 7
        uow.templates.count.return_value = 2

        kpis = DashboardService(uow).get_kpis()

        assert kpis == {'users': 3, 'establishments': None, 'validated_questions': 7, 'templates': 2}
        uow.rollback.assert_called_once()
