"""Admin dashboard KPIs."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from oceancollect.models_db import QuestionStatus

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self, uow):
        self._uow = uow

    def get_kpis(self):
        """
        Counts shown on the admin dashboard.

        A failing count is logged and reported as None so the other cards
        still render.
        """
        counters = {
            'users': self._uow.users.count_profiles,
            'establishments': self._uow.establishments.count,
            'validated_questions': lambda: self._uow.questions.count_by_status(QuestionStatus.VALIDATED),
            'templates': self._uow.templates.count,
        }
        kpis = {}
        for key, counter in counters.items():
            try:
                kpis[key] = counter()
            except SQLAlchemyError as e:
                self._uow.rollback()
                logger.error(f'Dashboard KPI {key} failed: {e}')
                kpis[key] = None
        return kpis
