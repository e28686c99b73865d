"""
Simple Dependency Injection container using Flask's g object.

Factory functions create services with their dependencies; the UnitOfWork
is cached per-request in Flask g.
"""
from flask import g

from oceancollect.database import get_db
from oceancollect.repositories.unit_of_work import UnitOfWork


def get_uow() -> UnitOfWork:
    """Get or create UnitOfWork for the current request."""
    if 'uow' not in g:
        db = next(get_db())
        g.uow = UnitOfWork(db)
    return g.uow


def get_user_service():
    from oceancollect.application.user_service import UserService
    return UserService(get_uow())


def get_establishment_service():
    from oceancollect.application.establishment_service import EstablishmentService
    return EstablishmentService(get_uow())


def get_question_service():
    from oceancollect.application.question_service import QuestionService
    return QuestionService(get_uow())


def get_template_service():
    from oceancollect.application.template_service import TemplateService
    return TemplateService(get_uow())


def get_dashboard_service():
    """Get DashboardService for the current request."""
    from oceancollect.application.dashboard_service import DashboardService
    return DashboardService(get_uow())


def teardown_uow(exception=None):
    """
    Teardown handler for Flask app context.

    Register with: app.teardown_appcontext(teardown_uow)
    """
    uow = g.pop('uow', None)
    if uow:
        if exception:
            uow.rollback()
        uow.close()
