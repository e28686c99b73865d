"""Per-request transaction boundary over the OceanCollect repositories."""
from .user_repository import UserRepository
from .establishment_repository import EstablishmentRepository
from .question_repository import QuestionRepository
from .template_repository import TemplateRepository


class UnitOfWork:
    """
    One session shared by the user, establishment, question and template
    repositories. Services decide when to commit; `container.teardown_uow`
    closes it at the end of the request.
    """

    def __init__(self, session):
        self.session = session
        self.users = UserRepository(session)
        self.establishments = EstablishmentRepository(session)
        self.questions = QuestionRepository(session)
        self.templates = TemplateRepository(session)

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.close()
        return False
