from .unit_of_work import UnitOfWork
from .user_repository import UserRepository
from .establishment_repository import EstablishmentRepository
from .question_repository import QuestionRepository
from .template_repository import TemplateRepository
