import os
import logging
from typing import Optional
from sqlalchemy import create_engine, event
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.engine import make_url

from .config import config

# Variáveis Globais
engine = None
db_session = None

logger = logging.getLogger("oceancollect")


def normalize_database_url(database_url: Optional[str]) -> Optional[str]:
    """
    Normaliza a URL do banco.
    - Se for Postgres (Supabase), garante que sslmode=require esteja presente.
    """
    if not database_url:
        return None

    try:
        url = make_url(database_url)
    except Exception:
        # Mantém a URL como está se não for parseável pelo SQLAlchemy
        return database_url

    if not url.drivername.startswith("postgresql") or "sslmode" in url.query:
        return database_url

    url = url.set(query={**url.query, "sslmode": "require"})
    return url.render_as_string(hide_password=False)


def _engine_kwargs(database_url: str) -> dict:
    url = make_url(database_url)
    if url.drivername.startswith("sqlite"):
        # SQLite em memória precisa de uma única conexão compartilhada
        if url.database in (None, "", ":memory:"):
            return {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "poolclass": NullPool}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite só aplica as FKs com o pragma ativo em cada conexão
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(database_url: Optional[str] = None):
    global engine, db_session
    database_url = normalize_database_url(database_url or os.getenv("DATABASE_URL") or config.DATABASE_URL)
    if not database_url:
        logger.warning("⚠️ DATABASE_URL não encontrada na Config. Verifique as variáveis de ambiente.")
        return

    try:
        masked_url = database_url.split("@")[-1] if "@" in database_url else "configured"
        logger.info(f"🔌 Conectando ao banco: {masked_url}")

        engine = create_engine(database_url, **_engine_kwargs(database_url))
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        db_session = scoped_session(sessionmaker(autocommit=False, autoflush=False, bind=engine))
        logger.info("✅ Conexão com Banco de Dados Inicializada")
    except Exception as e:
        logger.error(f"❌ Erro ao criar engine do banco: {e}")
        raise e


def create_schema():
    """Create every table declared on the models Base (idempotent)."""
    from .models_db import Base

    if engine is None:
        init_db()
    Base.metadata.create_all(bind=engine)


def get_db():
    """Generates a session. Cleanup is done by the app teardown (db_session.remove)."""
    if db_session is None:
        init_db()

    if db_session:
        yield db_session()
    else:
        yield None
