# backend/database.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    # SQLite needs thread sharing disabled; in-memory databases also need a single shared connection
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def load_models():
    # Models must be imported so their tables are registered on Base.metadata
    import models.users  # noqa: F401
    import models.customer  # noqa: F401
    import models.distributor  # noqa: F401
    import models.item  # noqa: F401
    import models.order  # noqa: F401
    import models.warehouse_log  # noqa: F401


def init_db(engine: Engine):
    load_models()
    Base.metadata.create_all(bind=engine)


# Session per request, taken from the factory the app was built with
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
