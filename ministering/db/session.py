from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ministering.core.config import settings

url = make_url(settings.DATABASE_URL)
backend = url.get_backend_name()

engine_kwargs: dict = {"pool_pre_ping": True}
connect_args: dict = {}
if backend.startswith("postgresql"):
    connect_args["options"] = "-c timezone=utc"
elif backend == "sqlite":
    connect_args["check_same_thread"] = False
    if url.database in (None, "", ":memory:"):
        # In-memory databases live on a single connection
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, **engine_kwargs)

if backend == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
