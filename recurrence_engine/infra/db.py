from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from recurrence_engine.config import SETTINGS

engine = create_engine(SETTINGS.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()
