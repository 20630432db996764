"""
Database configuration and session management
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings

if settings.database_url.startswith("postgresql"):
    engine = create_engine(
        settings.database_url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=1800,
        pool_timeout=30,
        connect_args={
            "connect_timeout": 7,
            "application_name": "legal-guide-api",
            "options": "-c statement_timeout=10000"  # 10 second statement timeout
        },
        echo=False,
        future=True
    )
else:
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        echo=False,
        future=True
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
