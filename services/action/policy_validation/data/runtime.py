"""SQL runtime wiring for the optional SQLAlchemy-backed service store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from services.action.policy_validation.config import PolicyValidationSettings
from services.action.policy_validation.data.schema import metadata


@dataclass(frozen=True)
class PolicyValidationSqlRuntime:
    """Engine and session factory for one SQL store database."""

    engine: Engine
    session_factory: sessionmaker[Session]

    @classmethod
    def from_settings(
        cls, settings: PolicyValidationSettings
    ) -> "PolicyValidationSqlRuntime":
        """Build the runtime from ``store_url``; optionally create tables."""
        if not settings.store_url:
            raise ValueError("store_url is required for the SQL service store")
        return cls.from_engine(
            create_engine(settings.store_url), create_schema=settings.create_schema
        )

    @classmethod
    def from_engine(
        cls, engine: Engine, *, create_schema: bool = False
    ) -> "PolicyValidationSqlRuntime":
        if create_schema:
            metadata.create_all(engine)
        return cls(
            engine=engine,
            session_factory=sessionmaker(
                bind=engine, autoflush=False, expire_on_commit=False
            ),
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session and enforce commit/rollback semantics."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
