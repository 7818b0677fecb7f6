"""FastAPI dependencies for dependency injection."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from compensation_sync.calculators.pay_components import PayComponentCalculator
from compensation_sync.config import get_settings
from compensation_sync.database import init_db


def get_db_session() -> Generator[Session, None, None]:
    """Get database session dependency."""
    _, factory = init_db()
    with factory() as session:
        try:
            yield session
        finally:
            session.close()


def get_calculator() -> PayComponentCalculator:
    """Calculator configured with the formula constants from settings."""
    return PayComponentCalculator(get_settings().pay_policy())


# Type aliases for cleaner dependency injection
DbSession = Annotated[Session, Depends(get_db_session)]
Calculator = Annotated[PayComponentCalculator, Depends(get_calculator)]
