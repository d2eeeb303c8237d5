# sellsight/api/deps.py

from functools import lru_cache

from fastapi import HTTPException, status

from sellsight.config import settings
from sellsight.db.repository import ProductRepository, create_repository


@lru_cache(maxsize=1)
def _repository() -> ProductRepository:
    return create_repository(settings)


def get_repository() -> ProductRepository:
    """
    Returns the process-wide repository selected by DATA_SOURCE.
    """
    try:
        return _repository()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Data store unavailable: {e}",
        )
