from fastapi import HTTPException

from src.errors import Result


def unwrap(result: Result):
    """Return the value of an ``Ok`` or raise the matching HTTP error."""
    if not result.ok:
        raise HTTPException(status_code=result.error.status_code, detail=result.message)
    return result.value
