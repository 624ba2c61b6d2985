from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from .errors import NotFoundError, ValidationError


@contextmanager
def http_errors() -> Iterator[None]:
    """Re-raise registry errors as the matching HTTP status."""

    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
