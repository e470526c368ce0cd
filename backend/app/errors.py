"""Translate service-layer exceptions into HTTP errors."""

from contextlib import contextmanager

from fastapi import HTTPException
from pydantic import BaseModel

from app.services.invitation_service import InvitationExpired


@contextmanager
def service_errors():
    try:
        yield
    except InvitationExpired as e:
        raise HTTPException(status_code=410, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def update_fields(req: BaseModel, required: tuple[str, ...] = ()) -> dict:
    """Fields set on a partial update; 400 when none are set or a required one is cleared."""
    changes = req.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    for field in required:
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
    return changes
