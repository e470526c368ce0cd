"""Tests for translating service errors and partial updates into HTTP errors."""
import pytest
from fastapi import HTTPException

from app.errors import service_errors, update_fields
from app.schemas.group import GroupUpdate
from app.services.invitation_service import InvitationExpired


class TestServiceErrors:

    @pytest.mark.parametrize(
        "exc, status",
        [
            (LookupError("gone"), 404),
            (PermissionError("nope"), 403),
            (ValueError("bad"), 400),
            (InvitationExpired("late"), 410),
        ],
    )
    def test_mapping(self, exc, status):
        with pytest.raises(HTTPException) as caught:
            with service_errors():
                raise exc
        assert caught.value.status_code == status
        assert caught.value.detail == str(exc)

    def test_other_errors_pass_through(self):
        with pytest.raises(KeyError):
            with service_errors():
                raise KeyError("unexpected")


class TestUpdateFields:

    def test_returns_only_set_fields(self):
        req = GroupUpdate(description=None, emoji="🌊")
        assert update_fields(req, required=("name",)) == {"description": None, "emoji": "🌊"}

    def test_empty_update(self):
        with pytest.raises(HTTPException) as caught:
            update_fields(GroupUpdate())
        assert caught.value.detail == "No fields to update"

    def test_cleared_required_field(self):
        with pytest.raises(HTTPException) as caught:
            update_fields(GroupUpdate(name=None), required=("name", "visibility"))
        assert caught.value.status_code == 400
        assert caught.value.detail == "name cannot be empty"
