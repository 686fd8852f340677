"""Tests for account request validation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "backend" / "src"))

from accountsync.api.account_validators import (  # noqa: E402
    MAX_ROLES_COUNT,
    validate_create_request,
    validate_delete_request,
    validate_update_request,
)
from accountsync.exceptions import ValidationError  # noqa: E402

VALID_CREATE = {
    "name": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "password": "Sup3r-secret!",
}


class TestValidateCreateRequest:
    """Tests for createUser validation."""

    @pytest.mark.parametrize("missing", ["name", "lastName", "email", "password"])
    def test_missing_required_field(self, missing: str) -> None:
        data = {key: value for key, value in VALID_CREATE.items() if key != missing}
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request(data)
        assert exc_info.value.field == missing
        assert exc_info.value.code == "invalid-argument"

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_required_field(self, blank: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({**VALID_CREATE, "lastName": blank})
        assert exc_info.value.field == "lastName"

    def test_reports_first_missing_field(self) -> None:
        """Fields are checked in the order name, lastName, email, password."""
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({"email": "ada@example.com"})
        assert exc_info.value.field == "name"

    def test_trims_email(self) -> None:
        payload = validate_create_request({**VALID_CREATE, "email": " a@b.com "})
        assert payload.email == "a@b.com"

    def test_password_is_not_trimmed(self) -> None:
        payload = validate_create_request({**VALID_CREATE, "password": " pass word "})
        assert payload.password == " pass word "

    def test_roles_default_to_empty_list(self) -> None:
        payload = validate_create_request(VALID_CREATE)
        assert payload.roles == []
        assert payload.phone is None

    def test_roles_are_deduplicated_in_order(self) -> None:
        payload = validate_create_request(
            {**VALID_CREATE, "roles": ["editor", "admin", "editor"]}
        )
        assert payload.roles == ["editor", "admin"]

    @pytest.mark.parametrize("roles", ["admin", [1], [""], {"admin": True}])
    def test_invalid_roles(self, roles) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({**VALID_CREATE, "roles": roles})
        assert exc_info.value.field == "roles"

    def test_too_many_roles(self) -> None:
        roles = [f"role-{index}" for index in range(MAX_ROLES_COUNT + 1)]
        with pytest.raises(ValidationError):
            validate_create_request({**VALID_CREATE, "roles": roles})

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({**VALID_CREATE, "email": "not-an-email"})
        assert exc_info.value.field == "email"

    def test_non_string_name(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({**VALID_CREATE, "name": 42})
        assert exc_info.value.field == "name"

    def test_name_too_long(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request({**VALID_CREATE, "name": "x" * 201})
        assert "at most" in exc_info.value.message

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request(["Ada"])
        assert exc_info.value.field == "data"

    def test_password_hidden_from_repr(self) -> None:
        payload = validate_create_request(VALID_CREATE)
        assert "Sup3r-secret!" not in repr(payload)


class TestValidateUpdateRequest:
    """Tests for updateUser validation."""

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_update_request({"phone": "555"})
        assert exc_info.value.field == "id"

    def test_id_only_has_no_changes(self) -> None:
        payload = validate_update_request({"id": "user-1"})
        assert not payload.has_changes
        assert payload.profile_fields() == {}

    def test_blank_fields_are_not_supplied(self) -> None:
        payload = validate_update_request(
            {"id": "user-1", "email": "  ", "name": "", "password": ""}
        )
        assert not payload.has_changes

    def test_phone_only_profile_fields(self) -> None:
        payload = validate_update_request({"id": "user-1", "phone": "555"})
        assert payload.profile_fields() == {"phone": "555"}

    def test_email_joins_profile_fields_when_others_present(self) -> None:
        payload = validate_update_request(
            {"id": "user-1", "email": " new@example.com ", "lastName": "Byron"}
        )
        assert payload.email == "new@example.com"
        assert payload.profile_fields() == {
            "last_name": "Byron",
            "email": "new@example.com",
        }

    def test_email_alone_is_not_a_profile_field_update(self) -> None:
        payload = validate_update_request({"id": "user-1", "email": "new@example.com"})
        assert payload.has_changes
        assert payload.profile_fields() == {}

    def test_password_only(self) -> None:
        payload = validate_update_request({"id": "user-1", "password": "n3w-pass"})
        assert payload.has_changes
        assert payload.profile_fields() == {}

    def test_rejects_invalid_email(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_update_request({"id": "user-1", "email": "nope"})
        assert exc_info.value.field == "email"


class TestValidateDeleteRequest:
    """Tests for deleteUser validation."""

    def test_uid_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_delete_request({"id": "user-1"})
        assert exc_info.value.field == "uid"

    def test_uid_trimmed(self) -> None:
        assert validate_delete_request({"uid": " user-1 "}).uid == "user-1"
