"""Request validation for the account callables.

Each validator is a pure function: it either returns a normalized payload
or raises ``ValidationError`` naming the first missing or invalid field.
No remote call is made before one of these has passed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from accountsync.exceptions import ValidationError
from accountsync.utils.validators import validate_email, validate_string_field

# Maximum string lengths to keep payloads bounded
MAX_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 320
MAX_PASSWORD_LENGTH = 256
MAX_PHONE_LENGTH = 32
MAX_ID_LENGTH = 128
MAX_ROLE_LENGTH = 64
MAX_ROLES_COUNT = 50


@dataclass(frozen=True)
class CreateUserPayload:
    name: str
    last_name: str
    email: str
    password: str = field(repr=False)
    phone: Optional[str] = None
    roles: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateUserPayload:
    id: str
    email: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None

    def profile_fields(self) -> dict[str, str]:
        """Return the supplied profile columns, email included."""
        candidates = {
            "name": self.name,
            "last_name": self.last_name,
            "phone": self.phone,
        }
        fields = {key: value for key, value in candidates.items() if value}
        if fields and self.email:
            fields["email"] = self.email
        return fields

    @property
    def has_changes(self) -> bool:
        return any(
            (self.email, self.password, self.name, self.last_name, self.phone)
        )


@dataclass(frozen=True)
class DeleteUserPayload:
    uid: str


def validate_create_request(data: Any) -> CreateUserPayload:
    """Validate a createUser payload.

    Required, checked in order: name, lastName, email, password.
    """
    data = _require_mapping(data)
    name = _required_string(data, "name", MAX_NAME_LENGTH)
    last_name = _required_string(data, "lastName", MAX_NAME_LENGTH)
    email = validate_email(_required_string(data, "email", MAX_EMAIL_LENGTH))
    password = _required_string(data, "password", MAX_PASSWORD_LENGTH, strip=False)

    return CreateUserPayload(
        name=name,
        last_name=last_name,
        email=email,
        password=password,
        phone=validate_string_field(data.get("phone"), "phone", MAX_PHONE_LENGTH),
        roles=_validate_roles(data.get("roles")),
    )


def validate_update_request(data: Any) -> UpdateUserPayload:
    """Validate an updateUser payload. Only ``id`` is required."""
    data = _require_mapping(data)
    identity_id = _required_string(data, "id", MAX_ID_LENGTH)

    email = validate_string_field(data.get("email"), "email", MAX_EMAIL_LENGTH)
    if email:
        validate_email(email)

    return UpdateUserPayload(
        id=identity_id,
        email=email,
        password=validate_string_field(
            data.get("password"), "password", MAX_PASSWORD_LENGTH, strip=False
        ),
        name=validate_string_field(data.get("name"), "name", MAX_NAME_LENGTH),
        last_name=validate_string_field(data.get("lastName"), "lastName", MAX_NAME_LENGTH),
        phone=validate_string_field(data.get("phone"), "phone", MAX_PHONE_LENGTH),
    )


def validate_delete_request(data: Any) -> DeleteUserPayload:
    """Validate a deleteUser payload."""
    data = _require_mapping(data)
    return DeleteUserPayload(uid=_required_string(data, "uid", MAX_ID_LENGTH))


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Request data must be an object", field="data")
    return data


def _required_string(
    data: Mapping[str, Any],
    field_name: str,
    max_length: int,
    strip: bool = True,
) -> str:
    value = validate_string_field(
        data.get(field_name), field_name, max_length, required=True, strip=strip
    )
    if value is None:
        raise ValidationError(f"{field_name} is required", field=field_name)
    return value


def _validate_roles(value: Any) -> list[str]:
    """Validate roles as a list of distinct role names, order preserved."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError("roles must be a list of strings", field="roles")
    if len(value) > MAX_ROLES_COUNT:
        raise ValidationError(
            f"roles must contain at most {MAX_ROLES_COUNT} entries", field="roles"
        )
    roles: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("roles must be a list of strings", field="roles")
        role = item.strip()
        if len(role) > MAX_ROLE_LENGTH:
            raise ValidationError(
                f"each role must be at most {MAX_ROLE_LENGTH} characters",
                field="roles",
            )
        if role not in roles:
            roles.append(role)
    return roles
