import pytest
from pydantic import ValidationError

from notiq.api.schemas.user import UserBase, UserPublic


def test_user_needs_an_auth_method():
    with pytest.raises(ValidationError) as exc:
        UserBase(email="a@example.com")
    assert "A user needs a password or a linked provider account" in str(exc.value)

    with pytest.raises(ValidationError):
        UserBase(email="a@example.com", password_hash="", google_id=None)


@pytest.mark.parametrize("field", ["password_hash", "google_id", "github_id"])
def test_any_single_auth_method_is_enough(field):
    user = UserBase(email="Ana@Example.com", **{field: "x1"})
    assert user.email == "ana@example.com"
    assert getattr(user, field) == "x1"


def test_public_user_hides_secrets():
    doc = {"_id": "66aa", "email": "ana@example.com", "password_hash": "$2b$hash", "github_id": "9"}
    public = UserPublic.from_doc(doc).model_dump()
    assert "password_hash" not in public
    assert public["has_password"] is True
    assert public["github_linked"] is True
    assert public["google_linked"] is False
