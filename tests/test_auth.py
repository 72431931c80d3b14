# tests/test_auth.py
import time
import uuid
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from jose import jwt

from charlotte.core.auth import session_from_token
from charlotte.core.auth_context import AuthContext, AuthSession
from charlotte.models.user import initials
from charlotte.repositories.user_repo import UserRepository


def token(claims, secret="test-secret"):
    return jwt.encode(claims, secret, algorithm="HS256")


def test_session_from_valid_token():
    user_id = uuid.uuid4()
    raw = token(
        {
            "sub": str(user_id),
            "email": "ana@example.com",
            "aud": "authenticated",
            "exp": int(time.time()) + 60,
            "user_metadata": {"nome_completo": "Ana Souza"},
        }
    )

    session = session_from_token(raw)

    assert session.user_id == user_id
    assert session.email == "ana@example.com"
    assert session.access_token == raw
    assert session.user_metadata["nome_completo"] == "Ana Souza"


@pytest.mark.parametrize(
    "raw",
    [
        "not-a-jwt",
        token({"sub": str(uuid.uuid4())}, secret="other-secret"),
        token({"sub": str(uuid.uuid4()), "exp": int(time.time()) - 60}),
        token({"email": "x@example.com"}),
        token({"sub": "not-a-uuid"}),
    ],
)
def test_bad_tokens_are_401(raw):
    with pytest.raises(HTTPException) as exc:
        session_from_token(raw)
    assert exc.value.status_code == 401


def session(user_id=None, **fields):
    return AuthSession(user_id=user_id or uuid.uuid4(), access_token="t", **fields)


def test_existing_profile_is_loaded(gateway, admin):
    context = AuthContext(UserRepository(), gateway).start(session(uuid.UUID(admin["id"])))

    assert not context.loading
    assert context.usuario.is_admin
    assert len(gateway.rows("usuarios_ext")) == 1


def test_missing_profile_is_provisioned_as_customer(gateway):
    s = session(email="maria.silva@example.com", user_metadata={"nome_completo": " Maria Silva "})
    context = AuthContext(UserRepository(), gateway).start(s)

    assert context.usuario.id == s.user_id
    assert context.usuario.nome_completo == "Maria Silva"
    assert context.usuario.role == "cliente"
    assert len(gateway.rows("usuarios_ext")) == 1

    # Second sign-in finds the row
    AuthContext(UserRepository(), gateway).start(s)
    assert len(gateway.rows("usuarios_ext")) == 1


def test_provisioned_name_falls_back_to_email(gateway):
    context = AuthContext(UserRepository(), gateway).start(session(email="joao@example.com"))
    assert context.usuario.nome_completo == "joao"


def test_sign_out_clears_profile(gateway, customer):
    context = AuthContext(UserRepository(), gateway).start(session(uuid.UUID(customer["id"])))
    context.handle_session_change(None)

    assert context.session is None
    assert context.usuario is None


def test_start_without_session(gateway):
    context = AuthContext(UserRepository(), gateway).start(None)
    assert context.usuario is None
    assert not context.loading


class FakeAuthClient:
    def __init__(self, current):
        self.current = current
        self.callback = None
        self.unsubscribed = False

    def get_session(self):
        return self.current

    def on_auth_state_change(self, callback):
        self.callback = callback
        return SimpleNamespace(unsubscribe=self.unsubscribe)

    def unsubscribe(self):
        self.unsubscribed = True


def supabase_session(user_id):
    return SimpleNamespace(
        access_token="t",
        user=SimpleNamespace(id=user_id, email="ana@example.com", user_metadata={}),
    )


def test_subscription_follows_auth_client(gateway, customer, admin):
    auth = FakeAuthClient(supabase_session(customer["id"]))
    context = AuthContext(UserRepository(), gateway)
    context.subscribe(auth)
    assert context.usuario.nome_completo == "Ana Souza"

    auth.callback("SIGNED_IN", supabase_session(admin["id"]))
    assert context.usuario.is_admin

    auth.callback("SIGNED_OUT", None)
    assert context.usuario is None

    context.close()
    assert auth.unsubscribed


def test_initials():
    assert initials("Ana Maria Souza") == "AM"
    assert initials("ana") == "A"
    assert initials("") == ""
    assert initials(None) == ""
