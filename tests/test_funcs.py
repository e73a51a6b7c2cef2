import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from backend.database.config.connection_engine import connection_engine
from backend.database.core import funcs
from backend.database.daos.user_dao import UserDao
from backend.database.entities.messages import ROLE_ASSISTANT, ROLE_USER
from backend.database.helpers.transactionManagement import transactional
from backend.main import app


def test_lookups_return_none_when_missing():
    assert funcs.get_user(9999) is None
    assert funcs.get_user_by_email("ninguem@cabedelo.pb.gov.br") is None
    assert funcs.get_owned_conversation(9999, 1) is None
    assert funcs.get_conversation_with_messages(9999, 1) is None
    assert funcs.update_user(9999, name="Ninguém") is None
    assert funcs.delete_user(9999) is False


def test_authenticate_user_does_not_expose_password(user):
    authenticated = funcs.authenticate_user(email=user["email"], password="senha123")
    assert authenticated["id"] == user["id"]
    assert "password" not in authenticated


def test_create_user_rejects_duplicate_email(user):
    with pytest.raises(funcs.DuplicateEmailError):
        funcs.create_user(name="Outra", email=user["email"], password="senha123")


def test_conversation_ownership(user, make_user):
    other = make_user()
    conversation = funcs.create_conversation(user["id"], "Consulta", "laws")
    assert funcs.get_owned_conversation(conversation["id"], user["id"])["query_type"] == "laws"
    assert funcs.get_owned_conversation(conversation["id"], other["id"]) is None
    assert funcs.get_conversation_with_messages(conversation["id"], other["id"]) is None


def test_create_message_bumps_conversation(user):
    older = funcs.create_conversation(user["id"], "Antiga")
    newer = funcs.create_conversation(user["id"], "Nova")
    before = funcs.get_owned_conversation(older["id"], user["id"])["updated_at"]

    funcs.create_message(older["id"], ROLE_USER, "pergunta")

    after = funcs.get_owned_conversation(older["id"], user["id"])["updated_at"]
    assert after > before
    assert [c["id"] for c in funcs.get_user_conversations(user["id"])] == [older["id"], newer["id"]]


def test_messages_come_back_in_insertion_order(user):
    conversation = funcs.create_conversation(user["id"], "Consulta")
    for n in range(3):
        funcs.create_message(conversation["id"], ROLE_USER, f"pergunta {n}")
        funcs.create_message(conversation["id"], ROLE_ASSISTANT, f"resposta {n}")

    messages = funcs.get_conversation_with_messages(conversation["id"], user["id"])["messages"]
    assert [m["content"] for m in messages] == [
        "pergunta 0", "resposta 0", "pergunta 1", "resposta 1", "pergunta 2", "resposta 2",
    ]


def test_delete_user_is_all_or_nothing(user, monkeypatch):
    conversation = funcs.create_conversation(user["id"], "Consulta")
    funcs.create_message(conversation["id"], ROLE_USER, "pergunta")

    def broken_delete(self, session, user_id):
        raise RuntimeError("disk full")

    monkeypatch.setattr(UserDao, "deleteUser", broken_delete)
    with pytest.raises(RuntimeError):
        funcs.delete_user(user["id"])

    assert funcs.get_user(user["id"]) is not None
    kept = funcs.get_conversation_with_messages(conversation["id"], user["id"])
    assert [m["content"] for m in kept["messages"]] == ["pergunta"]


def test_seed_roles_is_idempotent():
    assert funcs.seed_roles() == 0
    assert [r["name"] for r in funcs.get_roles()] == ["admin", "user"]


def test_roles_fall_back_when_table_is_empty(monkeypatch):
    monkeypatch.setattr(funcs, "_fetch_roles", lambda: [])
    assert [(r["id"], r["name"]) for r in funcs.get_roles()] == [(1, "admin"), (2, "user")]


def test_resolve_role_name():
    assert funcs.resolve_role_name(1) == "admin"
    assert funcs.resolve_role_name(2) == "user"
    assert funcs.resolve_role_name(42) == "user"


def test_service_functions_take_positional_arguments(user):
    conversation = funcs.create_conversation(user["id"], "Consulta", "laws")
    funcs.create_message(conversation["id"], ROLE_USER, "pergunta")

    assert funcs.get_user(user["id"])["email"] == user["email"]
    assert funcs.get_owned_conversation(conversation["id"], user["id"])["title"] == "Consulta"
    assert funcs.get_conversation_with_messages(conversation["id"], user["id"])["messages"][0]["content"] == "pergunta"
    assert funcs.update_user(user["id"], "Maria Renomeada")["name"] == "Maria Renomeada"


def test_nested_service_calls_share_one_transaction(user):
    @transactional
    def create_then_fail(session, user_id):
        funcs.create_conversation(user_id, "Descartada")
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        create_then_fail(user["id"])
    assert funcs.get_user_conversations(user["id"]) == []


def test_concurrent_duplicate_email_is_reported_as_duplicate(user, monkeypatch):
    # the pre-insert lookup misses, as when another request inserts first
    monkeypatch.setattr(UserDao, "fetchUserByEmail", lambda self, session, email: None)
    with pytest.raises(funcs.DuplicateEmailError):
        funcs.create_user(name="Outra Maria", email=user["email"], password="senha123")


def test_role_must_exist_in_the_table():
    with connection_engine.begin() as connection:
        connection.execute(text("DELETE FROM role"))

    with pytest.raises(funcs.UnknownRoleError):
        funcs.create_user(name="Ana", email="ana@cabedelo.pb.gov.br", password="senha123")
    assert funcs.get_user_by_email("ana@cabedelo.pb.gov.br") is None


def test_app_startup_restores_missing_roles():
    with connection_engine.begin() as connection:
        connection.execute(text("DELETE FROM role"))

    with TestClient(app):
        pass

    assert [(r["id"], r["name"]) for r in funcs._fetch_roles()] == [(1, "admin"), (2, "user")]
    assert funcs.create_user(name="Ana", email="ana@cabedelo.pb.gov.br", password="senha123")["role"] == "user"
