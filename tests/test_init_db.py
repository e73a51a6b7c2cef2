from backend.database.config.config import settings
from backend.database.core import funcs
from backend.init_db import init_db


def test_init_db_creates_admin_once(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "admin-senha")

    init_db()
    init_db()

    admins = [u for u in funcs.list_users() if u["email"] == settings.ADMIN_EMAIL]
    assert len(admins) == 1
    assert admins[0]["role"] == "admin"
    assert funcs.authenticate_user(email=settings.ADMIN_EMAIL, password="admin-senha") is not None


def test_init_db_without_password_only_seeds_roles(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)
    init_db()
    assert funcs.list_users() == []
    assert [r["name"] for r in funcs.get_roles()] == ["admin", "user"]


def test_init_db_refuses_short_admin_password(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "123")
    init_db()
    assert funcs.get_user_by_email(settings.ADMIN_EMAIL) is None
