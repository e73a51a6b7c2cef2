from backend.api import env_settings
from backend.database.config.config import Settings


def test_saved_settings_apply_on_next_start(tmp_path, monkeypatch):
    path = tmp_path / "custom.env"
    monkeypatch.setenv("ENV_FILE_PATH", str(path))
    monkeypatch.delenv("OPEN_AI_MODEL", raising=False)
    monkeypatch.delenv("LAWS_API_TIMEOUT", raising=False)

    env_settings.write_env_settings({"OPEN_AI_MODEL": "gpt-4o-mini", "LAWS_API_TIMEOUT": "15"}, path=str(path))

    fresh = Settings()
    assert fresh.OPEN_AI_MODEL == "gpt-4o-mini"
    assert fresh.LAWS_API_TIMEOUT == 15.0
    assert fresh.ENV_FILE_PATH == str(path)


def test_process_environment_wins_over_env_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.env"
    path.write_text("OPEN_AI_MODEL=gpt-4o-mini\n")
    monkeypatch.setenv("ENV_FILE_PATH", str(path))
    monkeypatch.setenv("OPEN_AI_MODEL", "gpt-4.1")

    assert Settings().OPEN_AI_MODEL == "gpt-4.1"


def test_explicit_env_file_argument_is_respected(tmp_path, monkeypatch):
    path = tmp_path / "other.env"
    path.write_text("LOG_LEVEL=DEBUG\n")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    assert Settings(_env_file=str(path)).LOG_LEVEL == "DEBUG"
