import importlib
import os

import dotenv

from edura import config


def test_dotenv_is_loaded_before_config_reads_the_environment(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    def fake_load_dotenv(path):
        assert path == config.BASE_DIR / ".env"
        os.environ["OPENAI_API_KEY"] = "sk-from-dotenv"
        return True

    monkeypatch.setattr(dotenv, "load_dotenv", fake_load_dotenv)

    try:
        reloaded = importlib.reload(config)
        assert reloaded.Config.COMPLETION_API_KEY == "sk-from-dotenv"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
