"""Tests for translation credential loading."""

import json

import pytest

from subtitle_aligner import config
from subtitle_aligner.config import TranslationCredentials, load_translation_credentials

_ENV_VARS = ("G11N_URL", "G11N_INSTANCE_ID", "G11N_USER_ID", "G11N_PASSWORD")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No G11N_* variables and no credentials file in the working directory."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadTranslationCredentials:

    def test_from_file(self, clean_env, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps({
            "url": "https://g11n.test/rest/",
            "instanceId": "inst",
            "userId": "user",
            "password": "pw",
        }))
        assert load_translation_credentials(path) == TranslationCredentials(
            url="https://g11n.test/rest",
            instance_id="inst",
            user_id="user",
            password="pw",
        )

    def test_wrapped_credentials(self, clean_env, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps({"credentials": {
            "url": "https://g11n.test/rest",
            "instanceId": "inst",
            "userId": "user",
            "password": "pw",
        }}))
        assert load_translation_credentials(str(path)).instance_id == "inst"

    def test_default_file_in_working_directory(self, clean_env, tmp_path):
        (tmp_path / config.TRANSLATION_CREDENTIALS_FILE).write_text(json.dumps({
            "url": "https://g11n.test/rest",
            "instanceId": "inst",
            "userId": "user",
            "password": "pw",
        }))
        assert load_translation_credentials().user_id == "user"

    def test_from_environment(self, clean_env):
        clean_env.setenv("G11N_URL", "https://g11n.test/rest")
        clean_env.setenv("G11N_INSTANCE_ID", "inst")
        clean_env.setenv("G11N_USER_ID", "user")
        clean_env.setenv("G11N_PASSWORD", "pw")
        assert load_translation_credentials().password == "pw"

    def test_missing_fields_raise(self, clean_env):
        clean_env.setenv("G11N_URL", "https://g11n.test/rest")
        with pytest.raises(ValueError, match="instance_id"):
            load_translation_credentials()

    def test_missing_file_raises(self, clean_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_translation_credentials(tmp_path / "absent.json")

    @pytest.mark.parametrize("content", [
        ["https://g11n.test/rest", "inst", "user", "pw"],
        {"credentials": ["not", "an", "object"]},
        "just a string",
    ])
    def test_non_object_file_raises(self, clean_env, tmp_path, content):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps(content))
        with pytest.raises(ValueError, match="JSON object"):
            load_translation_credentials(path)
