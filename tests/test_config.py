import pytest

from droidcommand.core.config import Config


def test_defaults():
    settings = Config()
    assert settings.step_retry_attempts == 5
    assert settings.step_retry_delay == 0.5
    assert settings.default_wait_ms == 1000
    assert settings.validate_config()


def test_environment_override(monkeypatch):
    monkeypatch.setenv("DROIDCOMMAND_STEP_RETRY_ATTEMPTS", "3")
    monkeypatch.setenv("DROIDCOMMAND_PROVIDER_BACKEND", "none")
    settings = Config()
    assert settings.step_retry_attempts == 3
    assert settings.provider_backend == "none"


@pytest.mark.parametrize("overrides,message", [
    ({"step_retry_attempts": 0}, "attempts"),
    ({"step_retry_delay_ms": -1}, "delay"),
    ({"provider_backend": "bluetooth"}, "backend"),
])
def test_validate_config_rejects_bad_values(overrides, message):
    with pytest.raises(ValueError, match=message):
        Config(**overrides).validate_config()
