import importlib

from newsletter_api.core import initialization

settings_module = importlib.import_module("newsletter_api.core.config.settings")


def test_initialize_application_reuses_the_settings_singleton(monkeypatch):
    logging_calls = []

    def build_again():
        raise AssertionError("settings must not be built a second time")

    monkeypatch.setattr(
        initialization, "configure_logging", lambda **kwargs: logging_calls.append(kwargs)
    )
    monkeypatch.setattr(settings_module, "create_settings", build_again)

    result = initialization.initialize_application()

    assert result is settings_module.settings
    assert logging_calls == [{"log_level": result.LOG_LEVEL, "json_logs": result.LOG_JSON}]
