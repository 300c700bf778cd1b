import pytest

from resume_interview.config import Settings, get_settings
from resume_interview.models.llm_client import CompletionParams


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_baseline_defaults() -> None:
    settings = Settings()

    assert settings.history_cap == 10
    assert settings.session_idle_timeout is None
    assert settings.document_store_url is None

    params = CompletionParams.from_settings(settings)
    assert params.model == "gpt-3.5-turbo"
    assert (params.temperature, params.max_tokens) == (0.9, 350)
    assert (params.presence_penalty, params.frequency_penalty) == (0.7, 0.5)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HISTORY_CAP", "6")
    monkeypatch.setenv("SESSION_IDLE_TIMEOUT", "900")
    monkeypatch.setenv("COMPLETION_MODEL", "llama3.1:8b")
    monkeypatch.setenv("COMPLETION_BASE_URL", "http://localhost:11434/v1")

    settings = get_settings()

    assert settings.history_cap == 6
    assert settings.session_idle_timeout == 900
    assert settings.completion_base_url == "http://localhost:11434/v1"
    assert CompletionParams.from_settings().model == "llama3.1:8b"


def test_cli_defaults_follow_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_HOST", "0.0.0.0")
    monkeypatch.setenv("API_PORT", "9100")

    from resume_interview.main import build_parser

    args = build_parser().parse_args(["--mode", "api"])
    assert args.mode == "api"
    assert args.host == "0.0.0.0"
    assert args.port == 9100
    assert args.resume is None
