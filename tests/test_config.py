import pytest

from coinbase_core.config import ApiConfig, ClientConfig, LoggingConfig, RetryConfig
from coinbase_core.retry import CallOptions


def test_defaults():
    config = ClientConfig()
    assert config.api.base_url == "https://api.exchange.coinbase.com"
    assert config.retry.to_call_options() == CallOptions()
    assert config.logging.log_file is None


def test_from_yaml_interpolates_env(tmp_path, monkeypatch):
    monkeypatch.setenv("CB_TEST_BASE_URL", "https://sandbox.example.com")
    config_file = tmp_path / "client.yaml"
    config_file.write_text(
        "api:\n"
        "  base_url: \"${CB_TEST_BASE_URL}\"\n"
        "  timeout: 5\n"
        "retry:\n"
        "  should_retry_on_status_codes: true\n"
        "  retryable_status_codes: [429, 503]\n"
        "  min_delay_seconds: 0.5\n"
        "  max_delay_seconds: 4\n"
        "logging:\n"
        "  log_level: DEBUG\n"
    )

    config = ClientConfig.from_yaml(str(config_file))

    assert config.api.base_url == "https://sandbox.example.com"
    assert config.api.timeout == 5
    options = config.retry.to_call_options()
    assert options.should_retry_on_status_codes is True
    assert options.retryable_status_codes == frozenset({429, 503})
    assert options.min_delay_seconds == 0.5
    assert options.max_delay_seconds == 4
    assert config.logging.log_level == "DEBUG"


def test_from_yaml_rejects_invalid_retry_settings(tmp_path):
    config_file = tmp_path / "client.yaml"
    config_file.write_text("retry:\n  max_retries: -1\n")
    with pytest.raises(ValueError):
        ClientConfig.from_yaml(str(config_file))


def test_from_yaml_missing_file():
    with pytest.raises(FileNotFoundError):
        ClientConfig.from_yaml("/nonexistent/client.yaml")


def test_yaml_round_trip(tmp_path):
    config = ClientConfig(
        api=ApiConfig(base_url="https://example.com", timeout=2.5, user_agent="ua/1"),
        retry=RetryConfig(max_retries=1, retryable_status_codes=[500]),
        logging=LoggingConfig(log_file="logs/client.log", log_level="WARNING"),
    )
    path = tmp_path / "out" / "client.yaml"
    config.to_yaml(str(path))

    assert ClientConfig.from_yaml(str(path)) == config
