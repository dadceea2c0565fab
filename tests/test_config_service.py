import pytest

from site_deploy.api.exceptions import ConfigurationError
from site_deploy.constants import ErrorCode, Provider
from site_deploy.models import AppConfig, UploadConfig
from site_deploy.services import ConfigService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITHUB_TOKEN", "FIREBASE_TOKEN", "SITE_DEPLOY_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_config_file(tmp_path):
    config = ConfigService(project_root=tmp_path).config

    assert config.upload.batch_size == 5
    assert config.upload.max_attempts == 3
    assert config.upload.retry_delay == 1.0
    assert config.upload.settle_delay == 2.0
    assert config.api_url(Provider.GITHUB) == "https://api.github.com"
    assert config.api_url(Provider.FIREBASE) == "https://firebasehosting.googleapis.com/v1beta1"


def test_loads_yaml_with_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("MY_GH_TOKEN", "ghp_from_env")
    (tmp_path / ".site-deploy.yaml").write_text(
        "github:\n"
        "  token: ${MY_GH_TOKEN}\n"
        "  api_url: https://ghe.example.com/api/v3\n"
        "upload:\n"
        "  batch_size: 10\n"
        "  retry_delay: 0.5\n"
    )

    config = ConfigService(project_root=tmp_path).config

    assert config.github.token == "ghp_from_env"
    assert config.api_url(Provider.GITHUB) == "https://ghe.example.com/api/v3"
    assert config.upload.batch_size == 10
    assert config.upload.retry_delay == 0.5
    assert config.upload.max_attempts == 3


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigService(config_path=tmp_path / "nope.yaml").load_config()


def test_config_path_from_environment(tmp_path, monkeypatch):
    custom = tmp_path / "deploy.yaml"
    custom.write_text("firebase:\n  token: fb-token\n")
    monkeypatch.setenv("SITE_DEPLOY_CONFIG", str(custom))

    service = ConfigService(project_root=tmp_path / "elsewhere")

    assert service.config_path == custom
    assert service.config.firebase.token == "fb-token"


@pytest.mark.parametrize("content", [
    "github: [unclosed",
    "- just\n- a list\n",
    "upload:\n  batch_size: 0\n",
    "upload:\n  unknown_knob: 1\n",
])
def test_malformed_config(tmp_path, content):
    path = tmp_path / ".site-deploy.yaml"
    path.write_text(content)

    with pytest.raises(ConfigurationError) as exc_info:
        ConfigService(config_path=path).load_config()

    assert exc_info.value.error_code == ErrorCode.CONFIG_FORMAT_ERROR


def test_token_precedence(tmp_path, monkeypatch):
    (tmp_path / ".site-deploy.yaml").write_text("github:\n  token: from-file\n")
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    service = ConfigService(project_root=tmp_path)

    assert service.resolve_token(Provider.GITHUB, "from-flag") == "from-flag"
    assert service.resolve_token(Provider.GITHUB) == "from-file"


def test_token_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("FIREBASE_TOKEN", "fb-env")
    assert ConfigService(project_root=tmp_path).resolve_token(Provider.FIREBASE) == "fb-env"


def test_missing_token(tmp_path):
    with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
        ConfigService(project_root=tmp_path).resolve_token(Provider.GITHUB)


def test_app_config_dict_shape():
    config = AppConfig(upload=UploadConfig(batch_size=2))
    assert config.to_dict()["upload"]["batch_size"] == 2
    assert config.to_dict()["github"] == {}
    assert AppConfig.from_dict(None).upload.batch_size == 5
