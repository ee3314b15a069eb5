"""
Tests for service construction.
"""

import pytest

from snapshare.config.settings import get_default_config
from snapshare.errors import InvalidCredential
from snapshare.services import create_services

from .helpers import OTHER_SECRET_KEY, TEST_SECRET_KEY, data_url, make_image_bytes


@pytest.fixture
def config(tmp_path, filter_dir):
    config = get_default_config()
    config['media']['upload_dir'] = str(tmp_path / "posts")
    config['media']['filter_dir'] = str(filter_dir)
    return config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv('SNAPSHARE_SECRET_KEY', raising=False)
    monkeypatch.delenv('SNAPSHARE_ENVIRONMENT', raising=False)


class TestCreateServices:

    def test_key_from_config(self, config):
        config['security']['secret_key'] = TEST_SECRET_KEY
        services = create_services(config)

        token = services.tokens.issue(1, "alice")
        assert services.tokens.resolve_from_carrier(f"Bearer {token}") == 1

    def test_explicit_key_wins(self, config):
        config['security']['secret_key'] = OTHER_SECRET_KEY
        services = create_services(config, secret_key=TEST_SECRET_KEY)
        other = create_services(config)

        token = services.tokens.issue(1, "alice")
        assert services.tokens.verify(token).subject_id == 1
        with pytest.raises(InvalidCredential):
            other.tokens.verify(token)

    def test_key_from_environment(self, config, monkeypatch):
        monkeypatch.setenv('SNAPSHARE_SECRET_KEY', TEST_SECRET_KEY)
        config['security']['secret_key'] = '${SNAPSHARE_SECRET_KEY_TYPO}'
        services = create_services(config)
        assert services.tokens.verify(services.tokens.issue(2, "bob")).subject_name == "bob"

    def test_missing_key_is_fatal(self, config):
        with pytest.raises(ValueError):
            create_services(config)

    def test_missing_key_in_production(self, config, monkeypatch):
        monkeypatch.setenv('SNAPSHARE_ENVIRONMENT', 'production')
        with pytest.raises(SystemExit):
            create_services(config)

    def test_pipeline_wired_to_configured_directories(self, config, tmp_path):
        services = create_services(config, secret_key=TEST_SECRET_KEY)

        stored = services.compositor.compose(data_url(make_image_bytes()), "heart.png")
        assert stored.startswith("posts/")
        assert services.artifacts.locate(stored).parent == tmp_path / "posts"
        assert services.filters.available() == ["heart.png", "star.png"]
