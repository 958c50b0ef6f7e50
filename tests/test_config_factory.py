# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for configuration and factory functions."""

import tempfile

import pytest
import requests

from copilot_zipper import (
    GitHandler,
    HttpHandler,
    LocalHandler,
    Manager,
    ZipperConfig,
    create_http_client,
    create_manager,
)
from copilot_zipper.exceptions import ConfigurationError
from tests.fixtures import FakeClient


class TestZipperConfig:
    """Tests for ZipperConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = ZipperConfig()

        assert config.insecure is False
        assert config.temp_dir is None
        assert config.ignore_file == ".zipperignore"
        assert config.git_binary == "git"
        assert config.log_level == "INFO"
        assert config.effective_temp_dir == tempfile.gettempdir()

    def test_log_level_normalized(self):
        """Test that the log level is upper-cased."""
        assert ZipperConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test that an unknown log level is rejected."""
        with pytest.raises(ConfigurationError, match="Invalid log level"):
            ZipperConfig(log_level="chatty")

    def test_missing_temp_dir(self, tmp_path):
        """Test that a temp dir that does not exist is rejected."""
        with pytest.raises(ConfigurationError):
            ZipperConfig(temp_dir=str(tmp_path / "missing"))

    def test_from_env(self, monkeypatch, tmp_path):
        """Test loading every setting from the environment."""
        monkeypatch.setenv("ZIPPER_INSECURE", "true")
        monkeypatch.setenv("ZIPPER_TEMP_DIR", str(tmp_path))
        monkeypatch.setenv("ZIPPER_IGNORE_FILE", ".cfignore")
        monkeypatch.setenv("ZIPPER_GIT_BINARY", "/usr/local/bin/git")
        monkeypatch.setenv("ZIPPER_LOG_LEVEL", "warning")

        config = ZipperConfig.from_env()

        assert config.insecure is True
        assert config.temp_dir == str(tmp_path)
        assert config.effective_temp_dir == str(tmp_path)
        assert config.ignore_file == ".cfignore"
        assert config.git_binary == "/usr/local/bin/git"
        assert config.log_level == "WARNING"

    def test_from_env_defaults(self, monkeypatch):
        """Test that an empty environment yields the defaults."""
        for name in ("ZIPPER_INSECURE", "ZIPPER_TEMP_DIR", "ZIPPER_IGNORE_FILE",
                     "ZIPPER_GIT_BINARY", "ZIPPER_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ZipperConfig.from_env() == ZipperConfig()

    @pytest.mark.parametrize("value,expected", [
        ("1", True),
        ("yes", True),
        ("ON", True),
        ("0", False),
        ("false", False),
        ("", False),
    ])
    def test_insecure_values(self, monkeypatch, value, expected):
        """Test boolean parsing of ZIPPER_INSECURE."""
        monkeypatch.setenv("ZIPPER_INSECURE", value)
        assert ZipperConfig.from_env().insecure is expected


class TestCreateHttpClient:
    """Tests for create_http_client."""

    def test_secure_by_default(self):
        """Test that TLS verification is on by default."""
        client = create_http_client()

        assert isinstance(client, requests.Session)
        assert client.verify is True
        assert client.trust_env is True

    def test_insecure(self):
        """Test that verification can be disabled."""
        assert create_http_client(insecure=True).verify is False


class TestCreateManager:
    """Tests for create_manager."""

    def test_default_handlers(self):
        """Test that git, http and local handlers are registered in order."""
        manager = create_manager()

        assert isinstance(manager, Manager)
        assert [type(h) for h in manager.handlers] == [GitHandler, HttpHandler, LocalHandler]
        assert isinstance(manager.http_client, requests.Session)

    def test_config_applied(self, tmp_path):
        """Test that configuration reaches handlers and client."""
        config = ZipperConfig(
            insecure=True,
            temp_dir=str(tmp_path),
            ignore_file=".cfignore",
            git_binary="/opt/git",
        )

        manager = create_manager(config)
        git, http, local = manager.handlers

        assert manager.http_client.verify is False
        assert git.git_binary == "/opt/git"
        assert git.temp_dir == str(tmp_path)
        assert git.local.ignore_file == ".cfignore"
        assert http.temp_dir == str(tmp_path)
        assert local.ignore_file == ".cfignore"
        assert local.temp_dir == str(tmp_path)

    def test_injected_client(self):
        """Test that an explicit client is used as is."""
        client = FakeClient()
        assert create_manager(http_client=client).http_client is client

    def test_auto_detection_order(self, tmp_path):
        """Test that repository URLs resolve to git and directories to local."""
        manager = create_manager(http_client=FakeClient())

        assert manager.find_handler("https://github.com/org/repo.git").name == "git"
        assert manager.find_handler("https://example.com/app.tar.gz").name == "http"
        assert manager.find_handler(str(tmp_path)).name == "local"

    def test_independent_managers(self):
        """Test that two managers do not share registrations."""
        first = create_manager(http_client=FakeClient())
        second = create_manager(http_client=FakeClient())

        assert first.handlers[0] is not second.handlers[0]
