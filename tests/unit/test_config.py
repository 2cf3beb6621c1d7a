"""
Unit tests for configuration loading.
"""

import json
import logging
from pathlib import Path

import pytest

from minihttpd.config import ServerConfig, load_config


def write_config(tmp_path: Path, content) -> str:
    path = tmp_path / "conf.json"
    if isinstance(content, str):
        path.write_text(content)
    else:
        path.write_text(json.dumps(content))
    return str(path)


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 80
        assert config.server_root == "/var/www/html/"
        assert config.error_log == "/var/log/error_log"
        assert config.access_log == "/var/log/access_log"
        assert config.host == "0.0.0.0"

    def test_defaults_are_valid(self):
        ServerConfig().validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": 0},
        {"port": 65536},
        {"backlog": -1},
        {"buffer_size": 0},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_to_dict(self):
        data = ServerConfig(port=8080).to_dict()

        assert data["port"] == 8080
        assert data["server_root"] == "/var/www/html/"
        assert set(data) >= {"port", "server_root", "error_log", "access_log", "log_level"}


class TestLoadConfig:

    def test_full_file(self, tmp_path: Path):
        path = write_config(tmp_path, {
            "port": 8080,
            "serverRoot": "/srv/www/",
            "errorLog": "/tmp/err",
            "accessLog": "/tmp/acc",
            "logLevel": "DEBUG",
        })
        config = load_config(path)

        assert config.port == 8080
        assert config.server_root == "/srv/www/"
        assert config.error_log == "/tmp/err"
        assert config.access_log == "/tmp/acc"
        assert config.log_level == "DEBUG"

    def test_partial_file_keeps_defaults(self, tmp_path: Path):
        config = load_config(write_config(tmp_path, {"port": 9000}))

        assert config.port == 9000
        assert config.server_root == "/var/www/html/"
        assert config.access_log == "/var/log/access_log"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        config = load_config(write_config(tmp_path, {"port": 9000, "workers": 8}))
        assert config.port == 9000

    def test_numeric_string_port(self, tmp_path: Path):
        config = load_config(write_config(tmp_path, {"port": "8081"}))
        assert config.port == 8081

    def test_load_success_logged(self, tmp_path: Path, caplog):
        path = write_config(tmp_path, {"port": 8080})

        with caplog.at_level(logging.INFO, logger="minihttpd"):
            load_config(path)

        assert "Configuration loaded from" in caplog.text
        assert "port=8080" in caplog.text

    def test_missing_file(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.ERROR, logger="minihttpd"):
            config = load_config(str(tmp_path / "nope.json"))

        assert config == ServerConfig()
        assert "Could not open configuration file" in caplog.text

    def test_directory_path(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.ERROR, logger="minihttpd"):
            config = load_config(str(tmp_path))

        assert config == ServerConfig()

    def test_invalid_json(self, tmp_path: Path, caplog):
        path = write_config(tmp_path, "{ port: 8080 ")

        with caplog.at_level(logging.ERROR, logger="minihttpd"):
            config = load_config(path)

        assert config == ServerConfig()
        assert "Error parsing configuration file" in caplog.text

    def test_not_an_object(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.ERROR, logger="minihttpd"):
            config = load_config(write_config(tmp_path, [8080]))

        assert config == ServerConfig()
        assert "expected a JSON object" in caplog.text

    @pytest.mark.parametrize("content", [
        {"port": "abc"},
        {"port": 70000},
        {"port": True},
        {"port": None},
        {"serverRoot": 42},
        {"logLevel": "chatty"},
    ])
    def test_bad_values_fall_back_to_defaults(self, tmp_path: Path, caplog, content):
        # The valid keys alongside a bad one are discarded too
        content = dict(content, accessLog="/tmp/acc")

        with caplog.at_level(logging.ERROR, logger="minihttpd"):
            config = load_config(write_config(tmp_path, content))

        assert config == ServerConfig()
        assert "Invalid configuration" in caplog.text
