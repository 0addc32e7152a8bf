"""Tests for the renderer settings store."""

import logging
import warnings
from pathlib import PureWindowsPath

import pytest

from easyviewer.environment.config import DEFAULTS, RECOGNIZED_KEYS, UNSET, ConfigStore
from easyviewer.environment.exceptions import ConfigValidationWarning, ErrorCode


class TestConfigStore:
    def test_defaults(self):
        config = ConfigStore()
        assert config.ignore_errors is False
        assert config.max_include_depth == 50
        assert config.max_passes == 100
        assert config.as_dict() == DEFAULTS

    def test_set_and_get(self):
        config = ConfigStore()
        assert config.set("default_scheme", "app") is True
        assert config.get("default_scheme") == "app"
        assert config.default_scheme == "app"

    def test_absent_key_is_unset(self):
        config = ConfigStore()
        assert config.get("views") is UNSET
        assert config.views is None
        assert "views" not in config
        assert not UNSET

    def test_get_default(self):
        assert ConfigStore().get("views", "fallback") == "fallback"

    def test_paths_use_forward_slashes(self):
        config = ConfigStore()
        config.set("views", "site\\views")
        config.set("scripts", PureWindowsPath("site\\js"))
        assert config.views == "site/views"
        assert config.scripts == "site/js"

    def test_unknown_key_warns_and_is_ignored(self, caplog):
        config = ConfigStore()
        with caplog.at_level(logging.WARNING, logger="easyviewer.environment.config"):
            with pytest.warns(ConfigValidationWarning, match="Unknown config key 'colour'"):
                assert config.set("colour", "red") is False
        assert "colour" not in config
        assert "easy-viewer" in caplog.text

    def test_unknown_key_never_raises(self):
        config = ConfigStore()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            config.set("typo", 1)
        assert config.get("typo") is UNSET

    def test_validation_disabled(self):
        config = ConfigStore(validate=False)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            config.set("custom", 1)
        assert config.get("custom") == 1

    def test_from_mapping(self):
        config = ConfigStore.from_mapping({"views": "v", "ignore_errors": True})
        assert config.views == "v"
        assert config.ignore_errors is True

    def test_recognized_keys(self):
        assert {"views", "default_scheme", "ignore_errors"} <= RECOGNIZED_KEYS

    def test_warning_carries_code(self):
        assert ConfigValidationWarning.code is ErrorCode.UNKNOWN_CONFIG_KEY
