import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from project1356.config import Settings, load_settings


def test_defaults_without_file_or_env():
    settings = load_settings(environ={})
    assert settings == Settings()
    assert settings.masking_policy == "placeholder"
    assert settings.poll_interval_seconds == 60.0


def test_yaml_file_with_env_override(tmp_path):
    config = tmp_path / "project1356.yaml"
    config.write_text("masking_policy: partial\nexport_version: '1.1.0'\nlog_level: DEBUG\n", encoding="utf-8")
    settings = load_settings(
        environ={"PROJECT1356_CONFIG": str(config), "PROJECT1356_LOG_LEVEL": "WARNING"},
    )
    assert settings.masking_policy == "partial"
    assert settings.export_version == "1.1.0"
    assert settings.log_level == "WARNING"


def test_invalid_values_are_rejected(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path=config, environ={})
    with pytest.raises(ValueError):
        load_settings(environ={"PROJECT1356_MASKING_POLICY": "reveal"})
