import json

import pytest

from shipyard.core.errors import ConfigError
from shipyard.core.release_config import DEFAULT_UNITS, ReleaseConfig


def test_default_config_uses_known_units() -> None:
    config = ReleaseConfig()

    assert [unit.name for unit in config.units] == ["manifest", "convert", "runtime"]
    assert config.units == list(DEFAULT_UNITS)
    assert config.propagation_delay_s == 10.0
    assert config.token_env == "CARGO_REGISTRY_TOKEN"


def test_yaml_config_loads_units_and_settings(tmp_path) -> None:
    path = tmp_path / "release.yaml"
    path.write_text(
        """
token_env: CRATES_TOKEN
propagation_delay_s: 15
max_attempts: 5
publish_args: ["--allow-dirty"]
units:
  - name: manifest
    location: manifest/Cargo.toml
  - name: convert
    location: convert/Cargo.toml
    dependencies: [manifest]
  - name: runtime
    dependencies: [manifest, convert]
    verify: false
""",
        encoding="utf-8",
    )

    config = ReleaseConfig.from_file(str(path))

    assert config.token_env == "CRATES_TOKEN"
    assert config.propagation_delay_s == 15.0
    assert config.max_attempts == 5
    assert config.publish_args == ["--allow-dirty"]
    assert config.workdir == str(tmp_path.resolve())
    runtime = config.units[2]
    assert runtime.location == "runtime/Cargo.toml"
    assert runtime.dependencies == ("manifest", "convert")
    assert runtime.verify is False
    assert config.units[0].verify is True


def test_json_config_is_supported(tmp_path) -> None:
    path = tmp_path / "release.json"
    path.write_text(json.dumps({"units": [{"name": "manifest"}], "workdir": "/srv/repo"}), encoding="utf-8")

    config = ReleaseConfig.from_file(str(path))

    assert config.units[0].location == "manifest/Cargo.toml"
    assert config.workdir == "/srv/repo"


@pytest.mark.parametrize(
    "name,content",
    [
        ("release.yaml", "units: []\n"),
        ("release.yaml", "units: [manifest]\n"),
        ("release.yaml", "units:\n  - name: runtime\n    verify: maybe\n"),
        ("release.yaml", "- just\n- a list\n"),
        ("release.yaml", "units:\n  - location: nameless/Cargo.toml\n"),
        ("release.yaml", "units: [manifest\n"),
        ("release.toml", "units = []\n"),
    ],
)
def test_invalid_configs_raise_config_error(tmp_path, name, content) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        ReleaseConfig.from_file(str(path))


def test_missing_config_file_raises_config_error(tmp_path) -> None:
    with pytest.raises(ConfigError):
        ReleaseConfig.from_file(str(tmp_path / "absent.yaml"))


def test_validate_rejects_negative_delay() -> None:
    config = ReleaseConfig(propagation_delay_s=-1)

    with pytest.raises(ConfigError):
        config.validate()


@pytest.mark.parametrize("raw,expected", [("false", False), ("no", False), ("true", True), (False, False)])
def test_verify_flag_parses_strings_strictly(raw, expected) -> None:
    config = ReleaseConfig.from_dict({"units": [{"name": "runtime", "verify": raw}]})

    assert config.units[0].verify is expected
