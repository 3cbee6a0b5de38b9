from __future__ import annotations

import pytest
import yaml

from gpxtag.core.config import Config, MediaConfig, TrackConfig, create_default_config


def test_defaults():
    config = Config()
    assert config.log_level == "INFO"
    assert config.log_file is None
    assert config.track.max_workers == 1
    assert config.media.extensions == [".jpg", ".jpeg"]
    assert config.media.fallback_to_mtime is True
    assert config.media.dry_run is False
    assert config.validate() is True


def test_default_extension_lists_are_independent():
    first, second = MediaConfig(), MediaConfig()
    first.extensions.append(".png")
    assert second.extensions == [".jpg", ".jpeg"]


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "config.yaml"
    original = Config(
        track=TrackConfig(max_workers=4),
        media=MediaConfig(extensions=[".jpg"], dry_run=True, show_progress=False),
        log_level="DEBUG",
        log_file="logs/gpxtag.log",
    )
    original.to_yaml(str(path))

    assert Config.from_yaml(str(path)) == original


def test_partial_yaml_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: WARNING\nmedia:\n  dry_run: true\n", encoding="utf-8")

    config = Config.from_yaml(str(path))
    assert config.log_level == "WARNING"
    assert config.media.dry_run is True
    assert config.media.extensions == [".jpg", ".jpeg"]
    assert config.track == TrackConfig()


def test_empty_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.from_yaml(str(path)) == Config()


def test_unknown_key_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("media:\n  colour: blue\n", encoding="utf-8")
    with pytest.raises(TypeError):
        Config.from_yaml(str(path))


@pytest.mark.parametrize(
    "config",
    [
        Config(log_level="LOUD"),
        Config(track=TrackConfig(max_workers=0)),
        Config(media=MediaConfig(extensions=[])),
        Config(media=MediaConfig(extensions=["jpg"])),
    ],
)
def test_validate_rejects(config):
    with pytest.raises(ValueError):
        config.validate()


def test_validate_accepts_lowercase_level():
    assert Config(log_level="debug").validate() is True


def test_create_default_config(tmp_path):
    path = tmp_path / "gpxtag.yaml"
    config = create_default_config(str(path))

    assert config == Config()
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["log_level"] == "INFO"
    assert data["media"]["extensions"] == [".jpg", ".jpeg"]
    assert data["track"]["max_workers"] == 1


def test_malformed_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("media: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        Config.from_yaml(str(path))


@pytest.mark.parametrize("content", ["- a\n- b\n", "just text\n", "track: 3\n", "media: [.jpg]\n"])
def test_non_mapping_yaml_is_rejected(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        Config.from_yaml(str(path))


def test_validate_rejects_non_string_values():
    with pytest.raises(ValueError):
        Config(log_level=5).validate()
    with pytest.raises(ValueError):
        Config(media=MediaConfig(extensions=[5])).validate()
