import pytest

from cpindexer.load_config import (
    DEFAULT_AUTO_REBUILD_COOLDOWN,
    DEFAULT_OUTPUT,
    ConfigNotFoundError,
    IndexerConfig,
    load_base_qualified_ids,
    load_program_config,
    require_mods_root,
)

from .conftest import write_json, write_text


def test_load_program_config_resolves_relative_paths(tmp_path):
    config_path = write_text(
        tmp_path / "config.toml",
        'mods_root = "Mods"\noutput = "out/index.json"\nbaseline = ["data/stardew-ids", "data/custom-ids.json"]\n'
        "auto_rebuild_cooldown = 3\n",
    )

    config = load_program_config(config_path)

    assert config.mods_root == tmp_path / "Mods"
    assert config.output_path == tmp_path / "out" / "index.json"
    assert config.baseline_paths == [tmp_path / "data" / "stardew-ids", tmp_path / "data" / "custom-ids.json"]
    assert config.auto_rebuild_cooldown == 3.0


def test_missing_config_file_uses_defaults(tmp_path, capsys):
    config = load_program_config(tmp_path / "config.toml")

    assert config.mods_root is None
    assert config.output_path == DEFAULT_OUTPUT
    assert config.auto_rebuild_cooldown == DEFAULT_AUTO_REBUILD_COOLDOWN
    assert "[warn]" in capsys.readouterr().out


def test_invalid_toml_raises_value_error(tmp_path):
    config_path = write_text(tmp_path / "config.toml", "mods_root = = nope")
    with pytest.raises(ValueError):
        load_program_config(config_path)


def test_single_baseline_string_is_one_path(tmp_path):
    config_path = write_text(tmp_path / "config.toml", 'baseline = "data/stardew-ids"\n')

    config = load_program_config(config_path)

    assert config.baseline_paths == [tmp_path / "data" / "stardew-ids"]


def test_baseline_of_wrong_type_raises_value_error(tmp_path):
    config_path = write_text(tmp_path / "config.toml", "baseline = 7\n")
    with pytest.raises(ValueError, match="baseline"):
        load_program_config(config_path)


def test_require_mods_root(tmp_path):
    with pytest.raises(ConfigNotFoundError):
        require_mods_root(IndexerConfig())
    with pytest.raises(ConfigNotFoundError):
        require_mods_root(IndexerConfig(mods_root=tmp_path / "missing"))
    file_path = write_text(tmp_path / "file.txt", "x")
    with pytest.raises(ConfigNotFoundError):
        require_mods_root(IndexerConfig(mods_root=file_path))
    assert require_mods_root(IndexerConfig(mods_root=tmp_path)) == tmp_path


def test_load_base_qualified_ids(tmp_path):
    write_json(
        tmp_path / "stardew-ids.json",
        {
            "categoryTypes": {"objects": "O", "hats": "H"},
            "objects": [{"qualifiedId": " (O)128 "}, {"id": "no-qualified-id"}],
            "hats": [{"qualifiedId": "(H)1"}],
            "notListed": [{"qualifiedId": "(X)1"}],
        },
    )
    write_json(tmp_path / "custom-ids.json", {"categoryTypes": {"objects": "O"}, "objects": [{"qualifiedId": "(O)Custom"}]})
    write_text(tmp_path / "broken.json", "{ nope")

    base = load_base_qualified_ids([tmp_path / "stardew-ids", tmp_path / "custom-ids.json", tmp_path / "broken.json"])

    assert base == {"(O)128", "(H)1", "(O)Custom"}
