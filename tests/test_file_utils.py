import os

from cpindexer.file_utils import iter_json_files, read_jsonc

from .conftest import write_json, write_text


def test_iter_json_files_is_sorted_and_skips_dot_folders(tmp_path):
    write_json(tmp_path / "b.json", {})
    write_json(tmp_path / "a" / "z.jsonc", {})
    write_json(tmp_path / ".git" / "hidden.json", {})
    write_text(tmp_path / "notes.txt", "not json")

    assert list(iter_json_files(tmp_path)) == [tmp_path / "a" / "z.jsonc", tmp_path / "b.json"]


def test_iter_json_files_stops_at_self_pointing_symlink(tmp_path):
    pack = tmp_path / "Pack"
    write_json(pack / "content.json", {"Changes": []})
    os.symlink(pack, pack / "loop")

    assert list(iter_json_files(pack)) == [pack / "content.json"]


def test_iter_json_files_stops_at_mutual_symlinks(tmp_path):
    pack = tmp_path / "Pack"
    write_json(pack / "content.json", {"Changes": []})
    os.symlink(pack, pack / "loop_a")
    os.symlink(pack, pack / "loop_b")

    assert list(iter_json_files(pack)) == [pack / "content.json"]


def test_read_jsonc_accepts_comments_and_trailing_commas(tmp_path):
    path = write_text(tmp_path / "content.json", '{\n  // comment\n  "Format": "2.0.0",\n}\n')
    assert read_jsonc(path) == {"Format": "2.0.0"}
