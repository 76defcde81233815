import json

from cpindexer.index_builder import build_index_document, stable_stringify, write_if_changed
from cpindexer.models import InstalledItemInfo
from cpindexer.schemas import CATEGORY_TYPES


def _info(name):
    return InstalledItemInfo("Author.Mod", "Magic Mod", name)


def test_document_groups_and_sorts_by_qualified_id():
    items = {
        "(O)b": _info("B"),
        "(ZZ)q": _info("Q"),
        "(O)a": _info(""),
        "(BC)Keg": _info("Keg"),
    }
    document = build_index_document(items)

    assert document["categoryTypes"] == CATEGORY_TYPES
    assert set(document) == {"categoryTypes", *CATEGORY_TYPES}
    assert [entry["qualifiedId"] for entry in document["objects"]] == ["(O)a", "(O)b", "(ZZ)q"]
    assert document["objects"][0] == {
        "id": "a",
        "name": "a",
        "qualifiedId": "(O)a",
        "modId": "Author.Mod",
        "modName": "Magic Mod",
    }
    assert [entry["id"] for entry in document["bigCraftables"]] == ["Keg"]
    assert document["hats"] == []


def test_stable_stringify_ignores_key_order():
    assert stable_stringify({"b": 1, "a": {"d": 1, "c": [2, {"z": 0, "y": 1}]}}) == stable_stringify(
        {"a": {"c": [2, {"y": 1, "z": 0}], "d": 1}, "b": 1}
    )


def test_write_if_changed_skips_identical_content(tmp_path):
    output = tmp_path / "data" / "installed-mod-ids.json"
    document = build_index_document({"(O)Gem": _info("Gem")})

    assert write_if_changed(output, document) is True
    before = output.stat().st_mtime_ns
    assert write_if_changed(output, document) is False
    assert output.stat().st_mtime_ns == before


def test_write_if_changed_compares_canonical_form(tmp_path):
    output = tmp_path / "index.json"
    document = build_index_document({"(O)Gem": _info("Gem")})
    reordered = dict(reversed(list(document.items())))
    output.write_text(json.dumps(reordered), encoding="utf-8")

    assert write_if_changed(output, document) is False


def test_write_if_changed_rewrites_unparseable_file(tmp_path):
    output = tmp_path / "index.json"
    output.write_text("{ broken", encoding="utf-8")
    document = build_index_document({})

    assert write_if_changed(output, document) is True
    assert json.loads(output.read_text(encoding="utf-8")) == document


def test_write_if_changed_rewrites_when_content_differs(tmp_path):
    output = tmp_path / "index.json"
    write_if_changed(output, build_index_document({"(O)Gem": _info("Gem")}))

    assert write_if_changed(output, build_index_document({"(O)Gem": _info("Shiny Gem")})) is True
