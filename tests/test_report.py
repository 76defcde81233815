from openpyxl import load_workbook

from cpindexer.index_builder import build_index_document
from cpindexer.models import InstalledItemInfo, PackageInfo
from cpindexer.report import export_report, print_index_summary


def _document():
    return build_index_document(
        {
            "(O)Gem": InstalledItemInfo("Author.Mod", "Magic Mod", "Gem"),
            "(H)Hat": InstalledItemInfo("Author.Mod", "Magic Mod", "Hat"),
            "(O)Other.Pack_Ore": InstalledItemInfo("Other.Pack", "Other Pack", "Other.Pack_Ore"),
        }
    )


def test_export_report_writes_one_sheet_per_non_empty_category(tmp_path):
    output = tmp_path / "reports" / "installed_items.xlsx"

    export_report(output, _document())

    workbook = load_workbook(output)
    assert workbook.sheetnames == ["summary", "objects", "hats"]
    rows = list(workbook["objects"].iter_rows(values_only=True))
    assert rows[0] == ("qualifiedId", "id", "name", "modId", "modName")
    assert rows[1] == ("(O)Gem", "Gem", "Gem", "Author.Mod", "Magic Mod")
    summary = {row[0]: row[2] for row in workbook["summary"].iter_rows(min_row=2, values_only=True)}
    assert summary["objects"] == 2
    assert summary["weapons"] == 0


def test_print_index_summary(tmp_path, capsys):
    package = PackageInfo(unique_id="Author.Mod", name="Magic Mod", root_dir=tmp_path)

    print_index_summary(_document(), [package])

    out = capsys.readouterr().out
    assert "Magic Mod (Author.Mod): 2 items" in out
    assert "Other.Pack: 1 items (referenced only)" in out
