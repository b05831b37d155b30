import codecs

from metadata_translator_mcp.csv_io import read_csv, write_csv
from metadata_translator_mcp.rows import (
    CsvRow,
    MetadataObjectContainer,
    ObjectRef,
    ObjectType,
    TranslatedProperty,
    TranslationRow,
)


def _row(prop, original, translation=""):
    ref = ObjectRef(ObjectType.MEASURE, "Sales", original)
    return TranslationRow(MetadataObjectContainer((ref,), prop), {"en-US": original, "fr-FR": translation})


def test_write_csv_has_bom_header_and_quoting(tmp_path):
    path = tmp_path / "fr-FR.csv"
    rows = [
        _row(TranslatedProperty.CAPTION, "Sales, net", 'Ventes "nettes"'),
        _row(TranslatedProperty.DESCRIPTION, "Line one\nline two"),
    ]

    assert write_csv(path, rows, "en-US", "fr-FR") == 2

    raw = path.read_bytes()
    assert raw.startswith(codecs.BOM_UTF8)
    assert raw.decode("utf-8-sig") == (
        "Type,Original,Translation\r\n"
        'Caption,"Sales, net","Ventes ""nettes"""\r\n'
        'Description,"Line one\nline two",\r\n'
    )


def test_read_csv_skips_comments_and_malformed_records(tmp_path):
    path = tmp_path / "fr-FR.csv"
    path.write_text(
        "Type,Original,Translation\n"
        "# exported for review\n"
        "Caption,Sales,Ventes\n"
        "Caption,too,many,fields\n"
        "Description,\"Multi\nline\",\"Sur\nplusieurs\"\n",
        encoding="utf-8-sig",
    )

    assert read_csv(path) == [
        CsvRow("Caption", "Sales", "Ventes"),
        CsvRow("Description", "Multi\nline", "Sur\nplusieurs"),
    ]


def test_read_csv_fallback_uses_original_for_empty_translation(tmp_path):
    path = tmp_path / "de-DE.csv"
    path.write_text("Type,Original,Translation\nCaption,Sales,\nCaption,Date,Datum\n", encoding="utf-8")

    assert read_csv(path, fallback_to_default=True) == [
        CsvRow("Caption", "Sales", "Sales"),
        CsvRow("Caption", "Date", "Datum"),
    ]
    assert read_csv(path)[0].translation == ""


def test_read_csv_empty_or_missing_file_gives_nothing(tmp_path):
    empty = tmp_path / "fr-FR.csv"
    empty.write_text("", encoding="utf-8")

    assert read_csv(empty) == []
    assert read_csv(tmp_path / "missing.csv") == []


def test_written_file_reads_back(tmp_path):
    path = tmp_path / "fr-FR.csv"
    rows = [_row(TranslatedProperty.CAPTION, "A, B", "C \"D\""), _row(TranslatedProperty.DISPLAY_FOLDER, "X\\Y")]
    write_csv(path, rows, "en-US", "fr-FR")

    assert read_csv(path) == [
        CsvRow("Caption", "A, B", 'C "D"'),
        CsvRow("DisplayFolder", "X\\Y", ""),
    ]


def test_hash_lines_inside_quoted_fields_are_kept(tmp_path):
    path = tmp_path / "fr-FR.csv"
    rows = [
        _row(TranslatedProperty.DESCRIPTION, "Intro\n# Notes\nmore", "Intro FR\n# Remarques"),
        _row(TranslatedProperty.CAPTION, "Sales", "Ventes"),
    ]
    write_csv(path, rows, "en-US", "fr-FR")

    assert read_csv(path) == [
        CsvRow("Description", "Intro\n# Notes\nmore", "Intro FR\n# Remarques"),
        CsvRow("Caption", "Sales", "Ventes"),
    ]


def test_comment_lines_with_quotes_do_not_swallow_records(tmp_path):
    path = tmp_path / "fr-FR.csv"
    path.write_text(
        '# generated, "draft\n'
        "Type,Original,Translation\n"
        '#,"unterminated\n'
        "Caption,Sales,Ventes\n",
        encoding="utf-8-sig",
    )

    assert read_csv(path) == [CsvRow("Caption", "Sales", "Ventes")]
