import json
from pathlib import Path

import yaml

from appearance_manager.enginelib.catalog_loader import CatalogLoader
from appearance_manager.enginelib.appearance import LinearGradient, Solid


def write_json(path: Path, payload):
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle)


def test_sources_merge_in_configured_order(tmp_path):
    write_json(tmp_path / "first.json", [{"id": "b", "title": "Beta", "colors": ["#111111"]}])
    write_json(tmp_path / "second.json", [{"id": "a", "title": "Alpha", "colors": ["#222222"]}])

    loader = CatalogLoader("theme", tmp_path, ["first", "second"])
    result = loader.load()

    assert result.ok
    assert [record.id for record in result.records] == ["b", "a"]
    assert result.loaded_sources == ["first", "second"]


def test_missing_source_is_skipped(tmp_path):
    write_json(tmp_path / "present.json", [{"id": "a", "title": "Alpha"}])

    result = CatalogLoader("theme", tmp_path, ["absent", "present"]).load()

    assert not result.ok
    assert result.skipped_sources == ["absent"]
    assert [record.id for record in result.records] == ["a"]
    assert "absent" in result.errors[0]


def test_malformed_source_contributes_nothing(tmp_path):
    (tmp_path / "broken.json").write_text("[{\"id\": ", encoding="utf-8")
    write_json(
        tmp_path / "partial.json",
        [{"id": "ok", "title": "Fine"}, {"title": "no id"}],
    )
    write_json(tmp_path / "good.json", [{"id": "g", "title": "Good"}])

    result = CatalogLoader("theme", tmp_path, ["broken", "partial", "good"]).load()

    assert result.skipped_sources == ["broken", "partial"]
    assert [record.id for record in result.records] == ["g"]
    assert len(result.errors) == 2


def test_invalid_hex_color_is_a_decode_error(tmp_path):
    write_json(tmp_path / "colors.json", [{"id": "x", "title": "X", "colors": ["red"]}])

    result = CatalogLoader("theme", tmp_path, ["colors"]).load()

    assert result.records == []
    assert result.skipped_sources == ["colors"]


def test_unknown_type_is_not_rejected(tmp_path):
    write_json(tmp_path / "themes.json", [{"id": "x", "title": "X", "type": "hologram", "colors": ["#ABCDEF"]}])

    result = CatalogLoader("theme", tmp_path, ["themes"]).load()

    assert result.ok
    assert result.records[0].appearance == Solid("#ABCDEF")


def test_null_and_non_string_type_fall_back_to_solid(tmp_path):
    write_json(
        tmp_path / "themes.json",
        [
            {"id": "flat_null", "title": "Flat", "type": None, "colors": ["#111111"]},
            {"id": "flat_int", "title": "Int", "type": 3, "colors": ["#222222"]},
            {"id": "nested", "title": "Nested", "background": {"type": ["linear"], "colors": ["#333333"]}},
        ],
    )
    write_json(
        tmp_path / "pencils.json",
        [
            {
                "id": "p",
                "name": "P",
                "type": False,
                "pencilColor": ["#444444"],
                "textFieldBackground": {"type": None, "colors": ["#555555"]},
            }
        ],
    )

    themes = CatalogLoader("theme", tmp_path, ["themes"]).load()
    pencils = CatalogLoader("pencil", tmp_path, ["pencils"]).load()

    assert themes.ok and pencils.ok
    assert [record.appearance for record in themes.records] == [
        Solid("#111111"),
        Solid("#222222"),
        Solid("#333333"),
    ]
    assert pencils.records[0].appearance == Solid("#444444")
    assert pencils.records[0].input_field_appearance == Solid("#555555")


def test_yaml_sources_are_supported(tmp_path):
    with open(tmp_path / "pencils.yaml", "w", encoding="utf-8") as handle:
        yaml.safe_dump(
            [{"id": "p", "title": "Ink", "type": "linearGradient", "pencilColor": ["#000000", "#FFFFFF"]}],
            handle,
        )

    result = CatalogLoader("pencil", tmp_path, ["pencils"]).load()

    assert result.ok
    assert result.records[0].appearance == LinearGradient(("#000000", "#FFFFFF"))


def test_duplicate_ids_keep_first_occurrence(tmp_path):
    write_json(tmp_path / "one.json", [{"id": "dup", "title": "First"}])
    write_json(tmp_path / "two.json", [{"id": "dup", "title": "Second"}, {"id": "other", "title": "Other"}])

    result = CatalogLoader("theme", tmp_path, ["one", "two"]).load()

    assert result.dedupe_hits == 1
    assert [record.display_name for record in result.records] == ["First", "Other"]


def test_loader_is_repeatable(tmp_path):
    write_json(tmp_path / "themes.json", [{"id": "a", "title": "A"}, {"id": "b", "title": "B"}])
    loader = CatalogLoader("theme", tmp_path, ["themes"])

    assert loader.load().records == loader.load().records


def test_explicit_file_name(tmp_path):
    write_json(tmp_path / "custom.json", [{"id": "a", "title": "A"}])

    result = CatalogLoader("theme", tmp_path, ["custom.json"]).load()

    assert result.loaded_sources == ["custom.json"]
    assert result.summary()["count"] == 1
