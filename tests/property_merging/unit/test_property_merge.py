"""Property merge service tests."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
from simple_jmeter_runner.property_merging import (
    ConfigArtifactPropertySource,
    MergeMode,
    PropertyCategory,
    PropertyMergeError,
    configure_property_files,
    read_properties_file,
    resolve_category,
)

_DEFAULTS = {
    PropertyCategory.JMETER: "# engine defaults\nlanguage=en\njmeter.exit.check.pause=2000\n",
    PropertyCategory.SAVE_SERVICE: "_version=2.2\n",
    PropertyCategory.UPGRADE: "old.Class=new.Class\n",
    PropertyCategory.USER: "# user defaults\nuser.shared=default\n",
    PropertyCategory.SYSTEM: "# system defaults\n",
}


def _write_config_jar(path: Path, defaults: dict[PropertyCategory, str] | None = None) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for category, text in (defaults or _DEFAULTS).items():
            archive.writestr(f"bin/{category.file_name}", text)
    return path


def _write_config_directory(path: Path) -> Path:
    (path / "bin").mkdir(parents=True)
    for category, text in _DEFAULTS.items():
        (path / "bin" / category.file_name).write_text(text, encoding="iso-8859-1")
    return path


@pytest.fixture
def source(tmp_path: Path) -> ConfigArtifactPropertySource:
    return ConfigArtifactPropertySource(_write_config_jar(tmp_path / "ApacheJMeter_config-5.6.jar"))


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


def test_resolve_category_merge_keeps_defaults_and_lets_overrides_win() -> None:
    merged = resolve_category(
        {"a": "1", "b": "2"}, {"b": "override", "c": "3"}, MergeMode.MERGE
    )

    assert merged == {"a": "1", "b": "override", "c": "3"}
    assert list(merged) == ["a", "b", "c"]


def test_resolve_category_replace_discards_defaults() -> None:
    merged = resolve_category({"a": "1", "b": "2"}, {"b": "override"}, MergeMode.REPLACE)

    assert merged == {"b": "override"}


def test_categories_without_overrides_are_copied_verbatim(
    source: ConfigArtifactPropertySource, output_dir: Path
) -> None:
    property_sets = configure_property_files(
        source, {}, mode=MergeMode.MERGE, output_dir=output_dir
    )

    for category, text in _DEFAULTS.items():
        written = output_dir / category.file_name
        assert written.read_text(encoding="iso-8859-1") == text
        assert property_sets[category].path == written
    assert PropertyCategory.GLOBAL not in property_sets
    assert not (output_dir / "global.properties").exists()


def test_merge_mode_overlays_overrides_on_defaults(
    source: ConfigArtifactPropertySource, output_dir: Path
) -> None:
    property_sets = configure_property_files(
        source,
        {PropertyCategory.JMETER: {"language": "de", "extra": "yes"}},
        mode=MergeMode.MERGE,
        output_dir=output_dir,
    )

    expected = {"language": "de", "jmeter.exit.check.pause": "2000", "extra": "yes"}
    assert property_sets[PropertyCategory.JMETER].properties == expected
    assert read_properties_file(output_dir / "jmeter.properties") == expected


def test_replace_mode_writes_exactly_the_overrides(
    source: ConfigArtifactPropertySource, output_dir: Path
) -> None:
    property_sets = configure_property_files(
        source,
        {PropertyCategory.USER: {"only": "this"}},
        mode=MergeMode.REPLACE,
        output_dir=output_dir,
    )

    assert property_sets[PropertyCategory.USER].properties == {"only": "this"}
    assert read_properties_file(output_dir / "user.properties") == {"only": "this"}
    assert property_sets[PropertyCategory.JMETER].properties["language"] == "en"


def test_global_properties_win_over_every_other_category(
    source: ConfigArtifactPropertySource, output_dir: Path
) -> None:
    property_sets = configure_property_files(
        source,
        {
            PropertyCategory.USER: {"user.shared": "from-user"},
            PropertyCategory.GLOBAL: {"user.shared": "from-global", "language": "fr"},
        },
        mode=MergeMode.MERGE,
        output_dir=output_dir,
    )

    assert property_sets[PropertyCategory.USER].properties["user.shared"] == "from-global"
    assert property_sets[PropertyCategory.JMETER].properties["language"] == "fr"
    assert read_properties_file(output_dir / "jmeter.properties")["language"] == "fr"
    assert read_properties_file(output_dir / "global.properties") == {
        "user.shared": "from-global",
        "language": "fr",
    }
    # untouched categories stay byte-identical copies
    assert (output_dir / "upgrade.properties").read_text(encoding="iso-8859-1") == _DEFAULTS[
        PropertyCategory.UPGRADE
    ]


def test_custom_file_in_test_directory_is_a_user_source(
    source: ConfigArtifactPropertySource, output_dir: Path, tmp_path: Path
) -> None:
    custom_dir = tmp_path / "tests"
    custom_dir.mkdir()
    (custom_dir / "jmeter.properties").write_text("language=es\nfrom.file=1\n", encoding="utf-8")

    property_sets = configure_property_files(
        source,
        {PropertyCategory.JMETER: {"from.file": "2"}},
        mode=MergeMode.MERGE,
        output_dir=output_dir,
        custom_files_dir=custom_dir,
    )

    jmeter = property_sets[PropertyCategory.JMETER].properties
    assert jmeter["language"] == "es"
    assert jmeter["from.file"] == "2"
    assert jmeter["jmeter.exit.check.pause"] == "2000"


def test_merged_output_is_stable_when_merged_again(
    source: ConfigArtifactPropertySource, output_dir: Path, tmp_path: Path
) -> None:
    overrides = {
        PropertyCategory.JMETER: {"language": "de"},
        PropertyCategory.GLOBAL: {"language": "it"},
    }
    first = configure_property_files(
        source, overrides, mode=MergeMode.MERGE, output_dir=output_dir
    )
    second_output = tmp_path / "second"
    second_output.mkdir()

    second = configure_property_files(
        ConfigArtifactPropertySource(output_dir),
        overrides,
        mode=MergeMode.MERGE,
        output_dir=second_output,
    )

    for category, property_set in first.items():
        assert read_properties_file(property_set.path) == property_set.properties
        assert second[category].properties == property_set.properties


def test_exploded_config_directory_is_accepted(tmp_path: Path, output_dir: Path) -> None:
    source = ConfigArtifactPropertySource(_write_config_directory(tmp_path / "config"))

    property_sets = configure_property_files(
        source, {}, mode=MergeMode.MERGE, output_dir=output_dir
    )

    assert property_sets[PropertyCategory.JMETER].properties["language"] == "en"


def test_missing_default_file_fails(tmp_path: Path, output_dir: Path) -> None:
    incomplete = dict(_DEFAULTS)
    del incomplete[PropertyCategory.UPGRADE]
    source = ConfigArtifactPropertySource(_write_config_jar(tmp_path / "config.jar", incomplete))

    with pytest.raises(PropertyMergeError, match="upgrade.properties"):
        configure_property_files(source, {}, mode=MergeMode.MERGE, output_dir=output_dir)


def test_missing_config_artifact_fails(tmp_path: Path, output_dir: Path) -> None:
    source = ConfigArtifactPropertySource(tmp_path / "does-not-exist.jar")

    with pytest.raises(PropertyMergeError, match="Config artifact not found"):
        configure_property_files(source, {}, mode=MergeMode.MERGE, output_dir=output_dir)


def test_non_string_override_values_are_rejected(
    source: ConfigArtifactPropertySource, output_dir: Path
) -> None:
    with pytest.raises(PropertyMergeError, match="strings"):
        configure_property_files(
            source,
            {PropertyCategory.JMETER: {"port": 8080}},  # type: ignore[dict-item]
            mode=MergeMode.MERGE,
            output_dir=output_dir,
        )


def test_unknown_category_key_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown property category 'jmeterr'"):
        PropertyCategory.from_config_key("jmeterr")
