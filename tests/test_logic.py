"""
Tests for the generation pipeline: discovery, filtering, dedup, ordering,
rendering and idempotent writes.
"""

import textwrap
from pathlib import Path

import pytest

from flutter_asset_gen.logic import collect_entries, deduplicate, generate_assets
from flutter_asset_gen.models import AssetEntry, AssetGenConfig
from flutter_asset_gen.render import render_output


def _config(**overrides) -> AssetGenConfig:
    # validation is covered separately
    return AssetGenConfig.defaults().copy_with(validate_pubspec=False, **overrides)


class TestEndToEnd:
    def test_class_output_grouped_with_map(self, project_dir: Path, make_files):
        make_files(["assets/logo.png", "assets/icon.svg"])

        result = generate_assets(config=_config())

        assert result.count == 2
        assert result.skipped is False
        assert result.warnings == []
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert content == textwrap.dedent("""\
            // GENERATED CODE – DO NOT MODIFY.
            // Run: flutter-asset-gen

            class Assets {
              const Assets._();

              // --- assets ---
              /// assets/icon.svg
              static const icon = "assets/icon.svg";
              /// assets/logo.png
              static const logo = "assets/logo.png";

              static const Map<String,String> all = {
                "icon": icon,
                "logo": logo,
              };
            }
        """)
        assert content.count("// --- assets ---") == 1

    def test_second_run_is_skipped(self, project_dir: Path, make_files):
        make_files(["assets/logo.png"])
        generate_assets(config=_config())
        output = project_dir / "lib/generated/assets.dart"
        before = output.read_bytes()

        result = generate_assets(config=_config())

        assert result.skipped is True
        assert output.read_bytes() == before

    def test_change_is_picked_up(self, project_dir: Path, make_files):
        make_files(["assets/logo.png"])
        generate_assets(config=_config())
        make_files(["assets/banner.jpg"])

        result = generate_assets(config=_config())

        assert result.skipped is False
        assert "banner" in (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")

    def test_dry_run_never_writes(self, project_dir: Path, make_files):
        make_files(["assets/logo.png"])
        result = generate_assets(config=_config(), dry_run=True)
        assert result.skipped is False
        assert not (project_dir / "lib/generated/assets.dart").exists()
        assert (project_dir / "lib/generated").is_dir()

    def test_no_header_and_no_grouping(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        generate_assets(config=_config(add_header=False, group_by_root=False, generate_map=False))
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert content == textwrap.dedent("""\
            class Assets {
              const Assets._();

              /// assets/a.png
              static const a = "assets/a.png";

            }
        """)

    def test_build_runner_banner(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        generate_assets(config=_config(build_runner_mode=True))
        lines = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8").splitlines()
        assert lines[2] == "// Generated by build_runner"
        assert lines[3] == ""

    def test_enum_output(self, project_dir: Path, make_files):
        make_files(["assets/logo.png", "assets/icon.svg"])
        generate_assets(config=_config(generate_enum=True, add_header=False))
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert content == textwrap.dedent("""\
            enum Assets {
              /// assets/icon.svg
              icon("assets/icon.svg"),
              /// assets/logo.png
              logo("assets/logo.png");

              const Assets(this.path);

              final String path;

              @override
              String toString() => path;

              static const Map<String, Assets> all = {
                "icon": Assets.icon,
                "logo": Assets.logo,
              };
            }
        """)

    def test_enum_without_entries_is_still_valid(self, project_dir: Path):
        generate_assets(config=_config(generate_enum=True))
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert "enum Assets {\n  ;\n" in content

    def test_deterministic_output(self, project_dir: Path, make_files):
        make_files(["assets/b/x.png", "assets/a/x.png", "images/x.png"])
        config = _config(roots=["assets", "images"], output="out1.dart")
        generate_assets(config=config)
        generate_assets(config=config.copy_with(output="out2.dart"))
        assert (project_dir / "out1.dart").read_bytes() == (project_dir / "out2.dart").read_bytes()

    def test_unwritable_output_propagates(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        (project_dir / "lib").write_text("not a directory")
        with pytest.raises(OSError):
            generate_assets(config=_config(output="lib/generated/assets.dart"))

    def test_special_characters_are_escaped(self, project_dir: Path, make_files):
        make_files(["assets/price$1.png", 'assets/say"hi.png'])
        generate_assets(config=_config())
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert '"assets/price\\$1.png";' in content
        assert '"assets/say\\"hi.png";' in content

    def test_backslash_is_escaped(self):
        entry = AssetEntry(root="assets", relative_path="back\\slash.png", identifier="backSlash")
        content = render_output(_config(), [entry])
        assert 'static const backSlash = "assets/back\\\\slash.png";' in content

    def test_special_characters_are_escaped_in_enum(self, project_dir: Path, make_files):
        make_files(["assets/price$1.png"])
        generate_assets(config=_config(generate_enum=True))
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert '("assets/price\\$1.png");' in content

    def test_undecodable_existing_output_is_overwritten(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        output = project_dir / "lib/generated/assets.dart"
        output.parent.mkdir(parents=True)
        output.write_bytes(b"\xff\xfe\x00garbage")

        result = generate_assets(config=_config())

        assert result.skipped is False
        assert 'static const a = "assets/a.png";' in output.read_text(encoding="utf-8")


class TestCollectEntries:
    def test_missing_root_is_skipped(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        entries, warnings = collect_entries(_config(roots=["missing", "assets"]))
        assert [e.identifier for e in entries] == ["a"]
        assert warnings == []

    def test_exclude_patterns(self, project_dir: Path, make_files):
        make_files(["assets/.hidden.tmp", "assets/notes.tmp", "assets/logo.png", "assets/.DS_Store"])
        entries, _ = collect_entries(_config(exclude=["**/.*", "**/*.tmp"]))
        assert [e.relative_path for e in entries] == ["logo.png"]

    def test_include_extensions(self, project_dir: Path, make_files):
        make_files(["assets/logo.PNG", "assets/icon.svg", "assets/data.json", "assets/LICENSE"])
        entries, _ = collect_entries(_config(include_extensions=[".png", ".svg"]))
        assert sorted(e.relative_path for e in entries) == ["icon.svg", "logo.PNG"]

    def test_empty_extension_can_be_included(self, project_dir: Path, make_files):
        make_files(["assets/LICENSE", "assets/data.json"])
        entries, _ = collect_entries(_config(include_extensions=[""]))
        assert [e.relative_path for e in entries] == ["LICENSE"]

    def test_sort_by_path(self, project_dir: Path, make_files):
        make_files(["assets/b/zebra.png", "assets/c/apple.png", "assets/a.png"])
        entries, _ = collect_entries(_config(sort="path", naming_case="snake", prefix="z"))
        assert [e.relative_path for e in entries] == ["a.png", "b/zebra.png", "c/apple.png"]

    def test_sort_by_identifier(self, project_dir: Path, make_files):
        make_files(["assets/b/zebra.png", "assets/c/apple.png", "assets/a.png"])
        entries, _ = collect_entries(_config())
        assert [e.identifier for e in entries] == ["a", "bZebra", "cApple"]

    def test_unknown_sort_falls_back_to_identifier(self, project_dir: Path, make_files):
        make_files(["assets/z/a.png", "assets/b.png"])
        entries, _ = collect_entries(_config(sort="size"))
        assert [e.identifier for e in entries] == ["b", "zA"]

    def test_collision_across_roots(self, project_dir: Path, make_files):
        make_files(["assets/logo.png", "images/logo.svg"])
        entries, warnings = collect_entries(_config(roots=["assets", "images"]))
        by_path = {e.path: e.identifier for e in entries}
        assert by_path == {"assets/logo.png": "logo", "images/logo.svg": "logo2"}
        assert warnings == ['Duplicate "logo" for logo.svg -> logo2']

    def test_group_order_follows_sorted_entries(self, project_dir: Path, make_files):
        make_files(["zz/apple.png", "aa/zebra.png"])
        generate_assets(config=_config(roots=["aa", "zz"]))
        content = (project_dir / "lib/generated/assets.dart").read_text(encoding="utf-8")
        assert content.index("// --- zz ---") < content.index("// --- aa ---")


class TestDeduplicate:
    def _entry(self, identifier: str, rel: str) -> AssetEntry:
        return AssetEntry(root="assets", relative_path=rel, identifier=identifier)

    def test_suffixes_start_at_two(self):
        entries, warnings = deduplicate([
            self._entry("logo", "logo.png"),
            self._entry("logo", "logo.svg"),
            self._entry("logo", "logo.jpg"),
        ])
        assert [e.identifier for e in entries] == ["logo", "logo2", "logo3"]
        assert warnings == [
            'Duplicate "logo" for logo.svg -> logo2',
            'Duplicate "logo" for logo.jpg -> logo3',
        ]

    def test_skips_identifiers_already_taken(self):
        entries, warnings = deduplicate([
            self._entry("logo2", "logo2.png"),
            self._entry("logo", "logo.png"),
            self._entry("logo", "logo.svg"),
        ])
        assert [e.identifier for e in entries] == ["logo2", "logo", "logo3"]
        assert len(warnings) == 1

    def test_unique_identifiers_untouched(self):
        entries, warnings = deduplicate([self._entry("a", "a.png"), self._entry("b", "b.png")])
        assert [e.identifier for e in entries] == ["a", "b"]
        assert warnings == []


class TestValidationStep:
    def test_result_carries_validation(self, project_dir: Path, make_files):
        make_files(["assets/a.png", "assets/b.png"])
        (project_dir / "pubspec.yaml").write_text("flutter:\n  assets:\n    - assets/a.png\n")

        result = generate_assets(config=AssetGenConfig.defaults())

        assert result.validation is not None
        assert result.validation.is_valid is False
        assert result.validation.missing_assets == ["assets/b.png"]
        assert result.validation.unused_assets == []

    def test_validation_disabled(self, project_dir: Path, make_files):
        make_files(["assets/a.png"])
        assert generate_assets(config=_config()).validation is None

    def test_verbose_report(self, project_dir: Path, make_files, caplog):
        make_files(["assets/a.png"])
        (project_dir / "pubspec.yaml").write_text("flutter:\n  assets:\n    - assets/\n")
        with caplog.at_level("INFO", logger="flutter_asset_gen"):
            generate_assets(config=AssetGenConfig.defaults(), verbose=True)
        messages = [r.getMessage() for r in caplog.records]
        assert "All assets are properly declared in pubspec.yaml" in messages
        assert "Generated 1 assets → lib/generated/assets.dart" in messages
