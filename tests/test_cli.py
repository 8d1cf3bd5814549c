"""
Tests for the gear-cutout command-line tool.
"""

import json

import pytest

import gear_cutout


def base_args(tmp_path):
    return [
        "-o", str(tmp_path / "out"),
        "--settings-dir", str(tmp_path / "settings"),
        "--full-size", "64",
        "--tight-size", "32",
    ]


class TestCollectInputs:
    """Tests for collect_inputs."""

    def test_expands_directories(self, tmp_path, write_sprite):
        write_sprite(tmp_path / "b.png")
        write_sprite(tmp_path / "a.PNG")
        (tmp_path / "notes.txt").write_text("x")

        files = gear_cutout.collect_inputs([tmp_path])

        assert [p.name for p in files] == ["a.PNG", "b.png"]

    def test_keeps_files(self, tmp_path):
        path = tmp_path / "x.png"
        assert gear_cutout.collect_inputs([path]) == [path]


class TestBuildParameters:
    """Tests for build_parameters."""

    def test_clamps_ranges(self):
        args = gear_cutout.build_parser().parse_args(["--tolerance", "500", "--erosion", "9"])
        params = gear_cutout.build_parameters(args)

        assert params.tolerance == 150
        assert params.erosion_iterations == 4

    def test_clamps_low_tolerance(self):
        args = gear_cutout.build_parser().parse_args(["--tolerance", "1"])
        assert gear_cutout.build_parameters(args).tolerance == 15

    def test_no_corner_mask(self):
        args = gear_cutout.build_parser().parse_args(["--no-corner-mask", "--mode", "threshold"])
        params = gear_cutout.build_parameters(args)

        assert params.corner_region is None
        assert params.classification_mode.value == "threshold"


class TestMain:
    """Tests for main."""

    def test_exports_outputs(self, tmp_path, write_sprite):
        src = write_sprite(tmp_path / "sprite.png")

        code = gear_cutout.main([str(src)] + base_args(tmp_path))

        assert code == 0
        assert (tmp_path / "out" / "4_2_ドレス_装備.png").exists()
        assert (tmp_path / "out" / "4_2_ドレス_装備_サムネ.png").exists()

    def test_failed_item_sets_exit_code(self, tmp_path, write_sprite):
        good = write_sprite(tmp_path / "sprite.png")
        bad = tmp_path / "broken.png"
        bad.write_bytes(b"garbage")

        code = gear_cutout.main([str(good), str(bad)] + base_args(tmp_path))

        assert code == 1
        assert (tmp_path / "out" / "4_2_ドレス_装備.png").exists()

    def test_existing_output_without_overwrite(self, tmp_path, write_sprite):
        src = write_sprite(tmp_path / "sprite.png")
        assert gear_cutout.main([str(src)] + base_args(tmp_path)) == 0

        assert gear_cutout.main([str(src)] + base_args(tmp_path)) == 1
        assert gear_cutout.main([str(src), "--overwrite"] + base_args(tmp_path)) == 0

    def test_saves_session(self, tmp_path, write_sprite):
        src = write_sprite(tmp_path / "sprite.png")
        session = tmp_path / "batch.json"

        gear_cutout.main([str(src), "--session", str(session), "--erosion", "2"] + base_args(tmp_path))

        items = json.loads(session.read_text(encoding="utf-8"))["items"]
        assert items[0]["source_path"] == str(src)
        assert items[0]["erosion"] == 2

    def test_session_rerun_keeps_one_item(self, tmp_path, write_sprite):
        src = write_sprite(tmp_path / "sprite.png")
        session = tmp_path / "batch.json"
        first = [str(src), "--session", str(session), "--erosion", "2"] + base_args(tmp_path)
        again = [str(src), "--session", str(session), "--overwrite"] + base_args(tmp_path)

        assert gear_cutout.main(first) == 0
        assert gear_cutout.main(again) == 0

        items = json.loads(session.read_text(encoding="utf-8"))["items"]
        assert len(items) == 1
        assert items[0]["erosion"] == 2
        assert sorted(p.name for p in (tmp_path / "out").iterdir()) == [
            "4_2_ドレス_装備.png",
            "4_2_ドレス_装備_サムネ.png",
        ]

    def test_save_api_key(self, tmp_path, write_sprite, monkeypatch):
        src = write_sprite(tmp_path / "sprite.png")
        args = [str(src), "--api-key", " k ", "--save-api-key"] + base_args(tmp_path)
        monkeypatch.setattr(gear_cutout, "name_items", lambda store, service: 0)

        assert gear_cutout.main(args) == 0

        settings = json.loads((tmp_path / "settings" / "settings.json").read_text(encoding="utf-8"))
        assert settings["user_gemini_api_key"] == "k"

    def test_save_api_key_requires_key(self, tmp_path):
        with pytest.raises(SystemExit):
            gear_cutout.main(["--save-api-key"] + base_args(tmp_path))

    def test_no_inputs(self, tmp_path):
        with pytest.raises(SystemExit):
            gear_cutout.main(base_args(tmp_path))
