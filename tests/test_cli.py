"""Tests for the command line interface."""

from hksave.__main__ import main, parse_args
from hksave.core.codec import decode
from hksave.utils.hex_utils import to_hex


class TestParseArgs:
    """Tests for argument parsing."""

    def test_bare_file_opens_editor(self):
        args = parse_args(["user1.dat"])

        assert args.command == "edit"
        assert args.file == "user1.dat"

    def test_no_arguments_opens_editor(self):
        args = parse_args([])

        assert args.command == "edit"
        assert args.file is None

    def test_set_with_presets(self):
        args = parse_args(["set", "user1.dat", "geo=5", "-p", "max-soul", "-p", "max-geo"])

        assert args.assignments == ["geo=5"]
        assert args.preset == ["max-soul", "max-geo"]


class TestCommands:
    """Tests for the batch commands."""

    def test_show(self, save_path, capsys):
        assert main(["show", str(save_path)]) == 0

        out = capsys.readouterr().out
        assert "geo" in out
        assert "1234" in out
        assert "57.5" in out

    def test_hex(self, save_path, sample_save, capsys):
        assert main(["hex", str(save_path)]) == 0

        assert capsys.readouterr().out.strip() == to_hex(sample_save)

    def test_text_no_color(self, save_path, sample_save, capsys):
        assert main(["text", "--no-color", str(save_path)]) == 0

        assert capsys.readouterr().out == sample_save.decode("utf-8")

    def test_set_writes_modified_copy(self, save_path, sample_save, capsys):
        assert main(["set", str(save_path), "geo=999999", "completionPercentage=112"]) == 0

        modified = save_path.with_name("user1_modified.dat")
        fields = decode(modified.read_bytes())
        assert fields["geo"] == 999999
        assert fields["completionPercentage"] == 112.0
        assert save_path.read_bytes() == sample_save
        assert str(modified) in capsys.readouterr().out

    def test_set_preset_and_output(self, save_path, tmp_path):
        out = tmp_path / "out.dat"

        assert main(["set", str(save_path), "-p", "max-soul", "-o", str(out)]) == 0

        fields = decode(out.read_bytes())
        assert fields["soul"] == 198
        assert fields["maxSoul"] == 198

    def test_set_unknown_field(self, save_path, capsys):
        assert main(["set", str(save_path), "charms=40"]) == 1

        assert "Error: Unknown field: charms" in capsys.readouterr().err

    def test_set_bad_assignment(self, save_path, capsys):
        assert main(["set", str(save_path), "geo"]) == 1

        assert "Error:" in capsys.readouterr().err

    def test_wrong_extension(self, tmp_path, capsys):
        path = tmp_path / "user1.sav"
        path.write_bytes(b'"geo":1')

        assert main(["show", str(path)]) == 1

        assert "Please select a .dat file" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["show", str(tmp_path / "nope.dat")]) == 1

        assert "Error:" in capsys.readouterr().err

    def test_import_hex(self, save_path, tmp_path):
        hex_file = tmp_path / "edited.txt"
        hex_file.write_text(to_hex(b'{"geo":31}') + "\n", encoding="utf-8")
        out = tmp_path / "rebuilt.dat"

        assert main(["import-hex", str(hex_file), str(save_path), "-o", str(out)]) == 0

        assert out.read_bytes() == b'{"geo":31}'

    def test_import_hex_invalid(self, save_path, tmp_path, capsys):
        hex_file = tmp_path / "edited.txt"
        hex_file.write_text("7b 2", encoding="utf-8")

        assert main(["import-hex", str(hex_file), str(save_path)]) == 1

        assert "Error:" in capsys.readouterr().err
