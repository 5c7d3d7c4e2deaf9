import json

import pytest

from treejson.cli import main


@pytest.fixture()
def input_file(tmp_path):
    p = tmp_path / "in.json"
    p.write_bytes(b'{"a": 1.50, "b": [true, null], "s": "caf\xc3\xa9"}')
    return p


class TestFormat:
    def test_compact_stdout(self, input_file, capsysbinary):
        main(["format", str(input_file)])
        out = capsysbinary.readouterr().out
        assert out == b'{"a":1.50,"b":[true,null],"s":"caf\\u00e9"}\n'

    def test_indent(self, input_file, capsysbinary):
        main(["format", str(input_file), "--indent", "2"])
        out = capsysbinary.readouterr().out.decode("ascii")
        assert out.startswith('{\n  "a": 1.50,\n  "b": [\n    true,')
        assert json.loads(out)["b"] == [True, None]

    def test_output_file(self, input_file, tmp_path):
        target = tmp_path / "out" / "result.json"
        main(["format", str(input_file), "--output", str(target), "--indent", "0"])
        assert target.read_bytes() == b'{"a":1.50,"b":[true,null],"s":"caf\\u00e9"}\n'

    def test_invalid_json_exits(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        with pytest.raises(SystemExit) as exc_info:
            main(["format", str(bad)])
        assert exc_info.value.code == 2
        assert "cannot read" in capsys.readouterr().err

    def test_missing_file_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["format", str(tmp_path / "nope.json")])
        assert exc_info.value.code == 2

    def test_unwritable_output_exits(self, input_file, tmp_path, capsys):
        blocker = tmp_path / "plain_file"
        blocker.write_text("x")
        with pytest.raises(SystemExit) as exc_info:
            main(["format", str(input_file), "--output", str(blocker / "out.json")])
        assert exc_info.value.code == 3
        assert "cannot write" in capsys.readouterr().err

    def test_strict_rejects_lone_surrogate(self, tmp_path, capsys):
        src = tmp_path / "s.json"
        src.write_text('["\\ud800"]')
        with pytest.raises(SystemExit) as exc_info:
            main(["format", str(src), "--strict"])
        assert exc_info.value.code == 1
        assert "invalid UTF-8" in capsys.readouterr().err

    def test_lenient_truncates_lone_surrogate(self, tmp_path, capsysbinary):
        src = tmp_path / "s.json"
        src.write_text('["ok\\ud800tail"]')
        main(["format", str(src)])
        assert capsysbinary.readouterr().out == b'["ok"]\n'

    def test_negative_indent_rejected(self, input_file):
        with pytest.raises(SystemExit):
            main(["format", str(input_file), "--indent", "-1"])

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "format" in capsys.readouterr().out
