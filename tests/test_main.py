import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main


class TestMain:
    def test_prints_summary(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type,client,tx,amount",
            "deposit,2,1,5",
            "deposit,1,2,1.25",
            "dispute,1,2",
        ]))

        assert main(["main.py", str(csv_file)]) == 0

        out = capsys.readouterr().out
        assert out == (
            "client,available,held,total,locked\n"
            "1,0,1.25,1.25,false\n"
            "2,5,0,5,false\n"
        )

    def test_usage(self, capsys):
        assert main(["main.py"]) == 1

        captured = capsys.readouterr()
        assert "Usage" in captured.err
        assert captured.out == ""

    def test_missing_file(self, tmp_path, capsys):
        assert main(["main.py", str(tmp_path / "missing.csv")]) == 1

        assert capsys.readouterr().out == ""

    def test_invalid_utf8_row_is_skipped(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_bytes(
            b"type,client,tx,amount\n"
            b"deposit,1,1,5\n"
            b"deposit,2,2,\xff\xfe\n"
            b"deposit,1,3,2\n"
        )

        assert main(["main.py", str(csv_file)]) == 0

        assert capsys.readouterr().out == (
            "client,available,held,total,locked\n"
            "1,7,0,7,false\n"
        )

    def test_oversized_field_is_skipped(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type,client,tx,amount",
            "deposit,1,1,5",
            "foo," + "x" * 200000,
            "deposit,1,3,2",
        ]))

        assert main(["main.py", str(csv_file)]) == 0

        assert capsys.readouterr().out == (
            "client,available,held,total,locked\n"
            "1,7,0,7,false\n"
        )

    def test_invalid_configuration(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("PAYMENTS_DECODE_IN_BACKGROUND", "ture")

        assert main(["main.py", str(tmp_path / "test.csv")]) == 1

        captured = capsys.readouterr()
        assert "PAYMENTS_DECODE_IN_BACKGROUND" in captured.err
        assert captured.out == ""
