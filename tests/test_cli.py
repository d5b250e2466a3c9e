"""
Tests for the kshconv command line script.
"""
import json

import kshconv

CHART = "title=CLI\nt=120\n--\n1000|00|0-\n0000|00|--\n--\n"


class TestMain:
    def test_convert(self, tmp_path):
        chart = tmp_path / "chart.ksh"
        chart.write_text(CHART, encoding="utf-8")

        assert kshconv.main([str(chart)]) == 0

        data = json.loads((tmp_path / "chart.kson").read_text(encoding="utf-8"))
        assert data["meta"]["title"] == "CLI"
        assert data["note"]["bt"][0] == [{"y": 0}]

    def test_output_name(self, tmp_path):
        chart = tmp_path / "chart.ksh"
        chart.write_text("\ufeff" + CHART, encoding="utf-8")
        out = tmp_path / "out.json"

        assert kshconv.main([str(chart), "-o", str(out), "--indent", "2"]) == 0
        assert json.loads(out.read_text(encoding="utf-8"))["meta"]["title"] == "CLI"

    def test_conversion_error(self, tmp_path, capsys):
        chart = tmp_path / "broken.ksh"
        chart.write_text("--\n" + "0000|00|--\n" * 5 + "--\n", encoding="utf-8")

        assert kshconv.main([str(chart)]) == 3
        assert not (tmp_path / "broken.kson").exists()
        assert "TimingError" in capsys.readouterr().err

    def test_lenient(self, tmp_path):
        chart = tmp_path / "chart.ksh"
        chart.write_text(CHART.replace("0000|00|--\n--", "0000|00|--\n???\n--"), encoding="utf-8")

        assert kshconv.main([str(chart)]) == 3
        assert kshconv.main([str(chart), "--lenient"]) == 0

    def test_kson_input_not_supported(self, tmp_path, capsys):
        document = tmp_path / "chart.kson"
        document.write_text("{}", encoding="utf-8")

        assert kshconv.main([str(document)]) == 3
        assert "NotImplementedError" in capsys.readouterr().err

    def test_unknown_extension(self, tmp_path):
        chart = tmp_path / "chart.txt"
        chart.write_text(CHART, encoding="utf-8")

        assert kshconv.main([str(chart)]) == 3
        assert kshconv.main([str(chart), "-f", "ksh", "-o", str(tmp_path / "chart.kson")]) == 0

    def test_missing_file(self, tmp_path):
        assert kshconv.main([str(tmp_path / "missing.ksh")]) == 3
