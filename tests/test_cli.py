"""
Tests for the command line interface.

Run with: pytest tests/test_cli.py -v
"""

import io
import json

import pandas as pd
import pytest

from vehicle_ocr.cli import build_parser, main


class TestExtractCommand:
    """Tests for `vehicle-ocr extract`."""

    def test_mileage_text(self, capsys):
        assert main(["extract", "mileage", "Odometer: 123,456 mi"]) == 0
        out = capsys.readouterr().out
        assert "Mileage: 123456" in out
        assert "Confidence: high" in out
        assert "please verify" not in out

    def test_vin_json(self, capsys):
        assert main(["extract", "vin", "VIN", "1HGBH41JXMN109186", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['value'] == "1HGBH41JXMN109186"
        assert data['confidence'] == "high"

    def test_no_value(self, capsys):
        assert main(["extract", "vin", "nothing here"]) == 0
        out = capsys.readouterr().out
        assert "No vin found" in out
        assert "Low confidence - please verify" in out

    def test_file_lines_joined(self, tmp_path, capsys):
        path = tmp_path / "ocr.txt"
        path.write_text("ODOMETER\n045,210\nkm\n")
        assert main(["extract", "mileage", "--file", str(path)]) == 0
        assert "Mileage: 45210" in capsys.readouterr().out

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1HGBH 41JXM N109186\n"))
        assert main(["extract", "vin"]) == 0
        assert "VIN: 1HGBH41JXMN109186" in capsys.readouterr().out

    def test_verbose_shows_candidates(self, capsys):
        assert main(["--verbose", "extract", "mileage", "12,500, 98,000"]) == 0
        out = capsys.readouterr().out
        assert "Confidence: medium" in out
        assert "Candidates: 12500, 98000, 12, 500, 98" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["extract", "vin", "--file", str(tmp_path / "nope.txt")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_field_rejected(self):
        with pytest.raises(SystemExit):
            main(["extract", "tyre_pressure", "123"])


class TestValidateCommand:
    """Tests for `vehicle-ocr validate`."""

    def test_valid(self, capsys):
        assert main(["validate", "1HGBH41JXMN109186"]) == 0
        out = capsys.readouterr().out
        assert "Checksum OK: True (expected X)" in out
        assert "Well formed: True" in out

    def test_invalid_chars(self, capsys):
        assert main(["validate", "1HGBH41JXMN1O9186"]) == 1
        assert "Invalid characters: O" in capsys.readouterr().out

    def test_json(self, capsys):
        main(["validate", "11111111111111111", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data['checksum_ok'] is True
        assert data['well_formed'] is False


class TestEvaluateCommand:
    """Tests for `vehicle-ocr evaluate`."""

    @pytest.fixture
    def samples(self, tmp_path):
        path = tmp_path / "samples.csv"
        pd.DataFrame(
            [("Odometer: 123,456 mi", "123456"), ("99", "99"), ("12,500, 98,000", "98000")],
            columns=["text", "expected"],
        ).to_csv(path, index=False)
        return path

    def test_report(self, samples, tmp_path, capsys):
        output = tmp_path / "results.csv"
        assert main(["evaluate", str(samples), "--field", "mileage", "--output", str(output)]) == 0
        out = capsys.readouterr().out
        assert "Samples: 3" in out
        assert "Exact match: 2 (66.67%)" in out
        assert output.exists()

    def test_json(self, samples, capsys):
        assert main(["evaluate", str(samples), "--field", "mileage", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['total_samples'] == 3
        assert data['tier_counts'] == {"high": 1, "medium": 1, "low": 1}

    def test_missing_samples(self, tmp_path, capsys):
        assert main(["evaluate", str(tmp_path / "none.csv"), "--field", "vin"]) == 1
        assert "Failed to load samples" in capsys.readouterr().err


class TestGlobalOptions:
    """Tests for top-level options."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("mileage:\n  plausible_range: [100, 2000000]\n")
        assert main(["--config", str(config), "extract", "mileage", "1500000"]) == 0
        assert "Mileage: 1500000" in capsys.readouterr().out

    def test_bad_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.yaml"), "validate", "1HGBH41JXMN109186"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    @pytest.mark.parametrize("content", [
        "logging:\n  level: 10\n",
        "logging:\n  - DEBUG\n",
    ])
    def test_malformed_logging_section(self, tmp_path, capsys, content):
        config = tmp_path / "config.yaml"
        config.write_text(content)
        assert main(["--config", str(config), "extract", "mileage", "45000"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_config_directory(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path), "extract", "mileage", "45000"]) == 1
        assert "Could not read" in capsys.readouterr().err

    def test_validate_uses_config_rules(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("vin:\n  min_distinct_chars: 14\n")
        assert main(["--config", str(config), "validate", "1HGBH41JXMN109186"]) == 0
        assert "Well formed: False" in capsys.readouterr().out

    def test_parser_commands(self):
        parser = build_parser()
        args = parser.parse_args(["evaluate", "s.csv", "--field", "vin"])
        assert args.command == "evaluate"
        assert args.field == "vin"
