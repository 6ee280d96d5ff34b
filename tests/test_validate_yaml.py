#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from validate_yaml import load_schema, main, validate_data_file


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        schema = load_schema()
        assert "schedules" in schema["properties"]
        assert "tracking" in schema["properties"]


class TestValidateDataFile:
    """Tests for validate_data_file function."""

    def test_valid_minimal_returns_no_errors(self, tmp_path):
        """Valid minimal data file returns empty error list."""
        path = tmp_path / "valid.yaml"
        path.write_text("""
schedules:
  - code: EQ-1
    year: 2025
    frequency: monthly
    startWeek: 2

tracking:
  - code: EQ-1
    year: 2025
    week: 2
    status: completed_on_time
    completedAt: 2025-01-08
""")
        schema = load_schema()
        errors = validate_data_file(path, schema)
        assert errors == []

    def test_missing_required_field_returns_errors(self, tmp_path):
        """Tracking record without week returns schema validation errors."""
        path = tmp_path / "invalid.yaml"
        path.write_text("""
tracking:
  - code: EQ-1
    year: 2025
    # week missing
""")
        schema = load_schema()
        errors = validate_data_file(path, schema)
        assert len(errors) >= 1
        assert any("Schema validation" in e for e in errors)

    def test_week_out_of_range_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
schedules:
  - code: EQ-1
    year: 2025
    weeks: [54]
""")
        errors = validate_data_file(path, load_schema())
        assert any("at path" in e for e in errors)

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        """Invalid YAML syntax returns YAML parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("""
schedules:
  - code: EQ-1
    weeks: [unclosed
""")
        schema = load_schema()
        errors = validate_data_file(path, schema)
        assert len(errors) >= 1
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        """Nonexistent file returns error (caught by validate_data_file)."""
        schema = load_schema()
        path = tmp_path / "does_not_exist.yaml"
        errors = validate_data_file(path, schema)
        assert len(errors) >= 1
        assert any("Error" in e for e in errors)


class TestMain:
    """Tests for the validate_yaml entry point."""

    def test_sample_data_valid(self, capsys):
        assert main([]) == 0
        assert "OK: plant.yaml" in capsys.readouterr().out

    def test_reports_failure(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("unexpected: true\n")
        assert main([str(path)]) == 1
        assert "FAIL: bad.yaml" in capsys.readouterr().out

    def test_summary_counts_valid_files(self, tmp_path, capsys):
        good = tmp_path / "good.yaml"
        good.write_text("schedules: []\n")
        bad = tmp_path / "bad.yaml"
        bad.write_text("unexpected: true\n")
        assert main([str(good), str(bad)]) == 1
        assert "1 of 2 data files valid" in capsys.readouterr().out
