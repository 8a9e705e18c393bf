"""Tests for export configuration and config-driven export."""

import pydantic
import pytest

from error_store.config import ExportConfig, load_config
from error_store.export import export_errors
from error_store.read_write import load_errors
from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType, Severity
from gtfs_canon.core.errors import ValidationError


def write_config(tmp_path, body: str):
    """Write a YAML config file and return its path."""
    config_path = tmp_path / "export.yaml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


class TestLoadConfig:
    """Tests for reading the YAML configuration."""

    def test_templates_are_substituted(self, tmp_path):
        """{{ name }} should be replaced by top-level string settings."""
        config_path = write_config(
            tmp_path,
            f"output_dir: {tmp_path}\n"
            'output_path: "{{ output_dir }}/errors.parquet"\n'
            'log_file: "{{ output_dir }}/validation.log"\n'
            "min_severity: warning\n",
        )

        config = load_config(config_path)

        assert config.output_path == tmp_path / "errors.parquet"
        assert config.log_file == tmp_path / "validation.log"
        assert config.min_severity is Severity.WARNING

    def test_defaults(self, tmp_path):
        """Only output_path is required."""
        config = load_config(write_config(tmp_path, "output_path: errors.csv\n"))

        assert config.log_file is None
        assert config.min_severity is Severity.INFO

    def test_missing_output_path(self, tmp_path):
        """A config without output_path should fail validation."""
        with pytest.raises(pydantic.ValidationError):
            load_config(write_config(tmp_path, "min_severity: ERROR\n"))

    def test_unknown_severity(self):
        """An unknown severity name should fail validation."""
        with pytest.raises(pydantic.ValidationError):
            ExportConfig(output_path="errors.csv", min_severity="CRITICAL")


class TestExportErrors:
    """Tests for config-driven export."""

    def test_filters_by_min_severity(self, tmp_path):
        """Findings below min_severity should not be written."""
        output_path = tmp_path / "out" / "errors.csv"
        config_path = write_config(
            tmp_path,
            f"output_path: {output_path}\nmin_severity: ERROR\n",
        )
        errors = [
            ValidationError.without_entities(ErrorType.TABLE_MISSING, "table=agency"),
            ValidationError.without_entities(ErrorType.STOP_UNUSED, "stop_id=S9"),
            ValidationError.from_line(
                ErrorType.MISSING_FIELD,
                "field=trip_id",
                EntityType.TRIP,
                4,
            ),
        ]

        written = export_errors(config_path, errors)

        assert written["error_type"].to_list() == ["TABLE_MISSING", "MISSING_FIELD"]
        assert load_errors(output_path) == [errors[0], errors[2]]

    def test_writes_log_file(self, tmp_path):
        """The configured log file should receive the export summary."""
        log_file = tmp_path / "validation.log"
        config_path = write_config(
            tmp_path,
            f"output_path: {tmp_path / 'errors.parquet'}\nlog_file: {log_file}\n",
        )

        export_errors(
            config_path,
            [ValidationError.without_entities(ErrorType.TABLE_MISSING, "table=stops")],
        )

        assert "TABLE_MISSING" in log_file.read_text(encoding="utf-8")
