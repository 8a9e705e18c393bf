"""YAML configuration for exporting validation findings.

Example::

    output_dir: out
    output_path: "{{ output_dir }}/errors.parquet"
    log_file: "{{ output_dir }}/validation.log"
    min_severity: WARNING
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

from gtfs_canon.codebook.errors import Severity


class ExportConfig(BaseModel):
    """Settings for an export run."""

    output_path: Path
    log_file: Path | None = None
    min_severity: Severity = Severity.INFO

    @field_validator("min_severity", mode="before")
    @classmethod
    def parse_severity(cls, value: Any) -> Any:  # noqa: ANN401
        """Accept severity names in any case."""
        if isinstance(value, str):
            return Severity.from_name(value.upper())
        return value


def load_config(config_path: Path | str) -> ExportConfig:
    """Load an export configuration from a YAML file.

    Replaces template variables in the format {{ variable_name }} with the
    values of top-level string settings.

    Args:
        config_path: Path to the YAML configuration

    Returns:
        The validated configuration
    """
    with Path(config_path).open(encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    variables = {key: value for key, value in config.items() if isinstance(value, str)}

    def replace_templates(obj: Any) -> Any:  # noqa: ANN401
        if isinstance(obj, str):
            for var_name, var_value in variables.items():
                obj = obj.replace(f"{{{{ {var_name} }}}}", str(var_value))
            return obj
        if isinstance(obj, dict):
            return {k: replace_templates(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [replace_templates(item) for item in obj]
        return obj

    return ExportConfig.model_validate(replace_templates(config))


__all__ = ["ExportConfig", "load_config"]
