"""
Configuration for the ECS logging formatter and validator.

Provides environment-aware settings with conservative defaults. Every option
a formatter adapter reads is configurable here, so call sites do not need to
repeat service metadata on each logged event.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.exceptions import ConfigurationError


BUNDLED_SPEC_PATH = Path(__file__).resolve().parent.parent / "validation" / "spec.json"


class ServiceFields(BaseModel):
	"""
	Static service metadata copied into every record.

	Notes:
	- name also seeds event.dataset when no dataset is given.
	- Empty values are omitted from the record.
	"""

	name: Optional[str] = Field(None, max_length=1024)
	version: Optional[str] = Field(None, max_length=1024)
	environment: Optional[str] = Field(None, max_length=1024)
	node_name: Optional[str] = Field(None, max_length=1024)


class FormatterOptions(BaseModel):
	"""
	Conversion switches for the logging adapter.

	Rationale:
	- convert_err is on by default; error instances are always worth mapping.
	- convert_req_res is off by default since header copies can be large.
	"""

	convert_err: bool = True
	convert_req_res: bool = False
	event_dataset: Optional[str] = None


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="ECS_LOGGING_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("WARNING", description="Level for this package's own logger")
	logs_dir: Optional[Path] = Field(None, description="Directory for internal log files")
	ecs_version: str = Field("1.6.0", description="Value written to ecs.version")
	spec_path: Path = Field(BUNDLED_SPEC_PATH, description="Spec document used by the validator")
	service: ServiceFields = ServiceFields()
	formatter: FormatterOptions = FormatterOptions()

	def model_post_init(self, __context: object) -> None:
		if self.logs_dir is not None:
			try:
				self.logs_dir.mkdir(parents=True, exist_ok=True)
			except OSError as e:
				raise ConfigurationError(f"Cannot create logs_dir {self.logs_dir}: {e}") from e


config = Config()
