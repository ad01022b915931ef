"""Configuration for element-inspector, read lazily from the environment."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

logger = logging.getLogger(__name__)


class Config:
	"""Configuration class that reads environment variables on every access.

	Values are never cached, so tests and long-lived hosts can change them at runtime.
	"""

	@property
	def ELEMENT_INSPECTOR_LOGGING_LEVEL(self) -> str:
		return os.getenv('ELEMENT_INSPECTOR_LOGGING_LEVEL', 'info').lower()

	@property
	def ELEMENT_INSPECTOR_CDP_URL(self) -> str | None:
		return os.getenv('ELEMENT_INSPECTOR_CDP_URL') or None

	@property
	def ELEMENT_INSPECTOR_FORMAT(self) -> str:
		return os.getenv('ELEMENT_INSPECTOR_FORMAT', 'compact_prompt').lower()

	@property
	def ELEMENT_INSPECTOR_SYNOPSIS(self) -> bool:
		return os.getenv('ELEMENT_INSPECTOR_SYNOPSIS', 'false').lower()[:1] in ('t', 'y', '1')

	@property
	def ELEMENT_INSPECTOR_NOTIFICATION_MS(self) -> int:
		raw = os.getenv('ELEMENT_INSPECTOR_NOTIFICATION_MS', '2000')
		try:
			return int(raw)
		except ValueError:
			logger.warning(f'⚠️ Invalid ELEMENT_INSPECTOR_NOTIFICATION_MS={raw!r}, using 2000')
			return 2000

	def settings(self) -> 'InspectorSettings':
		"""Snapshot the current environment into a validated settings model"""
		return InspectorSettings(
			logging_level=self.ELEMENT_INSPECTOR_LOGGING_LEVEL,
			cdp_url=self.ELEMENT_INSPECTOR_CDP_URL,
			output_format=self.ELEMENT_INSPECTOR_FORMAT,
			synopsis=self.ELEMENT_INSPECTOR_SYNOPSIS,
			notification_ms=self.ELEMENT_INSPECTOR_NOTIFICATION_MS,
		)


class InspectorSettings(BaseModel):
	"""Typed settings used to build a formatter and the host glue"""

	model_config = ConfigDict(extra='forbid', validate_assignment=True)

	logging_level: str = 'info'
	cdp_url: str | None = None
	output_format: str = 'compact_prompt'
	synopsis: bool = False
	notification_ms: int = Field(default=2000, ge=0)


CONFIG = Config()
