from enum import Enum


class SessionState(str, Enum):
	IDLE = 'idle'
	ARMED = 'armed'
	COMMITTING = 'committing'
	TERMINATED = 'terminated'


class Severity(str, Enum):
	SUCCESS = 'success'
	ERROR = 'error'
	INFO = 'info'


class InspectorError(Exception):
	"""Base class for every error raised by element-inspector"""


class InstrumentationDeniedError(InspectorError):
	"""The document context cannot be instrumented (browser-internal pages and the like)"""

	def __init__(self, url: str, message: str = 'Cannot inspect browser pages'):
		self.url = url
		self.message = message
		super().__init__(f'{message}: {url}')


# User-visible messages
MESSAGE_ARMED = '🔍 Click any element to copy'
MESSAGE_COPIED = '✓ Copied to clipboard!'
MESSAGE_COPY_FAILED = '✗ Failed to copy'
MESSAGE_CANCELLED = 'Inspection cancelled'
