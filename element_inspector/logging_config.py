import logging
import sys

from element_inspector.config import CONFIG


def addLoggingLevel(levelName, levelNum, methodName=None):
	"""
	Comprehensively adds a new logging level to the `logging` module and the
	currently configured logging class.

	`levelName` becomes an attribute of the `logging` module with the value
	`levelNum`. `methodName` becomes a convenience method for both `logging`
	itself and the class returned by `logging.getLoggerClass()` (usually just
	`logging.Logger`). If `methodName` is not specified, `levelName.lower()` is
	used.

	To avoid accidental clobberings of existing attributes, this method will
	raise an `AttributeError` if the level name is already an attribute of the
	`logging` module or if the method name is already present

	Example
	-------
	>>> addLoggingLevel('TRACE', logging.DEBUG - 5)
	>>> logging.getLogger(__name__).setLevel('TRACE')
	>>> logging.getLogger(__name__).trace('that worked')
	>>> logging.trace('so did this')
	>>> logging.TRACE
	5

	"""
	if not methodName:
		methodName = levelName.lower()

	if hasattr(logging, levelName):
		raise AttributeError(f'{levelName} already defined in logging module')
	if hasattr(logging, methodName):
		raise AttributeError(f'{methodName} already defined in logging module')
	if hasattr(logging.getLoggerClass(), methodName):
		raise AttributeError(f'{methodName} already defined in logger class')

	def logForLevel(self, message, *args, **kwargs):
		if self.isEnabledFor(levelNum):
			self._log(levelNum, message, args, **kwargs)

	def logToRoot(message, *args, **kwargs):
		logging.log(levelNum, message, *args, **kwargs)

	logging.addLevelName(levelNum, levelName)
	setattr(logging, levelName, levelNum)
	setattr(logging.getLoggerClass(), methodName, logForLevel)
	setattr(logging, methodName, logToRoot)


class InspectorFormatter(logging.Formatter):
	def format(self, record):
		# element_inspector.dom.path -> dom.path
		if isinstance(record.name, str) and record.name.startswith('element_inspector.'):
			record.name = record.name.removeprefix('element_inspector.')
		return super().format(record)


def setup_logging(stream=None, log_level=None, force_setup=False) -> logging.Logger:
	"""Setup logging configuration for element-inspector.

	Args:
		stream: Output stream for logs (default: sys.stdout)
		log_level: Override log level (default: uses CONFIG.ELEMENT_INSPECTOR_LOGGING_LEVEL)
		force_setup: Force reconfiguration even if handlers already exist
	"""
	try:
		addLoggingLevel('RESULT', 35)
	except AttributeError:
		pass

	log_type = log_level or CONFIG.ELEMENT_INSPECTOR_LOGGING_LEVEL

	if logging.getLogger().hasHandlers() and not force_setup:
		return logging.getLogger('element_inspector')

	root = logging.getLogger()
	root.handlers = []

	console = logging.StreamHandler(stream or sys.stdout)
	if log_type == 'result':
		console.setLevel('RESULT')
		console.setFormatter(InspectorFormatter('%(message)s'))
	else:
		console.setFormatter(InspectorFormatter('%(levelname)-8s [%(name)s] %(message)s'))

	root.addHandler(console)

	if log_type == 'result':
		root.setLevel('RESULT')
	elif log_type == 'debug':
		root.setLevel(logging.DEBUG)
	elif log_type == 'warning':
		root.setLevel(logging.WARNING)
	else:
		root.setLevel(logging.INFO)

	package_logger = logging.getLogger('element_inspector')
	package_logger.propagate = False
	package_logger.handlers = [console]
	package_logger.setLevel(root.level)

	# Silence third-party loggers
	for logger_name in ['cdp_use', 'bubus', 'websockets', 'httpx', 'httpcore', 'asyncio']:
		third_party = logging.getLogger(logger_name)
		third_party.setLevel(logging.ERROR)
		third_party.propagate = False

	package_logger.debug(f'🪵 Logging configured at level {log_type}')
	return package_logger
