import os

from element_inspector.logging_config import setup_logging

# Embedding hosts can opt out and configure logging themselves
if os.environ.get('ELEMENT_INSPECTOR_SETUP_LOGGING', 'true').lower() != 'false':
	logger = setup_logging()
else:
	import logging

	logger = logging.getLogger('element_inspector')

from element_inspector.browser.activation import begin_inspection
from element_inspector.browser.session import BrowserSession
from element_inspector.dom.document import DocumentContext, HTMLDocument
from element_inspector.dom.path import PathResolver
from element_inspector.formatter import Description, DescriptionFormatter, OutputFormat
from element_inspector.inspector import InspectionRegistry, InspectionSession, InstrumentationDeniedError, SessionState

__all__ = [
	'BrowserSession',
	'Description',
	'DescriptionFormatter',
	'DocumentContext',
	'HTMLDocument',
	'InspectionRegistry',
	'InspectionSession',
	'InstrumentationDeniedError',
	'OutputFormat',
	'PathResolver',
	'SessionState',
	'begin_inspection',
]
