from element_inspector.inspector.service import InspectionRegistry, InspectionSession
from element_inspector.inspector.views import InspectorError, InstrumentationDeniedError, SessionState, Severity

__all__ = [
	'InspectionRegistry',
	'InspectionSession',
	'InspectorError',
	'InstrumentationDeniedError',
	'SessionState',
	'Severity',
]
