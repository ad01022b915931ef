# @file purpose: Entry point that arms an inspection session against the page of a browser session

import logging

from element_inspector.browser.clipboard import SystemClipboard
from element_inspector.browser.instrumentation import CDPPageInstrumentation
from element_inspector.browser.notifications import CDPNotificationSurface
from element_inspector.browser.overlay import CDPHighlightOverlay
from element_inspector.browser.session import BrowserSession
from element_inspector.config import CONFIG, InspectorSettings
from element_inspector.dom.service import CDPDocument, DomService
from element_inspector.formatter.service import DescriptionFormatter
from element_inspector.inspector.service import InspectionRegistry, InspectionSession
from element_inspector.inspector.views import InstrumentationDeniedError

logger = logging.getLogger(__name__)

# Pages the browser does not let scripts instrument
PRIVILEGED_URL_PREFIXES = ('chrome://', 'chrome-extension://', 'edge://', 'devtools://', 'about:')


def can_instrument(url: str) -> bool:
	return bool(url) and not url.startswith(PRIVILEGED_URL_PREFIXES)


async def begin_inspection(
	browser_session: BrowserSession,
	registry: InspectionRegistry,
	settings: InspectorSettings | None = None,
	formatter: DescriptionFormatter | None = None,
) -> InspectionSession:
	"""
	Arm an inspection session on the session's current page.

	Raises InstrumentationDeniedError for browser-internal pages, before anything is changed.
	If the page is already being inspected, the active session is returned untouched.
	"""
	settings = settings or CONFIG.settings()
	await browser_session.start()
	url = await browser_session.get_current_page_url()
	if not can_instrument(url):
		logger.error(f'❌ Cannot inspect browser pages: {url}')
		raise InstrumentationDeniedError(url)

	context_id = browser_session.target_id or url
	active = registry.active_session(context_id)
	if active is not None:
		logger.debug(f'Page {url} is already being inspected')
		return active

	dom_service = DomService(browser_session)
	document = await CDPDocument.load(dom_service, context_id=context_id)
	session = InspectionSession(
		document=document,
		formatter=formatter or DescriptionFormatter.from_settings(settings),
		overlay=CDPHighlightOverlay(browser_session),
		clipboard=SystemClipboard(browser_session),
		notifier=CDPNotificationSurface(browser_session, duration_ms=settings.notification_ms),
		registry=registry,
		instrumentation=CDPPageInstrumentation(browser_session, dom_service),
	)
	await session.arm()
	return session
