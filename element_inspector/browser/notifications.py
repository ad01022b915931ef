import json
import logging
from typing import TYPE_CHECKING

from element_inspector.config import CONFIG
from element_inspector.dom.views import INSPECTOR_PREFIX
from element_inspector.inspector.collaborators import NotificationSurface
from element_inspector.inspector.views import Severity

if TYPE_CHECKING:
	from element_inspector.browser.session import BrowserSession

logger = logging.getLogger(__name__)

NOTIFICATION_ID = f'{INSPECTOR_PREFIX}-notification'
FADE_OUT_MS = 300

SEVERITY_COLORS = {
	Severity.SUCCESS: '#16a34a',
	Severity.ERROR: '#dc2626',
	Severity.INFO: '#2563eb',
}

SHOW_NOTIFICATION_FUNCTION = f"""
(message, severity, color, durationMs, fadeMs) => {{
	const notification = document.createElement('div');
	notification.id = '{NOTIFICATION_ID}';
	notification.className = severity;
	notification.textContent = message;
	Object.assign(notification.style, {{
		position: 'fixed', top: '20px', right: '20px', zIndex: '2147483647', pointerEvents: 'none',
		padding: '10px 16px', borderRadius: '6px', color: '#fff', background: color, font: '14px sans-serif',
		opacity: '0', transition: 'opacity ' + fadeMs + 'ms ease',
	}});
	document.body.appendChild(notification);
	setTimeout(() => {{ notification.style.opacity = '1'; }}, 10);
	setTimeout(() => {{
		notification.style.opacity = '0';
		setTimeout(() => notification.remove(), fadeMs);
	}}, durationMs);
}}
"""


class CDPNotificationSurface(NotificationSurface):
	"""Transient toast in the page: fades in, stays for duration_ms, fades out and is removed"""

	def __init__(self, browser_session: 'BrowserSession', duration_ms: int | None = None):
		self.browser_session = browser_session
		self.duration_ms = CONFIG.ELEMENT_INSPECTOR_NOTIFICATION_MS if duration_ms is None else duration_ms

	async def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> None:
		cdp_client = self.browser_session.cdp_client
		if cdp_client is None:
			logger.info(f'[{severity.value}] {message}')
			return
		arguments = ', '.join(
			json.dumps(value) for value in (message, severity.value, SEVERITY_COLORS[severity], self.duration_ms, FADE_OUT_MS)
		)
		try:
			await cdp_client.send.Runtime.evaluate(
				params={'expression': f'({SHOW_NOTIFICATION_FUNCTION})({arguments})', 'returnByValue': True},
				session_id=self.browser_session.session_id,
			)
		except Exception as e:
			logger.warning(f'⚠️ Could not show notification {message!r}: {type(e).__name__}: {e}')
