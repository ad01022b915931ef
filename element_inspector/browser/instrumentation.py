# @file purpose: Capturing page listeners bridged to the session's event bus through a CDP binding

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from element_inspector.dom.views import INSPECTOR_PREFIX
from element_inspector.inspector.collaborators import PageInstrumentation
from element_inspector.inspector.events import ElementClickedEvent, KeyPressedEvent, PageNavigatedEvent, PointerMovedEvent

if TYPE_CHECKING:
	from bubus import EventBus

	from element_inspector.browser.session import BrowserSession
	from element_inspector.dom.service import DomService

logger = logging.getLogger(__name__)

BINDING_NAME = '__elementInspectorReport'
LISTENERS_KEY = '__elementInspectorListeners'

# Listeners run in the capture phase so the page's own handlers see nothing of the click
ATTACH_LISTENERS_SCRIPT = f"""
(() => {{
	if (window.{LISTENERS_KEY}) return false;
	const report = (payload) => window.{BINDING_NAME}(JSON.stringify(payload));
	const isOwn = (target) => !!(target && target.id && target.id.startsWith('{INSPECTOR_PREFIX}'));
	const listeners = {{
		mousemove: (e) => {{
			if (isOwn(e.target)) return;
			report({{type: 'move', x: e.clientX, y: e.clientY}});
		}},
		click: (e) => {{
			e.preventDefault();
			e.stopPropagation();
			e.stopImmediatePropagation();
			if (isOwn(e.target)) return;
			report({{type: 'click', x: e.clientX, y: e.clientY}});
		}},
		keydown: (e) => {{
			report({{type: 'key', key: e.key}});
		}},
	}};
	for (const [name, listener] of Object.entries(listeners)) {{
		document.addEventListener(name, listener, true);
	}}
	window.{LISTENERS_KEY} = listeners;
	return true;
}})()
"""

DETACH_LISTENERS_SCRIPT = f"""
(() => {{
	const listeners = window.{LISTENERS_KEY};
	if (!listeners) return false;
	for (const [name, listener] of Object.entries(listeners)) {{
		document.removeEventListener(name, listener, true);
	}}
	delete window.{LISTENERS_KEY};
	return true;
}})()
"""


class CDPPageInstrumentation(PageInstrumentation):
	"""
	Installs mousemove/click/keydown capture listeners in the page.

	The listeners report viewport coordinates through a Runtime binding; the node under the
	pointer is looked up with DOM.getNodeForLocation and forwarded as bus events.
	Main-frame navigations are forwarded as PageNavigatedEvent.
	"""

	def __init__(self, browser_session: 'BrowserSession', dom_service: 'DomService'):
		self.browser_session = browser_session
		self.dom_service = dom_service
		self.event_bus: 'EventBus | None' = None
		self._binding_registered = False
		self._pending_tasks: set[asyncio.Task] = set()

	@property
	def cdp_client(self):
		if self.browser_session.cdp_client is None:
			raise ValueError('Browser session is not started')
		return self.browser_session.cdp_client

	async def attach(self, event_bus: 'EventBus') -> None:
		self.event_bus = event_bus
		session_id = self.browser_session.session_id

		await self.cdp_client.send.Runtime.addBinding(params={'name': BINDING_NAME}, session_id=session_id)
		if not self._binding_registered:

			def on_binding_called(event_data: dict, session_id: str | None = None) -> None:
				"""Must stay sync; the actual work runs in a task"""
				if event_data.get('name') != BINDING_NAME:
					return
				task = asyncio.create_task(self._handle_report(event_data.get('payload', '')))
				self._pending_tasks.add(task)
				task.add_done_callback(self._pending_tasks.discard)

			self.cdp_client.register.Runtime.bindingCalled(on_binding_called)
			self.cdp_client.register.Page.frameNavigated(self._on_frame_navigated)
			self._binding_registered = True

		# frameNavigated is only reported once the Page domain is enabled
		await self.cdp_client.send.Page.enable(session_id=session_id)

		await self.cdp_client.send.Runtime.evaluate(
			params={'expression': ATTACH_LISTENERS_SCRIPT, 'returnByValue': True}, session_id=session_id
		)
		logger.debug('👂 Page listeners attached')

	async def detach(self) -> None:
		self.event_bus = None
		session_id = self.browser_session.session_id
		await self.cdp_client.send.Runtime.evaluate(
			params={'expression': DETACH_LISTENERS_SCRIPT, 'returnByValue': True}, session_id=session_id
		)
		try:
			await self.cdp_client.send.Runtime.removeBinding(params={'name': BINDING_NAME}, session_id=session_id)
		except Exception as e:
			logger.debug(f'Runtime.removeBinding failed: {type(e).__name__}: {e}')
		logger.debug('🔇 Page listeners detached')

	def _on_frame_navigated(self, event_data: dict, session_id: str | None = None) -> None:
		"""A new document in the main frame drops the injected listeners, the session must not stay armed"""
		if self.event_bus is None:
			return
		if session_id is not None and session_id != self.browser_session.session_id:
			return
		frame = event_data.get('frame') or {}
		if frame.get('parentId'):
			return
		self.event_bus.dispatch(PageNavigatedEvent(url=frame.get('url', '')))

	async def _handle_report(self, raw_payload: str) -> None:
		if self.event_bus is None:
			return
		try:
			payload: dict[str, Any] = json.loads(raw_payload)
		except json.JSONDecodeError:
			logger.debug(f'Ignoring malformed page report: {raw_payload[:100]!r}')
			return

		kind = payload.get('type')
		if kind == 'key':
			self.event_bus.dispatch(KeyPressedEvent(key=str(payload.get('key', ''))))
			return
		if kind not in ('move', 'click'):
			return

		backend_node_id = await self.dom_service.node_for_location(payload.get('x', 0), payload.get('y', 0))
		# the bus may have been detached while the lookup was in flight
		if backend_node_id is None or self.event_bus is None:
			return
		if kind == 'move':
			self.event_bus.dispatch(PointerMovedEvent(backend_node_id=backend_node_id))
		else:
			self.event_bus.dispatch(ElementClickedEvent(backend_node_id=backend_node_id))
