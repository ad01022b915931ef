# @file purpose: Interaction state machine: hover tracking, commit on click, cancel on Escape

import logging
from typing import TYPE_CHECKING

from bubus import EventBus
from uuid_extensions import uuid7str

from element_inspector.inspector.events import (
	ElementClickedEvent,
	ElementDescribedEvent,
	InspectionArmedEvent,
	InspectionEndedEvent,
	KeyPressedEvent,
	PageNavigatedEvent,
	PointerMovedEvent,
)
from element_inspector.inspector.views import (
	MESSAGE_ARMED,
	MESSAGE_CANCELLED,
	MESSAGE_COPIED,
	MESSAGE_COPY_FAILED,
	SessionState,
	Severity,
)

if TYPE_CHECKING:
	from element_inspector.dom.document import DocumentContext
	from element_inspector.dom.views import DOMTreeNode
	from element_inspector.formatter.service import DescriptionFormatter
	from element_inspector.inspector.collaborators import (
		ClipboardSink,
		HighlightOverlay,
		NotificationSurface,
		PageInstrumentation,
	)

logger = logging.getLogger(__name__)

ESCAPE_KEY = 'Escape'


class InspectionRegistry:
	"""Which document contexts currently have an armed session. Owned by the host integration."""

	def __init__(self):
		self._armed: dict[str, 'InspectionSession'] = {}

	def is_armed(self, context_id: str) -> bool:
		return context_id in self._armed

	def active_session(self, context_id: str) -> 'InspectionSession | None':
		return self._armed.get(context_id)

	def acquire(self, context_id: str, session: 'InspectionSession') -> bool:
		if context_id in self._armed:
			return False
		self._armed[context_id] = session
		return True

	def release(self, context_id: str, session: 'InspectionSession') -> None:
		if self._armed.get(context_id) is session:
			del self._armed[context_id]


class InspectionSession:
	"""
	One inspection of one document: IDLE -> ARMED -> COMMITTING -> TERMINATED.

	While armed, the session listens on its event bus for PointerMovedEvent, ElementClickedEvent
	and KeyPressedEvent. A click on a page node builds the description, copies it and ends the
	session. Escape ends it without copying, and so does a navigation of the page (PageNavigatedEvent).
	terminate() can be called any number of times.
	"""

	def __init__(
		self,
		document: 'DocumentContext',
		formatter: 'DescriptionFormatter',
		overlay: 'HighlightOverlay',
		clipboard: 'ClipboardSink',
		notifier: 'NotificationSurface',
		registry: InspectionRegistry | None = None,
		instrumentation: 'PageInstrumentation | None' = None,
		event_bus: EventBus | None = None,
	):
		self.id = uuid7str()
		self.document = document
		self.formatter = formatter
		self.overlay = overlay
		self.clipboard = clipboard
		self.notifier = notifier
		self.registry = registry or InspectionRegistry()
		self.instrumentation = instrumentation
		self.event_bus = event_bus or EventBus(name=f'InspectionSession_{self.id[-4:]}')

		self.state = SessionState.IDLE
		self.hover_target: 'DOMTreeNode | None' = None
		self.last_text: str | None = None
		self._observers_attached = False
		self._instrumentation_attached = False
		self._overlay_shown = False

	@property
	def logger(self) -> logging.Logger:
		return logging.getLogger(f'element_inspector.InspectionSession🔍 {self.id[-4:]}')

	@property
	def context_id(self) -> str:
		return self.document.context_id

	@property
	def observers(self) -> list[tuple[type, object]]:
		return [
			(PointerMovedEvent, self.on_PointerMovedEvent),
			(ElementClickedEvent, self.on_ElementClickedEvent),
			(KeyPressedEvent, self.on_KeyPressedEvent),
			(PageNavigatedEvent, self.on_PageNavigatedEvent),
		]

	async def arm(self) -> bool:
		"""Start inspecting. Returns False (and does nothing) if the document is already being inspected."""
		if self.state == SessionState.ARMED or not self.registry.acquire(self.context_id, self):
			self.logger.debug(f'Document {self.context_id[-4:]} is already armed, ignoring arm()')
			return False

		self.state = SessionState.ARMED
		self.hover_target = None

		try:
			# a failing show() may still leave overlay elements behind
			self._overlay_shown = True
			await self.overlay.show()
			self._attach_observers()
			if self.instrumentation is not None:
				self._instrumentation_attached = True
				await self.instrumentation.attach(self.event_bus)
			await self.notifier.notify(MESSAGE_ARMED, Severity.INFO)
		except Exception as e:
			self.logger.error(f'❌ Failed to start inspecting {self.document.url}: {type(e).__name__}: {e}')
			await self.terminate(reason='arm_failed')
			return False

		self.event_bus.dispatch(InspectionArmedEvent(context_id=self.context_id, url=self.document.url))
		self.logger.info(f'🎯 Inspecting {self.document.url}')
		return True

	def _attach_observers(self) -> None:
		if self._observers_attached:
			return
		for event_type, handler in self.observers:
			self.event_bus.on(event_type, handler)
		self._observers_attached = True

	def _detach_observers(self) -> None:
		if not self._observers_attached:
			return
		handlers = [handler for _, handler in self.observers]
		for registered in self.event_bus.handlers.values():
			for handler in handlers:
				if handler in registered:
					registered.remove(handler)
		self._observers_attached = False

	async def on_PointerMovedEvent(self, event: PointerMovedEvent) -> None:
		node = await self._node_for_event(event.backend_node_id)
		if node is None or node is self.hover_target:
			return
		await self.hover(node)

	async def hover(self, node: 'DOMTreeNode') -> None:
		"""Make node the hover target and move the overlay onto its current box"""
		if self.state != SessionState.ARMED or node.is_inspector_element() or node is self.hover_target:
			return
		self.hover_target = node
		# geometry is never cached, the page may have scrolled or resized since the last read
		await self.document.refresh_node(node)
		await self.overlay.highlight(node)

	async def on_ElementClickedEvent(self, event: ElementClickedEvent) -> str | None:
		node = await self._node_for_event(event.backend_node_id)
		if node is None:
			return None
		return await self.commit(node)

	async def commit(self, node: 'DOMTreeNode') -> str | None:
		"""Describe node, copy the text and end the session. Returns the text, or None if nothing was committed."""
		if self.state != SessionState.ARMED:
			return None
		if node.is_inspector_element():
			self.logger.debug(f'Ignoring click on inspector element {node}')
			return None

		self.state = SessionState.COMMITTING
		# no further pointer/click/key events may reach us while the clipboard write is pending
		self._detach_observers()
		await self._detach_instrumentation()

		text: str | None = None
		copied = False
		try:
			node = await self.document.current_node(node)
			await self.document.refresh_node(node)
			text = self.formatter.format(node)
			self.last_text = text
			copied = await self.clipboard.write(text)
		except Exception as e:
			self.logger.error(f'❌ Failed to describe {node}: {type(e).__name__}: {e}')

		if copied:
			self.logger.info(f'📋 Copied description of {node} ({len(text or "")} chars)')
			await self._notify(MESSAGE_COPIED, Severity.SUCCESS)
		else:
			await self._notify(MESSAGE_COPY_FAILED, Severity.ERROR)

		if text is not None:
			self.event_bus.dispatch(
				ElementDescribedEvent(
					context_id=self.context_id,
					output_format=self.formatter.output_format.value,
					text=text,
					copied=copied,
				)
			)
		await self.terminate(reason='copied' if copied else 'copy_failed')
		return text

	async def on_KeyPressedEvent(self, event: KeyPressedEvent) -> None:
		if event.key == ESCAPE_KEY:
			await self.cancel()

	async def on_PageNavigatedEvent(self, event: PageNavigatedEvent) -> None:
		if self.state != SessionState.ARMED:
			return
		self.logger.info(f'🧭 Page navigated to {event.url}, ending inspection')
		# the overlay went away with the old document
		self._overlay_shown = False
		await self.terminate(reason='navigated')

	async def cancel(self) -> None:
		if self.state != SessionState.ARMED:
			return
		await self._notify(MESSAGE_CANCELLED, Severity.INFO)
		await self.terminate(reason='cancelled')

	async def terminate(self, reason: str = 'terminated') -> None:
		"""Detach every listener, remove the visuals and release the document. Safe to call repeatedly."""
		was_active = self.state in (SessionState.ARMED, SessionState.COMMITTING)

		self._detach_observers()
		await self._detach_instrumentation()
		if self._overlay_shown:
			self._overlay_shown = False
			try:
				await self.overlay.remove()
			except Exception as e:
				self.logger.warning(f'⚠️ Failed to remove overlay: {type(e).__name__}: {e}')
		self.registry.release(self.context_id, self)
		self.hover_target = None

		if was_active:
			self.state = SessionState.TERMINATED
			self.event_bus.dispatch(InspectionEndedEvent(context_id=self.context_id, reason=reason))
			self.logger.debug(f'🛑 Inspection ended ({reason})')

	async def _detach_instrumentation(self) -> None:
		if not self._instrumentation_attached or self.instrumentation is None:
			return
		self._instrumentation_attached = False
		try:
			await self.instrumentation.detach()
		except Exception as e:
			self.logger.warning(f'⚠️ Failed to detach page listeners: {type(e).__name__}: {e}')

	async def _node_for_event(self, backend_node_id: int) -> 'DOMTreeNode | None':
		if self.state != SessionState.ARMED:
			return None
		try:
			return await self.document.resolve_node(backend_node_id)
		except Exception as e:
			self.logger.debug(f'Could not resolve node {backend_node_id}: {type(e).__name__}: {e}')
			return None

	async def _notify(self, message: str, severity: Severity) -> None:
		try:
			await self.notifier.notify(message, severity)
		except Exception as e:
			self.logger.warning(f'⚠️ Failed to show notification {message!r}: {type(e).__name__}: {e}')
