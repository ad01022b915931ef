import pytest

from element_inspector.dom.document import HTMLDocument
from element_inspector.dom.views import DOMRect
from element_inspector.formatter.service import DescriptionFormatter
from element_inspector.inspector.collaborators import ClipboardSink, HighlightOverlay, NotificationSurface
from element_inspector.inspector.service import InspectionRegistry, InspectionSession
from element_inspector.inspector.views import Severity


class RecordingOverlay(HighlightOverlay):
	def __init__(self):
		self.calls = []

	async def show(self):
		self.calls.append(('show', None))

	async def highlight(self, node):
		self.calls.append(('highlight', node))

	async def remove(self):
		self.calls.append(('remove', None))

	def count(self, name):
		return sum(1 for call, _ in self.calls if call == name)


class RecordingClipboard(ClipboardSink):
	def __init__(self, succeed=True):
		self.succeed = succeed
		self.writes = []

	async def write(self, text):
		self.writes.append(text)
		return self.succeed


class RecordingNotifier(NotificationSurface):
	def __init__(self):
		self.messages = []

	async def notify(self, message, severity=Severity.SUCCESS):
		self.messages.append((message, severity))


def load(html: str, url: str = 'https://example.com/') -> HTMLDocument:
	return HTMLDocument(html, url=url)


def with_layout(node, x=0.0, y=0.0, width=0.0, height=0.0, styles=None):
	node.bounds = DOMRect(x=x, y=y, width=width, height=height)
	node.computed_styles = dict(styles or {})
	return node


@pytest.fixture
def registry():
	return InspectionRegistry()


@pytest.fixture
async def make_session(registry):
	"""Factory building sessions with recording collaborators; buses are stopped afterwards"""
	sessions = []

	def _make(document, formatter=None, clipboard=None, **kwargs):
		session = InspectionSession(
			document=document,
			formatter=formatter or DescriptionFormatter(),
			overlay=RecordingOverlay(),
			clipboard=clipboard or RecordingClipboard(),
			notifier=RecordingNotifier(),
			registry=kwargs.pop('registry', registry),
			**kwargs,
		)
		sessions.append(session)
		return session

	yield _make

	for session in sessions:
		await session.event_bus.stop()
