"""Events flowing through an inspection session's event bus."""

from bubus import BaseEvent


# Page -> session
class PointerMovedEvent(BaseEvent):
	"""The pointer moved over a node of the page"""

	backend_node_id: int


class ElementClickedEvent(BaseEvent):
	"""A node was clicked. The page's own handlers never see this click."""

	backend_node_id: int


class KeyPressedEvent(BaseEvent):
	key: str


class PageNavigatedEvent(BaseEvent):
	"""The main frame loaded a new document; everything injected into the old one is gone"""

	url: str


# Session -> host
class InspectionArmedEvent(BaseEvent):
	context_id: str
	url: str


class ElementDescribedEvent(BaseEvent):
	"""A description was built and handed to the clipboard"""

	context_id: str
	output_format: str
	text: str
	copied: bool


class InspectionEndedEvent(BaseEvent):
	context_id: str
	reason: str  # 'copied', 'copy_failed', 'cancelled', 'navigated', 'arm_failed', 'terminated'
