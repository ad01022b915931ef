"""Interfaces of the host-side collaborators an inspection session drives."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from element_inspector.inspector.views import Severity

if TYPE_CHECKING:
	from bubus import EventBus

	from element_inspector.dom.views import DOMTreeNode


class HighlightOverlay(ABC):
	"""Outline plus tag label drawn over the hovered node"""

	@abstractmethod
	async def show(self) -> None: ...

	@abstractmethod
	async def highlight(self, node: 'DOMTreeNode') -> None: ...

	@abstractmethod
	async def remove(self) -> None: ...


class ClipboardSink(ABC):
	@abstractmethod
	async def write(self, text: str) -> bool:
		"""Copy text, returning False only when every copy mechanism failed"""


class NotificationSurface(ABC):
	@abstractmethod
	async def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> None: ...


class PageInstrumentation(ABC):
	"""Capturing pointer/click/key listeners in the page, forwarded as events onto a bus"""

	@abstractmethod
	async def attach(self, event_bus: 'EventBus') -> None: ...

	@abstractmethod
	async def detach(self) -> None: ...
