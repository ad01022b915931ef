import json
import logging
from typing import TYPE_CHECKING

from element_inspector.dom.path import visible_class_names
from element_inspector.dom.views import INSPECTOR_PREFIX, DOMRect, DOMTreeNode
from element_inspector.inspector.collaborators import HighlightOverlay

if TYPE_CHECKING:
	from element_inspector.browser.session import BrowserSession

logger = logging.getLogger(__name__)

OVERLAY_ID = f'{INSPECTOR_PREFIX}-overlay'
TOOLTIP_ID = f'{INSPECTOR_PREFIX}-tooltip'

# Vertical room the tooltip needs above the node before it flips below
TOOLTIP_HEIGHT = 30
TOOLTIP_GAP_BELOW = 5

CREATE_OVERLAY_SCRIPT = f"""
(() => {{
	if (document.getElementById('{OVERLAY_ID}')) return;
	const overlay = document.createElement('div');
	overlay.id = '{OVERLAY_ID}';
	Object.assign(overlay.style, {{
		position: 'absolute', pointerEvents: 'none', zIndex: '2147483646', display: 'none',
		border: '2px solid #4f46e5', background: 'rgba(79, 70, 229, 0.12)', boxSizing: 'border-box',
	}});
	document.body.appendChild(overlay);
	const tooltip = document.createElement('div');
	tooltip.id = '{TOOLTIP_ID}';
	Object.assign(tooltip.style, {{
		position: 'absolute', pointerEvents: 'none', zIndex: '2147483647', display: 'none',
		background: '#1e1b4b', color: '#fff', font: '12px monospace', padding: '4px 8px', borderRadius: '4px',
		whiteSpace: 'nowrap',
	}});
	document.body.appendChild(tooltip);
}})()
"""

MOVE_OVERLAY_FUNCTION = f"""
(box, label, tooltipTop, tooltipLeft) => {{
	const overlay = document.getElementById('{OVERLAY_ID}');
	const tooltip = document.getElementById('{TOOLTIP_ID}');
	if (!overlay || !tooltip) return;
	const scrollX = window.scrollX;
	const scrollY = window.scrollY;
	overlay.style.top = (box.top + scrollY) + 'px';
	overlay.style.left = (box.left + scrollX) + 'px';
	overlay.style.width = box.width + 'px';
	overlay.style.height = box.height + 'px';
	overlay.style.display = 'block';
	tooltip.textContent = label;
	tooltip.style.top = (tooltipTop + scrollY) + 'px';
	tooltip.style.left = (tooltipLeft + scrollX) + 'px';
	tooltip.style.display = 'block';
}}
"""

REMOVE_OVERLAY_SCRIPT = f"""
(() => {{
	for (const id of ['{OVERLAY_ID}', '{TOOLTIP_ID}']) {{
		const element = document.getElementById(id);
		if (element) element.remove();
	}}
}})()
"""


def tooltip_label(node: DOMTreeNode) -> str:
	"""tag#id.class1.class2, the text shown above the hovered node"""
	label = node.tag_name
	if node.element_id:
		label += f'#{node.element_id}'
	class_names = visible_class_names(node)
	if class_names:
		label += '.' + '.'.join(class_names)
	return label


def tooltip_position(rect: DOMRect) -> tuple[float, float]:
	"""(top, left) of the tooltip in viewport coordinates: above the node, below it when there is no room"""
	if rect.top < TOOLTIP_HEIGHT:
		return rect.bottom + TOOLTIP_GAP_BELOW, rect.left
	return rect.top - TOOLTIP_HEIGHT, rect.left


class CDPHighlightOverlay(HighlightOverlay):
	"""Outline and label elements injected into the page"""

	def __init__(self, browser_session: 'BrowserSession'):
		self.browser_session = browser_session

	async def _evaluate(self, expression: str) -> None:
		cdp_client = self.browser_session.cdp_client
		if cdp_client is None:
			raise ValueError('Browser session is not started')
		result = await cdp_client.send.Runtime.evaluate(
			params={'expression': expression, 'returnByValue': True}, session_id=self.browser_session.session_id
		)
		if 'exceptionDetails' in result:
			raise RuntimeError(f'Overlay script failed: {result["exceptionDetails"]}')

	async def show(self) -> None:
		await self._evaluate(CREATE_OVERLAY_SCRIPT)

	async def highlight(self, node: DOMTreeNode) -> None:
		rect = node.bounds or DOMRect(x=0, y=0, width=0, height=0)
		top, left = tooltip_position(rect)
		box = {'top': rect.top, 'left': rect.left, 'width': rect.width, 'height': rect.height}
		arguments = ', '.join(json.dumps(value) for value in (box, tooltip_label(node), top, left))
		try:
			await self._evaluate(f'({MOVE_OVERLAY_FUNCTION})({arguments})')
		except Exception as e:
			logger.debug(f'Failed to move overlay onto {node}: {type(e).__name__}: {e}')

	async def remove(self) -> None:
		await self._evaluate(REMOVE_OVERLAY_SCRIPT)
