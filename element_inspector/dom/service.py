import logging
from typing import TYPE_CHECKING, Any

from element_inspector.dom.descriptor import PRESENTATION_PROPERTIES, REACT_FIBER_KEY_PREFIXES
from element_inspector.dom.document import DocumentContext
from element_inspector.dom.views import DOMRect, DOMTreeNode, NodeType
from element_inspector.utils import time_execution_async

if TYPE_CHECKING:
	from cdp_use.cdp.dom.types import Node

	from element_inspector.browser.session import BrowserSession

logger = logging.getLogger(__name__)

# Runs with `this` bound to the element; returns everything that must be read live
READ_LIVE_FACTS_FUNCTION = """
function(properties, fiberPrefixes) {
	const rect = this.getBoundingClientRect();
	const computed = window.getComputedStyle(this);
	const styles = {};
	for (const prop of properties) {
		styles[prop] = computed.getPropertyValue(prop);
	}
	const instrumentation = {};
	for (const key of Object.keys(this)) {
		if (!fiberPrefixes.some(prefix => key.startsWith(prefix))) continue;
		const chain = [];
		let fiber = this[key];
		while (fiber && chain.length < 1000) {
			const type = fiber.type;
			if (typeof type === 'function') {
				chain.push({kind: 'function', name: type.name || null, display_name: type.displayName || null});
			} else if (type && typeof type === 'object') {
				chain.push({kind: 'object', name: null, display_name: type.displayName || null});
			} else {
				chain.push({kind: 'host', name: typeof type === 'string' ? type : null, display_name: null});
			}
			fiber = fiber.return;
		}
		instrumentation[key] = chain;
	}
	return {
		rect: {x: rect.x, y: rect.y, width: rect.width, height: rect.height},
		styles: styles,
		instrumentation: instrumentation,
	};
}
"""


class DomService:
	"""
	Service for getting the DOM tree of the attached page and reading live facts of single nodes.
	"""

	def __init__(self, browser: 'BrowserSession'):
		self.browser = browser
		self.logger = logger

	@property
	def cdp_client(self):
		if self.browser.cdp_client is None:
			raise ValueError('Browser session is not started')
		return self.browser.cdp_client

	@property
	def session_id(self) -> str | None:
		return self.browser.session_id

	@time_execution_async('--get_dom_tree')
	async def get_dom_tree(self) -> tuple[DOMTreeNode, dict[int, int]]:
		"""Fetch the whole tree. Returns the document node and a backend node id -> node id map."""
		result = await self.cdp_client.send.DOM.getDocument(params={'depth': -1, 'pierce': False}, session_id=self.session_id)
		node_ids: dict[int, int] = {}

		def _construct_node(node: 'Node', parent: DOMTreeNode | None) -> DOMTreeNode:
			# To make attributes more readable
			attributes: dict[str, str] = {}
			raw_attributes = node.get('attributes') or []
			for i in range(0, len(raw_attributes), 2):
				attributes[raw_attributes[i]] = raw_attributes[i + 1]

			dom_tree_node = DOMTreeNode(
				backend_node_id=node['backendNodeId'],
				node_type=NodeType(node['nodeType']),
				node_name=node['nodeName'],
				node_value=node.get('nodeValue', '') or '',
				attributes=attributes,
				parent_node=parent,
			)
			node_ids[node['backendNodeId']] = node['nodeId']

			for child in node.get('children') or []:
				dom_tree_node.children_nodes.append(_construct_node(child, dom_tree_node))
			return dom_tree_node

		return _construct_node(result['root'], None), node_ids

	async def node_for_location(self, x: float, y: float) -> int | None:
		"""Backend node id of the topmost element at a viewport point, ignoring pointer-events:none overlays"""
		try:
			result = await self.cdp_client.send.DOM.getNodeForLocation(
				params={'x': int(x), 'y': int(y), 'includeUserAgentShadowDOM': False, 'ignorePointerEventsNone': True},
				session_id=self.session_id,
			)
		except Exception as e:
			self.logger.debug(f'No node at ({x}, {y}): {type(e).__name__}: {e}')
			return None
		return result.get('backendNodeId')

	async def query_selector(self, root_node_id: int, selector: str) -> int | None:
		"""Run document.querySelector in the page, returning the backend node id of the match"""
		result = await self.cdp_client.send.DOM.querySelector(
			params={'nodeId': root_node_id, 'selector': selector}, session_id=self.session_id
		)
		node_id = result.get('nodeId')
		if not node_id:
			return None
		described = await self.cdp_client.send.DOM.describeNode(params={'nodeId': node_id}, session_id=self.session_id)
		return described['node']['backendNodeId']

	async def read_live_facts(self, backend_node_id: int) -> dict[str, Any]:
		resolved = await self.cdp_client.send.DOM.resolveNode(
			params={'backendNodeId': backend_node_id}, session_id=self.session_id
		)
		object_id = resolved['object']['objectId']
		result = await self.cdp_client.send.Runtime.callFunctionOn(
			params={
				'functionDeclaration': READ_LIVE_FACTS_FUNCTION,
				'objectId': object_id,
				'arguments': [
					{'value': [prop for prop, _ in PRESENTATION_PROPERTIES]},
					{'value': list(REACT_FIBER_KEY_PREFIXES)},
				],
				'returnByValue': True,
			},
			session_id=self.session_id,
		)
		if 'exceptionDetails' in result:
			raise RuntimeError(f'Reading live facts failed: {result["exceptionDetails"]}')
		return result.get('result', {}).get('value') or {}


class CDPDocument(DocumentContext):
	"""The document of a live page. The tree is re-read when the page reports nodes it does not know yet."""

	def __init__(self, dom_service: DomService, root: DOMTreeNode, node_ids: dict[int, int], url: str, context_id: str | None = None):
		self.dom_service = dom_service
		self._node_ids = node_ids
		super().__init__(root, url=url, context_id=context_id)

	@classmethod
	async def load(cls, dom_service: DomService, context_id: str | None = None) -> 'CDPDocument':
		root, node_ids = await dom_service.get_dom_tree()
		url = await dom_service.browser.get_current_page_url()
		return cls(dom_service, root, node_ids, url=url, context_id=context_id)

	async def reload(self) -> None:
		self.root, self._node_ids = await self.dom_service.get_dom_tree()
		self._index(self.root)
		logger.debug(f'🔄 Re-read DOM tree of {self.url} ({len(self._nodes)} nodes)')

	async def resolve_node(self, backend_node_id: int) -> DOMTreeNode | None:
		node = self.get_node(backend_node_id)
		if node is None:
			await self.reload()
			node = self.get_node(backend_node_id)
		return node

	async def current_node(self, node: DOMTreeNode) -> DOMTreeNode:
		"""Re-read the whole tree so paths and markup reflect what the page shows right now"""
		try:
			await self.reload()
		except Exception as e:
			logger.warning(f'⚠️ Could not re-read DOM tree, describing the last known state: {type(e).__name__}: {e}')
			return node
		current = self.get_node(node.backend_node_id)
		if current is None:
			logger.warning(f'⚠️ {node} is no longer in the page, describing the last known state')
			return node
		return current

	async def refresh_node(self, node: DOMTreeNode) -> DOMTreeNode:
		if not node.is_element:
			return node
		try:
			facts = await self.dom_service.read_live_facts(node.backend_node_id)
		except Exception as e:
			logger.warning(f'⚠️ Could not read live facts of {node}: {type(e).__name__}: {e}')
			return node
		rect = facts.get('rect') or {}
		node.bounds = DOMRect(
			x=rect.get('x', 0), y=rect.get('y', 0), width=rect.get('width', 0), height=rect.get('height', 0)
		)
		node.computed_styles = dict(facts.get('styles') or {})
		node.instrumentation = dict(facts.get('instrumentation') or {})
		return node

	async def query_selector(self, selector: str) -> DOMTreeNode | None:
		root_node_id = self._node_ids.get(self.root.backend_node_id)
		if root_node_id is None:
			return None
		try:
			backend_node_id = await self.dom_service.query_selector(root_node_id, selector)
		except Exception as e:
			logger.warning(f'⚠️ querySelector({selector!r}) failed: {type(e).__name__}: {e}')
			return None
		if backend_node_id is None:
			return None
		return await self.resolve_node(backend_node_id)
