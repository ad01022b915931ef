# @file purpose: Document contexts the inspector can describe nodes of (parsed HTML, or a live page over CDP)

import logging
import re
from abc import ABC, abstractmethod

import lxml.html
from cssselect import SelectorError
from lxml import etree
from lxml.cssselect import CSSSelector
from uuid_extensions import uuid7str

from element_inspector.dom.path import ROOT_DISPLAY_PATH, ROOT_EXECUTABLE_PATH
from element_inspector.dom.views import DOMTreeNode, NodeType

logger = logging.getLogger(__name__)

_EXECUTABLE_PATH_RE = re.compile(r"^document\.querySelector\('(?P<selector>(?:[^'\\]|\\.)*)'\)$", re.DOTALL)


def unquote_js_string(value: str) -> str:
	"""Reverse of path.as_js_string for the escapes it produces"""
	result: list[str] = []
	chars = iter(value)
	for char in chars:
		if char != '\\':
			result.append(char)
			continue
		escaped = next(chars, '')
		result.append('\n' if escaped == 'n' else escaped)
	return ''.join(result)


class DocumentContext(ABC):
	"""
	One document the inspector can be armed against.

	Holds the node tree, hands out nodes by backend node id and can re-evaluate a resolved path.
	"""

	def __init__(self, root: DOMTreeNode, url: str = 'about:blank', context_id: str | None = None):
		self.root = root
		self.url = url
		self.context_id = context_id or uuid7str()
		self._nodes: dict[int, DOMTreeNode] = {}
		self._index(root)

	def _index(self, root: DOMTreeNode) -> None:
		self._nodes = {root.backend_node_id: root}
		for node in root.iter_descendants():
			self._nodes[node.backend_node_id] = node

	@property
	def body(self) -> DOMTreeNode | None:
		for node in self.root.iter_descendants():
			if node.is_document_body:
				return node
		return None

	def get_node(self, backend_node_id: int) -> DOMTreeNode | None:
		return self._nodes.get(backend_node_id)

	async def resolve_node(self, backend_node_id: int) -> DOMTreeNode | None:
		"""Look up a node reported by the host, re-reading the tree if it changed meanwhile"""
		return self.get_node(backend_node_id)

	async def current_node(self, node: DOMTreeNode) -> DOMTreeNode:
		"""The same node in the current state of the tree (attributes, text and siblings included)"""
		return node

	async def refresh_node(self, node: DOMTreeNode) -> DOMTreeNode:
		"""Re-read the live geometry, computed style and instrumentation of a node"""
		return node

	@abstractmethod
	async def query_selector(self, selector: str) -> DOMTreeNode | None: ...

	async def evaluate(self, path: str) -> DOMTreeNode | None:
		"""Evaluate an executable path (or a bare selector) against the current tree"""
		path = path.strip()
		if path in (ROOT_EXECUTABLE_PATH, ROOT_DISPLAY_PATH):
			return self.body
		match = _EXECUTABLE_PATH_RE.match(path)
		if match:
			return await self.query_selector(unquote_js_string(match.group('selector')))
		return await self.query_selector(path)


class HTMLDocument(DocumentContext):
	"""A static HTML document parsed with lxml. No layout, so geometry and computed styles stay empty."""

	def __init__(self, html: str, url: str = 'about:blank', context_id: str | None = None):
		self._element_paths: dict[str, DOMTreeNode] = {}
		self._next_backend_node_id = 1
		self._root_element = lxml.html.document_fromstring(html)
		self._tree = self._root_element.getroottree()
		super().__init__(self._build_document(), url=url, context_id=context_id)

	@classmethod
	def from_file(cls, path, url: str | None = None) -> 'HTMLDocument':
		with open(path, encoding='utf-8') as f:
			html = f.read()
		return cls(html, url=url or f'file://{path}')

	def _allocate_id(self) -> int:
		backend_node_id = self._next_backend_node_id
		self._next_backend_node_id += 1
		return backend_node_id

	def _build_document(self) -> DOMTreeNode:
		document = DOMTreeNode(
			backend_node_id=self._allocate_id(),
			node_type=NodeType.DOCUMENT_NODE,
			node_name='#document',
		)
		docinfo = self._tree.docinfo
		if docinfo.doctype:
			self._append(
				document,
				DOMTreeNode(
					backend_node_id=self._allocate_id(),
					node_type=NodeType.DOCUMENT_TYPE_NODE,
					node_name=docinfo.root_name or 'html',
				),
			)
		self._build_element(self._root_element, document)
		return document

	def _append(self, parent: DOMTreeNode, child: DOMTreeNode) -> DOMTreeNode:
		child.parent_node = parent
		parent.children_nodes.append(child)
		return child

	def _append_text(self, parent: DOMTreeNode, text: str | None) -> None:
		if not text:
			return
		self._append(
			parent,
			DOMTreeNode(
				backend_node_id=self._allocate_id(),
				node_type=NodeType.TEXT_NODE,
				node_name='#text',
				node_value=text,
			),
		)

	def _build_element(self, element, parent: DOMTreeNode) -> None:
		if element.tag is etree.Comment:
			self._append(
				parent,
				DOMTreeNode(
					backend_node_id=self._allocate_id(),
					node_type=NodeType.COMMENT_NODE,
					node_name='#comment',
					node_value=element.text or '',
				),
			)
			return
		if not isinstance(element.tag, str):
			# processing instructions and entities carry nothing worth describing
			return

		node = self._append(
			parent,
			DOMTreeNode(
				backend_node_id=self._allocate_id(),
				node_type=NodeType.ELEMENT_NODE,
				node_name=element.tag.upper(),
				attributes={str(name): str(value) for name, value in element.attrib.items()},
			),
		)
		self._element_paths[self._tree.getpath(element)] = node

		self._append_text(node, element.text)
		for child in element:
			self._build_element(child, node)
			self._append_text(node, child.tail)

	async def query_selector(self, selector: str) -> DOMTreeNode | None:
		return self.select(selector)

	def select(self, selector: str) -> DOMTreeNode | None:
		"""Synchronous querySelector over the parsed tree"""
		try:
			matches = CSSSelector(selector, translator='html')(self._root_element)
		except (SelectorError, etree.XPathError) as e:
			logger.warning(f'⚠️ Invalid selector {selector!r}: {type(e).__name__}: {e}')
			return None
		if not matches:
			return None
		return self._element_paths.get(self._tree.getpath(matches[0]))

	def select_all(self, selector: str) -> list[DOMTreeNode]:
		try:
			matches = CSSSelector(selector, translator='html')(self._root_element)
		except (SelectorError, etree.XPathError) as e:
			logger.warning(f'⚠️ Invalid selector {selector!r}: {type(e).__name__}: {e}')
			return []
		paths = (self._tree.getpath(match) for match in matches)
		return [self._element_paths[path] for path in paths if path in self._element_paths]
