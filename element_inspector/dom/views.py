from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# Private prefix carried by every element, class and attribute injected into the page
INSPECTOR_PREFIX = '__element-inspector'

# Attribute families that are instrumentation noise rather than page content
IGNORED_ATTRIBUTE_PREFIXES = (INSPECTOR_PREFIX, 'data-cursor')

VOID_ELEMENTS = frozenset(
	{
		'area',
		'base',
		'br',
		'col',
		'embed',
		'hr',
		'img',
		'input',
		'link',
		'meta',
		'param',
		'source',
		'track',
		'wbr',
	}
)


class NodeType(int, Enum):
	"""DOM node types as reported by the host (same numeric codes as Node.nodeType)"""

	ELEMENT_NODE = 1
	ATTRIBUTE_NODE = 2
	TEXT_NODE = 3
	CDATA_SECTION_NODE = 4
	ENTITY_REFERENCE_NODE = 5
	ENTITY_NODE = 6
	PROCESSING_INSTRUCTION_NODE = 7
	COMMENT_NODE = 8
	DOCUMENT_NODE = 9
	DOCUMENT_TYPE_NODE = 10
	DOCUMENT_FRAGMENT_NODE = 11
	NOTATION_NODE = 12


@dataclass
class DOMRect:
	"""Bounding box in viewport coordinates"""

	x: float
	y: float
	width: float
	height: float

	@property
	def top(self) -> float:
		return self.y

	@property
	def left(self) -> float:
		return self.x

	@property
	def bottom(self) -> float:
		return self.y + self.height

	@property
	def right(self) -> float:
		return self.x + self.width


# One frame of a framework component chain, e.g. {'kind': 'function', 'name': 'Button', 'display_name': None}
FiberFrame = dict[str, Any]


@dataclass(eq=False)
class DOMTreeNode:
	"""
	One node of a document tree as seen by the inspector.

	Identity comparison only (eq=False): two nodes are the same node only if they are the same object.
	"""

	backend_node_id: int
	node_type: NodeType
	node_name: str
	node_value: str = ''
	attributes: dict[str, str] = field(default_factory=dict)
	children_nodes: list['DOMTreeNode'] = field(default_factory=list, repr=False)
	parent_node: 'DOMTreeNode | None' = field(default=None, repr=False)

	# filled from the host per capture
	bounds: DOMRect | None = None
	computed_styles: dict[str, str] = field(default_factory=dict, repr=False)
	instrumentation: dict[str, list[FiberFrame]] = field(default_factory=dict, repr=False)

	@property
	def tag_name(self) -> str:
		return self.node_name.lower()

	@property
	def is_element(self) -> bool:
		return self.node_type == NodeType.ELEMENT_NODE

	@property
	def element_id(self) -> str:
		return self.attributes.get('id', '')

	@property
	def class_name(self) -> str:
		"""Raw class attribute, untouched"""
		return self.attributes.get('class', '')

	@property
	def class_names(self) -> list[str]:
		return self.class_name.split()

	@property
	def element_children(self) -> list['DOMTreeNode']:
		return [child for child in self.children_nodes if child.is_element]

	@property
	def parent_element(self) -> 'DOMTreeNode | None':
		parent = self.parent_node
		if parent is not None and parent.is_element:
			return parent
		return None

	@property
	def is_document_body(self) -> bool:
		return self.is_element and self.tag_name == 'body'

	@property
	def direct_text(self) -> str:
		"""Text of the immediate text children only, whitespace collapsed"""
		parts = [child.node_value for child in self.children_nodes if child.node_type == NodeType.TEXT_NODE]
		return ' '.join(''.join(parts).split())

	@property
	def text_content(self) -> str:
		"""Text of every descendant text node, whitespace collapsed"""
		return ' '.join(self._collect_text().split())

	def _collect_text(self) -> str:
		if self.node_type in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE):
			return self.node_value
		return ''.join(child._collect_text() for child in self.children_nodes)

	def iter_descendants(self):
		for child in self.children_nodes:
			yield child
			yield from child.iter_descendants()

	def is_inspector_element(self) -> bool:
		"""True for the overlay, tooltip and notification elements (and anything inside them)"""
		current: DOMTreeNode | None = self
		while current is not None:
			if current.is_element and current.element_id.startswith(INSPECTOR_PREFIX):
				return True
			current = current.parent_node
		return False

	def __str__(self) -> str:
		if not self.is_element:
			return f'#{self.node_type.name.lower()}'
		element_id = f'#{self.element_id}' if self.element_id else ''
		return f'<{self.tag_name}{element_id}> (backend_node_id={self.backend_node_id})'


class PathSegment(BaseModel):
	"""One step of a resolved path"""

	model_config = ConfigDict(frozen=True)

	tag: str
	element_id: str | None = None
	class_names: tuple[str, ...] = ()
	nth_child: int | None = None


class ResolvedPath(BaseModel):
	"""All encodings of one resolved path, derived from the same segments"""

	model_config = ConfigDict(frozen=True)

	executable_path: str
	display_path: str
	css_selector: str
	segments: tuple[PathSegment, ...] = ()

	@property
	def is_root(self) -> bool:
		return not self.segments


class NodeFacts(BaseModel):
	"""Raw facts about one node, consumed by the formatter"""

	model_config = ConfigDict(frozen=True)

	tag_name: str
	attributes: tuple[tuple[str, str], ...] = ()
	presentation: tuple[tuple[str, str], ...] = ()
	bounds: DOMRect
	component_name: str | None = None
	open_tag: str
	outer_html: str
	direct_text: str = ''
	full_text: str = ''
