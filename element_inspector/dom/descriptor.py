# @file purpose: Extracts the structural facts (attributes, styles, geometry, markup, text) of one node

import logging
from abc import ABC, abstractmethod

from element_inspector.dom.markup import serialize_open_tag, serialize_outer_html
from element_inspector.dom.path import visible_class_names
from element_inspector.dom.views import IGNORED_ATTRIBUTE_PREFIXES, DOMRect, DOMTreeNode, FiberFrame, NodeFacts

logger = logging.getLogger(__name__)

# (computed style property, label used in the output)
PRESENTATION_PROPERTIES: tuple[tuple[str, str], ...] = (
	('color', 'color'),
	('background-color', 'backgroundColor'),
	('font-size', 'fontSize'),
	('font-family', 'fontFamily'),
	('display', 'display'),
	('position', 'position'),
)

# Computed value the host reports for "not set" colors
TRANSPARENT_BLACK = 'rgba(0, 0, 0, 0)'

REACT_FIBER_KEY_PREFIXES = ('__reactFiber$', '__reactInternalInstance$')
ANONYMOUS_COMPONENT = 'Anonymous'


class ComponentNameResolver(ABC):
	"""Finds the name of the UI framework component that rendered a node"""

	@abstractmethod
	def resolve(self, node: DOMTreeNode) -> str | None: ...


class NullComponentNameResolver(ComponentNameResolver):
	def resolve(self, node: DOMTreeNode) -> str | None:
		return None


class ReactFiberIntrospector(ComponentNameResolver):
	"""
	Reads the React fiber chain attached to a node under a `__reactFiber$<random>` key.

	Each frame is a plain dict read from the page: kind ('function', 'object' or 'host'),
	name and display_name of the fiber type. The chain runs from the node's own fiber up
	through `fiber.return`.
	"""

	def resolve(self, node: DOMTreeNode) -> str | None:
		try:
			chain = self._find_fiber_chain(node)
			if not chain:
				return None
			for frame in chain:
				name = self._frame_name(frame)
				if name:
					return name
		except (AttributeError, TypeError, ValueError) as e:
			logger.debug(f'Could not read component chain of {node}: {type(e).__name__}: {e}')
		return None

	@staticmethod
	def _find_fiber_chain(node: DOMTreeNode) -> list[FiberFrame] | None:
		for key, chain in node.instrumentation.items():
			if key.startswith(REACT_FIBER_KEY_PREFIXES):
				return chain
		return None

	@staticmethod
	def _frame_name(frame: FiberFrame) -> str | None:
		kind = frame.get('kind')
		if kind == 'function':
			name = frame.get('display_name') or frame.get('name')
			if name and name != ANONYMOUS_COMPONENT:
				return name
		elif kind == 'object' and frame.get('display_name'):
			return frame['display_name']
		return None


def is_ignored_attribute(name: str) -> bool:
	return name.startswith(IGNORED_ATTRIBUTE_PREFIXES)


class NodeDescriptor:
	"""Collects the facts the formatters need about a single node."""

	def __init__(self, component_resolver: ComponentNameResolver | None = None):
		self.component_resolver = component_resolver or NullComponentNameResolver()

	def describe(self, node: DOMTreeNode) -> NodeFacts:
		return NodeFacts(
			tag_name=node.tag_name,
			attributes=tuple(self.extract_attributes(node)),
			presentation=tuple(self.extract_presentation(node)),
			bounds=self.extract_bounds(node),
			component_name=self.resolve_component_name(node),
			open_tag=serialize_open_tag(node),
			outer_html=serialize_outer_html(node),
			direct_text=node.direct_text,
			full_text=node.text_content,
		)

	def extract_attributes(self, node: DOMTreeNode) -> list[tuple[str, str]]:
		attributes: list[tuple[str, str]] = []
		for name, value in node.attributes.items():
			if is_ignored_attribute(name):
				continue
			if name == 'class':
				value = ' '.join(visible_class_names(node))
				if not value and node.class_name.strip():
					# only inspector classes were present
					continue
			attributes.append((name, value))
		return attributes

	def extract_presentation(self, node: DOMTreeNode) -> list[tuple[str, str]]:
		presentation: list[tuple[str, str]] = []
		for prop, label in PRESENTATION_PROPERTIES:
			value = (node.computed_styles.get(prop) or '').strip()
			if not value or value == TRANSPARENT_BLACK:
				continue
			presentation.append((label, value))
		return presentation

	def extract_bounds(self, node: DOMTreeNode) -> DOMRect:
		if node.bounds is None:
			return DOMRect(x=0, y=0, width=0, height=0)
		return DOMRect(x=node.bounds.x, y=node.bounds.y, width=node.bounds.width, height=node.bounds.height)

	def resolve_component_name(self, node: DOMTreeNode) -> str | None:
		try:
			return self.component_resolver.resolve(node)
		except Exception as e:
			logger.debug(f'Component name resolver failed for {node}: {type(e).__name__}: {e}')
			return None
