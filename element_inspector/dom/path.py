# @file purpose: Derives a unique, re-selectable path for any node of a document tree

import logging

from element_inspector.dom.views import INSPECTOR_PREFIX, DOMTreeNode, PathSegment, ResolvedPath
from element_inspector.utils import css_escape

logger = logging.getLogger(__name__)

ROOT_EXECUTABLE_PATH = 'document.body'
ROOT_DISPLAY_PATH = 'body'
CHILD_COMBINATOR = ' > '


def visible_class_names(node: DOMTreeNode) -> list[str]:
	"""Class names of the node without the ones the inspector injects itself"""
	return [name for name in node.class_names if not name.startswith(INSPECTOR_PREFIX)]


def render_segment(segment: PathSegment, escape: bool = True) -> str:
	quote = css_escape if escape else (lambda value: value)
	if segment.element_id is not None:
		return f'#{quote(segment.element_id)}'
	text = segment.tag
	if segment.class_names:
		text += '.' + '.'.join(quote(name) for name in segment.class_names)
	if segment.nth_child is not None:
		text += f':nth-child({segment.nth_child})'
	return text


def as_js_string(value: str) -> str:
	"""Quote as a single-quoted JavaScript string literal"""
	return "'" + value.replace('\\', '\\\\').replace("'", "\\'").replace('\n', '\\n') + "'"


class PathResolver:
	"""
	Resolves a node to a selector path.

	The walk stops at the document body or at the first ancestor carrying an id.
	Identifiers are trusted to be unique, the host never checks it.
	"""

	def resolve(self, node: DOMTreeNode | None) -> ResolvedPath:
		if node is not None and not node.is_element:
			# text and comment nodes resolve to the element holding them
			node = node.parent_element
		if node is None or node.is_document_body:
			return ResolvedPath(
				executable_path=ROOT_EXECUTABLE_PATH,
				display_path=ROOT_DISPLAY_PATH,
				css_selector=ROOT_DISPLAY_PATH,
			)

		segments = self.build_segments(node)
		return self.from_segments(segments)

	def from_segments(self, segments: list[PathSegment]) -> ResolvedPath:
		selector = CHILD_COMBINATOR.join(render_segment(segment) for segment in segments)
		return ResolvedPath(
			executable_path=f'document.querySelector({as_js_string(selector)})',
			display_path=CHILD_COMBINATOR.join(render_segment(segment, escape=False) for segment in segments),
			css_selector=selector,
			segments=tuple(segments),
		)

	def build_segments(self, node: DOMTreeNode) -> list[PathSegment]:
		if node.element_id:
			return [PathSegment(tag=node.tag_name, element_id=node.element_id)]

		segments: list[PathSegment] = []
		current: DOMTreeNode | None = node
		while current is not None and current.is_element and not current.is_document_body:
			if current.element_id:
				segments.insert(0, PathSegment(tag=current.tag_name, element_id=current.element_id))
				break

			parent = current.parent_element
			segments.insert(
				0,
				PathSegment(
					tag=current.tag_name,
					class_names=tuple(visible_class_names(current)),
					nth_child=self._sibling_ordinal(current, parent),
				),
			)
			current = parent

		logger.debug(f'🧭 Resolved {node} into {len(segments)} segments')
		return segments

	@staticmethod
	def _sibling_ordinal(node: DOMTreeNode, parent: DOMTreeNode | None) -> int | None:
		"""
		1-based position among all element children, only when a same-tag, same-class sibling exists.

		The uniqueness check looks at matching siblings but the ordinal counts every element child.
		"""
		if parent is None:
			return None
		children = parent.element_children
		matching = [
			sibling
			for sibling in children
			if sibling.node_name.lower() == node.node_name.lower()
			and (not node.class_name or sibling.class_name == node.class_name)
		]
		if len(matching) <= 1:
			return None
		return children.index(node) + 1

