"""Serialize DOMTreeNode trees back to HTML markup, the way outerHTML does."""

from element_inspector.dom.views import VOID_ELEMENTS, DOMTreeNode, NodeType

# Children of these elements are emitted raw, like the HTML serializer does
RAW_TEXT_ELEMENTS = frozenset({'script', 'style', 'xmp', 'iframe', 'noembed', 'noframes', 'plaintext', 'noscript'})


def escape_text(text: str) -> str:
	return text.replace('&', '&amp;').replace('\xa0', '&nbsp;').replace('<', '&lt;').replace('>', '&gt;')


def escape_attribute(value: str) -> str:
	return value.replace('&', '&amp;').replace('\xa0', '&nbsp;').replace('"', '&quot;')


def serialize_attributes(attributes: list[tuple[str, str]] | tuple[tuple[str, str], ...]) -> str:
	return ''.join(f' {name}="{escape_attribute(value)}"' for name, value in attributes)


def serialize_open_tag(node: DOMTreeNode) -> str:
	return f'<{node.tag_name}{serialize_attributes(list(node.attributes.items()))}>'


def serialize_outer_html(node: DOMTreeNode) -> str:
	"""Serialize the node and its whole subtree."""
	parts: list[str] = []
	_serialize_into(node, parts, raw_text=False)
	return ''.join(parts)


def _serialize_into(node: DOMTreeNode, parts: list[str], raw_text: bool) -> None:
	if node.node_type == NodeType.TEXT_NODE:
		parts.append(node.node_value if raw_text else escape_text(node.node_value))
	elif node.node_type == NodeType.CDATA_SECTION_NODE:
		parts.append(f'<![CDATA[{node.node_value}]]>')
	elif node.node_type == NodeType.COMMENT_NODE:
		parts.append(f'<!--{node.node_value}-->')
	elif node.node_type == NodeType.DOCUMENT_TYPE_NODE:
		parts.append(f'<!DOCTYPE {node.node_name}>')
	elif node.node_type in (NodeType.DOCUMENT_NODE, NodeType.DOCUMENT_FRAGMENT_NODE):
		for child in node.children_nodes:
			_serialize_into(child, parts, raw_text=False)
	elif node.is_element:
		parts.append(serialize_open_tag(node))
		if node.tag_name in VOID_ELEMENTS:
			return
		child_raw = node.tag_name in RAW_TEXT_ELEMENTS
		for child in node.children_nodes:
			_serialize_into(child, parts, raw_text=child_raw)
		parts.append(f'</{node.tag_name}>')
