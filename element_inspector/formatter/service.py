# @file purpose: Renders an element Description into one of the clipboard text formats

import logging
import re

from element_inspector.dom.descriptor import ComponentNameResolver, NodeDescriptor, ReactFiberIntrospector
from element_inspector.dom.markup import escape_attribute, escape_text
from element_inspector.dom.path import CHILD_COMBINATOR, ROOT_DISPLAY_PATH, PathResolver, visible_class_names
from element_inspector.dom.views import VOID_ELEMENTS, DOMTreeNode, NodeFacts
from element_inspector.formatter.views import Description, OutputFormat
from element_inspector.utils import format_css_number, js_round, time_execution_sync, truncate_text

logger = logging.getLogger(__name__)

SYNOPSIS_TEXT_LIMIT = 30
CLASS_NAME_LIMIT = 8
CLASS_NAME_KEEP = 5
ELLIPSIS = '…'
COMPACT_WRAPPER = '\\'

# Every control character except newline
_CONTROL_CHARACTERS = re.compile(r'[\x00-\x09\x0b-\x1f\x7f-\x9f]')


def abbreviate_class_name(name: str) -> str:
	if len(name) <= CLASS_NAME_LIMIT:
		return name
	return name[:CLASS_NAME_KEEP] + ELLIPSIS


def strip_control_characters(text: str) -> str:
	return _CONTROL_CHARACTERS.sub(' ', text.replace('\r\n', '\n'))


def compact_path(node: DOMTreeNode | None) -> str:
	"""
	Full ancestor chain below body, each step as tag#id.class1.class2 with long class names abbreviated.

	Unlike the selector path it never stops at an identified ancestor, so the surrounding structure stays visible.
	"""
	if node is not None and not node.is_element:
		node = node.parent_element
	steps: list[str] = []
	current = node
	while current is not None and current.is_element and not current.is_document_body:
		step = current.tag_name
		if current.element_id:
			step += f'#{current.element_id}'
		class_names = visible_class_names(current)
		if class_names:
			step += '.' + '.'.join(abbreviate_class_name(name) for name in class_names)
		steps.insert(0, step)
		current = current.parent_element
	if not steps:
		return ROOT_DISPLAY_PATH
	return CHILD_COMBINATOR.join(steps)


def build_synopsis(facts: NodeFacts) -> str:
	"""Single-line stand-in for the full markup: open tag, truncated direct text, close tag"""
	attributes = []
	for name, value in facts.attributes:
		if name == 'class':
			value = ' '.join(abbreviate_class_name(class_name) for class_name in value.split())
		attributes.append(f' {name}="{escape_attribute(value)}"')
	open_tag = f'<{facts.tag_name}{"".join(attributes)}>'
	if facts.tag_name in VOID_ELEMENTS:
		return open_tag
	text = escape_text(truncate_text(facts.direct_text, SYNOPSIS_TEXT_LIMIT, ELLIPSIS))
	return f'{open_tag}{text}</{facts.tag_name}>'


class DescriptionFormatter:
	"""
	Turns a node into the text that ends up on the clipboard.

	One formatter, three layouts:
	- VERBOSE: markdown sections with full markup, every attribute and style, unrounded size and full text
	- COMPACT_PROMPT: a few labelled lines meant to be pasted into a prompt, wrapped in backslashes
	- KEY_VALUE: fixed sections of `name:` / `value` pairs, headers kept even when empty
	"""

	def __init__(
		self,
		output_format: OutputFormat | str = OutputFormat.COMPACT_PROMPT,
		synopsis: bool = False,
		component_resolver: ComponentNameResolver | None = None,
		path_resolver: PathResolver | None = None,
	):
		self.output_format = OutputFormat.parse(output_format)
		self.synopsis = synopsis
		self.path_resolver = path_resolver or PathResolver()
		self.descriptor = NodeDescriptor(component_resolver or ReactFiberIntrospector())

	@classmethod
	def from_settings(cls, settings, component_resolver: ComponentNameResolver | None = None) -> 'DescriptionFormatter':
		return cls(
			output_format=settings.output_format,
			synopsis=settings.synopsis,
			component_resolver=component_resolver,
		)

	@time_execution_sync('--build_description')
	def build(self, node: DOMTreeNode) -> Description:
		path = self.path_resolver.resolve(node)
		facts = self.descriptor.describe(node)
		return Description(
			executable_path=path.executable_path,
			display_path=path.display_path,
			css_selector=path.css_selector,
			compact_path=compact_path(node),
			component_name=facts.component_name,
			attributes=facts.attributes,
			presentation=facts.presentation,
			bounds=facts.bounds,
			open_tag=facts.open_tag,
			outer_html=facts.outer_html,
			synopsis=build_synopsis(facts),
			direct_text=facts.direct_text,
			full_text=facts.full_text,
		)

	def render(self, description: Description) -> str:
		if self.output_format == OutputFormat.VERBOSE:
			text = self._render_verbose(description)
		elif self.output_format == OutputFormat.KEY_VALUE:
			text = self._render_key_value(description)
		else:
			text = self._render_compact_prompt(description)
		return strip_control_characters(text)

	def format(self, node: DOMTreeNode) -> str:
		description = self.build(node)
		text = self.render(description)
		logger.debug(f'📝 Described {node} as {self.output_format.value} ({len(text)} chars)')
		return text

	def _render_verbose(self, description: Description) -> str:
		bounds = description.bounds
		sections = [
			f'## Element\n```html\n{description.outer_html}\n```',
			f'## Path\n`{description.display_path}`',
		]
		if description.attributes:
			lines = [f'- **{name}:** {value}' for name, value in description.attributes]
			sections.append('## Attributes\n' + '\n'.join(lines))
		if description.presentation:
			lines = [f'- **{name}:** {value}' for name, value in description.presentation]
			sections.append('## Computed Styles\n' + '\n'.join(lines))
		sections.append(
			'## Position & Size\n'
			f'- **top:** {js_round(bounds.top)}px\n'
			f'- **left:** {js_round(bounds.left)}px\n'
			f'- **width:** {format_css_number(bounds.width)}px\n'
			f'- **height:** {format_css_number(bounds.height)}px'
		)
		if description.full_text:
			sections.append(f'## Text Content\n{description.full_text}')
		return '\n\n'.join(sections)

	def _render_compact_prompt(self, description: Description) -> str:
		bounds = description.bounds
		lines = [
			f'DOM Path: {description.compact_path}',
			f'Position: top={js_round(bounds.top)}px, left={js_round(bounds.left)}px, '
			f'width={js_round(bounds.width)}px, height={js_round(bounds.height)}px',
		]
		if description.component_name:
			lines.append(f'React Component: {description.component_name}')
		if description.attributes:
			lines.append('Attributes: ' + ', '.join(f'{name}="{value}"' for name, value in description.attributes))
		if description.presentation:
			lines.append('Computed Styles: ' + '\n'.join(f'{name}: {value}' for name, value in description.presentation))
		markup = description.synopsis if self.synopsis else description.outer_html
		lines.append(f'HTML Element: {markup}')
		return COMPACT_WRAPPER + '\n'.join(lines) + COMPACT_WRAPPER

	def _render_key_value(self, description: Description) -> str:
		bounds = description.bounds
		geometry = [
			('top', f'{js_round(bounds.top)}px'),
			('left', f'{js_round(bounds.left)}px'),
			('width', f'{js_round(bounds.width)}px'),
			('height', f'{js_round(bounds.height)}px'),
		]
		sections = [
			('Element', description.outer_html),
			('Selector', description.css_selector),
			('Attributes', _key_value_lines(description.attributes)),
			('Computed Styles', _key_value_lines(description.presentation)),
			('Position', _key_value_lines(geometry)),
			('Text', description.direct_text),
		]
		return '\n\n'.join(f'{header}:\n{body}' if body else f'{header}:' for header, body in sections)


def _key_value_lines(pairs) -> str:
	return '\n'.join(f'{name}:\n{value}' for name, value in pairs)
