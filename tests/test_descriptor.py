# @file purpose: Tests for fact extraction: attributes, presentation, component labels, markup and text

from unittest.mock import Mock

from element_inspector.dom.descriptor import NodeDescriptor, ReactFiberIntrospector, is_ignored_attribute
from element_inspector.dom.markup import serialize_outer_html
from element_inspector.dom.views import DOMRect, DOMTreeNode, NodeType
from tests.conftest import load, with_layout


def element(tag: str, attributes: dict[str, str] | None = None) -> DOMTreeNode:
	return DOMTreeNode(backend_node_id=1, node_type=NodeType.ELEMENT_NODE, node_name=tag.upper(), attributes=attributes or {})


class TestAttributes:
	def test_order_is_kept_and_instrumentation_is_dropped(self):
		node = element(
			'div',
			{
				'id': 'card',
				'data-cursor-ref': 'e12',
				'class': 'card __element-inspector-hover',
				'__element-inspector-marker': '1',
				'title': 'Card',
			},
		)

		attributes = NodeDescriptor().extract_attributes(node)

		assert attributes == [('id', 'card'), ('class', 'card'), ('title', 'Card')]

	def test_class_attribute_holding_only_inspector_classes_is_dropped(self):
		node = element('span', {'class': '__element-inspector-hover', 'role': 'note'})
		assert NodeDescriptor().extract_attributes(node) == [('role', 'note')]

	def test_empty_class_attribute_is_kept(self):
		node = element('span', {'class': ''})
		assert NodeDescriptor().extract_attributes(node) == [('class', '')]

	def test_ignored_prefixes(self):
		assert is_ignored_attribute('data-cursor-ref')
		assert is_ignored_attribute('__element-inspector-x')
		assert not is_ignored_attribute('data-testid')


class TestPresentation:
	def test_unset_values_and_transparent_black_are_omitted(self):
		node = element('p')
		node.computed_styles = {
			'display': 'block',
			'color': 'rgb(0, 0, 0)',
			'background-color': 'rgba(0, 0, 0, 0)',
			'font-size': '',
			'margin': '4px',
		}

		presentation = NodeDescriptor().extract_presentation(node)

		assert presentation == [('color', 'rgb(0, 0, 0)'), ('display', 'block')]

	def test_labels_follow_the_fixed_property_order(self):
		node = element('p')
		node.computed_styles = {
			'position': 'relative',
			'font-family': 'Inter, sans-serif',
			'font-size': '16px',
			'background-color': 'rgb(255, 255, 255)',
		}

		labels = [label for label, _ in NodeDescriptor().extract_presentation(node)]

		assert labels == ['backgroundColor', 'fontSize', 'fontFamily', 'position']


class TestGeometry:
	def test_missing_bounds_become_an_empty_rect(self):
		assert NodeDescriptor().extract_bounds(element('p')) == DOMRect(x=0, y=0, width=0, height=0)

	def test_bounds_are_copied(self):
		node = with_layout(element('p'), x=1.5, y=2, width=3, height=4)
		bounds = NodeDescriptor().extract_bounds(node)
		assert bounds == DOMRect(x=1.5, y=2, width=3, height=4)
		assert bounds is not node.bounds


class TestReactFiberIntrospector:
	def test_no_instrumentation(self):
		assert ReactFiberIntrospector().resolve(element('div')) is None

	def test_first_named_function_component_wins(self):
		node = element('button')
		node.instrumentation = {
			'__reactFiber$k2x9': [
				{'kind': 'host', 'name': 'button', 'display_name': None},
				{'kind': 'function', 'name': 'Anonymous', 'display_name': None},
				{'kind': 'function', 'name': 'SubmitButton', 'display_name': None},
				{'kind': 'function', 'name': 'Form', 'display_name': None},
			]
		}
		assert ReactFiberIntrospector().resolve(node) == 'SubmitButton'

	def test_display_name_is_preferred(self):
		node = element('button')
		node.instrumentation = {'__reactFiber$a': [{'kind': 'function', 'name': 'c', 'display_name': 'PrimaryButton'}]}
		assert ReactFiberIntrospector().resolve(node) == 'PrimaryButton'

	def test_object_frames_need_a_display_name(self):
		node = element('input')
		node.instrumentation = {
			'__reactInternalInstance$q': [
				{'kind': 'object', 'name': None, 'display_name': None},
				{'kind': 'object', 'name': None, 'display_name': 'ForwardRef(TextField)'},
			]
		}
		assert ReactFiberIntrospector().resolve(node) == 'ForwardRef(TextField)'

	def test_chain_without_names(self):
		node = element('div')
		node.instrumentation = {'__reactFiber$a': [{'kind': 'host', 'name': 'div'}]}
		assert ReactFiberIntrospector().resolve(node) is None

	def test_malformed_chain_is_not_an_error(self):
		node = element('div')
		node.instrumentation = {'__reactFiber$a': ['not-a-frame']}
		assert ReactFiberIntrospector().resolve(node) is None

	def test_failing_resolver_leaves_the_label_out(self):
		resolver = Mock()
		resolver.resolve.side_effect = RuntimeError('page navigated away')

		facts = NodeDescriptor(resolver).describe(element('div'))

		assert facts.component_name is None


class TestMarkupAndText:
	def test_describe_collects_markup_and_text(self):
		document = load('<div id="t" class="box">Hello <b>bold</b>   world</div>')
		node = document.select('#t')

		facts = NodeDescriptor().describe(node)

		assert facts.tag_name == 'div'
		assert facts.open_tag == '<div id="t" class="box">'
		assert facts.outer_html == '<div id="t" class="box">Hello <b>bold</b>   world</div>'
		assert facts.direct_text == 'Hello world'
		assert facts.full_text == 'Hello bold world'

	def test_void_elements_have_no_closing_tag(self):
		document = load('<p><img src="a.png" alt="A &amp; B"><br></p>')
		assert serialize_outer_html(document.select('p')) == '<p><img src="a.png" alt="A &amp; B"><br></p>'

	def test_text_is_escaped_outside_raw_text_elements(self):
		document = load('<div id="d"><p>1 &lt; 2</p><script>if (a < b) {}</script></div>')
		assert serialize_outer_html(document.select('#d')) == '<div id="d"><p>1 &lt; 2</p><script>if (a < b) {}</script></div>'

	def test_comments_are_serialized(self):
		document = load('<div id="d"><!-- note --><span>x</span></div>')
		assert serialize_outer_html(document.select('#d')) == '<div id="d"><!-- note --><span>x</span></div>'
