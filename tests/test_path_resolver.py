# @file purpose: Tests for selector path resolution and its round trip against the tree

import pytest

from element_inspector.dom.path import PathResolver
from tests.conftest import load

resolver = PathResolver()

SAMPLE_PAGE = """
<html><body>
	<header class="top-bar">
		<nav><a href="/">Home</a><a href="/docs">Docs</a><a href="/blog" class="active">Blog</a></nav>
	</header>
	<main id="content">
		<section class="card"><h2>One</h2><p>first</p></section>
		<section class="card"><h2>Two</h2><p>second</p><p>third</p></section>
		<form><input name="q"><button type="submit">Go</button></form>
	</main>
	<footer><span class="muted">(c)</span></footer>
</body></html>
"""


class TestIdentifiers:
	def test_identifier_short_circuits_the_walk(self):
		document = load('<div class="wrapper"><button id="submit">Send</button></div>')
		node = document.select('button')

		path = resolver.resolve(node)

		assert path.executable_path == "document.querySelector('#submit')"
		assert path.display_path == '#submit'
		assert path.css_selector == '#submit'
		assert len(path.segments) == 1

	async def test_identifier_round_trip(self):
		document = load('<div><button id="submit">Send</button><button id="cancel">Cancel</button></div>')
		for element_id in ('submit', 'cancel'):
			node = document.select(f'#{element_id}')
			assert await document.evaluate(resolver.resolve(node).executable_path) is node

	def test_identified_ancestor_ends_the_walk(self):
		document = load('<div id="app"><ul><li>a</li><li>b</li></ul></div>')
		node = document.select_all('li')[1]

		path = resolver.resolve(node)

		assert path.display_path == '#app > ul > li:nth-child(2)'
		assert path.executable_path == "document.querySelector('#app > ul > li:nth-child(2)')"

	def test_identifier_is_escaped_only_in_executable_encodings(self):
		document = load('<p id="1st">x</p>')
		path = resolver.resolve(document.select('p'))

		assert path.display_path == '#1st'
		assert path.css_selector == '#\\31 st'
		assert path.executable_path == "document.querySelector('#\\\\31 st')"


class TestRootSentinel:
	def test_body_and_missing_node_resolve_to_root(self):
		document = load('<p>x</p>')
		for node in (document.body, None):
			path = resolver.resolve(node)
			assert path.executable_path == 'document.body'
			assert path.display_path == 'body'
			assert path.is_root

	async def test_root_sentinel_evaluates_to_body(self):
		document = load('<p>x</p>')
		assert await document.evaluate('document.body') is document.body

	def test_text_node_resolves_to_its_element(self):
		document = load('<div id="box">hello</div>')
		text_node = document.select('#box').children_nodes[0]
		assert resolver.resolve(text_node).display_path == '#box'


class TestSegments:
	def test_featureless_node_yields_bare_tags(self):
		document = load('<div><p>hi</p></div>')
		assert resolver.resolve(document.select('p')).display_path == 'div > p'

	def test_inspector_classes_are_left_out(self):
		document = load('<span class="label __element-inspector-hover">x</span>')
		assert resolver.resolve(document.select('span')).display_path == 'span.label'

	def test_ordinal_counts_all_children_of_the_parent(self):
		document = load('<div id="c"><p>x</p><span class="a">1</span><span class="a">2</span></div>')
		node = document.select_all('span')[1]
		assert resolver.resolve(node).display_path == '#c > span.a:nth-child(3)'

	def test_no_ordinal_when_classes_differ(self):
		document = load('<div id="c"><span class="a">1</span><span class="b">2</span></div>')
		assert resolver.resolve(document.select('span.a')).display_path == '#c > span.a'

	def test_classless_node_is_compared_by_tag_only(self):
		document = load('<div id="c"><span>1</span><span class="b">2</span></div>')
		node = document.select_all('span')[0]
		assert resolver.resolve(node).display_path == '#c > span:nth-child(1)'

	def test_superset_class_sibling_is_not_disambiguated(self):
		# The uniqueness check compares raw class strings, so "item" and "item active" never collide.
		# The resulting selector matches the first item, not the target: known and kept.
		document = load('<ul id="l"><li class="item active">A</li><li class="item">B</li></ul>')
		target = document.select_all('li')[1]

		path = resolver.resolve(target)

		assert path.display_path == '#l > li.item'
		assert document.select(path.css_selector) is not target


class TestRoundTrip:
	async def test_every_element_of_the_sample_page_round_trips(self):
		document = load(SAMPLE_PAGE)
		elements = [node for node in document.body.iter_descendants() if node.is_element]
		assert len(elements) > 10

		for node in elements:
			path = resolver.resolve(node)
			assert await document.evaluate(path.executable_path) is node, path.display_path
			assert document.select(path.css_selector) is node, path.css_selector

	def test_paths_of_the_sample_page(self):
		document = load(SAMPLE_PAGE)
		anchors = document.select_all('a')
		paragraphs = document.select_all('p')

		assert resolver.resolve(anchors[1]).display_path == 'header.top-bar > nav > a:nth-child(2)'
		assert resolver.resolve(anchors[2]).display_path == 'header.top-bar > nav > a.active'
		assert resolver.resolve(paragraphs[2]).display_path == '#content > section.card:nth-child(2) > p:nth-child(3)'
		assert resolver.resolve(document.select('input')).display_path == '#content > form > input'

	@pytest.mark.parametrize('selector', ['#content', 'footer > span.muted', 'form > button'])
	def test_resolution_is_deterministic(self, selector):
		document = load(SAMPLE_PAGE)
		node = document.select(selector)
		assert resolver.resolve(node) == resolver.resolve(node)
