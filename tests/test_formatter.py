# @file purpose: Tests for the three description formats, truncation, abbreviation and omission rules

import pytest
from pydantic import ValidationError

from element_inspector.dom.descriptor import NullComponentNameResolver
from element_inspector.formatter import DescriptionFormatter, OutputFormat
from element_inspector.formatter.service import abbreviate_class_name, strip_control_characters
from tests.conftest import load, with_layout

BUTTON_PAGE = '<form><button id="submit" class="btn primary" type="submit">Send it</button></form>'
BUTTON_STYLES = {
	'color': 'rgb(255, 255, 255)',
	'background-color': 'rgba(0, 0, 0, 0)',
	'display': 'inline-block',
	'position': 'static',
}
BUTTON_HTML = '<button id="submit" class="btn primary" type="submit">Send it</button>'


@pytest.fixture
def button():
	document = load(BUTTON_PAGE)
	return with_layout(document.select('#submit'), x=10.4, y=20.5, width=120.5, height=32, styles=BUTTON_STYLES)


def formatter_for(output_format, synopsis=False):
	return DescriptionFormatter(output_format=output_format, synopsis=synopsis, component_resolver=NullComponentNameResolver())


class TestCompactPrompt:
	def test_full_markup(self, button):
		text = formatter_for(OutputFormat.COMPACT_PROMPT).format(button)

		assert text == (
			'\\DOM Path: form > button#submit.btn.primary\n'
			'Position: top=21px, left=10px, width=121px, height=32px\n'
			'Attributes: id="submit", class="btn primary", type="submit"\n'
			'Computed Styles: color: rgb(255, 255, 255)\n'
			'display: inline-block\n'
			'position: static\n'
			f'HTML Element: {BUTTON_HTML}\\'
		)

	def test_synopsis_markup(self, button):
		text = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True).format(button)
		assert text.endswith('HTML Element: <button id="submit" class="btn primary" type="submit">Send it</button>\\')

	def test_attributes_line_is_omitted_without_attributes(self):
		document = load('<section><p>plain</p></section>')
		text = formatter_for(OutputFormat.COMPACT_PROMPT).format(document.select('p'))

		assert text == '\\DOM Path: section > p\nPosition: top=0px, left=0px, width=0px, height=0px\nHTML Element: <p>plain</p>\\'
		assert 'Attributes' not in text
		assert 'Computed Styles' not in text
		assert 'React Component' not in text

	def test_component_label(self, button):
		button.instrumentation = {'__reactFiber$x1': [{'kind': 'function', 'name': 'SubmitButton', 'display_name': None}]}

		text = DescriptionFormatter(OutputFormat.COMPACT_PROMPT).format(button)

		lines = text.split('\n')
		assert lines[1].startswith('Position: ')
		assert lines[2] == 'React Component: SubmitButton'

	def test_long_class_names_are_abbreviated_in_the_path(self):
		document = load('<div id="shop"><button class="btn btn-primary-large-variant">Buy</button></div>')
		formatter = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True)

		text = formatter.format(document.select('button'))

		assert text.startswith('\\DOM Path: div#shop > button.btn.btn-p…\n')
		assert 'Attributes: class="btn btn-primary-large-variant"' in text
		assert text.endswith('HTML Element: <button class="btn btn-p…">Buy</button>\\')

	def test_dom_path_keeps_every_ancestor_below_body(self):
		document = load(
			'<div id="app"><ul class="navigation-menu __element-inspector-hover"><li id="home">Home</li></ul></div>'
		)

		description = formatter_for(OutputFormat.COMPACT_PROMPT).build(document.select('#home'))

		assert description.display_path == '#home'
		assert description.compact_path == 'div#app > ul.navig… > li#home'

	@pytest.mark.parametrize(
		'length, expected_text',
		[
			(30, 'a' * 30),
			(31, 'a' * 30 + '…'),
		],
	)
	def test_synopsis_text_truncation_boundary(self, length, expected_text):
		document = load(f'<p>{"a" * length}</p>')
		text = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True).format(document.select('p'))
		assert text.endswith(f'HTML Element: <p>{expected_text}</p>\\')

	def test_class_abbreviation_boundary(self):
		assert abbreviate_class_name('abcdefgh') == 'abcdefgh'
		assert abbreviate_class_name('abcdefghi') == 'abcde…'

		document = load('<span class="abcdefgh abcdefghi">x</span>')
		text = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True).format(document.select('span'))

		assert text.startswith('\\DOM Path: span.abcdefgh.abcde…\n')
		assert text.endswith('HTML Element: <span class="abcdefgh abcde…">x</span>\\')

	def test_synopsis_of_void_element(self):
		document = load('<form><input name="email" type="email"></form>')
		text = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True).format(document.select('input'))
		assert text.endswith('HTML Element: <input name="email" type="email">\\')

	def test_synopsis_uses_direct_text_only(self):
		document = load('<div id="x">Total: <strong>42</strong> items</div>')
		text = formatter_for(OutputFormat.COMPACT_PROMPT, synopsis=True).format(document.select('#x'))
		assert text.endswith('HTML Element: <div id="x">Total: items</div>\\')


class TestKeyValueBlock:
	def test_full_block(self, button):
		text = formatter_for(OutputFormat.KEY_VALUE).format(button)

		assert text == (
			f'Element:\n{BUTTON_HTML}\n\n'
			'Selector:\n#submit\n\n'
			'Attributes:\nid:\nsubmit\nclass:\nbtn primary\ntype:\nsubmit\n\n'
			'Computed Styles:\ncolor:\nrgb(255, 255, 255)\ndisplay:\ninline-block\nposition:\nstatic\n\n'
			'Position:\ntop:\n21px\nleft:\n10px\nwidth:\n121px\nheight:\n32px\n\n'
			'Text:\nSend it'
		)

	def test_empty_sections_keep_their_headers(self):
		document = load('<div><span></span></div>')
		text = formatter_for(OutputFormat.KEY_VALUE).format(document.select('span'))

		assert text == (
			'Element:\n<span></span>\n\n'
			'Selector:\ndiv > span\n\n'
			'Attributes:\n\n'
			'Computed Styles:\n\n'
			'Position:\ntop:\n0px\nleft:\n0px\nwidth:\n0px\nheight:\n0px\n\n'
			'Text:'
		)


class TestVerbose:
	def test_full_document(self, button):
		text = formatter_for(OutputFormat.VERBOSE).format(button)

		assert text == (
			f'## Element\n```html\n{BUTTON_HTML}\n```\n\n'
			'## Path\n`#submit`\n\n'
			'## Attributes\n- **id:** submit\n- **class:** btn primary\n- **type:** submit\n\n'
			'## Computed Styles\n- **color:** rgb(255, 255, 255)\n- **display:** inline-block\n- **position:** static\n\n'
			'## Position & Size\n- **top:** 21px\n- **left:** 10px\n- **width:** 120.5px\n- **height:** 32px\n\n'
			'## Text Content\nSend it'
		)

	def test_optional_sections_are_omitted(self):
		document = load('<div><span></span></div>')
		text = formatter_for(OutputFormat.VERBOSE).format(document.select('span'))

		assert text == (
			'## Element\n```html\n<span></span>\n```\n\n'
			'## Path\n`div > span`\n\n'
			'## Position & Size\n- **top:** 0px\n- **left:** 0px\n- **width:** 0px\n- **height:** 0px'
		)

	def test_full_descendant_text(self):
		document = load('<p id="note">Read the <a href="/docs">docs</a> first.</p>')
		text = formatter_for(OutputFormat.VERBOSE).format(document.select('#note'))
		assert text.endswith('## Text Content\nRead the docs first.')


class TestSharedContract:
	def test_identifier_reference_in_every_format(self, button):
		outputs = {fmt: formatter_for(fmt).format(button) for fmt in OutputFormat}

		assert 'DOM Path: form > button#submit.btn.primary\n' in outputs[OutputFormat.COMPACT_PROMPT]
		assert 'Selector:\n#submit\n' in outputs[OutputFormat.KEY_VALUE]
		assert '## Path\n`#submit`' in outputs[OutputFormat.VERBOSE]
		for text in outputs.values():
			assert BUTTON_HTML in text

	@pytest.mark.parametrize('output_format', list(OutputFormat))
	def test_output_is_deterministic(self, button, output_format):
		formatter = formatter_for(output_format)
		assert formatter.format(button) == formatter.format(button)

	@pytest.mark.parametrize('output_format', list(OutputFormat))
	def test_no_control_characters_besides_newline(self, output_format):
		document = load('<pre id="code">a\tb\r\nc</pre>')
		text = formatter_for(output_format).format(document.select('#code'))

		assert not any(ord(char) < 0x20 and char != '\n' for char in text)
		assert 'a b' in text

	def test_strip_control_characters(self):
		assert strip_control_characters('a\tb\x00c\r\nd\n') == 'a b c\nd\n'

	def test_description_is_frozen(self, button):
		description = formatter_for(OutputFormat.COMPACT_PROMPT).build(button)
		with pytest.raises(ValidationError):
			description.display_path = 'body'

	def test_body_resolves_to_the_root_path(self):
		document = load('<p>x</p>')
		description = formatter_for(OutputFormat.KEY_VALUE).build(document.body)

		assert description.executable_path == 'document.body'
		assert description.compact_path == 'body'


class TestOutputFormat:
	@pytest.mark.parametrize(
		'value, expected',
		[
			('verbose', OutputFormat.VERBOSE),
			('markdown', OutputFormat.VERBOSE),
			('compact_prompt', OutputFormat.COMPACT_PROMPT),
			('Compact-Prompt', OutputFormat.COMPACT_PROMPT),
			('prompt', OutputFormat.COMPACT_PROMPT),
			('key-value', OutputFormat.KEY_VALUE),
			('kv', OutputFormat.KEY_VALUE),
			(OutputFormat.KEY_VALUE, OutputFormat.KEY_VALUE),
		],
	)
	def test_parse(self, value, expected):
		assert OutputFormat.parse(value) is expected

	def test_unknown_format(self):
		with pytest.raises(ValueError):
			OutputFormat.parse('yaml')
