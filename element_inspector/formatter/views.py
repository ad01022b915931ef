from enum import Enum

from pydantic import BaseModel, ConfigDict

from element_inspector.dom.views import DOMRect


class OutputFormat(str, Enum):
	VERBOSE = 'verbose'
	COMPACT_PROMPT = 'compact_prompt'
	KEY_VALUE = 'key_value'

	@classmethod
	def parse(cls, value: 'str | OutputFormat') -> 'OutputFormat':
		if isinstance(value, OutputFormat):
			return value
		normalized = value.strip().lower().replace('-', '_')
		aliases = {'compact': cls.COMPACT_PROMPT, 'prompt': cls.COMPACT_PROMPT, 'kv': cls.KEY_VALUE, 'markdown': cls.VERBOSE}
		if normalized in aliases:
			return aliases[normalized]
		return cls(normalized)


class Description(BaseModel):
	"""Everything captured about one element, assembled once per commit and never mutated"""

	model_config = ConfigDict(frozen=True)

	# path encodings
	executable_path: str
	display_path: str
	css_selector: str
	compact_path: str

	component_name: str | None = None
	attributes: tuple[tuple[str, str], ...] = ()
	presentation: tuple[tuple[str, str], ...] = ()
	bounds: DOMRect

	# markup
	open_tag: str
	outer_html: str
	synopsis: str

	direct_text: str = ''
	full_text: str = ''
