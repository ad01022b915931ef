import logging
import math
import time
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec('P')
R = TypeVar('R')


def time_execution_sync(additional_text: str = '') -> Callable[[Callable[P, R]], Callable[P, R]]:
	def decorator(func: Callable[P, R]) -> Callable[P, R]:
		@wraps(func)
		def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			result = func(*args, **kwargs)
			execution_time = time.time() - start_time
			# Only log if execution takes more than 0.25 seconds
			if execution_time > 0.25:
				self_has_logger = args and getattr(args[0], 'logger', None)
				log = getattr(args[0], 'logger') if self_has_logger else logger
				log.debug(f'⏳ {additional_text.strip("-")}() took {execution_time:.2f}s')
			return result

		return wrapper

	return decorator


def time_execution_async(
	additional_text: str = '',
) -> Callable[[Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]]:
	def decorator(func: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, Coroutine[Any, Any, R]]:
		@wraps(func)
		async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			result = await func(*args, **kwargs)
			execution_time = time.time() - start_time
			if execution_time > 0.25:
				self_has_logger = args and getattr(args[0], 'logger', None)
				log = getattr(args[0], 'logger') if self_has_logger else logger
				log.debug(f'⏳ {additional_text.strip("-")}() took {execution_time:.2f}s')
			return result

		return wrapper

	return decorator


def js_round(value: float) -> int:
	"""Round half up, the way Math.round does (Python's round() is banker's rounding)."""
	return math.floor(value + 0.5)


def format_css_number(value: float) -> str:
	"""Render a number the way JS template literals do: 120 -> '120', 120.5 -> '120.5'"""
	value = float(value)
	if value.is_integer():
		return str(int(value))
	return repr(value)


def css_escape(value: str) -> str:
	"""Serialize an identifier following the CSSOM CSS.escape() algorithm."""
	result: list[str] = []
	length = len(value)
	first = value[0] if value else ''
	for index, char in enumerate(value):
		code = ord(char)
		if code == 0:
			result.append('�')
		elif (
			0x1 <= code <= 0x1F
			or code == 0x7F
			or (index == 0 and 0x30 <= code <= 0x39)
			or (index == 1 and 0x30 <= code <= 0x39 and first == '-')
		):
			result.append(f'\\{code:x} ')
		elif index == 0 and length == 1 and char == '-':
			result.append('\\' + char)
		elif code >= 0x80 or char in '-_' or (char.isascii() and char.isalnum()):
			result.append(char)
		else:
			result.append('\\' + char)
	return ''.join(result)


def truncate_text(text: str, limit: int, marker: str = '…') -> str:
	"""Keep at most `limit` characters, appending `marker` only when something was cut."""
	if len(text) <= limit:
		return text
	return text[:limit] + marker
