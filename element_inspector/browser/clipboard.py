import asyncio
import json
import logging
from typing import TYPE_CHECKING

import pyperclip

from element_inspector.inspector.collaborators import ClipboardSink

if TYPE_CHECKING:
	from element_inspector.browser.session import BrowserSession

logger = logging.getLogger(__name__)


class SystemClipboard(ClipboardSink):
	"""
	Writes text to the clipboard.

	The page's asynchronous navigator.clipboard is tried first; when it rejects (no focus, no
	permission, no page at all) the synchronous pyperclip copy is used instead.
	"""

	def __init__(self, browser_session: 'BrowserSession | None' = None):
		self.browser_session = browser_session

	async def write(self, text: str) -> bool:
		if await self._write_async(text):
			return True
		return await self._write_fallback(text)

	async def _write_async(self, text: str) -> bool:
		if self.browser_session is None or self.browser_session.cdp_client is None:
			return False
		try:
			result = await self.browser_session.cdp_client.send.Runtime.evaluate(
				params={
					'expression': f'navigator.clipboard.writeText({json.dumps(text)}).then(() => true)',
					'awaitPromise': True,
					'returnByValue': True,
					'userGesture': True,
				},
				session_id=self.browser_session.session_id,
			)
		except Exception as e:
			logger.debug(f'Async clipboard write failed: {type(e).__name__}: {e}')
			return False
		if 'exceptionDetails' in result:
			logger.debug(f'Async clipboard write rejected: {result["exceptionDetails"].get("text", "")}')
			return False
		return result.get('result', {}).get('value') is True

	async def _write_fallback(self, text: str) -> bool:
		try:
			# blocking: pyperclip runs xclip, pbcopy or clip.exe as a subprocess
			await asyncio.to_thread(pyperclip.copy, text)
		except pyperclip.PyperclipException as e:
			logger.warning(f'❌ Clipboard fallback failed: {e}')
			return False
		logger.debug('📋 Copied through the pyperclip fallback')
		return True
