"""Connection to a running Chrome over the DevTools protocol."""

import logging

import httpx
from cdp_use import CDPClient

from element_inspector.config import CONFIG

logger = logging.getLogger(__name__)


class BrowserSession:
	"""
	Attaches to one page target of an already running browser.

	Either pass a websocket url, or the DevTools HTTP root (http://localhost:9222) and let the
	websocket url be fetched from /json/version.
	"""

	def __init__(self, cdp_url: str | None = None, target_id: str | None = None):
		self.cdp_url = cdp_url or CONFIG.ELEMENT_INSPECTOR_CDP_URL
		self.target_id = target_id
		self.cdp_client: CDPClient | None = None
		self.session_id: str | None = None
		self.url: str = ''
		self.logger = logger

	async def _resolve_ws_url(self) -> str:
		if not self.cdp_url:
			raise ValueError('CDP URL is not set')
		# If the cdp_url is already a websocket URL, use it as-is.
		if self.cdp_url.startswith('ws'):
			return self.cdp_url
		url = self.cdp_url.rstrip('/')
		if not url.endswith('/json/version'):
			url = url + '/json/version'
		async with httpx.AsyncClient() as client:
			version_info = await client.get(url)
			return version_info.json()['webSocketDebuggerUrl']

	async def start(self) -> 'BrowserSession':
		if self.cdp_client is not None:
			return self

		ws_url = await self._resolve_ws_url()
		self.cdp_client = CDPClient(ws_url)
		await self.cdp_client.start()

		targets = await self.cdp_client.send.Target.getTargets()
		pages = [target for target in targets['targetInfos'] if target['type'] == 'page']
		if self.target_id:
			pages = [target for target in pages if target['targetId'] == self.target_id]
		if not pages:
			await self.stop()
			raise RuntimeError(f'No page target found (target_id={self.target_id})')

		target = pages[0]
		self.target_id = target['targetId']
		self.url = target.get('url', '')
		result = await self.cdp_client.send.Target.attachToTarget(params={'targetId': self.target_id, 'flatten': True})
		self.session_id = result['sessionId']

		await self.cdp_client.send.Runtime.enable(session_id=self.session_id)
		await self.cdp_client.send.DOM.enable(session_id=self.session_id)
		self.logger.info(f'🔌 Attached to page {self.url} (target ...{self.target_id[-4:]})')
		return self

	async def stop(self) -> None:
		if self.cdp_client is None:
			return
		try:
			await self.cdp_client.stop()
		except Exception as e:
			self.logger.debug(f'Error while closing CDP client: {type(e).__name__}: {e}')
		self.cdp_client = None
		self.session_id = None

	async def __aenter__(self) -> 'BrowserSession':
		return await self.start()

	async def __aexit__(self, exc_type, exc_value, traceback) -> None:
		await self.stop()

	async def get_current_page_url(self) -> str:
		if self.cdp_client is None:
			return self.url
		result = await self.cdp_client.send.Runtime.evaluate(
			params={'expression': 'location.href', 'returnByValue': True}, session_id=self.session_id
		)
		self.url = result.get('result', {}).get('value', self.url) or self.url
		return self.url
