"""
Inspect an element of a page in an already running Chrome.

Start Chrome with remote debugging enabled, open the page you want to inspect, then run:

    chrome --remote-debugging-port=9222
    ELEMENT_INSPECTOR_CDP_URL=http://localhost:9222 python examples/inspect_page.py

Hover to highlight, click to copy the description, press Escape to cancel.
Set ELEMENT_INSPECTOR_LOGGING_LEVEL=result to see only the copied text in the terminal.
"""

import asyncio
import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from element_inspector import BrowserSession, InspectionRegistry, InstrumentationDeniedError, begin_inspection
from element_inspector.inspector.events import ElementDescribedEvent, InspectionEndedEvent

logger = logging.getLogger('element_inspector.examples')


async def main():
	registry = InspectionRegistry()
	ended = asyncio.Event()

	async with BrowserSession() as browser_session:
		try:
			session = await begin_inspection(browser_session, registry)
		except InstrumentationDeniedError as e:
			logger.error(f'❌ {e}')
			return

		def on_described(event: ElementDescribedEvent) -> None:
			logger.log(logging.getLevelName('RESULT'), event.text)

		def on_ended(event: InspectionEndedEvent) -> None:
			logger.info(f'Inspection ended: {event.reason}')
			ended.set()

		session.event_bus.on(ElementDescribedEvent, on_described)
		session.event_bus.on(InspectionEndedEvent, on_ended)

		await ended.wait()
		await session.event_bus.wait_until_idle()
		await session.event_bus.stop()


if __name__ == '__main__':
	asyncio.run(main())
