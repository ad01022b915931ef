from element_inspector.browser.activation import begin_inspection, can_instrument
from element_inspector.browser.session import BrowserSession

__all__ = ['BrowserSession', 'begin_inspection', 'can_instrument']
