from element_inspector.formatter.service import DescriptionFormatter
from element_inspector.formatter.views import Description, OutputFormat

__all__ = ['Description', 'DescriptionFormatter', 'OutputFormat']
