from .block import BlockCategory, BlockInstance, BlockTemplate, format_number, parse_number, sanitize_number_input
from .catalog import CATALOG, block_from_spec, get_template, instantiate, template_at

__all__ = [
    'BlockCategory', 'BlockInstance', 'BlockTemplate',
    'format_number', 'parse_number', 'sanitize_number_input',
    'CATALOG', 'block_from_spec', 'get_template', 'instantiate', 'template_at',
]
