"""
Static catalog of block templates, grouped by category in palette order.
"""

from __future__ import annotations
import uuid
from typing import Dict, List, Mapping, Optional

from blockstage_core.blocks.block import BlockCategory, BlockInstance, BlockTemplate
from blockstage_core.constants import (
    COLOR_CONTROL, COLOR_EVENT, COLOR_LOOKS, COLOR_MOTION,
    TEXT_GOTO, TEXT_MOVE, TEXT_REPEAT, TEXT_SAY_FOR, TEXT_SAY_HELLO, TEXT_TURN, TEXT_WHEN_CLICKED,
)

CATEGORY_COLORS: Dict[BlockCategory, str] = {
    BlockCategory.MOTION: COLOR_MOTION,
    BlockCategory.LOOKS: COLOR_LOOKS,
    BlockCategory.EVENT: COLOR_EVENT,
    BlockCategory.CONTROL: COLOR_CONTROL,
}

def _template(key: str, text: str, input_types: tuple, category: BlockCategory) -> BlockTemplate:
    return BlockTemplate(key, text, input_types, category, CATEGORY_COLORS[category])

CATALOG: Dict[BlockCategory, List[BlockTemplate]] = {
    BlockCategory.MOTION: [
        _template("move", TEXT_MOVE, ("number",), BlockCategory.MOTION),
        _template("turn", TEXT_TURN, ("number",), BlockCategory.MOTION),
        _template("goto", TEXT_GOTO, ("number", "number"), BlockCategory.MOTION),
    ],
    BlockCategory.LOOKS: [
        _template("say_for", TEXT_SAY_FOR, ("text", "number"), BlockCategory.LOOKS),
        _template("say_hello", TEXT_SAY_HELLO, (), BlockCategory.LOOKS),
    ],
    BlockCategory.EVENT: [
        _template("when_clicked", TEXT_WHEN_CLICKED, (), BlockCategory.EVENT),
    ],
    BlockCategory.CONTROL: [
        _template("repeat", TEXT_REPEAT, ("number",), BlockCategory.CONTROL),
    ],
}

TEMPLATES_BY_KEY: Dict[str, BlockTemplate] = {
    template.key: template for templates in CATALOG.values() for template in templates
}

def new_block_id() -> str:
    return f"block-{uuid.uuid4().hex[:12]}"

def get_template(key: str) -> BlockTemplate:
    try:
        return TEMPLATES_BY_KEY[key]
    except KeyError:
        raise ValueError(f"Unknown block template: {key}") from None

def template_at(category: BlockCategory | str, index: int) -> BlockTemplate:
    """Look up a template by palette position, e.g. ("Motion", 0) -> Move."""
    if isinstance(category, str):
        category = BlockCategory(category)
    templates = CATALOG[category]
    if not 0 <= index < len(templates):
        raise ValueError(f"No {category.value} template at index {index}")
    return templates[index]

def find_template_by_text(text: str) -> Optional[BlockTemplate]:
    for template in TEMPLATES_BY_KEY.values():
        if template.text == text:
            return template
    return None

def instantiate(template: BlockTemplate | str,
                inputs: Optional[Mapping[int, object]] = None,
                children: Optional[List[BlockInstance]] = None) -> BlockInstance:
    """
    Copy a template into a new block instance with a fresh session-unique id.

    Args:
        template: BlockTemplate or template key
        inputs: optional initial input values keyed by placeholder index
        children: optional body blocks (Repeat)

    Returns:
        BlockInstance
    """
    if isinstance(template, str):
        template = get_template(template)
    return BlockInstance(
        id=new_block_id(),
        text=template.text,
        input_types=list(template.input_types),
        category=template.category,
        color=template.color,
        inputs={int(k): str(v) for k, v in (inputs or {}).items()},
        children=list(children or []),
    )

def block_from_spec(spec: Mapping) -> BlockInstance:
    """
    Build a block from a project-file entry: either a template `key` or a full
    block dict (`text`, `category`, ...). Nested `children` are built recursively.
    """
    children = [block_from_spec(child) for child in spec.get("children", [])]
    if "key" in spec:
        return instantiate(spec["key"], spec.get("inputs"), children)

    template = find_template_by_text(spec.get("text", ""))
    if template is not None and "category" not in spec:
        return instantiate(template, spec.get("inputs"), children)

    if "text" not in spec or "category" not in spec:
        raise ValueError(f"Block entry needs a 'key' or 'text' and 'category': {dict(spec)}")
    data = dict(spec)
    data.setdefault("id", new_block_id())
    data.setdefault("color", CATEGORY_COLORS.get(BlockCategory(data["category"]), ""))
    data["children"] = []
    block = BlockInstance.from_dict(data)
    block.children = children
    return block
