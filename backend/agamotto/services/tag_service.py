"""
Tag management used by the tag selector: create with the next free color,
delete (which frees the color), list free colors.
"""

import logging
import time
from typing import List

from .errors import TagAlreadyExistsError, TagLimitExceededError
from .record_store import RecordStore
from .records import TagRecord
from .tag_palette import MAX_TAGS, available_colors, next_available_color

logger = logging.getLogger(__name__)


async def get_available_colors(store: RecordStore) -> List[str]:
    tags = await store.get_all_tags()
    return available_colors(tag.color for tag in tags)


async def create_tag(store: RecordStore, name: str) -> TagRecord:
    """
    Create a tag with the next available palette color.
    
    Raises:
        ValueError: empty name
        TagAlreadyExistsError: name is taken (case-sensitive)
        TagLimitExceededError: every palette color is in use
    """
    name = name.strip()
    if not name:
        raise ValueError("Tag name cannot be empty")
    
    if await store.get_tag(name):
        raise TagAlreadyExistsError(name)
    
    tags = await store.get_all_tags()
    color = next_available_color(tag.color for tag in tags)
    if color is None:
        raise TagLimitExceededError(name, MAX_TAGS)
    
    now = int(time.time() * 1000)
    tag = TagRecord(name=name, color=color, date_created=now, date_last_used=now)
    await store.put_tag(tag)
    logger.info(f"[Tags] Created tag '{name}' ({color})")
    return tag
