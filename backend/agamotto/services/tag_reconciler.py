"""
Tag Reconciler

Maps the tag names referenced by an import onto stored tags, creating the
missing ones with the next free palette color. The returned map is what
the importer uses for every row; it never re-reads tags by name.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .errors import StoreWriteError, TagCreationError, TagLimitExceededError
from .record_store import RecordStore
from .records import TagRecord
from .tag_palette import MAX_TAGS, available_colors, next_available_color

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Tags resolved for one import"""
    created_names: List[str] = field(default_factory=list)
    tag_map: Dict[str, TagRecord] = field(default_factory=dict)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TagReconciler:
    """Resolves tag names against the record store"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def reconcile(self, tag_names: Iterable[str]) -> ReconciliationResult:
        """
        Resolve every name to an existing or newly created tag.

        Existing tags are returned untouched (usage counters belong to
        session completion). Capacity for all missing names is checked
        before the first write, so a limit failure creates nothing.

        Args:
            tag_names: Distinct, already trimmed names in first-appearance order

        Returns:
            ReconciliationResult with created names and the name -> tag map

        Raises:
            TagLimitExceededError: the palette cannot hold every missing name
            TagCreationError: the store rejected a tag write (carries the
                names already created)
        """
        names = list(dict.fromkeys(tag_names))
        result = ReconciliationResult()
        missing: List[str] = []

        for name in names:
            existing = await self.store.get_tag(name)
            if existing:
                result.tag_map[name] = existing
            else:
                missing.append(name)

        if not missing:
            logger.info(f"[Tag Reconciler] All {len(names)} tags already exist")
            return result

        stored_tags = await self.store.get_all_tags()
        free = available_colors(tag.color for tag in stored_tags)
        if len(missing) > len(free):
            offending = missing[len(free)]
            logger.warning(
                f"[Tag Reconciler] Tag limit reached: {len(missing)} new tags requested, "
                f"{len(free)} colors free (first rejected: '{offending}')"
            )
            raise TagLimitExceededError(offending, MAX_TAGS)

        for name in missing:
            try:
                tag = await self._create_tag(name)
            except StoreWriteError as e:
                logger.error(f"[Tag Reconciler] Failed to create tag '{name}': {e}")
                raise TagCreationError(name, e, result.created_names) from e
            result.tag_map[name] = tag
            result.created_names.append(name)

        logger.info(
            f"[Tag Reconciler] Resolved {len(names)} tags, created {len(result.created_names)}: "
            f"{result.created_names}"
        )
        return result

    async def _create_tag(self, name: str) -> TagRecord:
        # Colors are recomputed per creation so two new tags never share one
        stored_tags = await self.store.get_all_tags()
        color = next_available_color(tag.color for tag in stored_tags)
        if color is None:
            raise TagLimitExceededError(name, MAX_TAGS)

        now = _now_ms()
        tag = TagRecord(
            name=name,
            color=color,
            date_created=now,
            date_last_used=now,
            total_instances=0,
        )
        await self.store.put_tag(tag)
        logger.info(f"[Tag Reconciler] Created tag '{name}' with color {color}")
        return tag
