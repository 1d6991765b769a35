# SPDX-License-Identifier: MIT

from typing import Optional

type EntityId = str


def normalize_entity_id(raw_id: object) -> Optional[EntityId]:
    """Stored ids may be numbers or strings; a missing or blank id gives None."""
    if raw_id is None:
        return None
    entity_id = str(raw_id).strip()
    if entity_id == "":
        return None
    return entity_id
