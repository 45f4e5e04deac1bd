"""
Item metadata model.

Only the fields needed to label auction listings are kept; everything else the
item endpoint returns is ignored at validation time.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ItemInfo(BaseModel):
    """Immutable snapshot of one item's metadata.

    Attributes:
        id: WoW canonical item ID.
        name: Display name at fetch time.
        icon: Icon asset identifier (e.g. ``"inv_misc_herb_01"``).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    icon: str

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Item id must be a positive integer, got {v}.")
        return v
