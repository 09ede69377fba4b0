from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AssetRole(str, Enum):
    face = "face"
    style = "style"
    clothing = "clothing"
    shoes = "shoes"
    accessories = "accessories"
    hairstyle = "hairstyle"


# request order for every non-face reference
NON_FACE_ORDER: Tuple[AssetRole, ...] = (
    AssetRole.style,
    AssetRole.clothing,
    AssetRole.shoes,
    AssetRole.accessories,
    AssetRole.hairstyle,
)


class Language(str, Enum):
    en = "en"
    ru = "ru"


class AspectRatio(str, Enum):
    square = "1:1"
    portrait_3_4 = "3:4"
    landscape_4_3 = "4:3"
    portrait_9_16 = "9:16"
    landscape_16_9 = "16:9"

    @property
    def value_ratio(self) -> float:
        w, h = self.value.split(":")
        return int(w) / int(h)

    @classmethod
    def nearest(cls, width: int, height: int) -> "AspectRatio":
        """Supported ratio closest to width/height; ties go to the earlier member."""
        target = width / height
        best = None
        best_diff = None
        for ratio in cls:
            diff = abs(ratio.value_ratio - target)
            if best_diff is None or diff < best_diff:
                best, best_diff = ratio, diff
        return best


class ImageRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: str  # base64, exactly as uploaded
    mime_type: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def inline_part(self) -> Dict[str, Dict[str, str]]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


class AssetMap:
    """Uploaded references for one session, at most one image per role."""

    def __init__(self, records: Optional[Dict[AssetRole, ImageRecord]] = None) -> None:
        self._slots: Dict[AssetRole, ImageRecord] = dict(records or {})

    def put(self, role: AssetRole, record: ImageRecord) -> None:
        self._slots[role] = record

    def remove(self, role: AssetRole) -> Optional[ImageRecord]:
        return self._slots.pop(role, None)

    def get(self, role: AssetRole) -> Optional[ImageRecord]:
        return self._slots.get(role)

    def __contains__(self, role: object) -> bool:
        return role in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[AssetRole]:
        return (role for role in AssetRole if role in self._slots)

    def items(self) -> List[Tuple[AssetRole, ImageRecord]]:
        return [(role, self._slots[role]) for role in self]

    @property
    def face(self) -> Optional[ImageRecord]:
        return self._slots.get(AssetRole.face)

    def has_face(self) -> bool:
        return AssetRole.face in self._slots

    def non_face(self) -> List[Tuple[AssetRole, ImageRecord]]:
        return [(role, self._slots[role]) for role in NON_FACE_ORDER if role in self._slots]

    def can_analyze(self) -> bool:
        return self.has_face() and bool(self.non_face())
