"""
Scene Classifier

Keyword tagging of a shot's scene description. Each category owns a list of
case-insensitive substrings; a scene belongs to a category when any of its
keywords occurs in the text. Categories overlap (a drone shot of a facade is
both aerial and exterior), so callers decide priority.

The vocabulary is business data: Russian stems as written by the script
generator, plus English equivalents. Swap or extend it by passing a different
table to SceneClassifier.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .models import Area

EXTERIOR = "exterior"
INTERIOR = "interior"
AERIAL = "aerial"
DETAIL = "detail"

DEFAULT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    EXTERIOR: (
        "exterior", "экстерьер", "фасад", "двор", "улиц", "аэриал", "дрон",
        "бассейн", "парк", "площад", "панорам",
        "facade", "street", "courtyard", "pool", "park", "plaza",
        "aerial", "drone", "panoram",
    ),
    INTERIOR: (
        "interior", "интерьер", "лобби", "гостин", "кухн", "спальн", "ванн",
        "холл", "ресепшн", "коридор", "лифт",
        "lobby", "living room", "kitchen", "bedroom", "bathroom", "hallway",
        "reception", "corridor", "elevator",
    ),
    AERIAL: (
        "дрон", "аэриал", "панорам", "фасад", "exterior",
        "drone", "aerial", "panoram", "facade",
    ),
    DETAIL: (
        "деталь", "крупный", "текстур", "close",
        "detail", "texture", "macro",
    ),
}


@dataclass(frozen=True)
class SceneTags:
    """Category flags for one scene description."""
    is_exterior: bool = False
    is_interior: bool = False
    is_aerial: bool = False
    is_detail: bool = False


class SceneClassifier:
    """Table-driven keyword classifier."""

    def __init__(self, keywords: Optional[Mapping[str, Iterable[str]]] = None):
        table = DEFAULT_KEYWORDS if keywords is None else keywords
        self.keywords: Dict[str, Tuple[str, ...]] = {
            category: tuple(kw.lower() for kw in words)
            for category, words in table.items()
        }

    def matches(self, scene: str, category: str) -> bool:
        text = (scene or "").lower()
        return any(kw in text for kw in self.keywords.get(category, ()))

    def classify(self, scene: str) -> SceneTags:
        return SceneTags(
            is_exterior=self.matches(scene, EXTERIOR),
            is_interior=self.matches(scene, INTERIOR),
            is_aerial=self.matches(scene, AERIAL),
            is_detail=self.matches(scene, DETAIL),
        )

    def area(self, scene: str) -> Area:
        """Coarse area label; interior wins when both vocabularies match."""
        if self.matches(scene, INTERIOR):
            return Area.INTERIOR
        if self.matches(scene, EXTERIOR):
            return Area.EXTERIOR
        return Area.OTHER


default_classifier = SceneClassifier()


def classify(scene: str) -> SceneTags:
    return default_classifier.classify(scene)


def area(scene: str) -> Area:
    return default_classifier.area(scene)
