from typing import Dict, Iterable, Optional, Protocol, Tuple, TypedDict
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Color:
    r: int # Red channel, 0-255.
    g: int # Green channel, 0-255.
    b: int # Blue channel, 0-255.
    a: int = 255 # Sampled and target colors are always opaque.

    def __post_init__(self) -> None:
        for channel_name in ("r", "g", "b", "a"):
            value = getattr(self, channel_name)
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"Color channel '{channel_name}' out of range: {value!r}")

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def from_argb(cls, value: int) -> "Color":
    # Unpacks a 0xAARRGGBB integer.
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, (value >> 24) & 0xFF)


@dataclass(frozen=True)
class MetalEntry:
    name: str # Metal name derived from the item path, e.g., "lead".
    item_id: str # Representative ingot item, e.g., "somemod:lead_ingot".


class SynthesisStatus(Enum):
    GENERATED = "generated"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class PackMetadata(TypedDict):
    description: str # Human-readable pack description.
    pack_format: int # Resource pack format version understood by the host.


MetalCollection = Dict[str, MetalEntry] # Maps a metal name to its first discovered ingot, e.g., "lead": MetalEntry("lead", "somemod:lead_ingot")



#                                           === Host boundary ===

class ItemCatalog(Protocol):
    def iter_item_ids(self) -> Iterable[str]: ... # Every known item identifier, "namespace:path".
    def has_tag(self, item_id: str, tag: str) -> bool: ...

class AssetLoader(Protocol):
    def load(self, location: str) -> Optional[bytes]: ... # Raw bytes for "namespace:path", None when absent.

class TexturePublisher(Protocol):
    def prepare(self) -> None: ...
    def has_texture(self, metal_name: str) -> bool: ...
    def publish(self, metal_name: str, image: object) -> None: ...
    def clear(self) -> None: ...



#                                           === Errors ===

class SourceImageUnavailableError(OSError):
# Ingot texture missing or undecodable; recovered by falling back to the default color.
    pass

class TemplateUnavailableError(OSError):
    def __init__(self, attempted_locations: Iterable[str], failure_reasons: Optional[Dict[str, str]] = None) -> None:
        self.attempted_locations: Tuple[str, ...] = tuple(attempted_locations)
        self.failure_reasons: Dict[str, str] = dict(failure_reasons or {}) # Location > "not found" or "unreadable (...)".
        details = " or ".join(f"{location} ({self.failure_reasons[location]})" if location in self.failure_reasons else location
                              for location in self.attempted_locations)
        super().__init__(f"Template texture not found or unreadable at {details}")

class EncodeFailureError(OSError):
    pass
