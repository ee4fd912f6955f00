""" Ingot utilities: logging, identifier parsing and metal discovery. """

import re
from typing import Iterable, Optional, Set, Tuple

from settings import INGOT_TAG, SHOW_DETAILS, SKIP_NAMESPACES

from backend.texture_classes import ItemCatalog, MetalCollection, MetalEntry

from backend.image_lib import close_image


LOG_TYPES: list[str] = ["debug", "info", "warn", "error", "skip", "complete"]
# Defines log types; the host adapter or the CLI reads them from stdout.

def log(message: str, message_kind: LOG_TYPES = "info") -> None:
# Maps different log types.

    if message == "":
        print("")
        return

    if message_kind not in LOG_TYPES:
        message_kind = "info"

    if message_kind == "debug":
        if SHOW_DETAILS:
            print(f"   · {message}")
    elif message_kind == "info":
        print(f"   {message}")
    elif message_kind == "warn":
        print(f"⚠️ {message}")
    elif message_kind == "error":
        print(f"⛔ {message}")
    elif message_kind == "skip":
        print(f"❌ {message}")
    elif message_kind == "complete":
        print(f"✅ {message}")
    else:
        print(message)  # fallback

    # Print styles:
    # debug: 3 whitespaces + · + message, only with SHOW_DETAILS
    # info: 3 whitespaces + message
    # warn: ⚠️ + message
    # error: ⛔ + message
    # skip: ❌ + message
    # complete: ✅ + message


INGOT_PATTERN = re.compile(r"(?:(.+)_ingot|ingot_(.+))")
METAL_NAME_PATTERN = re.compile(r"[a-z0-9_.\-]+")
# Metal names end up as a single resource path segment, e.g., "textures/block/metal/smooth/<name>.png".


def close_image_files(images: Iterable[Optional[object]]) -> None:
# Safely closes all opened images even if there is an error during image processing.

    processed_ids: Set[int] = set()
    for image in images:
        if image is None:
            continue
        image_id = id(image)
        if image_id in processed_ids:
            continue
        processed_ids.add(image_id)
        try:
            close_image(image) # Function from image_lib
        except (OSError, ValueError):
            pass


def split_identifier(identifier: str) -> Optional[Tuple[str, str]]:
# Splits "namespace:path" into its parts; returns None for malformed identifiers.

    if not isinstance(identifier, str) or identifier.count(":") != 1:
        return None
    namespace, path = identifier.split(":")
    if not namespace or not path:
        return None
    return namespace, path


def extract_metal_name_from_id(path: str) -> Optional[str]:
# Extracts metal name from an item path, e.g., lead_ingot > lead, ingot_tin > tin, double_lead_ingot > lead.

    match: Optional[re.Match[str]] = INGOT_PATTERN.search(path or "")
    if not match:
        return None
    metal_name: str = match.group(1) if match.group(1) is not None else match.group(2)

    if metal_name.startswith("double_"):
        metal_name = metal_name[len("double_"):]
    if metal_name.startswith("raw_"):
        metal_name = metal_name[len("raw_"):]
    return metal_name or None


def get_metal_name(item_id: str) -> Optional[str]:
# Returns the metal name for a full item identifier if it names a usable metal.

    parts = split_identifier(item_id)
    if parts is None:
        return None
    metal_name = extract_metal_name_from_id(parts[1])
    if not metal_name or not METAL_NAME_PATTERN.fullmatch(metal_name):
        return None
    return metal_name


def ingot_texture_location(item_id: str) -> Optional[str]:
# The conventional item texture location: "ns:path" > "ns:textures/item/path.png".

    parts = split_identifier(item_id)
    if parts is None:
        return None
    namespace, path = parts
    return f"{namespace}:textures/item/{path}.png"


def discover_metals(catalog: ItemCatalog, *, ingot_tag: str = INGOT_TAG, skip_namespaces: Optional[Iterable[str]] = None) -> MetalCollection:
# Scans the catalog for ingots (by tag or by name) and maps each metal name to the first ingot found for it.
# Items from skipped namespaces are ignored, as are identifiers that don't yield a usable metal name.

    skipped: Set[str] = set(SKIP_NAMESPACES if skip_namespaces is None else skip_namespaces)
    metal_to_ingot: MetalCollection = {}

    for item_id in catalog.iter_item_ids():
        parts = split_identifier(item_id)
        if parts is None:
            continue
        namespace, path = parts

        is_ingot: bool = "ingot" in path or catalog.has_tag(item_id, ingot_tag)
        if not is_ingot or namespace in skipped:
            continue

        metal_name = get_metal_name(item_id)
        if metal_name is None:
            continue
        if metal_name not in metal_to_ingot:
            metal_to_ingot[metal_name] = MetalEntry(metal_name, item_id)
        # First discovered ingot wins; later duplicates are dropped.

    return metal_to_ingot


def validate_safe_folder_name(raw_folder_name: Optional[str]) -> None:
# Validates that the custom folder name doesn't include unsupported characters.

    folder_name: str = (raw_folder_name or "")
    if folder_name.strip() == "":
        return

    if any(invalid_character in folder_name for invalid_character in '\\/:*?"<>|'):
        log(f"Aborted: invalid folder name '{raw_folder_name}'. It cannot contain \\ / : * ? \" < > |", "error")
        # Prints error.
        raise SystemExit(1)
    return
