
""" Auto Ingots settings. """

import json
import os
from typing import Any, Dict, List

from backend.texture_classes import Color


def _as_bool(v) -> bool:
# Converts .json input (bool/int/str/None) to a real bool;
# Avoids the case where a non-empty string like "False" is treated as True.

    if isinstance(v, bool): return v
    if isinstance(v, str):
        input_str = v.strip().lower()
        if input_str == "": return False
        return input_str in ("1","true","yes","on")
    return bool(v)


def _as_list(v) -> List[str]:
# Accepts a single string or a list of strings from .json.

    if v is None: return []
    if isinstance(v, str): return [v.strip()] if v.strip() else []
    return [str(item).strip() for item in v if str(item).strip()]



#                                           === Loading JSON file ===

_config_path = os.path.join(os.path.dirname(__file__), "config.json")
_config_data: Dict[str, Any] = {}
if os.path.isfile(_config_path):
    with open(_config_path, "r", encoding="utf-8") as f:
        _config_data = json.load(f)


# Assigning config values:
GENERATION_MODE: str = str(_config_data.get("GENERATION_MODE", "memory")).strip().lower() # "memory" serves textures from the virtual pack, "disk" writes them into a resource pack folder.
GAME_DIRECTORY: str = str(_config_data.get("GAME_DIRECTORY", ".")).strip() or "." # Root holding the "resourcepacks" folder in disk mode.
RESOURCE_PACK_FOLDER: str = str(_config_data.get("RESOURCE_PACK_FOLDER", "tfcautoingots_generated")).strip() # Folder name of the generated pack under <GAME_DIRECTORY>/resourcepacks.
ASSET_SOURCES: List[str] = _as_list(_config_data.get("ASSET_SOURCES", [])) # Extracted resource trees or .zip/.jar archives, highest priority first. CLI arguments override it.
SKIP_NAMESPACES: List[str] = _as_list(_config_data.get("SKIP_NAMESPACES", ["tfc"])) # Namespaces whose ingots already ship pile textures.
RELOAD_TEMPLATE: bool = _as_bool(_config_data.get("RELOAD_TEMPLATE", False)) # If true, the template is loaded again for every generated texture, picking up hot-swapped assets.

SHOW_DETAILS: bool = _as_bool(_config_data.get("SHOW_DETAILS", False)) # Shows debug logs, e.g., every generated texture.




#                                           === Constants ===

MOD_ID: str = "tfcautoingots"

DEFAULT_COLOR: Color = Color.from_argb(0xFFAAAAAA) # Used when no pixel of the ingot texture is visible or the texture is missing.
TRANSPARENCY_THRESHOLD: int = 128 # Pixels with alpha below this are ignored when averaging and copied verbatim when recoloring.

PACK_FORMAT: int = 34
PACK_DESCRIPTION: str = "Auto-generated TFC ingot pile textures"

TEMPLATE_TEXTURE: str = f"{MOD_ID}:textures/block/metal/smooth/template.png"
TEMPLATE_FALLBACK: str = "tfc:textures/block/metal/smooth/copper.png"

TARGET_NAMESPACE: str = "tfc" # Namespace the pile textures are served under.
TEXTURE_PATH_PREFIX: str = "textures/block/metal/smooth/"
INGOT_TAG: str = "c:ingots"

GENERATION_MODES: tuple[str, ...] = ("memory", "disk")
