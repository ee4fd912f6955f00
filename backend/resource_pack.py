""" Publishing backend: generated textures go either to an in-memory store served by the virtual resource pack, or to a resource pack folder on disk. """

import json
import os
import tempfile
import threading
from typing import Dict, List, Optional, Set

from backend.image_lib import ImageObject, encode_png, save_image as save_image_file
from backend.texture_classes import EncodeFailureError, PackMetadata

from settings import PACK_DESCRIPTION, PACK_FORMAT, RESOURCE_PACK_FOLDER, TARGET_NAMESPACE, TEXTURE_PATH_PREFIX
from utils import log




#                                           === In-memory store ===


class TextureStore:
# Owned map of metal name > generated image. Created at host startup, cleared on shutdown/reload.

    def __init__(self) -> None:
        self._textures: Dict[str, ImageObject] = {}
        self._lock = threading.RLock()

    def prepare(self) -> None:
        return

    def has_texture(self, metal_name: str) -> bool:
        with self._lock:
            return metal_name in self._textures

    def publish(self, metal_name: str, image: ImageObject) -> None:
        with self._lock:
            self._textures[metal_name] = image

    def get_texture(self, metal_name: str) -> Optional[ImageObject]:
        with self._lock:
            return self._textures.get(metal_name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._textures)

    def clear(self) -> None:
        with self._lock:
            self._textures.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._textures)


class VirtualResourcePack:
    """
    Read-only resource pack answering the host's asset requests from a TextureStore.

    Serves `<namespace>:textures/block/metal/smooth/<name>.png` for every generated name.
    """

    def __init__(self, store: TextureStore, *, namespace: str = TARGET_NAMESPACE, path_prefix: str = TEXTURE_PATH_PREFIX) -> None:
        self.store = store
        self.namespace = namespace
        self.path_prefix = path_prefix if path_prefix.endswith("/") else f"{path_prefix}/"

    def _metal_name_for_path(self, path: str) -> Optional[str]:
        if not (path.startswith(self.path_prefix) and path.endswith(".png")):
            return None
        metal_name = path[len(self.path_prefix):-len(".png")]
        if not metal_name or "/" in metal_name:
            return None
        return metal_name

    def get_resource(self, namespace: str, path: str) -> Optional[bytes]:
    # Encoded PNG bytes for a generated texture, None for anything else.

        if namespace != self.namespace:
            return None
        metal_name = self._metal_name_for_path(path)
        if metal_name is None:
            return None
        texture = self.store.get_texture(metal_name)
        if texture is None:
            return None

        try:
            return self.encode_texture(metal_name, texture)
        except EncodeFailureError as error:
            log(f"Failed to convert texture to bytes for {metal_name}: {error}", "error")
            return None
        # The store entry stays, so a later request can retry.

    def encode_texture(self, metal_name: str, texture: ImageObject) -> bytes:
        try:
            return encode_png(texture)
        except (OSError, ValueError) as error:
            raise EncodeFailureError(f"cannot encode '{metal_name}': {error}") from error

    def list_resources(self, namespace: str, path: str) -> List[str]:
    # Enumerates generated texture locations when asked for the texture folder.

        if namespace != self.namespace or path.strip("/") != self.path_prefix.strip("/"):
            return []
        return [f"{self.namespace}:{self.path_prefix}{metal_name}.png" for metal_name in self.store.names()]

    def get_namespaces(self) -> Set[str]:
        return {self.namespace}

    def get_metadata_section(self, section_name: str) -> Optional[PackMetadata]:
        if section_name != "pack":
            return None
        return PackMetadata(description=PACK_DESCRIPTION, pack_format=PACK_FORMAT)

    def get_root_resource(self, *paths: str) -> Optional[bytes]:
        return None





#                                           === On-disk pack ===


class DiskPackPublisher:
    """
    Writes generated textures into `<game_directory>/resourcepacks/<pack_folder>/`.

    Layout: `assets/<namespace>/textures/block/metal/smooth/<name>.png` plus a `pack.mcmeta`
    descriptor created once. Textures are written once and never overwritten.
    """

    def __init__(self, game_directory: str, pack_folder: str = RESOURCE_PACK_FOLDER, *, namespace: str = TARGET_NAMESPACE, path_prefix: str = TEXTURE_PATH_PREFIX) -> None:
        self.game_directory = os.path.abspath(game_directory or ".")
        self.pack_folder = pack_folder
        self.namespace = namespace
        self.path_prefix = path_prefix.strip("/")

    @property
    def pack_path(self) -> str:
        return os.path.join(self.game_directory, "resourcepacks", self.pack_folder)

    @property
    def textures_directory(self) -> str:
        return os.path.join(self.pack_path, "assets", self.namespace, *self.path_prefix.split("/"))

    def texture_path(self, metal_name: str) -> str:
        return os.path.join(self.textures_directory, f"{metal_name}.png")

    def prepare(self) -> None:
    # Creates the pack folder tree and its descriptor if absent. Raises OSError on filesystem failures.

        os.makedirs(self.textures_directory, exist_ok=True)
        descriptor_path = os.path.join(self.pack_path, "pack.mcmeta")
        if os.path.exists(descriptor_path):
            return
        descriptor = {"pack": {"pack_format": PACK_FORMAT, "description": PACK_DESCRIPTION}}
        with open(descriptor_path, "w", encoding="utf-8") as f:
            json.dump(descriptor, f, indent=2)

    def has_texture(self, metal_name: str) -> bool:
        return os.path.isfile(self.texture_path(metal_name))

    def publish(self, metal_name: str, image: ImageObject) -> None:
    # Writes to a temporary file first, so a texture is never observed half-written.

        self.prepare()
        target_path = self.texture_path(metal_name)
        file_descriptor, temporary_path = tempfile.mkstemp(prefix=f".{metal_name}.", suffix=".png", dir=self.textures_directory)
        os.close(file_descriptor)
        try:
            save_image_file(image, temporary_path)
            os.replace(temporary_path, target_path)
        except BaseException:
            if os.path.exists(temporary_path):
                os.remove(temporary_path)
            raise

    def list_textures(self) -> List[str]:
        if not os.path.isdir(self.textures_directory):
            return []
        return sorted(filename[:-len(".png")] for filename in os.listdir(self.textures_directory)
                      if filename.endswith(".png") and not filename.startswith("."))

    def clear(self) -> None:
        return
    # Written textures persist between sessions.
