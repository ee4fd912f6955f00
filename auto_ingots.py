""" Generates pile textures for ingots from any content pack, driven by the host's lifecycle hooks or from the CLI. """

import os
import sys
import time
from typing import List, Optional, Tuple, Union

from backend.io_backend import FolderAssetLoader, ResourceSources, ResourceTreeCatalog

from backend.resource_pack import DiskPackPublisher, TextureStore, VirtualResourcePack

from backend.texture_classes import AssetLoader, ItemCatalog, MetalCollection, SynthesisStatus

from pile_generator import PileTextureGenerator

from settings import (ASSET_SOURCES, GAME_DIRECTORY, GENERATION_MODE, GENERATION_MODES, RELOAD_TEMPLATE, RESOURCE_PACK_FOLDER, SHOW_DETAILS)

from utils import discover_metals, get_metal_name, log, validate_safe_folder_name


Publisher = Union[TextureStore, DiskPackPublisher]




#                                           === Lifecycle ===


class AutoIngots:
    """
    Entry points the host calls at its lifecycle moments.

    on_early_init: before resources load, prepares the publisher (creates the disk pack).
    on_ready: once the item registry is complete, generates textures for every discovered metal.
    on_item_touched: on demand, for the single item the player interacted with.
    on_shutdown: drops in-memory textures.
    """

    def __init__(self, catalog: ItemCatalog, loader: AssetLoader, publisher: Publisher, *, reload_template: bool = RELOAD_TEMPLATE) -> None:
        self.catalog = catalog
        self.publisher = publisher
        self.generator = PileTextureGenerator(loader, publisher, reload_template=reload_template)
        self.textures_generated: bool = False


    def on_early_init(self) -> None:
        try:
            self.publisher.prepare()
            if isinstance(self.publisher, DiskPackPublisher):
                log(f"Initialized resource pack directory: {self.publisher.pack_path}", "info")
        except OSError as error:
            log(f"Could not initialize resource pack: {error}", "warn")


    def on_ready(self) -> Tuple[int, int]:
    # Bulk generation; runs once per session. Returns (generated, total) metals.

        if self.textures_generated:
            return 0, 0

        log("Generating ingot textures...", "info")
        metals: MetalCollection = discover_metals(self.catalog)
        log(f"Found {len(metals)} unique metals", "info")

        success_count: int = 0
        for metal_name, metal_entry in metals.items():
            status = self.generator.synthesize(metal_name, metal_entry.item_id)
            if status is not SynthesisStatus.FAILED:
                success_count += 1
            else:
                log(f"Skipped: '{metal_name}' ({metal_entry.item_id})", "skip")

        log(f"Generated textures for {success_count}/{len(metals)} metals", "complete" if success_count == len(metals) else "warn")
        self.textures_generated = True

        if metals and success_count == 0:
            log("No textures were generated! Check logs above for errors.", "warn")
        elif success_count and isinstance(self.publisher, DiskPackPublisher):
            texture_count = len(self.publisher.list_textures())
            log(f"Generated {texture_count} texture files", "info")
            log(f"Textures saved to: {self.publisher.textures_directory}", "info")

        return success_count, len(metals)


    def on_item_touched(self, item_id: str) -> Optional[SynthesisStatus]:
    # Generates the texture for a single ingot if it's missing. Returns None for items that aren't ingots.

        metal_name = get_metal_name(item_id)
        if metal_name is None:
            return None
        return self.generator.synthesize(metal_name, item_id)


    def on_shutdown(self) -> None:
        self.publisher.clear()
        self.textures_generated = False




#                                           === Setup ===


def create_publisher(mode: str = GENERATION_MODE, game_directory: str = GAME_DIRECTORY) -> Publisher:
# Picks the publisher for the configured generation mode.

    mode = (mode or "").strip().lower()
    if mode == "disk":
        return DiskPackPublisher(game_directory, RESOURCE_PACK_FOLDER)
    if mode != "memory":
        log(f"Warning: Unknown GENERATION_MODE '{mode}'. Defaulting to 'memory'.", "warn")
    return TextureStore()


def create_virtual_pack(auto_ingots: AutoIngots) -> Optional[VirtualResourcePack]:
# The pack the host registers with its renderer; only available in memory mode.

    if isinstance(auto_ingots.publisher, TextureStore):
        return VirtualResourcePack(auto_ingots.publisher)
    return None


def _validate_config() -> None:
# Runs initial validation for the config.

    validate_safe_folder_name(RESOURCE_PACK_FOLDER)
    if not RESOURCE_PACK_FOLDER.strip():
        log("Aborted: RESOURCE_PACK_FOLDER cannot be empty.", "error")
        raise SystemExit(1)

    if GENERATION_MODE not in GENERATION_MODES:
        log(f"Warning: Unknown GENERATION_MODE '{GENERATION_MODE}'. The CLI always writes to disk.", "warn")
    return




#                                         === CLI entry point ===

def generate_from_sources(source_paths: List[str], game_directory: str = GAME_DIRECTORY) -> Tuple[int, int]:
# Runs a full generation over resource trees/archives and writes the on-disk pack.

    start_time = time.time()
    _validate_config()

    sources = ResourceSources(source_paths)
    for source_path in source_paths:
        if not any(source.path == os.path.abspath(source_path) for source in sources.sources):
            log(f"Skipping '{source_path}': not a folder or a .zip/.jar archive.", "warn")
    if not sources.sources:
        log("Aborted: No valid asset sources provided (CLI/config).", "error")
        raise SystemExit(1)

    auto_ingots = AutoIngots(ResourceTreeCatalog(sources), FolderAssetLoader(sources), DiskPackPublisher(game_directory, RESOURCE_PACK_FOLDER))
    auto_ingots.on_early_init()
    generated = auto_ingots.on_ready()

    if SHOW_DETAILS:
        elapsed_time = time.time() - start_time
        log(f"Execution time: {elapsed_time:.2f} seconds", "info")
    return generated


def main() -> None:
    source_paths: List[str] = [argument for argument in sys.argv[1:] if argument.strip()] or ASSET_SOURCES
    # CLI paths override ASSET_SOURCES.
    if not source_paths:
        log("Aborted: No asset sources provided (CLI/config).", "error")
        # Prints error.
        sys.exit(1)

    generated, total = generate_from_sources(source_paths)
    if total and generated == 0:
        sys.exit(1)

if __name__ == "__main__":
    main()
