""" Generates ingot pile textures by recoloring a shared template to the ingot's average color. """

import threading
from typing import Dict, Optional

import numpy as np

from backend.image_lib import (ImageObject, decode_image, ensure_rgba, from_array_u8, get_size, is_empty,
                               new_image_rgba, to_array_u8)

from backend.texture_classes import (AssetLoader, Color, SourceImageUnavailableError, SynthesisStatus,
                                     TemplateUnavailableError, TexturePublisher)

from settings import DEFAULT_COLOR, RELOAD_TEMPLATE, TEMPLATE_FALLBACK, TEMPLATE_TEXTURE, TRANSPARENCY_THRESHOLD

from utils import close_image_files, ingot_texture_location, log




#                                           === Color math ===


def average_color(image: ImageObject) -> Color:
# Mean RGB over pixels that are at least TRANSPARENCY_THRESHOLD opaque, truncated to integers.
# Returns DEFAULT_COLOR when no pixel qualifies, including zero-area images.

    if is_empty(image):
        return DEFAULT_COLOR

    pixels = to_array_u8(ensure_rgba(image)) # H x W x RGBA
    visible = pixels[..., 3] >= TRANSPARENCY_THRESHOLD
    pixel_count = int(np.count_nonzero(visible))
    if pixel_count == 0:
        return DEFAULT_COLOR

    totals = pixels[visible][:, :3].sum(axis=0, dtype=np.int64)
    red, green, blue = (int(total) // pixel_count for total in totals)
    return Color(red, green, blue)


def recolor(template: ImageObject, target: Color) -> ImageObject:
    """
    Recolors the template toward the target color while keeping its shading.

    Every visible pixel becomes the target color scaled by the ratio of the pixel's brightness
    to the template's mean brightness, truncated and clamped to 0-255. Alpha is kept, and pixels
    below the transparency threshold are copied unchanged, RGB included.
    The result is a new image; the template is not modified.
    """

    template = ensure_rgba(template)
    if is_empty(template):
        return new_image_rgba(get_size(template))

    # Brightness math stays in float32, in this order; float64 truncates differently at some boundaries.
    template_mean: Color = average_color(template)
    template_brightness = np.float32(template_mean.r + template_mean.g + template_mean.b) / np.float32(3.0)

    pixels = to_array_u8(template)
    result = pixels.copy()
    visible = pixels[..., 3] >= TRANSPARENCY_THRESHOLD

    pixel_brightness = pixels[..., :3].sum(axis=2, dtype=np.int32).astype(np.float32) / np.float32(3.0)
    if template_brightness > 0:
        brightness_factor = pixel_brightness / template_brightness
    else:
        brightness_factor = np.ones_like(pixel_brightness)
    # A template that is black on every visible pixel maps straight to the target color.

    target_rgb = np.array([target.r, target.g, target.b], dtype=np.float32)
    scaled = np.clip(np.trunc(target_rgb * brightness_factor[..., None]), 0, 255).astype(np.uint8)
    result[visible, :3] = scaled[visible]

    return from_array_u8(result, "RGBA")




#                                           === Synthesis ===


class PileTextureGenerator:
    """
    Turns a (metal name, ingot item) pair into a published pile texture.

    Generation is idempotent per metal name: a name the publisher already holds is not
    generated again. Calls for the same name are serialized.
    """

    def __init__(self, loader: AssetLoader, publisher: TexturePublisher, *, reload_template: bool = RELOAD_TEMPLATE,
                 template_location: str = TEMPLATE_TEXTURE, template_fallback: str = TEMPLATE_FALLBACK) -> None:
        self.loader = loader
        self.publisher = publisher
        self.reload_template = reload_template
        self.template_locations = (template_location, template_fallback)
        self._template: Optional[ImageObject] = None
        self._template_lock = threading.Lock()
        self._name_locks: Dict[str, threading.Lock] = {}
        self._name_locks_guard = threading.Lock()


    def _lock_for(self, metal_name: str) -> threading.Lock:
        with self._name_locks_guard:
            return self._name_locks.setdefault(metal_name, threading.Lock())


    def load_template(self) -> ImageObject:
    # Loads the template from its primary location, then the fallback. Cached unless reload_template is set.

        with self._template_lock:
            if self._template is not None and not self.reload_template:
                return self._template

            failure_reasons: Dict[str, str] = {} # Location > why it was unusable.
            for location in self.template_locations:
                data: Optional[bytes] = self.loader.load(location)
                if data is None:
                    log(f"Template not found at {location}, trying fallback...", "debug")
                    failure_reasons[location] = "not found"
                    continue
                try:
                    template = decode_image(data)
                except (OSError, ValueError) as error:
                    log(f"Template at {location} cannot be decoded: {error}", "warn")
                    failure_reasons[location] = f"unreadable ({error})"
                    continue
                if not self.reload_template:
                    self._template = template
                return template

        raise TemplateUnavailableError(self.template_locations, failure_reasons)


    def load_ingot_image(self, item_id: str, ingot_texture: Optional[bytes] = None) -> ImageObject:
    # Decodes the ingot's own texture, given explicitly or loaded from its conventional location.

        location = ingot_texture_location(item_id)
        data = ingot_texture if ingot_texture is not None else (self.loader.load(location) if location else None)
        if data is None:
            raise SourceImageUnavailableError(f"no texture at {location or item_id}")
        try:
            return decode_image(data)
        except (OSError, ValueError) as error:
            raise SourceImageUnavailableError(f"cannot decode texture of {item_id}: {error}") from error


    def extract_primary_color(self, item_id: str, ingot_texture: Optional[bytes] = None) -> Color:
    # The ingot's average color, or DEFAULT_COLOR if its texture is unavailable.

        try:
            ingot_image = self.load_ingot_image(item_id, ingot_texture)
        except SourceImageUnavailableError as error:
            log(f"Using default color for {item_id}: {error}", "debug")
            return DEFAULT_COLOR
        try:
            return average_color(ingot_image)
        finally:
            close_image_files([ingot_image])


    def synthesize(self, metal_name: str, item_id: str, ingot_texture: Optional[bytes] = None) -> SynthesisStatus:
    # Generates and publishes the pile texture for metal_name. Failures are logged and leave the name ungenerated.

        with self._lock_for(metal_name):
            if self.publisher.has_texture(metal_name):
                return SynthesisStatus.ALREADY_EXISTS

            template: Optional[ImageObject] = None
            try:
                target_color: Color = self.extract_primary_color(item_id, ingot_texture)
                template = self.load_template()
                pile_image: ImageObject = recolor(template, target_color)
                self.publisher.publish(metal_name, pile_image)

            except Exception as error:
            # One metal's failure never stops the batch; TemplateUnavailableError lists the attempted locations.
                log(f"Failed to generate texture for '{metal_name}': {error}", "error")
                return SynthesisStatus.FAILED

            finally:
                if self.reload_template:
                    close_image_files([template])
                # A cached template stays open for the next metal.

            log(f"Generated texture for '{metal_name}' from {item_id} (color {target_color.r}, {target_color.g}, {target_color.b})", "debug")
            return SynthesisStatus.GENERATED
