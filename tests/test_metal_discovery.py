import unittest
from pathlib import Path
import sys


# Allow top-level imports from repo root.
_REPO_DIR = Path(__file__).resolve().parents[1]
if str(_REPO_DIR) not in sys.path:
    sys.path.insert(0, str(_REPO_DIR))

from backend.texture_classes import MetalEntry
from utils import discover_metals, extract_metal_name_from_id, get_metal_name, ingot_texture_location, split_identifier


class FakeCatalog:
    def __init__(self, item_ids, tags=None) -> None:
        self.item_ids = list(item_ids)
        self.tags = tags or {}

    def iter_item_ids(self):
        return iter(self.item_ids)

    def has_tag(self, item_id, tag):
        return item_id in self.tags.get(tag, set())


class TestMetalNameExtraction(unittest.TestCase):
    def test_suffix_and_prefix_conventions(self) -> None:
        self.assertEqual(extract_metal_name_from_id("lead_ingot"), "lead")
        self.assertEqual(extract_metal_name_from_id("ingot_tin"), "tin")
        self.assertEqual(extract_metal_name_from_id("rose_gold_ingot"), "rose_gold")

    def test_common_prefixes_are_stripped(self) -> None:
        self.assertEqual(extract_metal_name_from_id("double_lead_ingot"), "lead")
        self.assertEqual(extract_metal_name_from_id("raw_zinc_ingot"), "zinc")
        self.assertEqual(extract_metal_name_from_id("double_raw_zinc_ingot"), "zinc")

    def test_non_ingots_yield_nothing(self) -> None:
        self.assertIsNone(extract_metal_name_from_id("stick"))
        self.assertIsNone(extract_metal_name_from_id("ingot"))
        self.assertIsNone(extract_metal_name_from_id(""))

    def test_get_metal_name_rejects_malformed_identifiers(self) -> None:
        self.assertEqual(get_metal_name("somemod:lead_ingot"), "lead")
        self.assertIsNone(get_metal_name("lead_ingot"))
        self.assertIsNone(get_metal_name("a:b:lead_ingot"))
        self.assertIsNone(get_metal_name("somemod:ingots/lead_ingot"))

    def test_identifier_helpers(self) -> None:
        self.assertEqual(split_identifier("somemod:lead_ingot"), ("somemod", "lead_ingot"))
        self.assertIsNone(split_identifier(":lead_ingot"))
        self.assertEqual(ingot_texture_location("somemod:lead_ingot"), "somemod:textures/item/lead_ingot.png")
        self.assertIsNone(ingot_texture_location("broken"))


class TestDiscoverMetals(unittest.TestCase):
    def test_first_discovered_item_wins(self) -> None:
        catalog = FakeCatalog(["alpha:lead_ingot", "beta:lead_ingot", "beta:ingot_lead"])

        metals = discover_metals(catalog, skip_namespaces=[])

        self.assertEqual(metals, {"lead": MetalEntry("lead", "alpha:lead_ingot")})

    def test_skipped_namespaces_are_ignored(self) -> None:
        catalog = FakeCatalog(["tfc:copper_ingot", "othermod:copper_ingot", "othermod:nickel_ingot"])

        metals = discover_metals(catalog, skip_namespaces=["tfc"])

        self.assertEqual(metals["copper"].item_id, "othermod:copper_ingot")
        self.assertEqual(sorted(metals), ["copper", "nickel"])

    def test_non_ingots_and_anomalies_are_excluded(self) -> None:
        catalog = FakeCatalog(["minecraft:stick", "no_namespace_ingot", "mod:nested/lead_ingot", "mod:bar_of_cobalt"],
                              tags={"c:ingots": {"mod:bar_of_cobalt"}})

        self.assertEqual(discover_metals(catalog, skip_namespaces=[]), {})

    def test_tag_membership_marks_ingots(self) -> None:
        catalog = FakeCatalog(["mod:osmium_ingot"], tags={"c:ingots": {"mod:osmium_ingot"}})

        self.assertIn("osmium", discover_metals(catalog, skip_namespaces=[]))

    def test_default_skips_tfc(self) -> None:
        catalog = FakeCatalog(["tfc:metal/ingot/copper", "tfc:bronze_ingot"])

        self.assertEqual(discover_metals(catalog), {})


if __name__ == "__main__":
    unittest.main()
