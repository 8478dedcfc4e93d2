import unittest
from types import SimpleNamespace

from inventory_tracker.core.matching import find_best_product_match, match_score


def product(product_id, name):
    return SimpleNamespace(id=product_id, name=name)


class MatchingTest(unittest.TestCase):
    def test_exact_match_ignores_case_and_whitespace(self):
        self.assertEqual(match_score("  LUVA NITRÍLICA ", "Luva Nitrílica"), 1.0)

    def test_containment_score(self):
        self.assertAlmostEqual(match_score("Luva Nitrílica M", "Luva Nitrílica"), 14 / 16 * 0.9)
        self.assertAlmostEqual(match_score("Luva", "Luva Nitrílica"), 4 / 14 * 0.9)

    def test_unrelated_names_score_zero(self):
        self.assertEqual(match_score("Gaze", "Luva"), 0.0)
        self.assertEqual(match_score("", "Luva"), 0.0)

    def test_best_match_selected(self):
        catalog = [product("p1", "Luva"), product("p2", "Luva Nitrílica"), product("p3", "Gaze")]
        match, score = find_best_product_match("Luva Nitrílica M", catalog)
        self.assertEqual(match.id, "p2")
        self.assertAlmostEqual(score, 0.7875)

    def test_no_match_leaves_item_unassigned(self):
        match, score = find_best_product_match("Seringa 5ml", [product("p1", "Gaze")])
        self.assertIsNone(match)
        self.assertEqual(score, 0.0)

    def test_accents_are_not_folded(self):
        self.assertEqual(match_score("Luva Nitrilica", "Luva Nitrílica"), 0.0)


if __name__ == "__main__":
    unittest.main()
