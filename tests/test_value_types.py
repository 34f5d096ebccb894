import unittest

from schema_normalizer import AttributeSet, FDSet, FunctionalDependency, RelationalScheme


def fd(determinant, dependent):
    return FunctionalDependency(determinant, dependent)


class TestAttributeSet(unittest.TestCase):
    def test_equality_ignores_order_and_duplicates(self):
        self.assertEqual(AttributeSet(["B", "A", "A"]), AttributeSet.of("A", "B"))
        self.assertEqual(hash(AttributeSet(["B", "A"])), hash(AttributeSet(["A", "B"])))
        self.assertNotEqual(AttributeSet.of("A"), AttributeSet.of("A", "B"))

    def test_single_string_is_one_attribute(self):
        attrs = AttributeSet("CustomerID")
        self.assertEqual(len(attrs), 1)
        self.assertIn("CustomerID", attrs)

    def test_set_operations(self):
        ab = AttributeSet.of("A", "B")
        bc = AttributeSet.of("B", "C")

        self.assertEqual(ab | bc, AttributeSet.of("A", "B", "C"))
        self.assertEqual(ab & bc, AttributeSet.of("B"))
        self.assertEqual(ab - bc, AttributeSet.of("A"))
        self.assertIsInstance(ab | bc, AttributeSet)
        self.assertEqual(ab - {"A"}, AttributeSet.of("B"))

    def test_subset_comparisons(self):
        a = AttributeSet.of("A")
        ab = AttributeSet.of("A", "B")

        self.assertTrue(a <= ab)
        self.assertTrue(a < ab)
        self.assertFalse(ab < ab)
        self.assertTrue(ab >= {"A"})
        self.assertTrue(ab > a)
        self.assertTrue(ab.issuperset(["B"]))

    def test_iteration_and_display_are_sorted(self):
        attrs = AttributeSet(["C", "A", "B"])
        self.assertEqual(list(attrs), ["A", "B", "C"])
        self.assertEqual(str(attrs), "{A,B,C}")


class TestFunctionalDependency(unittest.TestCase):
    def test_equality_by_set_content(self):
        self.assertEqual(fd(["B", "A"], ["C"]), fd(["A", "B"], ["C"]))
        self.assertNotEqual(fd(["A"], ["B"]), fd(["B"], ["A"]))

    def test_trivial(self):
        self.assertTrue(fd(["A", "B"], ["A"]).is_trivial)
        self.assertFalse(fd(["A"], ["B"]).is_trivial)

    def test_split_yields_singleton_dependents(self):
        parts = list(fd(["A"], ["C", "B"]).split())
        self.assertEqual(parts, [fd(["A"], ["B"]), fd(["A"], ["C"])])

    def test_display(self):
        self.assertEqual(str(fd(["B", "A"], ["C"])), "{A,B} → {C}")


class TestFDSet(unittest.TestCase):
    def test_duplicates_collapse(self):
        fds = FDSet((fd(["A"], ["B"]), fd(["A"], ["B"]), fd(["B"], ["C"])))
        self.assertEqual(len(fds), 2)

    def test_equality_ignores_order(self):
        first = FDSet((fd(["A"], ["B"]), fd(["B"], ["C"])))
        second = FDSet((fd(["B"], ["C"]), fd(["A"], ["B"])))
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(list(first)[0], fd(["A"], ["B"]))

    def test_from_pairs_accepts_tuples_and_stored_entries(self):
        from_tuples = FDSet.from_pairs([(["A"], ["B"])])
        from_entries = FDSet.from_pairs([{"from": ["A"], "to": ["B"]}])
        self.assertEqual(from_tuples, from_entries)

    def test_replace_keeps_position_and_collapses(self):
        fds = FDSet((fd(["X"], ["Y"]), fd(["A"], ["B"])))
        self.assertEqual(list(fds.replace(fd(["X"], ["Y"]), fd(["Z"], ["Y"]))), [fd(["Z"], ["Y"]), fd(["A"], ["B"])])

        merged = FDSet((fd(["A"], ["B"]), fd(["B"], ["C"]), fd(["A", "B"], ["C"])))
        merged = merged.replace(fd(["A", "B"], ["C"]), fd(["B"], ["C"]))
        self.assertEqual(list(merged), [fd(["A"], ["B"]), fd(["B"], ["C"])])

    def test_without_and_with_dependency_return_new_sets(self):
        fds = FDSet((fd(["A"], ["B"]),))
        grown = fds.with_dependency(fd(["B"], ["C"]))
        self.assertEqual(len(fds), 1)
        self.assertEqual(len(grown), 2)
        self.assertEqual(grown.without(fd(["B"], ["C"])), fds)

    def test_split_dependents_and_attributes(self):
        fds = FDSet((fd(["A"], ["B", "C"]), fd(["D"], ["A"])))
        self.assertEqual(len(fds.split_dependents()), 3)
        self.assertEqual(fds.attributes(), AttributeSet.of("A", "B", "C", "D"))

    def test_restricted_to(self):
        fds = FDSet((fd(["A"], ["B"]), fd(["B"], ["C"])))
        self.assertEqual(fds.restricted_to(["A", "B"]), FDSet((fd(["A"], ["B"]),)))

        mixed = FDSet((fd(["A"], ["B", "Z"]), fd(["Z"], ["A"])))
        self.assertEqual(mixed.restricted_to(["A", "B"]), FDSet((fd(["A"], ["B"]),)))

    def test_implies_and_equivalence(self):
        fds = FDSet((fd(["A"], ["B"]), fd(["B"], ["C"])))
        self.assertTrue(fds.implies(fd(["A"], ["C"])))
        self.assertFalse(fds.implies(fd(["C"], ["A"])))

        expanded = fds.with_dependency(fd(["A"], ["C"]))
        self.assertTrue(fds.is_equivalent(expanded))
        self.assertFalse(fds.is_equivalent(FDSet((fd(["A"], ["B"]),))))


class TestRelationalScheme(unittest.TestCase):
    def test_equality_ignores_name(self):
        self.assertEqual(RelationalScheme(["A", "B"], name="R1"), RelationalScheme(AttributeSet.of("B", "A")))

    def test_display(self):
        self.assertEqual(str(RelationalScheme(["B", "A"])), "R(A, B)")


if __name__ == "__main__":
    unittest.main()
