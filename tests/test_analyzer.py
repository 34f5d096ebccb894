import unittest

from schema_normalizer import AttributeSet, FDSet, NormalizationAnalyzer, RelationalScheme


class TestNormalizationAnalyzer(unittest.TestCase):
    def setUp(self):
        self.scheme = RelationalScheme(AttributeSet.of("A", "B", "C", "D"))

    def test_analyze_2nf_violation(self):
        # Key: (A, B)
        # FD: A -> D (Partial dependency)
        fds = FDSet.from_pairs([(["A", "B"], ["C"]), (["A"], ["D"])])

        result = NormalizationAnalyzer(self.scheme, fds).analyze()

        self.assertEqual(result["candidate_keys"], [["A", "B"]])
        self.assertEqual(len(result["second_nf_issues"]), 1)
        self.assertEqual(result["second_nf_issues"][0]["determinant"], ["A"])
        self.assertEqual(result["second_nf_issues"][0]["dependent"], ["D"])
        self.assertEqual(result["third_nf_issues"], [{"determinant": ["A"], "dependent": ["D"]}])
        self.assertEqual(result["normal_form"], "1NF")

    def test_analyze_3nf_violation(self):
        # Key: A
        # FD: B -> C (Transitive dependency, where B is not a key)
        scheme = RelationalScheme(AttributeSet.of("A", "B", "C"))
        fds = FDSet.from_pairs([(["A"], ["B"]), (["B"], ["C"])])

        result = NormalizationAnalyzer(scheme, fds).analyze()

        self.assertEqual(result["candidate_keys"], [["A"]])
        self.assertEqual(result["prime_attributes"], ["A"])
        self.assertEqual(result["second_nf_issues"], [])
        self.assertEqual(len(result["third_nf_issues"]), 1)
        self.assertEqual(result["third_nf_issues"][0]["determinant"], ["B"])
        self.assertEqual(result["third_nf_issues"][0]["dependent"], ["C"])
        self.assertEqual(result["normal_form"], "2NF")

    def test_prime_dependent_is_3nf_but_not_bcnf(self):
        scheme = RelationalScheme(AttributeSet.of("A", "B", "C"))
        fds = FDSet.from_pairs([(["A", "B"], ["C"]), (["C"], ["B"])])

        result = NormalizationAnalyzer(scheme, fds).analyze()

        self.assertEqual(result["candidate_keys"], [["A", "B"], ["A", "C"]])
        self.assertEqual(result["prime_attributes"], ["A", "B", "C"])
        self.assertEqual(result["third_nf_issues"], [])
        self.assertEqual(result["bcnf_issues"], [{"determinant": ["C"], "dependent": ["B"]}])
        self.assertEqual(result["normal_form"], "3NF")

    def test_bcnf_scheme_has_no_issues(self):
        fds = FDSet.from_pairs([(["A"], ["B", "C", "D"])])

        result = NormalizationAnalyzer(self.scheme, fds).analyze()

        self.assertEqual(result["normal_form"], "BCNF")
        self.assertEqual(result["second_nf_issues"], [])
        self.assertEqual(result["third_nf_issues"], [])
        self.assertEqual(result["bcnf_issues"], [])


if __name__ == "__main__":
    unittest.main()
