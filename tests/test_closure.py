from schema_normalizer import (
    AttributeIndex,
    AttributeSet,
    ClosureEngine,
    FDSet,
    FunctionalDependency,
    RelationalScheme,
    attribute_closure_report,
    closure,
    generate_subsets,
)


def attrs(*names):
    return AttributeSet.of(*names)


CHAIN = FDSet.from_pairs([(["A"], ["B"]), (["B"], ["C"])])
COMPOSITE = FDSet.from_pairs([(["A", "B"], ["C"]), (["C"], ["D"])])


def test_closure_follows_chain():
    assert closure(attrs("A"), CHAIN) == attrs("A", "B", "C")
    assert closure(attrs("B"), CHAIN) == attrs("B", "C")
    assert closure(attrs("C"), CHAIN) == attrs("C")


def test_closure_needs_whole_determinant():
    assert closure(attrs("A", "B"), COMPOSITE) == attrs("A", "B", "C", "D")
    assert closure(attrs("A"), COMPOSITE) == attrs("A")
    assert closure(attrs("C"), COMPOSITE) == attrs("C", "D")


def test_closure_accepts_plain_iterables():
    assert closure(["A"], [FunctionalDependency(["A"], ["B"])]) == attrs("A", "B")


def test_closure_consumes_a_generator_once():
    assert closure((name for name in ["A"]), CHAIN) == attrs("A", "B", "C")
    assert FDSet.from_pairs([(["A"], ["B"])]).implies(FunctionalDependency((n for n in ["A"]), ["B"]))


def test_closure_with_no_dependencies_is_identity():
    assert closure(attrs("A", "B"), FDSet()) == attrs("A", "B")


def test_unknown_attributes_are_inert():
    fds = FDSet.from_pairs([(["A"], ["B"]), (["Z"], ["C"])])
    assert closure(attrs("A"), fds) == attrs("A", "B")
    assert closure(attrs("X"), fds) == attrs("X")


def test_engine_skips_rules_outside_its_index():
    index = AttributeIndex(["A", "B", "C"])
    engine = ClosureEngine(index, [FunctionalDependency(["A", "Z"], ["B"]), FunctionalDependency(["A"], ["C", "Z"])])
    assert engine.closure(["A"]) == attrs("A", "C")


def test_closure_does_not_mutate_input():
    start = attrs("A")
    closure(start, CHAIN)
    assert start == attrs("A")


def test_generate_subsets_order_and_count():
    subsets = generate_subsets(["C", "A", "B"])
    assert subsets == [
        attrs("A"),
        attrs("B"),
        attrs("C"),
        attrs("A", "B"),
        attrs("A", "C"),
        attrs("B", "C"),
        attrs("A", "B", "C"),
    ]
    assert generate_subsets(["A", "B", "C"]) == subsets


def test_generate_subsets_enumerates_each_subset_once():
    subsets = generate_subsets(attrs("A", "B", "C", "D", "E"))
    assert len(subsets) == 2 ** 5 - 1
    assert len(set(subsets)) == len(subsets)
    assert AttributeSet() not in subsets


def test_generate_subsets_of_empty_set():
    assert generate_subsets([]) == []


def test_attribute_closure_report():
    report = attribute_closure_report(RelationalScheme(attrs("A", "B", "C")), CHAIN)
    assert len(report) == 7
    assert report[0] == (attrs("A"), attrs("A", "B", "C"))
    assert dict(report)[attrs("B")] == attrs("B", "C")


def test_attribute_closure_report_stays_inside_scheme():
    fds = FDSet.from_pairs([(["A"], ["B"]), (["B"], ["Z"])])
    report = dict(attribute_closure_report(RelationalScheme(attrs("A", "B", "C")), fds))
    assert report[attrs("B")] == attrs("B")
    assert report[attrs("A")] == attrs("A", "B")


def test_scheme_engine_ignores_foreign_attributes():
    fds = FDSet.from_pairs([(["A"], ["Z"]), (["Z"], ["B"])])
    scheme = RelationalScheme(attrs("A", "B"))
    assert ClosureEngine.for_scheme(scheme, fds).closure(attrs("A")) == attrs("A")
    assert dict(attribute_closure_report(scheme, fds))[attrs("A")] == attrs("A")
    # Without a scheme, Z is part of the universe and the chain fires.
    assert closure(attrs("A"), fds) == attrs("A", "B", "Z")
