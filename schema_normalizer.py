"""
Relational schema normalization core.

Given a relation scheme (its attribute universe) and a set of functional
dependencies, this module computes attribute closures, candidate keys, the
closure of the dependency set, a minimal cover, and decompositions into 3NF
(synthesis) and BCNF (binary splitting).

Every entry point is a pure function over immutable value types. Entities are
rebuilt for each request and nothing is shared between calls, so callers may
run computations on worker threads and get the same answer as a sequential run.
Attribute sets are mapped onto integer bitmasks for the closure loops and the
subset enumeration; both are exponential in the number of attributes and the
tool targets small, hand-written schemas.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple


# --------------------------------------------------------------------------------------
# Value types
# --------------------------------------------------------------------------------------
def _as_names(value: Any) -> FrozenSet[str]:
    if isinstance(value, AttributeSet):
        return value.names
    if isinstance(value, RelationalScheme):
        return value.attributes.names
    if isinstance(value, str):
        # A bare string is one attribute name, never a sequence of one-letter names.
        return frozenset((value,))
    return frozenset(value)


@dataclass(frozen=True, repr=False)
class AttributeSet:
    """Immutable, order-independent set of attribute names.

    Iteration is in sorted name order so that anything derived from an
    AttributeSet (subset enumeration, display strings) is deterministic.
    """

    names: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _as_names(self.names))

    @classmethod
    def of(cls, *names: str) -> AttributeSet:
        return cls(names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __repr__(self) -> str:
        return f"AttributeSet({sorted(self.names)!r})"

    def __str__(self) -> str:
        return "{" + ",".join(self) + "}"

    def union(self, other: Iterable[str]) -> AttributeSet:
        return AttributeSet(self.names | _as_names(other))

    def intersection(self, other: Iterable[str]) -> AttributeSet:
        return AttributeSet(self.names & _as_names(other))

    def difference(self, other: Iterable[str]) -> AttributeSet:
        return AttributeSet(self.names - _as_names(other))

    def issubset(self, other: Iterable[str]) -> bool:
        return self.names <= _as_names(other)

    def issuperset(self, other: Iterable[str]) -> bool:
        return self.names >= _as_names(other)

    __or__ = union
    __and__ = intersection
    __sub__ = difference
    __le__ = issubset
    __ge__ = issuperset

    def __lt__(self, other: Iterable[str]) -> bool:
        return self.names < _as_names(other)

    def __gt__(self, other: Iterable[str]) -> bool:
        return self.names > _as_names(other)


def _coerce(value: Any) -> AttributeSet:
    return value if isinstance(value, AttributeSet) else AttributeSet(value)


@dataclass(frozen=True)
class FunctionalDependency:
    """determinant -> dependent, both sides compared as sets."""

    determinant: AttributeSet
    dependent: AttributeSet

    def __post_init__(self) -> None:
        object.__setattr__(self, "determinant", _coerce(self.determinant))
        object.__setattr__(self, "dependent", _coerce(self.dependent))

    @property
    def is_trivial(self) -> bool:
        return self.dependent <= self.determinant

    def attributes(self) -> AttributeSet:
        return self.determinant | self.dependent

    def split(self) -> Iterator[FunctionalDependency]:
        """Yield one dependency per dependent attribute."""
        for name in self.dependent:
            yield FunctionalDependency(self.determinant, AttributeSet.of(name))

    def __str__(self) -> str:
        return f"{self.determinant} → {self.dependent}"


@dataclass(frozen=True, eq=False)
class FDSet:
    """Collection of functional dependencies with set semantics.

    Duplicates collapse on construction. Iteration follows insertion order,
    which only the minimal cover elimination order depends on; equality and
    hashing ignore it.
    """

    dependencies: Tuple[FunctionalDependency, ...] = ()

    def __post_init__(self) -> None:
        unique: List[FunctionalDependency] = []
        seen = set()
        for fd in self.dependencies:
            if not isinstance(fd, FunctionalDependency):
                fd = FunctionalDependency(*fd)
            if fd not in seen:
                seen.add(fd)
                unique.append(fd)
        object.__setattr__(self, "dependencies", tuple(unique))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Any]) -> FDSet:
        """Build from ``(from, to)`` pairs or ``{"from": [...], "to": [...]}`` entries."""
        dependencies = []
        for pair in pairs:
            if isinstance(pair, dict):
                dependencies.append(FunctionalDependency(pair["from"], pair["to"]))
            else:
                determinant, dependent = pair
                dependencies.append(FunctionalDependency(determinant, dependent))
        return cls(tuple(dependencies))

    def __iter__(self) -> Iterator[FunctionalDependency]:
        return iter(self.dependencies)

    def __len__(self) -> int:
        return len(self.dependencies)

    def __contains__(self, fd: object) -> bool:
        return fd in self.dependencies

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FDSet):
            return NotImplemented
        return frozenset(self.dependencies) == frozenset(other.dependencies)

    def __hash__(self) -> int:
        return hash(frozenset(self.dependencies))

    def __repr__(self) -> str:
        return "FDSet([" + ", ".join(str(fd) for fd in self.dependencies) + "])"

    def attributes(self) -> AttributeSet:
        names: set = set()
        for fd in self.dependencies:
            names |= fd.determinant.names | fd.dependent.names
        return AttributeSet(names)

    def with_dependency(self, fd: FunctionalDependency) -> FDSet:
        return FDSet(self.dependencies + (fd,))

    def without(self, fd: FunctionalDependency) -> FDSet:
        return FDSet(tuple(existing for existing in self.dependencies if existing != fd))

    def replace(self, old: FunctionalDependency, new: FunctionalDependency) -> FDSet:
        """Swap ``old`` for ``new`` in place; ``new`` collapses into an earlier equal entry."""
        return FDSet(tuple(new if existing == old else existing for existing in self.dependencies))

    def split_dependents(self) -> FDSet:
        return FDSet(tuple(part for fd in self.dependencies for part in fd.split()))

    def restricted_to(self, attributes: Iterable[str]) -> FDSet:
        """Dependencies as seen inside ``attributes``: foreign determinants drop the FD, foreign dependents are cut."""
        allowed = _coerce(attributes)
        kept = []
        for fd in self.dependencies:
            dependent = fd.dependent & allowed
            if fd.determinant <= allowed and dependent:
                kept.append(FunctionalDependency(fd.determinant, dependent))
        return FDSet(tuple(kept))

    def implies(self, fd: FunctionalDependency) -> bool:
        return fd.dependent <= closure(fd.determinant, self)

    def is_equivalent(self, other: FDSet) -> bool:
        return all(other.implies(fd) for fd in self) and all(self.implies(fd) for fd in other)


def _coerce_fds(fds: Any) -> FDSet:
    return fds if isinstance(fds, FDSet) else FDSet(tuple(fds))


@dataclass(frozen=True)
class RelationalScheme:
    """The attribute universe of one relation. ``name`` is display-only."""

    attributes: AttributeSet
    name: str = field(default="R", compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _coerce(self.attributes))

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.attributes)})"


# --------------------------------------------------------------------------------------
# Closure engine
# --------------------------------------------------------------------------------------
class AttributeIndex:
    """Stable attribute -> bit position mapping (sorted names)."""

    def __init__(self, attributes: Iterable[str]) -> None:
        self.names: Tuple[str, ...] = tuple(sorted(_as_names(attributes)))
        self.positions: Dict[str, int] = {name: pos for pos, name in enumerate(self.names)}
        self.full_mask = (1 << len(self.names)) - 1

    def __len__(self) -> int:
        return len(self.names)

    def covers(self, attributes: Iterable[str]) -> bool:
        return all(name in self.positions for name in attributes)

    def mask(self, attributes: Iterable[str]) -> int:
        """Bitmask of ``attributes``; names outside the index are ignored."""
        value = 0
        for name in attributes:
            pos = self.positions.get(name)
            if pos is not None:
                value |= 1 << pos
        return value

    def attributes(self, mask: int) -> AttributeSet:
        return AttributeSet(name for pos, name in enumerate(self.names) if mask >> pos & 1)

    def subset_masks(self, mask: Optional[int] = None) -> Iterator[int]:
        """Yield every non-empty subset of ``mask`` once, by size and then combination order."""
        if mask is None:
            mask = self.full_mask
        bits = [1 << pos for pos in range(len(self.names)) if mask >> pos & 1]
        for size in range(1, len(bits) + 1):
            for combo in combinations(bits, size):
                subset = 0
                for bit in combo:
                    subset |= bit
                yield subset


class ClosureEngine:
    """Computes X+ under a fixed dependency set, on bitmasks."""

    def __init__(self, index: AttributeIndex, fds: Iterable[FunctionalDependency]) -> None:
        self.index = index
        self.rules: List[Tuple[int, int]] = []
        for fd in fds:
            # A determinant naming an attribute outside the index can never be satisfied.
            if not index.covers(fd.determinant):
                continue
            rhs = index.mask(fd.dependent)
            if rhs:
                self.rules.append((index.mask(fd.determinant), rhs))

    @classmethod
    def over(cls, attributes: Iterable[str], fds: Any) -> ClosureEngine:
        """Engine whose index spans ``attributes`` and every attribute the FDs mention."""
        fds = _coerce_fds(fds)
        return cls(AttributeIndex(_as_names(attributes) | fds.attributes().names), fds)

    @classmethod
    def for_scheme(cls, scheme: RelationalScheme, fds: Any) -> ClosureEngine:
        """Engine indexed on the scheme alone; attributes the scheme lacks never enter a closure."""
        return cls(AttributeIndex(scheme.attributes), _coerce_fds(fds))

    def closure_mask(self, mask: int) -> int:
        result = mask
        changed = True
        while changed:
            changed = False
            for lhs, rhs in self.rules:
                if lhs & result == lhs and rhs & ~result:
                    result |= rhs
                    changed = True
        return result

    def closure(self, attributes: Iterable[str]) -> AttributeSet:
        return self.index.attributes(self.closure_mask(self.index.mask(attributes)))


def closure(attributes: Iterable[str], fds: Any) -> AttributeSet:
    """Return X+ under ``fds``. Unknown attributes are not an error."""
    attributes = _coerce(attributes)
    return ClosureEngine.over(attributes, fds).closure(attributes)


def generate_subsets(attributes: Iterable[str]) -> List[AttributeSet]:
    """Every non-empty subset, smallest first, in combination order over sorted names."""
    index = AttributeIndex(attributes)
    return [index.attributes(mask) for mask in index.subset_masks()]


def _projection_universe(scheme: RelationalScheme, fds: Any) -> AttributeSet:
    return scheme.attributes | _coerce_fds(fds).attributes()


class _SchemeView:
    """Closure engine bound to one scheme; results are clipped to the scheme.

    Without ``universe`` the scheme is its own universe. Passing a wider
    universe treats the scheme as a piece of it, so derivations may run through
    attributes the piece does not hold.
    """

    def __init__(self, scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> None:
        self.scheme = scheme
        self.fds = _coerce_fds(fds)
        if universe is None:
            self.engine = ClosureEngine.for_scheme(scheme, self.fds)
        else:
            self.engine = ClosureEngine(AttributeIndex(_as_names(universe) | scheme.attributes.names), self.fds)
        self.index = self.engine.index
        self.target = self.index.mask(scheme.attributes)

    def closure_mask(self, mask: int) -> int:
        return self.engine.closure_mask(mask) & self.target

    def is_superkey_mask(self, mask: int) -> bool:
        return self.closure_mask(mask) == self.target


def attribute_closure_report(scheme: RelationalScheme, fds: Any) -> List[Tuple[AttributeSet, AttributeSet]]:
    """(S, S+) for every non-empty subset S of the scheme."""
    view = _SchemeView(scheme, fds)
    return [
        (view.index.attributes(mask), view.index.attributes(view.closure_mask(mask)))
        for mask in view.index.subset_masks(view.target)
    ]


# --------------------------------------------------------------------------------------
# Key discovery
# --------------------------------------------------------------------------------------
class KeyFinder:
    """Enumerates the minimal candidate keys of a scheme by exhaustive subset search."""

    def __init__(self, scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> None:
        self.scheme = scheme
        self.view = _SchemeView(scheme, fds, universe)

    def closure(self, attributes: Iterable[str]) -> AttributeSet:
        """Closure of ``attributes`` within the scheme."""
        index = self.view.index
        return index.attributes(self.view.closure_mask(index.mask(attributes)))

    def is_superkey(self, attributes: Iterable[str]) -> bool:
        return self.view.is_superkey_mask(self.view.index.mask(attributes))

    def candidate_keys(self) -> List[AttributeSet]:
        index = self.view.index
        key_masks: List[int] = []
        # Smaller subsets come first, so a superkey is minimal unless it contains
        # a key that was already found.
        for mask in index.subset_masks(self.view.target):
            if any(key & mask == key for key in key_masks):
                continue
            if self.view.is_superkey_mask(mask):
                key_masks.append(mask)
        return [index.attributes(mask) for mask in key_masks]

    def find_key(self) -> AttributeSet:
        """One candidate key, found by dropping attributes from the full scheme."""
        mask = self.view.target
        for pos in range(len(self.view.index)):
            bit = 1 << pos
            if mask & bit and self.view.is_superkey_mask(mask & ~bit):
                mask &= ~bit
        return self.view.index.attributes(mask)

    def prime_attributes(self, keys: Optional[List[AttributeSet]] = None) -> AttributeSet:
        prime = AttributeSet()
        for key in self.candidate_keys() if keys is None else keys:
            prime = prime | key
        return prime


def candidate_keys(scheme: RelationalScheme, fds: Any) -> List[AttributeSet]:
    return KeyFinder(scheme, fds).candidate_keys()


# --------------------------------------------------------------------------------------
# FD set closure and minimal cover
# --------------------------------------------------------------------------------------
class FDSetReducer:
    """Derives the closure of a dependency set and its minimal cover."""

    def __init__(self, fds: Any) -> None:
        self.fds = _coerce_fds(fds)

    def closure_of_fd_set(self, scheme: RelationalScheme, universe: Optional[Iterable[str]] = None) -> FDSet:
        """S -> (S+ minus S) for every subset S of the scheme that determines anything new."""
        view = _SchemeView(scheme, self.fds, universe)
        index = view.index
        derived = []
        for mask in index.subset_masks(view.target):
            closed = view.closure_mask(mask)
            if closed & ~mask:
                derived.append(FunctionalDependency(index.attributes(mask), index.attributes(closed & ~mask)))
        return FDSet(tuple(derived))

    def minimal_cover(self) -> FDSet:
        cover = self.fds.split_dependents()
        cover = self._remove_extraneous_attributes(cover)
        return self._remove_redundant_dependencies(cover)

    @staticmethod
    def _remove_extraneous_attributes(cover: FDSet) -> FDSet:
        index = AttributeIndex(cover.attributes())
        changed = True
        while changed:
            changed = False
            for fd in list(cover):
                if fd not in cover:
                    # Already merged into an equal reduced dependency.
                    continue
                engine = ClosureEngine(index, cover)
                determinant = fd.determinant
                for name in fd.determinant:
                    trial = determinant - {name}
                    if fd.dependent <= engine.closure(trial):
                        determinant = trial
                if determinant != fd.determinant:
                    cover = cover.replace(fd, FunctionalDependency(determinant, fd.dependent))
                    changed = True
        return cover

    @staticmethod
    def _remove_redundant_dependencies(cover: FDSet) -> FDSet:
        index = AttributeIndex(cover.attributes())
        changed = True
        while changed:
            changed = False
            for fd in list(cover):
                rest = cover.without(fd)
                if fd.dependent <= ClosureEngine(index, rest).closure(fd.determinant):
                    cover = rest
                    changed = True
        return cover


def fd_set_closure(scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> FDSet:
    return FDSetReducer(fds).closure_of_fd_set(scheme, universe)


def minimal_cover(fds: Any) -> FDSet:
    return FDSetReducer(fds).minimal_cover()


def project(scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> FDSet:
    """Minimal cover of the dependencies that hold on ``scheme``.

    ``scheme`` is read as a piece of ``universe``, which defaults to the scheme
    plus every attribute ``fds`` mentions.
    """
    if universe is None:
        universe = _projection_universe(scheme, fds)
    return minimal_cover(fd_set_closure(scheme, fds, universe))


# --------------------------------------------------------------------------------------
# 3NF synthesis
# --------------------------------------------------------------------------------------
class NormalFormSynthesizer:
    """Builds a lossless, dependency-preserving 3NF decomposition from a minimal cover."""

    def __init__(self, scheme: RelationalScheme, fds: Any) -> None:
        self.scheme = scheme
        self.fds = _coerce_fds(fds)

    def synthesize(self) -> List[RelationalScheme]:
        if not self.scheme.attributes:
            return [self.scheme]

        grouped: Dict[AttributeSet, AttributeSet] = {}
        for fd in minimal_cover(self.fds.restricted_to(self.scheme.attributes)):
            grouped[fd.determinant] = grouped.get(fd.determinant, fd.determinant) | fd.dependent
        relations = list(grouped.values())

        keys = KeyFinder(self.scheme, self.fds)
        if not any(keys.is_superkey(attributes) for attributes in relations):
            relations.append(keys.find_key())

        return [
            RelationalScheme(attributes, name=f"{self.scheme.name}{pos}")
            for pos, attributes in enumerate(self._drop_subsumed(relations), start=1)
        ]

    @staticmethod
    def _drop_subsumed(relations: List[AttributeSet]) -> List[AttributeSet]:
        kept = []
        for pos, attributes in enumerate(relations):
            subsumed = any(
                attributes < other or (attributes == other and other_pos < pos)
                for other_pos, other in enumerate(relations)
                if other_pos != pos
            )
            if not subsumed:
                kept.append(attributes)
        return kept


def synthesize_3nf(scheme: RelationalScheme, fds: Any) -> List[RelationalScheme]:
    return NormalFormSynthesizer(scheme, fds).synthesize()


# --------------------------------------------------------------------------------------
# BCNF decomposition
# --------------------------------------------------------------------------------------
class BCNFDecomposer:
    """Splits a scheme on BCNF violations until every piece is in BCNF.

    The dependencies checked for a piece are those of F projected onto it,
    enumerated by determinant from the smallest and lexicographically first,
    which fixes the otherwise free choice of violation.
    """

    def __init__(self, scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> None:
        self.scheme = scheme
        self.view = _SchemeView(scheme, fds, universe)

    def find_violation(self, mask: Optional[int] = None) -> Optional[int]:
        """Determinant mask of the first projected dependency violating BCNF on ``mask``."""
        mask = self.view.target if mask is None else mask
        for lhs in self.view.index.subset_masks(mask):
            if lhs == mask:
                continue
            closed = self.view.engine.closure_mask(lhs) & mask
            if closed != lhs and closed != mask:
                return lhs
        return None

    def decompose(self) -> List[RelationalScheme]:
        worklist = deque([self.view.target])
        finished: List[int] = []
        while worklist:
            current = worklist.popleft()
            lhs = self.find_violation(current)
            if lhs is None:
                if current not in finished:
                    finished.append(current)
                continue
            closed = self.view.engine.closure_mask(lhs)
            worklist.append(closed & current)
            worklist.append(lhs | (current & ~closed))
        return [
            RelationalScheme(self.view.index.attributes(mask), name=f"{self.scheme.name}{pos}")
            for pos, mask in enumerate(finished, start=1)
        ]


def decompose_bcnf(scheme: RelationalScheme, fds: Any) -> List[RelationalScheme]:
    return BCNFDecomposer(scheme, fds).decompose()


# --------------------------------------------------------------------------------------
# Normal form analysis
# --------------------------------------------------------------------------------------
class NormalizationAnalyzer:
    """Derives 2NF/3NF/BCNF issues for one scheme from its keys and projected FDs."""

    def __init__(self, scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> None:
        self.scheme = scheme
        self.fds = _coerce_fds(fds)
        self.universe = scheme.attributes if universe is None else _coerce(universe)
        self.key_finder = KeyFinder(scheme, self.fds, universe)

    def analyze(self) -> Dict[str, Any]:
        keys = self.key_finder.candidate_keys()
        prime = self.key_finder.prime_attributes(keys)

        second_nf = self._partial_dependencies(keys, prime)
        third_nf: List[FunctionalDependency] = []
        bcnf: List[FunctionalDependency] = []
        for fd in project(self.scheme, self.fds, self.universe):
            if self.key_finder.is_superkey(fd.determinant):
                continue
            bcnf.append(fd)
            # Non-superkey determinant of a non-prime attribute.
            if not fd.dependent <= prime:
                third_nf.append(fd)

        if not bcnf:
            normal_form = "BCNF"
        elif not third_nf:
            normal_form = "3NF"
        elif not second_nf:
            normal_form = "2NF"
        else:
            normal_form = "1NF"

        return {
            "scheme": list(self.scheme.attributes),
            "candidate_keys": [list(key) for key in keys],
            "prime_attributes": list(prime),
            "second_nf_issues": [self._fd_summary(fd) for fd in second_nf],
            "third_nf_issues": [self._fd_summary(fd) for fd in third_nf],
            "bcnf_issues": [self._fd_summary(fd) for fd in bcnf],
            "normal_form": normal_form,
        }

    def _partial_dependencies(self, keys: List[AttributeSet], prime: AttributeSet) -> List[FunctionalDependency]:
        found: List[FunctionalDependency] = []
        for key in keys:
            for part in generate_subsets(key):
                if part == key:
                    continue
                dependent = self.key_finder.closure(part) - part - prime
                fd = FunctionalDependency(part, dependent)
                if dependent and fd not in found:
                    found.append(fd)
        return found

    @staticmethod
    def _fd_summary(fd: FunctionalDependency) -> Dict[str, Any]:
        return {
            "determinant": list(fd.determinant),
            "dependent": list(fd.dependent),
        }


# --------------------------------------------------------------------------------------
# Decomposition checks
# --------------------------------------------------------------------------------------
def is_bcnf(scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> bool:
    """BCNF check of ``scheme`` read as a piece of ``universe`` (default: scheme plus the FDs' attributes)."""
    if universe is None:
        universe = _projection_universe(scheme, fds)
    return BCNFDecomposer(scheme, fds, universe).find_violation() is None


def is_3nf(scheme: RelationalScheme, fds: Any, universe: Optional[Iterable[str]] = None) -> bool:
    if universe is None:
        universe = _projection_universe(scheme, fds)
    return not NormalizationAnalyzer(scheme, fds, universe).analyze()["third_nf_issues"]


def is_lossless_join(scheme: RelationalScheme, decomposition: Iterable[RelationalScheme], fds: Any) -> bool:
    """Chase test: the join is lossless iff some tableau row ends up fully distinguished."""
    attributes = list(scheme.attributes)
    rows: List[Dict[str, Tuple[Any, ...]]] = []
    for pos, piece in enumerate(decomposition):
        rows.append({
            name: ("a", name) if name in piece.attributes else ("b", pos, name)
            for name in attributes
        })
    if not rows:
        return not attributes

    dependencies = project(scheme, fds, scheme.attributes)
    changed = True
    while changed:
        changed = False
        for fd in dependencies:
            (target,) = tuple(fd.dependent)
            groups: Dict[Tuple[Any, ...], List[Dict[str, Tuple[Any, ...]]]] = {}
            for row in rows:
                groups.setdefault(tuple(row[name] for name in fd.determinant), []).append(row)
            for group in groups.values():
                symbols = {row[target] for row in group}
                if len(symbols) < 2:
                    continue
                # Distinguished symbols sort first and win the equation.
                winner = min(symbols)
                for row in rows:
                    if row[target] in symbols:
                        row[target] = winner
                changed = True
    return any(all(row[name][0] == "a" for name in attributes) for row in rows)


def is_dependency_preserving(decomposition: Iterable[RelationalScheme], fds: Any) -> bool:
    """True iff every dependency follows from the dependencies local to the pieces."""
    fds = _coerce_fds(fds)
    pieces = [piece.attributes for piece in decomposition]
    engine = ClosureEngine.over(AttributeSet(), fds)
    index = engine.index
    masks = [index.mask(piece) for piece in pieces]
    for fd in fds:
        current = index.mask(fd.determinant)
        previous = -1
        while previous != current:
            previous = current
            for mask in masks:
                current |= engine.closure_mask(current & mask) & mask
        if index.mask(fd.dependent) & ~current:
            return False
    return True
