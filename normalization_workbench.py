"""
Normalization workbench: input handling, persistence and reporting around the core.

The core in `schema_normalizer` assumes a validated attribute list and a list of
dependencies built only from it. This module is the layer that guarantees that:
it parses the attribute text, rejects duplicates and incomplete dependencies,
prunes dependencies left stale by a shrunk schema, and keeps the two input
values (attribute text and dependency list) in a small key/value table through
SQLAlchemy. Computed results are printed as bullet lists and can be written as
run artifacts; they are never stored in the workspace.

Invoke as `python normalization_workbench.py [operation ...]`. All defaults live
in the CONFIG constant below.
"""
from __future__ import annotations

import argparse
import json
import os
import queue
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from schema_normalizer import (
    AttributeSet,
    FDSet,
    FunctionalDependency,
    NormalizationAnalyzer,
    RelationalScheme,
    attribute_closure_report,
    candidate_keys,
    decompose_bcnf,
    fd_set_closure,
    minimal_cover,
    synthesize_3nf,
)


# --------------------------------------------------------------------------------------
# Configuration
# --------------------------------------------------------------------------------------
CONFIG: Dict[str, Any] = {
    "STORE": {
        # Any SQLAlchemy URL works; the default keeps the workspace next to the caller.
        "sqlalchemy_url": os.environ.get("NORMALIZER_STORE_URL", "sqlite:///normalizer_workspace.db"),
        "TABLE": "workspace_state",
    },
    "LIMITS": {
        # Keys, closures and BCNF enumerate 2^n subsets.
        "WARN_ATTRIBUTE_COUNT": 12,
        # Seconds before a pending computation is abandoned; None waits forever.
        "TIMEOUT_SECONDS": None,
    },
    "OUTPUT": {
        "BASE_PATH": "output",
    },
    "GRAMMAR": {
        "ATTRIBUTE_LIST_REGEX": r"^[a-zA-Z_][a-zA-Z0-9_]*(,\s*[a-zA-Z_][a-zA-Z0-9_]*)*$",
        "ARROW_REGEX": r"->|→",
    },
}

SCHEMA_KEY = "relationalSchema"
DEPENDENCIES_KEY = "functionalDependencies"
BULLET = "•"


# --------------------------------------------------------------------------------------
# Errors
# --------------------------------------------------------------------------------------
class WorkbenchError(ValueError):
    """Input rejected before any computation runs."""


class InvalidSchemaError(WorkbenchError):
    pass


class IncompleteDependencyError(WorkbenchError):
    pass


# --------------------------------------------------------------------------------------
# Utility helpers
# --------------------------------------------------------------------------------------
def quote_ident(name: str) -> str:
    """Quote an SQL identifier with ANSI double quotes, doubling embedded quotes."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def parse_attributes(schema_text: str) -> List[str]:
    stripped = (schema_text or "").strip()
    if not re.fullmatch(CONFIG["GRAMMAR"]["ATTRIBUTE_LIST_REGEX"], stripped):
        raise InvalidSchemaError(
            f"Invalid attribute list {schema_text!r}. Use comma-separated attribute names (e.g., A, B, C)."
        )
    attributes = [attr.strip() for attr in stripped.split(",")]
    duplicates = sorted({attr for attr in attributes if attributes.count(attr) > 1})
    if duplicates:
        raise InvalidSchemaError(f"Duplicate attributes: {', '.join(duplicates)}")
    return attributes


def parse_dependency(dependency_text: str) -> Dict[str, List[str]]:
    """Parse ``"A, B -> C"`` into the stored ``{"from": [...], "to": [...]}`` form."""
    sides = re.split(CONFIG["GRAMMAR"]["ARROW_REGEX"], dependency_text)
    if len(sides) != 2:
        raise WorkbenchError(f"Cannot parse {dependency_text!r}; expected 'A, B -> C'.")
    source, target = ([name.strip() for name in side.split(",") if name.strip()] for side in sides)
    return {"from": source, "to": target}


def prune_stale_dependencies(
    dependencies: Iterable[Dict[str, List[str]]], attributes: Sequence[str]
) -> Tuple[List[Dict[str, List[str]]], List[Dict[str, List[str]]]]:
    """Split dependencies into those built only from ``attributes`` and the stale rest."""
    known = set(attributes)
    kept, dropped = [], []
    for entry in dependencies:
        names = set(entry.get("from", [])) | set(entry.get("to", []))
        (kept if names <= known else dropped).append(entry)
    return kept, dropped


def build_dependency_set(dependencies: Iterable[Dict[str, List[str]]], attributes: Sequence[str]) -> FDSet:
    entries = list(dependencies)
    for pos, entry in enumerate(entries, start=1):
        if not entry.get("from") or not entry.get("to"):
            raise IncompleteDependencyError(f"Dependency #{pos} needs attributes on both sides.")
    kept, dropped = prune_stale_dependencies(entries, attributes)
    for entry in dropped:
        print(f"[WARN] Ignoring stale dependency {format_entry(entry)}: not all attributes are in the schema")
    return FDSet.from_pairs(kept)


# --------------------------------------------------------------------------------------
# Workspace
# --------------------------------------------------------------------------------------
@dataclass
class Workspace:
    """The two user-entered values a computation is built from."""

    schema_text: str = ""
    dependencies: List[Dict[str, List[str]]] = field(default_factory=list)

    @property
    def attributes(self) -> List[str]:
        return parse_attributes(self.schema_text)

    def scheme(self) -> RelationalScheme:
        return RelationalScheme(AttributeSet(self.attributes))

    def dependency_set(self) -> FDSet:
        return build_dependency_set(self.dependencies, self.attributes)

    def pruned(self) -> Workspace:
        """Copy without dependencies that mention attributes no longer in the schema."""
        kept, dropped = prune_stale_dependencies(self.dependencies, self.attributes)
        for entry in dropped:
            print(f"[WARN] Removing stale dependency {format_entry(entry)}")
        return Workspace(self.schema_text, kept)


class WorkspaceStore:
    """Key/value persistence of the workspace on top of SQLAlchemy."""

    def __init__(self, url: str, table: Optional[str] = None) -> None:
        self.engine: Engine = create_engine(url, future=True)
        self.table = quote_ident(table or CONFIG["STORE"]["TABLE"])
        self._ensure_table()

    def _ensure_table(self) -> None:
        sql = (
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            " state_key VARCHAR(64) PRIMARY KEY,"
            " state_value TEXT NOT NULL)"
        )
        with self.engine.begin() as conn:
            conn.execute(text(sql))

    def _put(self, key: str, value: str) -> None:
        # Delete + insert keeps the upsert portable across dialects.
        with self.engine.begin() as conn:
            conn.execute(text(f"DELETE FROM {self.table} WHERE state_key = :key"), {"key": key})
            conn.execute(
                text(f"INSERT INTO {self.table} (state_key, state_value) VALUES (:key, :value)"),
                {"key": key, "value": value},
            )

    def _get(self, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT state_value FROM {self.table} WHERE state_key = :key"), {"key": key}
            ).fetchone()
        return None if row is None else row[0]

    def save_schema(self, schema_text: str) -> None:
        self._put(SCHEMA_KEY, schema_text)

    def save_dependencies(self, dependencies: Iterable[Dict[str, List[str]]]) -> None:
        payload = [{"from": list(entry["from"]), "to": list(entry["to"])} for entry in dependencies]
        self._put(DEPENDENCIES_KEY, json.dumps(payload))

    def save(self, workspace: Workspace) -> None:
        self.save_schema(workspace.schema_text)
        self.save_dependencies(workspace.dependencies)

    def load(self) -> Workspace:
        raw_dependencies = self._get(DEPENDENCIES_KEY)
        return Workspace(
            schema_text=self._get(SCHEMA_KEY) or "",
            dependencies=json.loads(raw_dependencies) if raw_dependencies else [],
        )

    def is_empty(self) -> bool:
        return self._get(SCHEMA_KEY) is None and self._get(DEPENDENCIES_KEY) is None

    def dispose(self) -> None:
        self.engine.dispose()


# --------------------------------------------------------------------------------------
# Presentation
# --------------------------------------------------------------------------------------
def format_attribute_set(attributes: Iterable[str]) -> str:
    return "{" + ",".join(attributes) + "}"


def format_dependency(fd: FunctionalDependency) -> str:
    return f"{format_attribute_set(fd.determinant)} → {format_attribute_set(fd.dependent)}"


def format_entry(entry: Dict[str, List[str]]) -> str:
    return f"{format_attribute_set(entry.get('from', []))} → {format_attribute_set(entry.get('to', []))}"


OPERATIONS: Dict[str, Callable[[RelationalScheme, FDSet], Any]] = {
    "keys": candidate_keys,
    "closure": attribute_closure_report,
    "fd-closure": fd_set_closure,
    "minimal-cover": lambda scheme, fds: minimal_cover(fds),
    "3nf": synthesize_3nf,
    "bcnf": decompose_bcnf,
    "analyze": lambda scheme, fds: NormalizationAnalyzer(scheme, fds).analyze(),
}

TITLES = {
    "keys": "Candidate keys",
    "closure": "Attributes closure",
    "fd-closure": "Functional dependency closure",
    "minimal-cover": "Minimal cover",
    "3nf": "3NF synthesis",
    "bcnf": "BCNF decomposition",
    "analyze": "Normal form analysis",
}


def format_lines(operation: str, result: Any) -> List[str]:
    if operation == "keys":
        return [f"{BULLET}{format_attribute_set(key)}" for key in result]
    if operation == "closure":
        return [
            f"{BULLET}{format_attribute_set(subset)}⁺ → {format_attribute_set(closed)}"
            for subset, closed in result
        ]
    if operation in ("fd-closure", "minimal-cover"):
        return [f"{BULLET}{format_dependency(fd)}" for fd in result]
    if operation in ("3nf", "bcnf"):
        return [f"{BULLET}{format_attribute_set(scheme.attributes)}" for scheme in result]
    if operation == "analyze":
        lines = [
            f"{BULLET}Normal form: {result['normal_form']}",
            f"{BULLET}Candidate keys: " + ", ".join(format_attribute_set(key) for key in result["candidate_keys"]),
            f"{BULLET}Prime attributes: {format_attribute_set(result['prime_attributes'])}",
        ]
        for label, issues_key in (("2NF", "second_nf_issues"), ("3NF", "third_nf_issues"), ("BCNF", "bcnf_issues")):
            for issue in result[issues_key]:
                lines.append(
                    f"{BULLET}{label} issue: {format_attribute_set(issue['determinant'])}"
                    f" → {format_attribute_set(issue['dependent'])}"
                )
        return lines
    raise KeyError(operation)


def to_jsonable(operation: str, result: Any) -> Any:
    if operation == "keys":
        return [list(key) for key in result]
    if operation == "closure":
        return [{"attributes": list(subset), "closure": list(closed)} for subset, closed in result]
    if operation in ("fd-closure", "minimal-cover"):
        return [{"from": list(fd.determinant), "to": list(fd.dependent)} for fd in result]
    if operation in ("3nf", "bcnf"):
        return [{"name": scheme.name, "attributes": list(scheme.attributes)} for scheme in result]
    return result


# --------------------------------------------------------------------------------------
# Artifact writer
# --------------------------------------------------------------------------------------
class ArtifactWriter:
    """Writes machine-readable and human-readable results of one run."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.manifest: Dict[str, Any] = {"operations": []}
        self.report_sections: List[Tuple[str, List[str]]] = []

    def write_json(self, path: Path, obj: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(obj, indent=2, default=str))

    def append_manifest(self, entry: Dict[str, Any]) -> None:
        self.manifest["operations"].append(entry)

    def add_section(self, title: str, lines: List[str]) -> None:
        self.report_sections.append((title, lines))

    def finalize(self, workspace: Workspace) -> None:
        self.manifest["schema"] = workspace.schema_text
        self.manifest["dependencies"] = workspace.dependencies
        self.write_json(self.base_path / "manifest.json", self.manifest)

        lines = [
            "# Normalization Report",
            "",
            f"- Attributes: {workspace.schema_text}",
            "- Dependencies: " + ("; ".join(format_entry(entry) for entry in workspace.dependencies) or "none"),
        ]
        for title, section in self.report_sections:
            lines.extend(["", f"## {title}"])
            lines.extend(section or ["- No result."])
        (self.base_path / "report.md").write_text("\n".join(lines))


# --------------------------------------------------------------------------------------
# Runner
# --------------------------------------------------------------------------------------
class Runner:
    """Runs the requested computations against one workspace snapshot."""

    def __init__(self, workspace: Workspace, write_artifacts: bool = False, timeout: Optional[float] = None) -> None:
        self.workspace = workspace
        self.timeout = timeout if timeout is not None else CONFIG["LIMITS"]["TIMEOUT_SECONDS"]
        self.output_root: Optional[Path] = None
        self.writer: Optional[ArtifactWriter] = None
        if write_artifacts:
            ts = datetime.now(timezone.utc).strftime("run_%Y%m%d_%H%M%S")
            self.output_root = Path(CONFIG["OUTPUT"]["BASE_PATH"]) / ts
            self.writer = ArtifactWriter(self.output_root)

    def compute(self, operation: str) -> Any:
        """Run one operation on entities built fresh from the snapshot."""
        scheme = self.workspace.scheme()
        fds = self.workspace.dependency_set()
        func = OPERATIONS[operation]
        if not self.timeout:
            return func(scheme, fds)

        outcome: "queue.Queue[Tuple[bool, Any]]" = queue.Queue(maxsize=1)

        def work() -> None:
            try:
                outcome.put((True, func(scheme, fds)))
            except Exception as exc:
                outcome.put((False, exc))

        # Daemon worker: an abandoned computation must not hold the interpreter open.
        threading.Thread(target=work, name=f"normalizer-{operation}", daemon=True).start()
        try:
            ok, value = outcome.get(timeout=self.timeout)
        except queue.Empty:
            raise TimeoutError(f"{operation} exceeded {self.timeout}s") from None
        if not ok:
            raise value
        return value

    def run(self, operations: Sequence[str]) -> Dict[str, Any]:
        unknown = [op for op in operations if op not in OPERATIONS]
        if unknown:
            raise WorkbenchError(f"Unknown operation(s): {', '.join(unknown)}")

        # Validate and prune once; every operation then reads the same snapshot.
        self.workspace = self.workspace.pruned()
        self.workspace.dependency_set()
        attributes = self.workspace.attributes
        if len(attributes) > CONFIG["LIMITS"]["WARN_ATTRIBUTE_COUNT"]:
            print(f"[WARN] {len(attributes)} attributes: subset enumeration covers {2 ** len(attributes) - 1} subsets")

        results: Dict[str, Any] = {}
        for operation in operations:
            print(f"[INFO] {TITLES[operation]} for {format_attribute_set(attributes)}")
            try:
                result = self.compute(operation)
            except TimeoutError:
                print(f"[WARN] {TITLES[operation]}: no result yet after {self.timeout}s; discarded")
                results[operation] = None
                self._record(operation, None, status="timeout")
                continue
            except Exception as exc:
                print(f"[ERROR] {TITLES[operation]} failed: {exc}")
                results[operation] = None
                self._record(operation, None, status="error", error=str(exc))
                continue

            lines = format_lines(operation, result)
            print("\n".join(lines))
            results[operation] = result
            self._record(operation, result, status="ok", lines=lines)

        if self.writer:
            self.writer.finalize(self.workspace)
            print(f"[INFO] Run complete. Artifacts at {self.output_root}")
        return results

    def _record(
        self,
        operation: str,
        result: Any,
        status: str,
        lines: Optional[List[str]] = None,
        error: Optional[str] = None,
    ) -> None:
        if not self.writer:
            return
        entry: Dict[str, Any] = {"operation": operation, "status": status}
        if error:
            entry["error"] = error
        if status == "ok":
            path = self.output_root / f"{operation}.json"
            self.writer.write_json(path, to_jsonable(operation, result))
            entry["path"] = path.name
        self.writer.append_manifest(entry)
        self.writer.add_section(TITLES[operation], [f"- {line.lstrip(BULLET)}" for line in lines or []])


# --------------------------------------------------------------------------------------
# CLI
# --------------------------------------------------------------------------------------
def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute keys, closures, minimal covers and 3NF/BCNF decompositions.")
    parser.add_argument(
        "operations",
        nargs="*",
        help=f"Any of {', '.join(OPERATIONS)} or 'all' (default: all).",
    )
    parser.add_argument("--attributes", help="Comma-separated attribute names; omit to use the saved workspace.")
    parser.add_argument(
        "--fd", action="append", default=[], metavar="'A,B->C'", help="Functional dependency (repeatable)."
    )
    parser.add_argument("--save", action="store_true", help="Persist --attributes/--fd as the workspace.")
    parser.add_argument("--store", help="SQLAlchemy URL of the workspace store (default: env NORMALIZER_STORE_URL or a local SQLite file).")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each computation.")
    parser.add_argument("--write-artifacts", action="store_true", help="Write JSON results and report.md.")
    parser.add_argument("--output-dir", help="Base folder for artifacts.")
    return parser.parse_args(argv)


def _resolve_operations(requested: Sequence[str]) -> List[str]:
    if not requested or "all" in requested:
        return list(OPERATIONS)
    return list(requested)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.store:
        CONFIG["STORE"]["sqlalchemy_url"] = args.store
    if args.output_dir:
        CONFIG["OUTPUT"]["BASE_PATH"] = args.output_dir

    store: Optional[WorkspaceStore] = None
    try:
        if args.attributes is not None:
            workspace = Workspace(args.attributes, [parse_dependency(item) for item in args.fd])
        else:
            store = WorkspaceStore(CONFIG["STORE"]["sqlalchemy_url"])
            workspace = store.load()
            if not workspace.schema_text:
                print("[ERROR] No saved workspace. Pass --attributes (and --save to keep it).")
                return 1

        workspace = workspace.pruned()
        if args.save:
            store = store or WorkspaceStore(CONFIG["STORE"]["sqlalchemy_url"])
            store.save(workspace)
            print(f"[INFO] Workspace saved to {CONFIG['STORE']['sqlalchemy_url']}")

        Runner(workspace, write_artifacts=args.write_artifacts, timeout=args.timeout).run(
            _resolve_operations(args.operations)
        )
    except WorkbenchError as exc:
        print(f"[ERROR] {exc}")
        return 1
    except OperationalError as exc:
        print("[ERROR] Could not open the workspace store. Check --store or NORMALIZER_STORE_URL.")
        print(f"Details: {exc}")
        return 1
    finally:
        if store is not None:
            store.dispose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
