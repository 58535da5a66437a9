"""
zkapp_cli.contracts.discovery
=============================

Find deployable contract classes in the project's build output.

There is no structured manifest coming out of the build, so we scan source
text, but lexically: each file is tokenized with :mod:`tokenize` and we match
the declaration grammar

    class NAME ( base [, base]* ) :

where one of the bases is the contract base type, optionally dotted
(``SmartContract`` or ``zk.SmartContract``). Keyword arguments in the base list
(``metaclass=...``) are ignored. Text inside strings and comments never
matches.

Results keep scan order (sorted file paths, then position in file). The same
name found in two files is reported twice; callers decide what that means.
"""

from __future__ import annotations

import io
import json
import logging
import tokenize
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from ..errors import BuildOutputError

log = logging.getLogger(__name__)

DEFAULT_BASE = "SmartContract"
MANIFEST_NAME = "build.json"

__all__ = [
    "DiscoveredContract",
    "scan_source",
    "find_smart_contracts",
    "find_contract_file",
    "write_build_manifest",
]


@dataclass(frozen=True)
class DiscoveredContract:
    name: str
    path: Path


def _significant(tokens: Iterable[tokenize.TokenInfo]) -> Iterator[tokenize.TokenInfo]:
    skip = {tokenize.COMMENT, tokenize.NL, tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT}
    for tok in tokens:
        if tok.type not in skip:
            yield tok


def _bases(toks: List[tokenize.TokenInfo], start: int) -> tuple[List[str], int]:
    """
    Read a parenthesised base list starting at toks[start] == '('.
    Returns (dotted base names, index after the closing paren).
    """
    bases: List[str] = []
    current: List[str] = []
    depth = 0
    keyword = False
    i = start
    while i < len(toks):
        tok = toks[i]
        if tok.type == tokenize.OP and tok.string in "([{":
            depth += 1
            if depth > 1:
                current = []
        elif tok.type == tokenize.OP and tok.string in ")]}":
            depth -= 1
            if depth == 0:
                if current and not keyword:
                    bases.append(".".join(current))
                return bases, i + 1
        elif depth == 1 and tok.type == tokenize.OP and tok.string == ",":
            if current and not keyword:
                bases.append(".".join(current))
            current, keyword = [], False
        elif depth == 1 and tok.type == tokenize.OP and tok.string == "=":
            keyword = True
        elif depth == 1 and tok.type == tokenize.NAME:
            current.append(tok.string)
        elif depth == 1 and not (tok.type == tokenize.OP and tok.string == "."):
            # anything else (calls, subscripts, literals) is not a plain base name
            current = []
        i += 1
    return bases, i


def scan_source(source: str, base_type: str = DEFAULT_BASE) -> List[str]:
    """
    Return the names of classes in `source` that derive from `base_type`, in
    declaration order. Raises tokenize.TokenError / SyntaxError on input the
    tokenizer rejects.
    """
    toks = list(_significant(tokenize.generate_tokens(io.StringIO(source).readline)))
    names: List[str] = []
    i = 0
    while i < len(toks) - 2:
        tok = toks[i]
        if tok.type == tokenize.NAME and tok.string == "class" and toks[i + 1].type == tokenize.NAME:
            name = toks[i + 1].string
            if toks[i + 2].type == tokenize.OP and toks[i + 2].string == "(":
                bases, i = _bases(toks, i + 2)
                if any(b.split(".")[-1] == base_type for b in bases):
                    names.append(name)
                continue
        i += 1
    return names


def find_smart_contracts(
    pattern: str,
    root: Path,
    base_type: str = DEFAULT_BASE,
) -> List[DiscoveredContract]:
    """
    Scan every file matching `pattern` (relative to `root`) for contract
    declarations. An empty list is a valid answer.
    """
    found: List[DiscoveredContract] = []
    for path in sorted(p for p in root.glob(pattern) if p.is_file()):
        try:
            source = path.read_text(encoding="utf-8")
            names = scan_source(source, base_type)
        except (OSError, UnicodeDecodeError, tokenize.TokenError, SyntaxError) as e:
            log.warning("skipping %s: %s", path, e)
            continue
        found.extend(DiscoveredContract(name, path) for name in names)
    log.debug("discovered %d contract(s) under %s/%s", len(found), root, pattern)
    return found


def find_contract_file(contracts: Sequence[DiscoveredContract], name: str) -> Optional[Path]:
    """First file that declares `name`, or None."""
    for c in contracts:
        if c.name == name:
            return c.path
    return None


def write_build_manifest(build_dir: Path, contracts: Sequence[DiscoveredContract]) -> Path:
    """Write build/build.json listing the discovered contract names."""
    path = build_dir / MANIFEST_NAME
    payload = {"smartContracts": [c.name for c in contracts]}
    try:
        build_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise BuildOutputError(
            f"Failed to write {MANIFEST_NAME}: {e}",
            hint="Check that the build directory is writable.",
        ) from e
    return path
