"""
Configuration: process settings (environment) and the project's config.json.

- `Settings` holds CLI-wide knobs (GraphQL timeout, build glob, explorer URL)
  with overrides via environment variables (ZK_*).
- `ProjectConfig` wraps a project's config.json: a `networks` mapping (or the
  legacy `deployAliases` mapping) of alias -> {url, fee, keyPath, smartContract?}.
  It is read once per deploy and written back only to persist a contract
  choice. Writes are atomic (temp file + os.replace) but not locked, so two
  concurrent deploys against the same project are last-write-wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .errors import AliasNotFound, AliasUrlMissing, ConfigInvalid, ConfigNotFound

CONFIG_FILENAME = "config.json"

_DEFAULT_TIMEOUT = 20.0
_DEFAULT_BUILD_GLOB = "build/**/*.py"
_DEFAULT_CONTRACT_BASE = "SmartContract"
_DEFAULT_EXPLORER = "https://berkeley.minaexplorer.com/transaction/{hash}"

# Top-level keys that may hold the alias mapping, in order of preference.
_ALIAS_KEYS = ("networks", "deployAliases")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


@dataclass
class Settings:
    graphql_timeout: float = _DEFAULT_TIMEOUT
    build_glob: str = _DEFAULT_BUILD_GLOB
    contract_base: str = _DEFAULT_CONTRACT_BASE
    explorer_tx_url: str = _DEFAULT_EXPLORER

    @classmethod
    def from_env(cls, prefix: str = "ZK_") -> "Settings":
        """
        Create settings from environment variables:

        ZK_GRAPHQL_TIMEOUT      (float seconds, default 20)
        ZK_BUILD_GLOB           (glob relative to the project root)
        ZK_CONTRACT_BASE        (base class name that marks a deployable contract)
        ZK_EXPLORER_TX_URL      (template with a {hash} placeholder)
        """
        timeout = float(_env(f"{prefix}GRAPHQL_TIMEOUT", str(_DEFAULT_TIMEOUT)))  # type: ignore[arg-type]
        if timeout <= 0:
            raise ValueError(f"{prefix}GRAPHQL_TIMEOUT must be positive, got {timeout}")
        return cls(
            graphql_timeout=timeout,
            build_glob=_env(f"{prefix}BUILD_GLOB", _DEFAULT_BUILD_GLOB),  # type: ignore[arg-type]
            contract_base=_env(f"{prefix}CONTRACT_BASE", _DEFAULT_CONTRACT_BASE),  # type: ignore[arg-type]
            explorer_tx_url=_env(f"{prefix}EXPLORER_TX_URL", _DEFAULT_EXPLORER),  # type: ignore[arg-type]
        )

    @classmethod
    def with_overrides(cls, base: Optional["Settings"] = None, **overrides: Any) -> "Settings":
        """
        Build from existing settings plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def explorer_url(self, tx_hash: str) -> str:
        return self.explorer_tx_url.format(hash=tx_hash)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "graphql_timeout": float(self.graphql_timeout),
            "build_glob": self.build_glob,
            "contract_base": self.contract_base,
            "explorer_tx_url": self.explorer_tx_url,
        }


# --- config.json ----------------------------------------------------------------


@dataclass(frozen=True)
class DeployAlias:
    """One network target from config.json."""

    name: str
    url: str
    fee: Optional[str] = None
    key_path: Optional[str] = None
    smart_contract: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, raw: Dict[str, Any]) -> "DeployAlias":
        fee = raw.get("fee")
        return cls(
            name=name,
            url=str(raw.get("url") or ""),
            fee=None if fee in (None, "") else str(fee),
            key_path=raw.get("keyPath") or None,
            smart_contract=raw.get("smartContract") or None,
        )

    def resolved_key_path(self, root: Path) -> Path:
        """`keyPath` relative to the project root; `keys/<alias>.json` when unset."""
        rel = self.key_path or f"keys/{self.name}.json"
        p = Path(rel).expanduser()
        return p if p.is_absolute() else root / p


@dataclass
class ProjectConfig:
    path: Path
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def root(self) -> Path:
        return self.path.parent

    @property
    def aliases_key(self) -> str:
        """'networks' unless the file only has the legacy 'deployAliases' key."""
        for key in _ALIAS_KEYS:
            if isinstance(self.data.get(key), dict):
                return key
        return _ALIAS_KEYS[0]

    @property
    def _aliases(self) -> Dict[str, Any]:
        return self.data.setdefault(self.aliases_key, {})

    # --- loading ------------------------------------------------------------

    @classmethod
    def load(cls, root: os.PathLike[str] | str) -> "ProjectConfig":
        path = Path(root) / CONFIG_FILENAME
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigNotFound(
                "config.json not found. Make sure you're in a zkApp project."
            ) from e
        except OSError as e:
            raise ConfigInvalid(f"Unable to read config.json: {e}") from e
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigInvalid(f"Unable to read config.json: {e}") from e
        if not isinstance(data, dict):
            raise ConfigInvalid("Unable to read config.json: top level must be an object.")
        cfg = cls(path=path, data=data)
        if not isinstance(data.get(cfg.aliases_key, {}), dict):
            raise ConfigInvalid(f"'{cfg.aliases_key}' in config.json must be an object.")
        return cfg

    # --- aliases --------------------------------------------------------------

    def alias_names(self) -> Iterator[str]:
        return iter(sorted(self._aliases))

    def get_alias(self, name: str) -> DeployAlias:
        """
        Return the alias (matched by its lower-cased name) or raise. The alias
        must carry a non-empty url.
        """
        key = name.lower()
        raw = self._aliases.get(key)
        if not isinstance(raw, dict):
            raise AliasNotFound(key)
        alias = DeployAlias.from_dict(key, raw)
        if not alias.url:
            raise AliasUrlMissing(key)
        return alias

    def set_smart_contract(self, name: str, contract: str) -> bool:
        """
        Record `contract` for alias `name` and save. Returns False without
        touching the file when the stored value is already `contract`.
        """
        raw = self._aliases.get(name.lower())
        if not isinstance(raw, dict):
            raise AliasNotFound(name.lower())
        if raw.get("smartContract") == contract:
            return False
        raw["smartContract"] = contract
        self.save()
        return True

    # --- persistence ----------------------------------------------------------

    def save(self) -> None:
        _atomic_write_json(self.path, self.data)


def _atomic_write_json(path: Path, obj: Dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = (json.dumps(obj, indent=2) + "\n").encode("utf-8")
        with tempfile.NamedTemporaryFile("wb", delete=False, dir=str(path.parent)) as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_name = tmp.name
        os.replace(tmp_name, path)  # atomic on POSIX
    except OSError as e:
        raise ConfigInvalid(f"Failed to write {path.name}: {e}") from e


def find_project_root(start: Optional[os.PathLike[str] | str] = None) -> Path:
    """
    Walk up from `start` (default: cwd) to the first directory holding a
    config.json, so `zk deploy` works from anywhere inside a project.
    Falls back to `start` itself when none is found; loading then reports the
    missing file.
    """
    here = Path(start or os.getcwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate
    return here


__all__ = [
    "CONFIG_FILENAME",
    "Settings",
    "DeployAlias",
    "ProjectConfig",
    "find_project_root",
]
