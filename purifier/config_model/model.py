from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional
import os
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
)

from ..rules.types import TYPES

ENV_VAR = "PURIFIER_CFG"
DEFAULT_PATH = Path("config") / "config.toml"


# ---------- Leaf models ----------

class LoggingCfg(BaseModel):
    level: str = "WARNING"
    structured_json: bool = True


def _known_type(v: str) -> str:
    tag = str(v).strip().lower()
    if tag not in TYPES:
        raise ValueError(f"default_type must be one of {sorted(TYPES)}, got {v!r}")
    return tag


class SanitizerCfg(BaseModel):
    strict: bool = True
    default_type: str = "string"
    # filter applied to unknown scalar keys in lenient mode ("" keeps them as plain strings)
    unknown_key_filter: str = "escape"

    @field_validator("default_type")
    @classmethod
    def check_default_type(cls, v: str) -> str:
        return _known_type(v)


class ValidatorCfg(BaseModel):
    default_type: str = "string"
    # error code -> message override
    messages: Dict[str, str] = Field(default_factory=dict)

    @field_validator("default_type")
    @classmethod
    def check_default_type(cls, v: str) -> str:
        return _known_type(v)


# ---------- Root ----------

class PurifierCfg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    sanitizer: SanitizerCfg = Field(default_factory=SanitizerCfg)
    validator: ValidatorCfg = Field(default_factory=ValidatorCfg)

    # Where this config was read from (None for built-in defaults)
    _source: Optional[Path] = PrivateAttr(default=None)

    @property
    def source(self) -> Optional[Path]:
        return self._source

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> "PurifierCfg":
        try:
            import tomllib  # py>=3.11
        except ModuleNotFoundError:
            import tomli as tomllib

        p = Path(path)

        def _parse_raw_dict() -> dict:
            # 1) Try normal binary parse
            try:
                with p.open("rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError:
                pass

            # 2) Retry: decode with utf-8-sig (strips BOM) and drop stray zero-width chars
            text = p.read_text(encoding="utf-8-sig", errors="replace")
            cleaned = text.strip().lstrip("\ufeff\u200b\u200c\u200d\u2060")
            try:
                return tomllib.loads(cleaned)
            except tomllib.TOMLDecodeError as e:
                snippet = cleaned[:80].replace("\n", "\\n")
                raise RuntimeError(
                    f"Failed to parse TOML at {p} after BOM/cleanup. "
                    f"First chars: {snippet!r}"
                ) from e

        raw = _parse_raw_dict()

        # --- ensure nested dicts exist ---
        raw.setdefault("logging", {})
        raw.setdefault("sanitizer", {})
        raw.setdefault("validator", {})
        raw["validator"].setdefault("messages", {})

        cfg = cls(
            logging=LoggingCfg(**raw["logging"]),
            sanitizer=SanitizerCfg(**raw["sanitizer"]),
            validator=ValidatorCfg(**raw["validator"]),
        )
        cfg._source = p.resolve()
        return cfg

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> "PurifierCfg":
        """
        Resolution order:
          1) explicit ``path``
          2) $PURIFIER_CFG
          3) ./config/config.toml when it exists
          4) built-in defaults
        """
        chosen = path or os.environ.get(ENV_VAR)
        if chosen:
            return cls.from_toml(Path(chosen).resolve())
        if DEFAULT_PATH.is_file():
            return cls.from_toml(DEFAULT_PATH.resolve())
        return cls()


def load_config(path: str | os.PathLike[str] | None = None) -> PurifierCfg:
    return PurifierCfg.load(path)


@lru_cache(maxsize=1)
def default_config() -> PurifierCfg:
    """Process-wide config used by engines constructed without ``cfg``."""
    return load_config()
