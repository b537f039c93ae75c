"""
Checker configuration.

A StyleConfig is an immutable pydantic model loaded from a JSON file and
passed explicitly to every stage of a run. JSON keys use camelCase
(``excludeDirs``, ``namingTable``); Python code uses the snake_case names.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError
from .finding import Severity
from .parser import MODIFIERS, DeclarationKind
from .utils import DEFAULT_EXCLUDE_DIRS, CasePattern


class MemberCategory(Enum):
    """Member categories of a type, in the default canonical order."""
    SERIALIZED_FIELD = "serializedField"
    FIELD = "field"
    DELEGATE = "delegate"
    EVENT = "event"
    ENUM = "enum"
    INTERFACE = "interface"
    PROPERTY = "property"
    LIFECYCLE_METHOD = "lifecycleMethod"
    METHOD = "method"
    STRUCT = "struct"
    CLASS = "class"


DEFAULT_MEMBER_ORDER = tuple(MemberCategory)

DEFAULT_LIFECYCLE_ORDER = (
    "Awake", "OnEnable", "Start", "FixedUpdate", "OnTrigger*", "OnCollision*",
    "Update", "LateUpdate", "OnDrawGizmos", "OnDrawGizmosSelected", "OnGUI",
    "OnApplicationPause", "OnApplicationQuit", "OnDisable", "OnDestroy",
)

DEFAULT_BOOL_PREFIXES = ("is", "has", "can")

DEFAULT_USING_GROUPS = (
    ("System",),
    ("UnityEngine", "UnityEditor", "Unity"),
)


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class NamingEntry(_Model):
    """One row of the naming table: declarations of `kind` carrying all `modifiers` use `pattern`."""
    kind: DeclarationKind
    modifiers: FrozenSet[str] = frozenset()
    pattern: CasePattern

    @field_validator("modifiers")
    @classmethod
    def _known_modifiers(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        unknown = sorted(value - MODIFIERS)
        if unknown:
            raise ValueError(f"unknown modifier(s): {', '.join(unknown)}")
        return value

    @property
    def key(self) -> Tuple[DeclarationKind, FrozenSet[str]]:
        return (self.kind, self.modifiers)


def _entry(kind: DeclarationKind, pattern: CasePattern, *modifiers: str) -> NamingEntry:
    return NamingEntry(kind=kind, pattern=pattern, modifiers=frozenset(modifiers))


_K = DeclarationKind
_P = CasePattern

# Ties between equally specific entries go to the earlier row.
DEFAULT_NAMING_TABLE = (
    _entry(_K.NAMESPACE, _P.PASCAL),
    _entry(_K.CLASS, _P.PASCAL),
    _entry(_K.STRUCT, _P.PASCAL),
    _entry(_K.ENUM, _P.PASCAL),
    _entry(_K.INTERFACE, _P.INTERFACE),
    _entry(_K.DELEGATE, _P.PASCAL),
    _entry(_K.EVENT, _P.PASCAL),
    _entry(_K.METHOD, _P.PASCAL),
    _entry(_K.ENUM_MEMBER, _P.PASCAL),
    _entry(_K.FIELD, _P.SNAKE, "const"),
    _entry(_K.FIELD, _P.PASCAL, "static"),
    _entry(_K.FIELD, _P.PASCAL, "public"),
    _entry(_K.FIELD, _P.CAMEL, "readonly"),
    _entry(_K.FIELD, _P.UNDERSCORE_CAMEL, "private"),
    _entry(_K.FIELD, _P.CAMEL, "protected"),
    _entry(_K.FIELD, _P.CAMEL, "internal"),
    _entry(_K.PROPERTY, _P.PASCAL, "public"),
    _entry(_K.PROPERTY, _P.CAMEL, "private"),
    _entry(_K.PROPERTY, _P.PASCAL),
)


class RuleSettings(_Model):
    """Per-rule overrides."""
    severity: Optional[Severity] = None

    @field_validator("severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Severity.parse(value)
        return value


class RulesConfig(_Model):
    """The "rules" section: an optional enabled list plus per-rule settings keyed by rule id."""
    enabled: Optional[Tuple[str, ...]] = None
    settings: Dict[str, RuleSettings] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _split_settings(cls, data: Any) -> Any:
        # {"enabled": [...], "NamingCheck": {...}} -> {"enabled": [...], "settings": {...}}
        if isinstance(data, dict) and "settings" not in data:
            data = dict(data)
            enabled = data.pop("enabled", None)
            return {"enabled": enabled, "settings": data}
        return data

    def rule_ids(self) -> FrozenSet[str]:
        """Every rule id mentioned in this section."""
        return frozenset(self.enabled or ()) | frozenset(self.settings)


class FormattingOptions(_Model):
    """Switches for the individual formatting sub-checks."""
    space_after_comma: bool = Field(True, alias="spaceAfterComma")
    no_space_inside_parens: bool = Field(True, alias="noSpaceInsideParens")
    space_before_brace: bool = Field(True, alias="spaceBeforeBrace")
    require_braces: bool = Field(True, alias="requireBraces")
    no_space_before_semicolon: bool = Field(True, alias="noSpaceBeforeSemicolon")
    space_after_keyword: bool = Field(True, alias="spaceAfterKeyword")
    space_around_operators: bool = Field(True, alias="spaceAroundOperators")


class AbbreviationOptions(_Model):
    include_types: bool = Field(False, alias="includeTypes")


class StyleConfig(_Model):
    """Complete configuration of a checker run."""
    strict: bool = False
    extensions: Tuple[str, ...] = (".cs",)
    exclude_dirs: Tuple[str, ...] = Field(DEFAULT_EXCLUDE_DIRS, alias="excludeDirs")
    workers: Optional[int] = Field(None, ge=1)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    member_order: Tuple[MemberCategory, ...] = Field(DEFAULT_MEMBER_ORDER, alias="memberOrder")
    lifecycle_order: Tuple[str, ...] = Field(DEFAULT_LIFECYCLE_ORDER, alias="lifecycleOrder")
    naming_table: Tuple[NamingEntry, ...] = Field(DEFAULT_NAMING_TABLE, alias="namingTable")
    bool_prefixes: Tuple[str, ...] = Field(DEFAULT_BOOL_PREFIXES, alias="boolPrefixes")
    using_groups: Tuple[Tuple[str, ...], ...] = Field(DEFAULT_USING_GROUPS, alias="usingGroups")
    file_name_base_types: Tuple[str, ...] = Field(("MonoBehaviour",), alias="fileNameBaseTypes")
    formatting: FormattingOptions = Field(default_factory=FormattingOptions)
    abbreviations: AbbreviationOptions = Field(default_factory=AbbreviationOptions)

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one extension is required")
        return tuple(ext.lower() if ext.startswith(".") else "." + ext.lower() for ext in value)

    @field_validator("naming_table")
    @classmethod
    def _merge_naming_table(cls, value: Tuple[NamingEntry, ...]) -> Tuple[NamingEntry, ...]:
        # user rows replace default rows with the same key and come first on ties
        keys = {entry.key for entry in value}
        return tuple(value) + tuple(e for e in DEFAULT_NAMING_TABLE if e.key not in keys)

    @field_validator("member_order")
    @classmethod
    def _complete_member_order(cls, value: Tuple[MemberCategory, ...]) -> Tuple[MemberCategory, ...]:
        if len(set(value)) != len(value):
            raise ValueError("member categories must not repeat")
        # categories left out keep their default relative order at the end
        return tuple(value) + tuple(c for c in DEFAULT_MEMBER_ORDER if c not in value)

    def severity_for(self, rule_id: str, default: Severity) -> Severity:
        """Configured severity override for a rule, else its default."""
        settings = self.rules.settings.get(rule_id)
        if settings is not None and settings.severity is not None:
            return settings.severity
        return default

    def is_enabled(self, rule_id: str) -> bool:
        return self.rules.enabled is None or rule_id in self.rules.enabled

    def naming_pattern(self, kind: DeclarationKind, modifiers: Iterable[str]) -> Optional[CasePattern]:
        """Most specific naming table entry for a declaration; ties go to table order."""
        mods = frozenset(modifiers)
        best: Optional[NamingEntry] = None
        for entry in self.naming_table:
            if entry.kind != kind or not entry.modifiers <= mods:
                continue
            if best is None or len(entry.modifiers) > len(best.modifiers):
                best = entry
        return best.pattern if best is not None else None

    def using_group(self, namespace: str) -> int:
        """Index of the using group a namespace belongs to (the implicit "others" group is last)."""
        for index, prefixes in enumerate(self.using_groups):
            for prefix in prefixes:
                if namespace == prefix or namespace.startswith(prefix + "."):
                    return index
        return len(self.using_groups)

    def using_group_name(self, index: int) -> str:
        if index < len(self.using_groups):
            return "/".join(self.using_groups[index])
        return "other"

    def member_rank(self, category: MemberCategory) -> int:
        return self.member_order.index(category)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "config"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def config_from_dict(data: Dict[str, Any]) -> StyleConfig:
    """Validate a configuration mapping. Raises ConfigError."""
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object")
    try:
        return StyleConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_format_validation_error(e)}") from e


def load_config(path: Optional[Union[str, Path]] = None) -> StyleConfig:
    """Load a JSON configuration file, or the defaults when path is None. Raises ConfigError."""
    if path is None:
        return StyleConfig()
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {config_path}") from None
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read configuration {config_path}: {e}") from e
    return config_from_dict(data)


def check_rule_ids(config: StyleConfig, known: Iterable[str]) -> None:
    """Raise ConfigError if the rules section names an unregistered rule."""
    unknown = sorted(config.rules.rule_ids() - frozenset(known))
    if unknown:
        raise ConfigError(f"Unknown rule id(s) in configuration: {', '.join(unknown)}")
