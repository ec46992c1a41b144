"""In-memory types for assembly definition records.

The same AssemblyDefinitionState shape is used for a single loaded record
and for the combined view over several records. In a single record every
MixedBool is concrete; in the combined view a field is MIXED when the
records disagree on it. List rows carry a display_value that marks
per-row agreement in the combined view.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from asmdef_editor.mixed_bool import MixedBool


@dataclass(frozen=True)
class Platform:
    """A build platform known to the platform catalog."""
    name: str
    display_name: str


@dataclass(frozen=True)
class OptionalModule:
    """An optional engine module an assembly can opt into."""
    token: str
    display_name: str
    tooltip_when_enabled: str


@dataclass(frozen=True)
class PrecompiledAssembly:
    """A precompiled assembly (.dll) found in the project."""
    path: Path

    @property
    def file_name(self) -> str:
        return self.path.name


@dataclass
class AssemblyReference:
    """One entry of the assembly definition references list."""
    name: str | None = None
    serialized_reference: str | None = None
    path: Path | None = None
    data: dict[str, Any] | None = None
    display_value: MixedBool = MixedBool.FALSE

    @property
    def is_missing(self) -> bool:
        """True when the reference names a target that could not be resolved."""
        return self.name is not None and self.path is None

    def identity(self) -> tuple:
        if self.path is not None:
            return ('path', str(self.path))
        return ('serialized', self.serialized_reference)

    def copy(self) -> 'AssemblyReference':
        return replace(self)


@dataclass
class PrecompiledReference:
    """One entry of the precompiled references list."""
    name: str | None = None
    precompiled: PrecompiledAssembly | None = None
    display_value: MixedBool = MixedBool.FALSE

    @property
    def path(self) -> Path | None:
        return self.precompiled.path if self.precompiled else None

    @property
    def file_name(self) -> str | None:
        return self.precompiled.file_name if self.precompiled else None

    @property
    def is_missing(self) -> bool:
        return bool(self.name) and self.precompiled is None

    def identity(self) -> tuple:
        return (self.name,)

    def copy(self) -> 'PrecompiledReference':
        return replace(self)


@dataclass
class DefineConstraint:
    """A define constraint, optionally negated with a leading '!'."""
    name: str | None = None
    display_value: MixedBool = MixedBool.FALSE

    def identity(self) -> tuple:
        return (self.name,)

    def copy(self) -> 'DefineConstraint':
        return replace(self)


@dataclass
class VersionDefine:
    """Sets define when resource name matches the version expression."""
    name: str | None = None
    expression: str | None = None
    define: str | None = None
    display_value: MixedBool = MixedBool.FALSE

    def identity(self) -> tuple:
        return (self.name, self.expression, self.define)

    def copy(self) -> 'VersionDefine':
        return replace(self)


# Names of the list fields shared by records and the combined view.
LIST_FIELDS = (
    'references',
    'precompiled_references',
    'define_constraints',
    'version_defines',
)

# Names of the scalar MixedBool fields.
SCALAR_FIELDS = (
    'allow_unsafe_code',
    'override_references',
    'auto_referenced',
    'use_guids',
)

ROW_TYPES = {
    'references': AssemblyReference,
    'precompiled_references': PrecompiledReference,
    'define_constraints': DefineConstraint,
    'version_defines': VersionDefine,
}


@dataclass
class AssemblyDefinitionState:
    """Editable state of one assembly definition, or of the combined view."""
    path: Path | None = None
    name: str = ""
    references: list[AssemblyReference] = field(default_factory=list)
    precompiled_references: list[PrecompiledReference] = field(default_factory=list)
    define_constraints: list[DefineConstraint] = field(default_factory=list)
    version_defines: list[VersionDefine] = field(default_factory=list)
    optional_unity_references: list[MixedBool] = field(default_factory=list)
    allow_unsafe_code: MixedBool = MixedBool.FALSE
    override_references: MixedBool = MixedBool.FALSE
    auto_referenced: MixedBool = MixedBool.TRUE
    use_guids: MixedBool = MixedBool.TRUE
    compatible_with_any_platform: MixedBool = MixedBool.TRUE
    platform_compatibility: list[MixedBool] = field(default_factory=list)
    modified: bool = False
    # Persisted keys this editor does not model; written back unchanged.
    extra_fields: dict[str, Any] = field(default_factory=dict)
    diagnostics: list[Exception] = field(default_factory=list)

    def rows(self, list_name: str) -> list:
        """Get one of the row lists by field name."""
        if list_name not in LIST_FIELDS:
            raise KeyError(f"Unknown list field: {list_name}")
        return getattr(self, list_name)
