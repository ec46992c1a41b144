"""Shared helpers for building assembly definition test projects."""

import json
from pathlib import Path

from asmdef_editor.asset_database import get_meta_path
from asmdef_editor.catalogs import OptionalModuleCatalog, PlatformCatalog
from asmdef_editor.mixed_bool import MixedBool
from asmdef_editor.models import AssemblyDefinitionState, OptionalModule, Platform

TEST_PLATFORMS = PlatformCatalog([
    Platform('Android', 'Android'),
    Platform('Editor', 'Editor'),
    Platform('iOS', 'iOS'),
])

TEST_OPTIONAL_MODULES = OptionalModuleCatalog([
    OptionalModule('TestAssemblies', 'Test Assemblies', 'Test info'),
])


def write_asmdef(directory: Path, file_name: str, data: dict, guid: str | None = None) -> Path:
    """Write an .asmdef file, and a .meta file when guid is given."""
    path = Path(directory) / file_name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding='utf-8')
    if guid:
        write_meta(path, guid)
    return path


def write_meta(path: Path, guid: str):
    get_meta_path(path).write_text(f"fileFormatVersion: 2\nguid: {guid}\n", encoding='utf-8')


def read_json(path: Path) -> dict:
    return json.loads(Path(path).read_text(encoding='utf-8'))


def make_state(name: str = 'Test', path: Path | None = None, **fields) -> AssemblyDefinitionState:
    """Build a record shaped for TEST_PLATFORMS and TEST_OPTIONAL_MODULES."""
    state = AssemblyDefinitionState(
        path=path,
        name=name,
        platform_compatibility=[MixedBool.FALSE] * len(TEST_PLATFORMS),
        optional_unity_references=[MixedBool.FALSE] * len(TEST_OPTIONAL_MODULES),
    )
    for key, value in fields.items():
        setattr(state, key, value)
    return state
