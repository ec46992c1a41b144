"""Unit tests for the asset database and catalogs."""

from pathlib import Path
import tempfile
import shutil

import pytest

from asmdef_editor.asset_database import (
    AssetDatabase,
    REFERENCE_TYPE_GUID,
    REFERENCE_TYPE_NAME,
    get_meta_path,
    get_reference_type,
    guid_to_reference,
)
from asmdef_editor.catalogs import OptionalModuleCatalog, PlatformCatalog
from asmdef_editor.errors import CommitError, LoadError, UnknownPlatformError

from asmdef_fixtures import read_json, write_asmdef, write_meta

GUID_A = '0123456789abcdef0123456789abcdef'
GUID_B = 'fedcba9876543210fedcba9876543210'


class TestReferenceHelpers:
    """Tests for module level helpers."""

    def test_get_meta_path(self):
        assert get_meta_path(Path('Assets/Foo.asmdef')) == Path('Assets/Foo.asmdef.meta')

    def test_reference_type_guid(self):
        assert get_reference_type(f'GUID:{GUID_A}') == REFERENCE_TYPE_GUID

    def test_reference_type_name(self):
        assert get_reference_type('Foo.Runtime') == REFERENCE_TYPE_NAME
        assert get_reference_type('GUID:short') == REFERENCE_TYPE_NAME
        assert get_reference_type('') == REFERENCE_TYPE_NAME

    def test_guid_to_reference(self):
        assert guid_to_reference(GUID_A) == f'GUID:{GUID_A}'


class TestReadWriteRecord:
    """Tests for reading and writing records."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_read_missing_file(self):
        with pytest.raises(LoadError):
            AssetDatabase.read_record(self.temp_dir / 'Missing.asmdef')

    def test_read_invalid_json(self):
        path = self.temp_dir / 'Bad.asmdef'
        path.write_text('{ not json', encoding='utf-8')
        with pytest.raises(LoadError) as exc_info:
            AssetDatabase.read_record(path)
        assert 'Invalid JSON' in str(exc_info.value)

    def test_read_non_object(self):
        path = self.temp_dir / 'List.asmdef'
        path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(LoadError):
            AssetDatabase.read_record(path)

    def test_read_with_bom(self):
        """Test files saved with a byte order mark are read."""
        path = self.temp_dir / 'Bom.asmdef'
        path.write_bytes(b'\xef\xbb\xbf{"name": "Bom"}')
        assert AssetDatabase.read_record(path) == {'name': 'Bom'}

    def test_write_record(self):
        path = self.temp_dir / 'Out.asmdef'
        AssetDatabase.write_record(path, {'name': 'Out', 'references': []}, indent=2)
        text = path.read_text(encoding='utf-8')
        assert text.endswith('\n')
        assert '  "name": "Out"' in text
        assert read_json(path) == {'name': 'Out', 'references': []}

    def test_write_record_missing_dir(self):
        with pytest.raises(CommitError):
            AssetDatabase.write_record(self.temp_dir / 'nope' / 'Out.asmdef', {'name': 'Out'})


class TestAssetDatabaseIndex:
    """Tests for project indexing and reference resolution."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.core_path = write_asmdef(self.temp_dir / 'Core', 'Core.asmdef', {'name': 'Core'}, GUID_A)
        self.ui_path = write_asmdef(self.temp_dir / 'UI', 'UI.asmdef', {'name': 'Game.UI'})
        plugins = self.temp_dir / 'Plugins'
        plugins.mkdir()
        self.dll_path = plugins / 'Newtonsoft.Json.dll'
        self.dll_path.write_bytes(b'')
        write_meta(self.dll_path, GUID_B)
        self.database = AssetDatabase(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_path_to_guid(self):
        assert AssetDatabase.path_to_guid(self.core_path) == GUID_A

    def test_path_to_guid_without_meta(self):
        assert AssetDatabase.path_to_guid(self.ui_path) is None
        assert AssetDatabase.path_to_guid(None) is None

    def test_path_to_guid_uppercase(self):
        write_meta(self.ui_path, GUID_B.upper())
        assert AssetDatabase.path_to_guid(self.ui_path) == GUID_B

    def test_resolve_by_name(self):
        assert self.database.get_path_from_reference('Game.UI') == self.ui_path
        assert self.database.get_path_from_reference('Core') == self.core_path

    def test_resolve_by_guid(self):
        assert self.database.get_path_from_reference(f'GUID:{GUID_A}') == self.core_path

    def test_resolve_guid_of_precompiled_assembly(self):
        """Test a GUID that belongs to a .dll does not resolve to an assembly definition."""
        assert self.database.get_path_from_reference(f'GUID:{GUID_B}') is None

    def test_resolve_unknown(self):
        assert self.database.get_path_from_reference('Unknown') is None

    def test_assembly_names(self):
        assert self.database.assembly_names() == ['Core', 'Game.UI']

    def test_duplicate_name_keeps_first(self):
        write_asmdef(self.temp_dir / 'ZZ', 'Copy.asmdef', {'name': 'Core'})
        self.database.refresh()
        assert self.database.get_path_from_reference('Core') == self.core_path

    def test_unreadable_asmdef_is_skipped(self):
        (self.temp_dir / 'Broken.asmdef').write_text('{', encoding='utf-8')
        self.database.refresh()
        assert self.database.assembly_names() == ['Core', 'Game.UI']

    def test_precompiled_assemblies(self):
        assemblies = self.database.precompiled_assemblies()
        assert [a.file_name for a in assemblies] == ['Newtonsoft.Json.dll']
        assert assemblies[0].path == self.dll_path

    def test_import_asset_reindexes_renamed_assembly(self):
        self.database.assembly_names()
        AssetDatabase.write_record(self.ui_path, {'name': 'Game.Interface'})
        self.database.import_asset(self.ui_path)
        assert self.database.get_path_from_reference('Game.UI') is None
        assert self.database.get_path_from_reference('Game.Interface') == self.ui_path

    def test_missing_project_root(self):
        database = AssetDatabase(self.temp_dir / 'missing')
        assert database.assembly_names() == []
        assert database.precompiled_assemblies() == []


class TestCatalogs:
    """Tests for the platform and optional module catalogs."""

    def test_default_platforms(self):
        catalog = PlatformCatalog()
        names = [p.name for p in catalog.list_platforms()]
        assert len(catalog) == len(names)
        assert 'Editor' in names
        assert 'Android' in names

    def test_get_index_ignores_case(self):
        catalog = PlatformCatalog()
        assert catalog.get_index('editor') == catalog.get_index('Editor')

    def test_unknown_platform(self):
        catalog = PlatformCatalog()
        with pytest.raises(UnknownPlatformError) as exc_info:
            catalog.get_index('Dreamcast', 'Foo.asmdef')
        assert "Unknown platform 'Dreamcast'" in str(exc_info.value)
        assert isinstance(exc_info.value, LoadError)

    def test_default_optional_modules(self):
        catalog = OptionalModuleCatalog()
        tokens = [m.token for m in catalog.list_optional_modules()]
        assert tokens == ['TestAssemblies']
        assert len(catalog) == 1
