"""Unit tests for the configuration module."""

from pathlib import Path
from unittest.mock import patch
import tempfile
import shutil
import configparser

from asmdef_editor.config import (
    validate_config,
    is_config_valid,
    get_appdata_dir,
    get_config_path,
    config_exists,
    load_config,
    save_config,
    get_project_root,
    get_json_indent,
    get_color_scheme,
    COLOR_SCHEMES,
    DEFAULT_COLOR_SCHEME,
    MAX_JSON_INDENT,
    _cache,
)
from asmdef_editor.constants import DEFAULT_JSON_INDENT


class TestConfigValidation:
    """Tests for configuration validation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / 'config.ini'
        _cache.config = None
        _cache.mtime = None

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        _cache.config = None
        _cache.mtime = None

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_valid(self, mock_path):
        """Test validate_config with a saved, valid configuration."""
        mock_path.return_value = self.config_file
        save_config(project_root=self.temp_dir, json_indent=2, color_scheme='Dark Mode')
        assert validate_config() == []

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_missing_project_root(self, mock_path):
        mock_path.return_value = self.config_file
        save_config(project_root=str(Path(self.temp_dir) / 'missing'))
        issues = validate_config()
        assert any('Project root not found' in issue for issue in issues)

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_project_root_is_file(self, mock_path):
        mock_path.return_value = self.config_file
        file_path = Path(self.temp_dir) / 'file.txt'
        file_path.write_text('x')
        save_config(project_root=str(file_path))
        issues = validate_config()
        assert any('not a directory' in issue for issue in issues)

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_bad_indent(self, mock_path):
        mock_path.return_value = self.config_file
        self.config_file.write_text(f'''[Project]
root = {self.temp_dir}

[Editor]
json_indent = wide
''')
        issues = validate_config()
        assert any('JSON indent is not a number' in issue for issue in issues)

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_indent_out_of_range(self, mock_path):
        mock_path.return_value = self.config_file
        save_config(project_root=self.temp_dir, json_indent=MAX_JSON_INDENT + 1)
        issues = validate_config()
        assert any('JSON indent must be between' in issue for issue in issues)

    @patch('asmdef_editor.config.get_config_path')
    def test_validate_unknown_color_scheme(self, mock_path):
        mock_path.return_value = self.config_file
        save_config(project_root=self.temp_dir, color_scheme='Neon')
        issues = validate_config()
        assert any('Unknown color scheme' in issue for issue in issues)


class TestIsConfigValid:
    """Tests for is_config_valid function."""

    @patch('asmdef_editor.config.validate_config')
    def test_is_valid_true(self, mock_validate):
        """Test is_config_valid returns True when no issues."""
        mock_validate.return_value = []
        assert is_config_valid() is True

    @patch('asmdef_editor.config.validate_config')
    def test_is_valid_false(self, mock_validate):
        """Test is_config_valid returns False when issues exist."""
        mock_validate.return_value = ["Some issue"]
        assert is_config_valid() is False


class TestDirectoryPaths:
    """Tests for directory path functions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_get_appdata_dir(self):
        """Test that appdata directory is created."""
        with patch.dict('os.environ', {'APPDATA': self.temp_dir}):
            result = get_appdata_dir()
        assert result.exists()
        assert result == Path(self.temp_dir) / 'AsmdefEditor'

    def test_get_config_path(self):
        """Test config path returns correct filename."""
        with patch.dict('os.environ', {'APPDATA': self.temp_dir}):
            result = get_config_path()
            assert config_exists() is False
        assert result.name == 'config.ini'


class TestConfigConstants:
    """Tests for configuration constants."""

    def test_color_schemes_list(self):
        """Test color schemes list contains expected values."""
        assert "Match Windows Theme" in COLOR_SCHEMES
        assert "Light Mode" in COLOR_SCHEMES
        assert "Dark Mode" in COLOR_SCHEMES

    def test_default_color_scheme(self):
        """Test default color scheme is valid."""
        assert DEFAULT_COLOR_SCHEME in COLOR_SCHEMES


class TestLoadConfig:
    """Tests for load_config function."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        # Clear cache before each test
        _cache.config = None
        _cache.mtime = None

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        # Clear cache after each test
        _cache.config = None
        _cache.mtime = None

    @patch('asmdef_editor.config.get_config_path')
    def test_load_config_nonexistent(self, mock_path):
        """Test loading config when file doesn't exist."""
        mock_path.return_value = Path(self.temp_dir) / 'nonexistent.ini'
        config = load_config()
        assert isinstance(config, configparser.ConfigParser)
        assert len(config.sections()) == 0

    @patch('asmdef_editor.config.get_config_path')
    def test_load_config_existing(self, mock_path):
        """Test loading config from existing file."""
        config_file = Path(self.temp_dir) / 'config.ini'
        config_file.write_text('''[Project]
root = C:\\Unity\\MyGame
''')
        mock_path.return_value = config_file

        config = load_config()
        assert config.has_section('Project')
        assert config.get('Project', 'root') == 'C:\\Unity\\MyGame'

    @patch('asmdef_editor.config.get_config_path')
    def test_load_config_caching(self, mock_path):
        """Test config caching works."""
        config_file = Path(self.temp_dir) / 'config.ini'
        config_file.write_text('''[Project]
root = C:\\Unity\\MyGame
''')
        mock_path.return_value = config_file

        # First load
        config1 = load_config()
        # Second load should return cached
        config2 = load_config()
        assert config1 is config2

    @patch('asmdef_editor.config.get_config_path')
    def test_defaults_without_config(self, mock_path):
        mock_path.return_value = Path(self.temp_dir) / 'nonexistent.ini'
        assert get_project_root() == Path.cwd()
        assert get_json_indent() == DEFAULT_JSON_INDENT
        assert get_color_scheme() == DEFAULT_COLOR_SCHEME

    @patch('asmdef_editor.config.get_config_path')
    def test_bad_indent_falls_back(self, mock_path):
        config_file = Path(self.temp_dir) / 'config.ini'
        config_file.write_text('''[Editor]
json_indent = 99
''')
        mock_path.return_value = config_file
        assert get_json_indent() == DEFAULT_JSON_INDENT


class TestSaveConfig:
    """Tests for save_config function."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        _cache.config = None
        _cache.mtime = None

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        _cache.config = None
        _cache.mtime = None

    @patch('asmdef_editor.config.get_config_path')
    def test_save_config_creates_file(self, mock_path):
        """Test save_config creates config file."""
        config_file = Path(self.temp_dir) / 'config.ini'
        mock_path.return_value = config_file

        save_config(
            project_root='C:\\Unity\\MyGame',
            json_indent=2,
            color_scheme='Dark Mode',
        )

        assert config_file.exists()
        config = configparser.ConfigParser()
        config.read(config_file)
        assert config.get('Project', 'root') == 'C:\\Unity\\MyGame'
        assert config.get('Editor', 'json_indent') == '2'
        assert config.get('Appearance', 'color_scheme') == 'Dark Mode'

    @patch('asmdef_editor.config.get_config_path')
    def test_save_then_get(self, mock_path):
        """Test values saved are returned by the getters."""
        mock_path.return_value = Path(self.temp_dir) / 'config.ini'

        save_config(project_root=self.temp_dir, json_indent=0, color_scheme='Light Mode')

        assert get_project_root() == Path(self.temp_dir)
        assert get_json_indent() == 0
        assert get_color_scheme() == 'Light Mode'
