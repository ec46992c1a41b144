"""Constants used throughout Assembly Definition Editor."""

# Application info
APP_NAME = "Assembly Definition Editor"
APP_VERSION = "0.3"

# File extensions
ASMDEF_FILE_EXTENSION = ".asmdef"
META_FILE_EXTENSION = ".meta"
PRECOMPILED_FILE_EXTENSION = ".dll"

# Reference and define syntax
GUID_REFERENCE_PREFIX = "GUID:"
DEFINE_NOT_PREFIX = "!"

# Default platform catalog: (name, display name)
DEFAULT_PLATFORMS = [
    ("Android", "Android"),
    ("Editor", "Editor"),
    ("iOS", "iOS"),
    ("LinuxStandalone64", "Linux Standalone 64"),
    ("Lumin", "Lumin"),
    ("macOSStandalone", "macOS Standalone"),
    ("PS4", "PS4"),
    ("Switch", "Switch"),
    ("tvOS", "tvOS"),
    ("WSA", "Universal Windows Platform"),
    ("WebGL", "WebGL"),
    ("WindowsStandalone32", "Windows 32-bit"),
    ("WindowsStandalone64", "Windows 64-bit"),
    ("XboxOne", "Xbox One"),
]

# Default optional module catalog: (token, display name, text shown when enabled)
DEFAULT_OPTIONAL_MODULES = [
    (
        "TestAssemblies",
        "Test Assemblies",
        "Predefined Assemblies (Assembly-CSharp.dll etc) will not reference this assembly.\n"
        "This assembly will only be used for tests and will not be included in player builds.",
    ),
]

# Display placeholders
MISSING_REFERENCE_TEXT = "(Missing Reference)"
MISSING_VALUE_TEXT = "(Missing)"
MULTIPLE_VALUES_TEXT = "(Multiple Values)"
INVALID_EXPRESSION_TEXT = "Invalid"
SELECT_RESOURCE_TEXT = "Select..."

# UI Colors
COLOR_CHECKBOX_DEFAULT = "#1f6aa5"  # Blue - default checkbox color
COLOR_CHECKBOX_MIXED = "#FFA500"    # Orange - mixed/partial state
COLOR_STATUS_TEXT = "#FFA500"       # Orange - status bar text
COLOR_SAVE_BUTTON = "#28a745"       # Green - apply button
COLOR_SAVE_BUTTON_HOVER = "#218838" # Dark green - apply button hover
COLOR_MISSING_TEXT = "gray"         # Grayed out unresolved references

# Serialization
DEFAULT_JSON_INDENT = 4
