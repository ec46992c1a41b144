"""Platform and optional module catalogs.

Catalogs are read-only and passed to the loader, committer and session
rather than looked up globally, so tests can supply their own.
"""

from asmdef_editor.constants import DEFAULT_OPTIONAL_MODULES, DEFAULT_PLATFORMS
from asmdef_editor.errors import UnknownPlatformError
from asmdef_editor.models import OptionalModule, Platform


class PlatformCatalog:
    """Ordered list of build platforms; indices match platform_compatibility."""

    def __init__(self, platforms: list[Platform] | None = None):
        if platforms is None:
            platforms = [Platform(name, display) for name, display in DEFAULT_PLATFORMS]
        self._platforms = list(platforms)

    def __len__(self) -> int:
        return len(self._platforms)

    def list_platforms(self) -> list[Platform]:
        return list(self._platforms)

    def get_index(self, name: str, path=None) -> int:
        """Find the index of a platform by name, ignoring case.

        Raises:
            UnknownPlatformError: If no platform has that name.
        """
        wanted = name.casefold()
        for i, platform in enumerate(self._platforms):
            if platform.name.casefold() == wanted:
                return i
        raise UnknownPlatformError(f"Unknown platform '{name}'", path)


class OptionalModuleCatalog:
    """Ordered list of optional modules; indices match optional_unity_references."""

    def __init__(self, modules: list[OptionalModule] | None = None):
        if modules is None:
            modules = [OptionalModule(*entry) for entry in DEFAULT_OPTIONAL_MODULES]
        self._modules = list(modules)

    def __len__(self) -> int:
        return len(self._modules)

    def list_optional_modules(self) -> list[OptionalModule]:
        return list(self._modules)
