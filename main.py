"""Main entry point for Assembly Definition Editor."""

import logging
import sys
from pathlib import Path
from tkinter import filedialog

import customtkinter as ctk

from asmdef_editor.asset_database import AssetDatabase
from asmdef_editor.config import (
    config_exists,
    get_color_scheme,
    apply_color_scheme,
    get_project_root,
    get_json_indent,
)
from asmdef_editor.constants import APP_NAME, APP_VERSION, ASMDEF_FILE_EXTENSION
from asmdef_editor.inspector_session import InspectorSession
from asmdef_editor.ui.config_dialog import show_config_dialog
from asmdef_editor.ui.inspector_window import InspectorWindow

# Configure logging - only for our application
logging.basicConfig(
    level=logging.WARNING,  # Set root logger to WARNING to suppress library debug messages
    format='[%(levelname)s] %(message)s'
)
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)  # Our logger stays at DEBUG
logging.getLogger('asmdef_editor').setLevel(logging.DEBUG)


def _ask_for_files(root: ctk.CTk) -> list[Path]:
    """Ask the user for the assembly definitions to edit."""
    file_names = filedialog.askopenfilenames(
        parent=root,
        title="Select Assembly Definitions",
        initialdir=str(get_project_root()),
        filetypes=[("Assembly Definition", f"*{ASMDEF_FILE_EXTENSION}")]
    )
    return [Path(name) for name in file_names]


def main():
    """Main application entry point."""
    logger.info("%s %s starting", APP_NAME, APP_VERSION)

    ctk.set_default_color_theme("blue")

    config_found = config_exists()
    logger.debug("Config exists: %s", config_found)
    if config_found:
        apply_color_scheme(get_color_scheme())
    else:
        ctk.set_appearance_mode("system")

    paths = [Path(arg) for arg in sys.argv[1:]]

    if not config_found or not paths:
        temp_root = ctk.CTk()
        temp_root.withdraw()

        if not config_found:
            logger.info("First run - showing config dialog")
            if not show_config_dialog(temp_root):
                logger.info("User cancelled config dialog - exiting")
                temp_root.destroy()
                return
            apply_color_scheme(get_color_scheme())

        if not paths:
            paths = _ask_for_files(temp_root)

        temp_root.destroy()

    if not paths:
        logger.info("No assembly definitions selected - exiting")
        return

    asset_database = AssetDatabase(get_project_root())
    session = InspectorSession(paths, asset_database, json_indent=get_json_indent())
    session.load()

    logger.debug("Creating InspectorWindow...")
    app = InspectorWindow(session)

    logger.info("Starting mainloop...")
    app.mainloop()
    logger.info("mainloop ended")


if __name__ == "__main__":
    main()
