"""Configuration dialog for Assembly Definition Editor."""

from pathlib import Path
from tkinter import filedialog

import customtkinter as ctk

from asmdef_editor.config import (
    save_config,
    get_project_root,
    get_json_indent,
    get_color_scheme,
    COLOR_SCHEMES,
    MAX_JSON_INDENT,
)


class ConfigDialog(ctk.CTkToplevel):
    """Configuration dialog for the project root and editor settings."""

    def __init__(self, parent: ctk.CTk):
        super().__init__(parent)

        self.title("Assembly Definition Editor - Configuration")
        self.geometry("600x260")
        self.resizable(False, False)

        # Make this dialog modal
        self.transient(parent)
        self.grab_set()

        # Center the dialog on screen
        self.update_idletasks()
        x = (self.winfo_screenwidth() - 600) // 2
        y = (self.winfo_screenheight() - 260) // 2
        self.geometry(f"600x260+{x}+{y}")

        # Result tracking
        self.result = False

        self.project_path = ctk.StringVar(value=str(get_project_root()))
        self.json_indent = ctk.StringVar(value=str(get_json_indent()))
        self.color_scheme = ctk.StringVar(value=get_color_scheme())

        self._create_widgets()

        # Handle window close button
        self.protocol("WM_DELETE_WINDOW", self._on_cancel)

    def _create_widgets(self):
        """Create the dialog widgets."""
        main_frame = ctk.CTkFrame(self, fg_color="transparent")
        main_frame.pack(fill="both", expand=True, padx=20, pady=20)
        main_frame.grid_columnconfigure(1, weight=1)

        row = 0

        # Project root
        label = ctk.CTkLabel(main_frame, text="Project Root:", font=ctk.CTkFont(size=13))
        label.grid(row=row, column=0, sticky="w", padx=(0, 10), pady=5)

        entry = ctk.CTkEntry(main_frame, textvariable=self.project_path, width=350)
        entry.grid(row=row, column=1, sticky="ew", pady=5)

        browse_btn = ctk.CTkButton(main_frame, text="Browse...", command=self._on_project_browse, width=80)
        browse_btn.grid(row=row, column=2, padx=(10, 0), pady=5)

        row += 1

        self.project_hint = ctk.CTkLabel(
            main_frame, text="(Searched for .asmdef and .dll files)",
            font=ctk.CTkFont(size=10), text_color="gray"
        )
        self.project_hint.grid(row=row, column=1, columnspan=2, sticky="w")

        row += 1

        # JSON indentation
        label = ctk.CTkLabel(main_frame, text="JSON Indent:", font=ctk.CTkFont(size=13))
        label.grid(row=row, column=0, sticky="w", padx=(0, 10), pady=5)

        self.indent_dropdown = ctk.CTkComboBox(
            main_frame,
            values=[str(i) for i in range(0, MAX_JSON_INDENT + 1)],
            variable=self.json_indent,
            width=80,
            state="readonly"
        )
        self.indent_dropdown.grid(row=row, column=1, sticky="w", pady=5)

        row += 1

        # Color Scheme
        label = ctk.CTkLabel(main_frame, text="Color Scheme:", font=ctk.CTkFont(size=13))
        label.grid(row=row, column=0, sticky="w", padx=(0, 10), pady=5)

        self.color_dropdown = ctk.CTkComboBox(
            main_frame,
            values=COLOR_SCHEMES,
            variable=self.color_scheme,
            width=200,
            state="readonly"
        )
        self.color_dropdown.grid(row=row, column=1, sticky="w", pady=5)

        row += 1

        # Spacer
        main_frame.grid_rowconfigure(row, weight=1)
        row += 1

        button_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        button_frame.grid(row=row, column=0, columnspan=3, sticky="ew", pady=(10, 0))
        button_frame.grid_columnconfigure(0, weight=1)
        button_frame.grid_columnconfigure(1, weight=1)

        cancel_btn = ctk.CTkButton(
            button_frame,
            text="CANCEL",
            command=self._on_cancel,
            fg_color="#dc3545",
            hover_color="#c82333",
            text_color="white",
            font=ctk.CTkFont(size=13, weight="bold"),
            width=120,
            height=36
        )
        cancel_btn.grid(row=0, column=0, sticky="w")

        self.save_btn = ctk.CTkButton(
            button_frame,
            text="SAVE & CONTINUE",
            command=self._on_save,
            fg_color="#28a745",
            hover_color="#218838",
            text_color="white",
            font=ctk.CTkFont(size=13, weight="bold"),
            width=150,
            height=36
        )
        self.save_btn.grid(row=0, column=1, sticky="e")

    def _on_project_browse(self):
        """Handle project browse button click."""
        initial_dir = self.project_path.get() if Path(self.project_path.get()).exists() else None
        folder = filedialog.askdirectory(title="Select Project Root", initialdir=initial_dir)
        if folder:
            self.project_path.set(folder)

    def _on_cancel(self):
        """Handle cancel button click."""
        self.result = False
        self.destroy()

    def _on_save(self):
        """Handle save button click."""
        project_path = self.project_path.get()
        if not project_path or not Path(project_path).is_dir():
            self.project_hint.configure(text=f"Directory does not exist: {project_path}", text_color="red")
            return

        save_config(
            project_root=project_path,
            json_indent=int(self.json_indent.get()),
            color_scheme=self.color_scheme.get(),
        )

        self.result = True
        self.destroy()


def show_config_dialog(parent: ctk.CTk) -> bool:
    """Show the configuration dialog and wait for it to close.

    Args:
        parent: The parent window.

    Returns:
        True if configuration was saved, False if cancelled.
    """
    dialog = ConfigDialog(parent)
    parent.wait_window(dialog)
    return dialog.result
