"""
Inspector window for Assembly Definition Editor.

Shows the combined view of the selected .asmdef files and forwards every
edit to an InspectorSession:
- Name, general flags and define constraints
- Assembly definition references and precompiled references
- Optional Unity references
- Platform include/exclude selection
- Version defines with their expression outcome
- Revert / Apply buttons and the unapplied-changes prompt on close

Mixed values are drawn as checked checkboxes in the mixed color, or with a
"(Multiple Values)" placeholder for text fields.
"""

import logging
from tkinter import messagebox

import customtkinter as ctk

from asmdef_editor.constants import (
    APP_NAME,
    COLOR_CHECKBOX_DEFAULT,
    COLOR_CHECKBOX_MIXED,
    COLOR_MISSING_TEXT,
    COLOR_SAVE_BUTTON,
    COLOR_SAVE_BUTTON_HOVER,
    COLOR_STATUS_TEXT,
    MISSING_REFERENCE_TEXT,
    MULTIPLE_VALUES_TEXT,
    SELECT_RESOURCE_TEXT,
)
from asmdef_editor.errors import LoadError
from asmdef_editor.inspector_session import InspectorSession
from asmdef_editor.mixed_bool import MixedBool, clicked_value

logger = logging.getLogger(__name__)

MISSING_REFERENCES_NOTICE = (
    "The grayed out assembly references are missing and will not be referenced during compilation."
)
MIXED_VALUES_NOTICE = (
    "The selected files have different values. Fields shown as mixed are left as they are on Apply."
)


class InspectorWindow(ctk.CTk):
    """Main window editing one InspectorSession."""

    def __init__(self, session: InspectorSession):
        super().__init__()

        self.session = session

        self.title(f"{APP_NAME} - {len(session.paths)} file(s)")
        self.geometry("640x820")
        self.minsize(520, 480)

        self.status_var = ctk.StringVar(value="")
        self._refreshing = False

        self._create_layout()

        if not self.session.is_loaded and self.session.load_error is None:
            self.session.load()
        self._refresh()

        # Handle window close button
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def _create_layout(self):
        """Create the scrolling content area, the button bar and the status bar."""
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self.content = ctk.CTkScrollableFrame(self)
        self.content.grid(row=0, column=0, sticky="nsew", padx=10, pady=(10, 5))
        self.content.grid_columnconfigure(0, weight=1)

        button_frame = ctk.CTkFrame(self, fg_color="transparent")
        button_frame.grid(row=1, column=0, sticky="ew", padx=10, pady=5)
        button_frame.grid_columnconfigure(0, weight=1)

        self.revert_btn = ctk.CTkButton(
            button_frame, text="Revert", width=100, command=self._on_revert
        )
        self.revert_btn.grid(row=0, column=1, padx=(0, 10))

        self.apply_btn = ctk.CTkButton(
            button_frame,
            text="Apply",
            width=100,
            fg_color=COLOR_SAVE_BUTTON,
            hover_color=COLOR_SAVE_BUTTON_HOVER,
            command=self._on_apply
        )
        self.apply_btn.grid(row=0, column=2)

        status_label = ctk.CTkLabel(
            self, textvariable=self.status_var, text_color=COLOR_STATUS_TEXT, anchor="w"
        )
        status_label.grid(row=2, column=0, sticky="ew", padx=15, pady=(0, 5))

    def _refresh(self):
        """Rebuild all widgets from the session state."""
        # Destroying a focused entry fires FocusOut; ignore edits until rebuilt.
        self._refreshing = True
        try:
            for child in self.content.winfo_children():
                child.destroy()
            self._build_sections()
        finally:
            self._refreshing = False

    def _build_sections(self):
        if not self.session.is_loaded:
            self._create_load_error_section()
            self._update_buttons()
            return

        combined = self.session.combined
        self._create_name_section()
        if self.session.has_mixed_values():
            self._info(self.content, MIXED_VALUES_NOTICE)
        self._create_general_section()
        self._create_define_constraints_section()
        self._create_references_section()
        if combined.override_references == MixedBool.TRUE:
            self._create_precompiled_section()
        self._create_optional_references_section()
        self._create_platforms_section()
        self._create_version_defines_section()
        self._update_buttons()

    def _update_buttons(self):
        state = "normal" if self.session.has_unsaved_changes else "disabled"
        self.revert_btn.configure(state=state)
        self.apply_btn.configure(state=state)

    def _header(self, text: str):
        label = ctk.CTkLabel(
            self.content, text=text, font=ctk.CTkFont(size=14, weight="bold"), anchor="w"
        )
        label.pack(fill="x", pady=(12, 4))

    def _box(self) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(self.content)
        frame.pack(fill="x", pady=(0, 4))
        return frame

    def _info(self, parent, text: str):
        label = ctk.CTkLabel(
            parent, text=text, font=ctk.CTkFont(size=11), text_color="gray",
            wraplength=540, justify="left", anchor="w"
        )
        label.pack(fill="x", padx=8, pady=(0, 4))

    def _mixed_checkbox(self, parent, text: str, value: MixedBool, command) -> ctk.CTkCheckBox:
        """Create a checkbox that shows Mixed as checked in the mixed color.

        Clicking a Mixed checkbox sets the value to True for every file.
        """
        checkbox = ctk.CTkCheckBox(
            parent, text=text,
            command=lambda: command(clicked_value(value, bool(checkbox.get())))
        )
        if value == MixedBool.MIXED:
            checkbox.select()
            checkbox.configure(fg_color=(COLOR_CHECKBOX_MIXED, COLOR_CHECKBOX_MIXED))
        else:
            if value == MixedBool.TRUE:
                checkbox.select()
            checkbox.configure(fg_color=(COLOR_CHECKBOX_DEFAULT, COLOR_CHECKBOX_DEFAULT))
        checkbox.pack(anchor="w", padx=8, pady=2)
        return checkbox

    def _text_entry(self, parent, value: str | None, mixed: bool) -> ctk.CTkEntry:
        """Create an entry showing value, or an empty "(Multiple Values)" placeholder."""
        # The placeholder is only drawn for entries without a textvariable.
        entry = ctk.CTkEntry(parent, placeholder_text=MULTIPLE_VALUES_TEXT if mixed else None)
        if not mixed and value:
            entry.insert(0, value)
        return entry

    @staticmethod
    def _entry_value(entry: ctk.CTkEntry, mixed: bool) -> str | None:
        """Text of an entry; None when a Mixed entry was left empty."""
        text = entry.get()
        if mixed and not text:
            return None
        return text

    def _row_buttons(self, row_frame, list_name: str, index: int):
        remove_btn = ctk.CTkButton(
            row_frame, text="-", width=28,
            command=lambda: self._run(self.session.remove_row, list_name, index)
        )
        remove_btn.pack(side="right", padx=(4, 0))

        if not self.session.can_reorder:
            return
        row_count = len(self.session.combined.rows(list_name))
        down_btn = ctk.CTkButton(
            row_frame, text="v", width=28,
            state="normal" if index < row_count - 1 else "disabled",
            command=lambda: self._run(self.session.move_row, list_name, index, index + 1)
        )
        down_btn.pack(side="right", padx=(4, 0))
        up_btn = ctk.CTkButton(
            row_frame, text="^", width=28,
            state="normal" if index > 0 else "disabled",
            command=lambda: self._run(self.session.move_row, list_name, index, index - 1)
        )
        up_btn.pack(side="right", padx=(4, 0))

    def _add_button(self, parent, list_name: str):
        add_btn = ctk.CTkButton(
            parent, text="+", width=28,
            command=lambda: self._run(self.session.add_row, list_name)
        )
        add_btn.pack(anchor="e", padx=8, pady=4)

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def _create_load_error_section(self):
        self._header("Load error")
        label = ctk.CTkLabel(
            self.content, text=self.session.load_error or "", text_color="red",
            wraplength=560, justify="left", anchor="w"
        )
        label.pack(fill="x", pady=4)

    def _create_name_section(self):
        frame = ctk.CTkFrame(self.content, fg_color="transparent")
        frame.pack(fill="x", pady=(0, 4))

        label = ctk.CTkLabel(frame, text="Name", font=ctk.CTkFont(size=13))
        label.pack(side="left", padx=(0, 10))

        name_var = ctk.StringVar(value=self.session.display_name())
        entry = ctk.CTkEntry(frame, textvariable=name_var)
        entry.pack(side="left", fill="x", expand=True)

        if self.session.can_edit_name:
            entry.bind("<FocusOut>", lambda _e: self._run(self.session.set_name, name_var.get()))
            entry.bind("<Return>", lambda _e: self._run(self.session.set_name, name_var.get()))
        else:
            entry.configure(state="disabled")

    def _create_general_section(self):
        combined = self.session.combined
        self._header("General")
        box = self._box()
        for field_name, text in (
            ('allow_unsafe_code', "Allow 'unsafe' Code"),
            ('auto_referenced', "Auto Referenced"),
            ('override_references', "Override References"),
        ):
            self._mixed_checkbox(
                box, text, getattr(combined, field_name),
                lambda value, f=field_name: self._run(self.session.set_flag, f, value)
            )

    def _create_define_constraints_section(self):
        combined = self.session.combined
        self._header("Define Constraints")
        box = self._box()

        for index, constraint in enumerate(combined.define_constraints):
            row_frame = ctk.CTkFrame(box, fg_color="transparent")
            row_frame.pack(fill="x", padx=8, pady=2)

            mixed = constraint.display_value == MixedBool.MIXED
            entry = self._text_entry(row_frame, constraint.name, mixed)
            entry.pack(side="left", fill="x", expand=True)
            entry.bind("<Return>", lambda _e, i=index, w=entry: self._run(
                self.session.set_define_constraint, i, w.get()))
            entry.bind("<FocusOut>", lambda _e, i=index, w=entry: self._run(
                self.session.set_define_constraint, i, w.get()))

            self._row_buttons(row_frame, 'define_constraints', index)

        self._add_button(box, 'define_constraints')

    def _create_references_section(self):
        combined = self.session.combined
        self._header("Assembly Definition References")
        box = self._box()

        self._mixed_checkbox(
            box, "Use GUIDs", combined.use_guids,
            lambda value: self._run(self.session.set_flag, 'use_guids', value)
        )

        if self.session.has_missing_references():
            self._info(box, MISSING_REFERENCES_NOTICE)

        assembly_names = self.session.available_assembly_names()
        for index, reference in enumerate(combined.references):
            row_frame = ctk.CTkFrame(box, fg_color="transparent")
            row_frame.pack(fill="x", padx=8, pady=2)

            if reference.display_value == MixedBool.MIXED:
                text = MULTIPLE_VALUES_TEXT
            else:
                text = reference.name if reference.name is not None else MISSING_REFERENCE_TEXT
            label = ctk.CTkLabel(
                row_frame, text=text, anchor="w", width=200,
                text_color=COLOR_MISSING_TEXT if reference.is_missing else None
            )
            label.pack(side="left")

            # Editable so a .asmdef path or GUID: reference can be typed too.
            combo = ctk.CTkComboBox(
                row_frame, values=assembly_names,
                command=lambda choice, i=index: self._run(self.session.set_reference, i, choice)
            )
            combo.set("")
            combo.pack(side="left", fill="x", expand=True, padx=(4, 0))
            combo.bind("<Return>", lambda _e, i=index, w=combo: self._run(
                self.session.set_reference, i, w.get()))

            self._row_buttons(row_frame, 'references', index)

        self._add_button(box, 'references')

    def _create_precompiled_section(self):
        combined = self.session.combined
        self._header("Assembly References")
        box = self._box()

        if self.session.has_missing_precompiled_references():
            self._info(box, MISSING_REFERENCES_NOTICE)

        available = self.session.available_precompiled_names()
        for index, reference in enumerate(combined.precompiled_references):
            row_frame = ctk.CTkFrame(box, fg_color="transparent")
            row_frame.pack(fill="x", padx=8, pady=2)

            if reference.display_value == MixedBool.MIXED:
                current = MULTIPLE_VALUES_TEXT
            elif reference.precompiled is not None:
                current = reference.file_name
            elif reference.name:
                current = reference.name
            elif available:
                current = "None"
            else:
                current = "No possible references"

            combo = ctk.CTkComboBox(
                row_frame, values=[current] + available, state="readonly",
                command=lambda choice, i=index, c=current: self._on_precompiled_selected(i, choice, c)
            )
            combo.set(current)
            if reference.is_missing:
                combo.configure(state="disabled")
            combo.pack(side="left", fill="x", expand=True)

            self._row_buttons(row_frame, 'precompiled_references', index)

        self._add_button(box, 'precompiled_references')

    def _create_optional_references_section(self):
        combined = self.session.combined
        self._header("Unity References")
        box = self._box()

        modules = self.session.optional_modules.list_optional_modules()
        for index, module in enumerate(modules):
            value = combined.optional_unity_references[index]
            self._mixed_checkbox(
                box, module.display_name, value,
                lambda checked, i=index: self._run(self.session.set_optional_reference, i, checked)
            )
            if value == MixedBool.TRUE:
                self._info(box, module.tooltip_when_enabled)

    def _create_platforms_section(self):
        combined = self.session.combined
        self._header("Platforms")
        box = self._box()

        self._mixed_checkbox(
            box, "Any Platform", combined.compatible_with_any_platform,
            lambda value: self._run(self.session.toggle_any_platform, value)
        )

        if combined.compatible_with_any_platform == MixedBool.MIXED:
            return

        if combined.compatible_with_any_platform == MixedBool.TRUE:
            title = "Exclude Platforms"
        else:
            title = "Include Platforms"
        label = ctk.CTkLabel(box, text=title, font=ctk.CTkFont(size=13, weight="bold"), anchor="w")
        label.pack(fill="x", padx=8, pady=(6, 2))

        for index, platform in enumerate(self.session.platforms.list_platforms()):
            self._mixed_checkbox(
                box, platform.display_name, combined.platform_compatibility[index],
                lambda checked, i=index: self._run(self.session.set_platform, i, checked)
            )

        select_frame = ctk.CTkFrame(box, fg_color="transparent")
        select_frame.pack(fill="x", padx=8, pady=6)
        ctk.CTkButton(
            select_frame, text="Select all", width=100,
            command=lambda: self._run(self.session.select_all_platforms)
        ).pack(side="left", padx=(0, 6))
        ctk.CTkButton(
            select_frame, text="Deselect all", width=100,
            command=lambda: self._run(self.session.deselect_all_platforms)
        ).pack(side="left")

    def _create_version_defines_section(self):
        combined = self.session.combined
        self._header("Version Defines")
        box = self._box()

        for index, version_define in enumerate(combined.version_defines):
            row_frame = ctk.CTkFrame(box)
            row_frame.pack(fill="x", padx=8, pady=4)
            row_frame.grid_columnconfigure(1, weight=1)

            mixed = version_define.display_value == MixedBool.MIXED
            resources = [SELECT_RESOURCE_TEXT] + self.session.available_version_resources(index)

            ctk.CTkLabel(row_frame, text="Resource").grid(row=0, column=0, sticky="w", padx=6)
            resource_combo = ctk.CTkComboBox(
                row_frame, values=resources, state="readonly",
                command=lambda choice, i=index: self._on_resource_selected(i, choice)
            )
            resource_combo.set(MULTIPLE_VALUES_TEXT if mixed else (version_define.name or SELECT_RESOURCE_TEXT))
            resource_combo.grid(row=0, column=1, sticky="ew", pady=2)

            ctk.CTkLabel(row_frame, text="Define").grid(row=1, column=0, sticky="w", padx=6)
            define_entry = self._text_entry(row_frame, version_define.define, mixed)
            define_entry.grid(row=1, column=1, sticky="ew", pady=2)
            define_entry.bind("<FocusOut>", lambda _e, i=index, w=define_entry, m=mixed: self._run(
                self.session.set_version_define, i, None, self._entry_value(w, m), None))

            ctk.CTkLabel(row_frame, text="Expression").grid(row=2, column=0, sticky="w", padx=6)
            expression_entry = self._text_entry(row_frame, version_define.expression, mixed)
            expression_entry.grid(row=2, column=1, sticky="ew", pady=2)
            expression_entry.bind("<FocusOut>", lambda _e, i=index, w=expression_entry, m=mixed: self._run(
                self.session.set_version_define, i, None, None, self._entry_value(w, m)))

            outcome = self.session.expression_outcome(index) or ""
            ctk.CTkLabel(row_frame, text="Expression outcome").grid(row=3, column=0, sticky="w", padx=6)
            ctk.CTkLabel(row_frame, text=outcome, anchor="w").grid(row=3, column=1, sticky="ew")

            remove_btn = ctk.CTkButton(
                row_frame, text="-", width=28,
                command=lambda i=index: self._run(self.session.remove_row, 'version_defines', i)
            )
            remove_btn.grid(row=0, column=2, padx=6)

        self._add_button(box, 'version_defines')

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    def _run(self, action, *args):
        """Run a session command, report errors in the status bar and redraw."""
        if self._refreshing:
            return
        try:
            action(*args)
        except (LoadError, ValueError, IndexError) as e:
            logger.error("Edit failed: %s", e)
            self.status_var.set(str(e))
        else:
            self.status_var.set("")
        self._refresh()

    def _on_precompiled_selected(self, index: int, choice: str, current: str):
        if choice == current:
            return
        self._run(self.session.set_precompiled_reference, index, choice)

    def _on_resource_selected(self, index: int, choice: str):
        if choice == SELECT_RESOURCE_TEXT:
            return
        self._run(self.session.set_version_define, index, choice, None, None)

    def _on_revert(self):
        self.session.revert()
        self.status_var.set("Reverted")
        self._refresh()

    def _on_apply(self):
        results = self.session.apply()
        failures = [f"{path}: {error}" for path, error in results if error]
        if failures:
            messagebox.showwarning("Apply Completed with Errors", "\n".join(failures))
            self.status_var.set(f"{len(results) - len(failures)} saved, {len(failures)} failed")
        else:
            self.status_var.set(f"Saved {len(results)} file(s)")
        self._refresh()

    def _on_close(self):
        if self.session.has_unsaved_changes:
            apply_changes = messagebox.askyesno(
                "Unapplied import settings",
                f"{self.session.unsaved_changes_message()}\n\nApply changes? (No reverts them)"
            )
            self.session.close(apply_changes)
        self.destroy()
