"""Apply flag edits to many assembly definition files at once.

This helper runs the same combined-edit engine as the inspector window
without a UI: the selected files are loaded and combined, the requested
fields are set on the combined view, and only those fields are written
back to each file. Every other field keeps its per-file value.

Usage:
    python asmdef_batch_edit.py <file.asmdef> [<file.asmdef> ...] [options]

Example:
    python asmdef_batch_edit.py A.asmdef B.asmdef --allow-unsafe true --platform Editor=true
"""

import argparse
import json
import logging
from pathlib import Path

from asmdef_editor.asset_database import AssetDatabase
from asmdef_editor.config import get_json_indent, get_project_root
from asmdef_editor.edit_committer import apply_combined_state
from asmdef_editor.inspector_session import InspectorSession
from asmdef_editor.errors import UnknownPlatformError

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

FLAG_OPTIONS = {
    'allow_unsafe': 'allow_unsafe_code',
    'auto_referenced': 'auto_referenced',
    'override_references': 'override_references',
    'use_guids': 'use_guids',
}


def parse_bool(value: str) -> bool:
    """Parse a true/false command line value."""
    lowered = value.lower()
    if lowered in ('true', 'yes', '1', 'on'):
        return True
    if lowered in ('false', 'no', '0', 'off'):
        return False
    raise argparse.ArgumentTypeError(f"Expected true or false, got '{value}'")


def parse_platform(value: str) -> tuple[str, bool]:
    """Parse a NAME=true|false platform setting."""
    name, sep, flag = value.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=true|false, got '{value}'")
    return name, parse_bool(flag)


def apply_edits(session: InspectorSession, args: argparse.Namespace) -> bool:
    """Apply the requested edits to the combined view of a loaded session."""
    for option, field_name in FLAG_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            session.set_flag(field_name, value)
            logger.info("Set %s = %s", field_name, value)

    if args.any_platform is not None:
        session.toggle_any_platform(args.any_platform)
        logger.info("Set Any Platform = %s", args.any_platform)

    for name, value in args.platform or []:
        try:
            index = session.platforms.get_index(name)
        except UnknownPlatformError as e:
            logger.error("%s", e)
            return False
        session.set_platform(index, value)
        logger.info("Set platform %s = %s", name, value)

    for constraint in args.add_define_constraint or []:
        index = session.add_row('define_constraints')
        session.set_define_constraint(index, constraint)
        logger.info("Added define constraint %s", constraint)

    return True


def main():
    parser = argparse.ArgumentParser(
        description='Apply flag edits to several assembly definition files.'
    )
    parser.add_argument('files', type=Path, nargs='+', help='Assembly definition files to edit')
    parser.add_argument('--project-root', type=Path, help='Project root (defaults to configured root)')
    parser.add_argument('--allow-unsafe', type=parse_bool, help="Set Allow 'unsafe' Code")
    parser.add_argument('--auto-referenced', type=parse_bool, help='Set Auto Referenced')
    parser.add_argument('--override-references', type=parse_bool, help='Set Override References')
    parser.add_argument('--use-guids', type=parse_bool, help='Write references as GUIDs')
    parser.add_argument('--any-platform', type=parse_bool, help='Set Any Platform')
    parser.add_argument('--platform', type=parse_platform, action='append',
                        help='Set a platform flag, e.g. Editor=true (repeatable)')
    parser.add_argument('--add-define-constraint', action='append',
                        help='Append a define constraint (repeatable)')
    parser.add_argument('--dry-run', action='store_true', help='Print the result instead of saving')

    args = parser.parse_args()

    for path in args.files:
        if not path.exists():
            logger.error("Assembly definition not found: %s", path)
            return 1

    project_root = args.project_root or get_project_root()
    session = InspectorSession(args.files, AssetDatabase(project_root), json_indent=get_json_indent())

    if not session.load():
        logger.error("Could not load assembly definitions: %s", session.load_error)
        return 1

    if not apply_edits(session, args):
        return 1

    if args.dry_run:
        apply_combined_state(session.combined, session.states)
        for state in session.states:
            print(f"--- {state.path}")
            print(json.dumps(session.committer.serialize(state), indent=get_json_indent()))
        return 0

    results = session.apply()
    failures = [(path, error) for path, error in results if error]
    for path, error in failures:
        logger.error("Failed to save %s: %s", path, error)
    logger.info("%d saved, %d failed", len(results) - len(failures), len(failures))
    return 1 if failures else 0


if __name__ == '__main__':
    exit(main())
