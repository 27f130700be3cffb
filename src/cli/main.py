"""Command-line front end for the personal dictionary.

Usage examples:
    dictionary list --sort newest --search ma
    dictionary add --word mace --definition animal --illustration "Macja po fle."
    dictionary speak mace
    dictionary cloud set https://dictionary.example.com --passphrase secret
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# main.py is at <root>/src/cli/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from adapter.local.key_value_storage import FileKeyValueStorage
from adapter.local.local_store import LocalStore
from adapter.speech.edge_tts import EdgeTTSEngine
from cli.forms import validate_form
from cli.render import render_cloud_status, render_entry, render_index
from domain.model.cloud_config import CloudConfig
from domain.model.dictionary import ImportStrategy, OperationResult, SortOrder
from domain.model.entry import Entry, normalize_word
from domain.model.errors import ValidationError
from port.key_value_storage import KeyValueStorage
from services.entry_manager import EntryManager, select_entry_store
from services.import_export import read_import_file, write_export_file
from services.speech_service import SpeechAdapter
from utils.cloud_config import clear_cloud_config, load_cloud_config, save_cloud_config
from utils.config import data_dir
from utils.data_url import read_audio_file
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

# Commands that should not trigger the startup pull from the cloud
_NO_AUTO_SYNC = {'cloud', 'sync', 'export', 'voices'}


@dataclass
class AppContext:
    storage: KeyValueStorage
    manager: EntryManager
    speech: SpeechAdapter


def build_context(storage: KeyValueStorage, speech: SpeechAdapter | None = None) -> AppContext:
    """Wire the entry manager for the configured mode and load local entries."""
    manager = EntryManager(LocalStore(storage), select_entry_store(load_cloud_config(storage)))
    manager.load()
    return AppContext(storage=storage, manager=manager, speech=speech or SpeechAdapter(EdgeTTSEngine()))


def find_entry(manager: EntryManager, key: str) -> Entry | None:
    """Look an entry up by id, then by (case-insensitive) word."""
    return manager.get(key) or manager.normalized_map.get(normalize_word(key))


def _report(result: OperationResult, success_message: str) -> int:
    if result.success:
        print(success_message)
        return 0
    print(f"Error: {result.message}", file=sys.stderr)
    return 1


def _print_form_errors(errors: dict[str, str]) -> int:
    for message in errors.values():
        print(f"Error: {message}", file=sys.stderr)
    return 1


# ── commands ─────────────────────────────────────────────


async def cmd_list(ctx: AppContext, args) -> int:
    manager = ctx.manager
    manager.sort_order = SortOrder(args.sort)
    manager.search_query = args.search or ''
    print(render_index(manager.visible_entries, manager.selected_id))
    if manager.store.is_remote:
        print(render_cloud_status(manager.cloud_status, manager.cloud_error))
    return 0


async def cmd_show(ctx: AppContext, args) -> int:
    entry = find_entry(ctx.manager, args.entry)
    if entry is None:
        print(f"Error: no entry '{args.entry}'", file=sys.stderr)
        return 1
    ctx.manager.select(entry.id)
    print(render_entry(entry))
    return 0


async def cmd_add(ctx: AppContext, args) -> int:
    try:
        recording = read_audio_file(args.recording) if args.recording else None
    except OSError as e:
        print(f"Error: cannot read recording: {e}", file=sys.stderr)
        return 1
    form, errors = validate_form(
        word=args.word, definition=args.definition, illustration=args.illustration, recording=recording,
    )
    if form is None:
        return _print_form_errors(errors)
    result = await ctx.manager.add(form.word, form.definition, form.illustration, form.recording)
    return _report(result, f"Added '{form.word}'.")


async def cmd_edit(ctx: AppContext, args) -> int:
    entry = find_entry(ctx.manager, args.entry)
    if entry is None:
        print(f"Error: no entry '{args.entry}'", file=sys.stderr)
        return 1
    if args.clear_recording:
        recording = None
    elif args.recording:
        try:
            recording = read_audio_file(args.recording)
        except OSError as e:
            print(f"Error: cannot read recording: {e}", file=sys.stderr)
            return 1
    else:
        recording = entry.recording
    form, errors = validate_form(
        word=args.word if args.word is not None else entry.word,
        definition=args.definition if args.definition is not None else entry.definition,
        illustration=args.illustration if args.illustration is not None else entry.illustration,
        recording=recording,
    )
    if form is None:
        return _print_form_errors(errors)
    result = await ctx.manager.update(entry.id, form.word, form.definition, form.illustration, form.recording)
    return _report(result, f"Updated '{form.word}'.")


async def cmd_delete(ctx: AppContext, args) -> int:
    entry = find_entry(ctx.manager, args.entry)
    if entry is None:
        print(f"Error: no entry '{args.entry}'", file=sys.stderr)
        return 1
    result = await ctx.manager.remove(entry.id)
    return _report(result, f"Deleted '{entry.word}'.")


async def cmd_import(ctx: AppContext, args) -> int:
    try:
        items = read_import_file(args.file)
    except ValidationError as e:
        print(f"Failed to import: {e.message}", file=sys.stderr)
        return 1
    result = ctx.manager.import_batch(items, ImportStrategy(args.strategy))
    print(result.summary)
    return 0


async def cmd_export(ctx: AppContext, args) -> int:
    target = write_export_file(ctx.manager.export_json(), args.file)
    print(f"Exported {len(ctx.manager.entries)} entries to {target}.")
    return 0


async def cmd_sync(ctx: AppContext, args) -> int:
    result = await ctx.manager.sync_from_cloud()
    return _report(result, f"Synced {len(ctx.manager.entries)} entries from the cloud.")


async def cmd_speak(ctx: AppContext, args) -> int:
    speech = ctx.speech
    if not speech.supported:
        print("Error: speech is not supported on this system", file=sys.stderr)
        return 1
    entry = find_entry(ctx.manager, args.entry)
    if args.voice and not speech.select_voice(args.voice):
        print(f"Error: unknown voice '{args.voice}'", file=sys.stderr)
        return 1
    speech.rate = args.rate
    speech.pitch = args.pitch
    spoken = speech.play_entry(entry) if entry else speech.speak(args.entry)
    if not spoken:
        print("Error: could not play or speak the entry", file=sys.stderr)
        return 1
    speech.wait()
    return 0


async def cmd_voices(ctx: AppContext, args) -> int:
    for voice in ctx.speech.voices:
        marker = '*' if voice == ctx.speech.selected_voice else ' '
        print(f"{marker} {voice.name} ({voice.lang})")
    return 0


async def cmd_cloud(ctx: AppContext, args) -> int:
    if args.action == 'set':
        base = (args.url or '').strip()
        if not base:
            print("Error: API base URL is required", file=sys.stderr)
            return 1
        save_cloud_config(ctx.storage, CloudConfig(api_base_url=base, passphrase=args.passphrase or ''))
        ctx.manager.use_store(select_entry_store(load_cloud_config(ctx.storage)))
        print("Cloud settings saved.")
        return await cmd_sync(ctx, args)
    if args.action == 'clear':
        clear_cloud_config(ctx.storage)
        ctx.manager.use_store(select_entry_store(None))
        print("Cloud sync disabled on this device.")
        return 0
    config = load_cloud_config(ctx.storage)
    print(f"cloud: {config.base_url}" if config else "cloud: disabled (local only)")
    return 0


COMMANDS = {
    'list': cmd_list,
    'show': cmd_show,
    'add': cmd_add,
    'edit': cmd_edit,
    'delete': cmd_delete,
    'import': cmd_import,
    'export': cmd_export,
    'sync': cmd_sync,
    'speak': cmd_speak,
    'voices': cmd_voices,
    'cloud': cmd_cloud,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='dictionary', description="Personal dictionary")
    parser.add_argument('--data-dir', type=Path, default=None, help="Local storage directory")
    parser.add_argument('--offline', action='store_true', help="Skip the startup cloud sync")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log at INFO level")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('list', help="Show the dictionary index")
    p.add_argument('--sort', choices=[s.value for s in SortOrder], default=SortOrder.ALPHABETICAL.value)
    p.add_argument('--search', default='')

    p = sub.add_parser('show', help="Show one entry")
    p.add_argument('entry', help="Entry id or word")

    p = sub.add_parser('add', help="Add an entry")
    p.add_argument('--word', required=True)
    p.add_argument('--definition', required=True)
    p.add_argument('--illustration', required=True)
    p.add_argument('--recording', type=Path, help="Audio file to attach")

    p = sub.add_parser('edit', help="Edit an entry")
    p.add_argument('entry', help="Entry id or word")
    p.add_argument('--word')
    p.add_argument('--definition')
    p.add_argument('--illustration')
    group = p.add_mutually_exclusive_group()
    group.add_argument('--recording', type=Path, help="Audio file to attach")
    group.add_argument('--clear-recording', action='store_true')

    p = sub.add_parser('delete', help="Delete an entry")
    p.add_argument('entry', help="Entry id or word")

    p = sub.add_parser('import', help="Import entries from a JSON export")
    p.add_argument('file', type=Path)
    p.add_argument('--strategy', choices=[s.value for s in ImportStrategy], default=ImportStrategy.SKIP.value)

    p = sub.add_parser('export', help="Export entries to a JSON file")
    p.add_argument('file', type=Path, nargs='?')

    sub.add_parser('sync', help="Replace local entries with the cloud copy")

    p = sub.add_parser('speak', help="Play an entry's recording or speak a word")
    p.add_argument('entry', help="Entry id, word, or any text")
    p.add_argument('--voice')
    p.add_argument('--rate', type=float, default=1.0)
    p.add_argument('--pitch', type=float, default=1.0)

    sub.add_parser('voices', help="List speech voices")

    p = sub.add_parser('cloud', help="Configure cloud sync")
    p.add_argument('action', choices=['show', 'set', 'clear'])
    p.add_argument('url', nargs='?')
    p.add_argument('--passphrase')

    return parser


async def run(args: argparse.Namespace, ctx: AppContext) -> int:
    logger.info("Running command", extra={"command": args.command, "remote": ctx.manager.store.is_remote})
    if args.command not in _NO_AUTO_SYNC and not args.offline and ctx.manager.store.is_remote:
        result = await ctx.manager.sync_from_cloud()
        if not result.success:
            print(f"Warning: cloud sync failed ({result.message}); using local entries.", file=sys.stderr)
    return await COMMANDS[args.command](ctx, args)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_structured_logging(logging.INFO if args.verbose else logging.WARNING)
    storage = FileKeyValueStorage(args.data_dir or data_dir())
    ctx = build_context(storage)
    try:
        return asyncio.run(run(args, ctx))
    except KeyboardInterrupt:
        ctx.speech.stop()
        return 130


if __name__ == "__main__":
    sys.exit(main())
