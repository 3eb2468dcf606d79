import argparse
import logging
import sys
import textwrap
from functools import wraps

from .database import DatabaseStore, DatabaseNotFound, DatabaseError, QueryError
from .database.values import describe_value
from .metadata import build_metadata_list, MetadataList
from .scan import ScanHandle, ScanMode, AdvanceResult, identify, write_playlist
from .scan.playlist import playlist_path_of
from .settings import (
    Settings,
    SETTING_SCAN_EXTENSIONS, SETTING_SCAN_RECURSIVE, SETTING_SCAN_SKIP_UNREADABLE, SETTING_SCAN_RETRIES,
    SETTING_SCAN_EXCLUDED, SETTING_DATABASE_PATH, SETTING_LOGGING_PATH, SETTING_LOGGING_LEVEL,
    SETTING_MESSAGES_DURATION
)
from .utils.messages import DEFAULT_DURATION, MessageQueue

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_RETRIES = 3


def reports_database_errors(func):
    """Decorator turning setup failures into a message on stderr and exit status 1."""
    @wraps(func)
    def wrapper(settings, args):
        try:
            return func(settings, args)
        except (DatabaseNotFound, DatabaseError, QueryError, FileNotFoundError, NotADirectoryError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    return wrapper


def romdex_main():
    parser = argparse.ArgumentParser(
        prog='romdex',
        description='Identify game content files by checksum and look them up in a metadata database.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              romdex scan ~/roms/snes --database ~/db/snes --playlist snes.lpl
              romdex query ~/db/snes "{'releaseyear': between(1990, 1995)}"
            ''').strip()
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to the settings file. If not provided, uses ROMDEX_CONFIG environment variable or romdex.toml in '
             'the current directory.')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print progress notifications while scanning')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file. If not provided, uses logging.path from settings or no logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO.')
    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        title='Commands',
        help='Use "romdex COMMAND --help" for command-specific help'
    )

    parser_scan = subparsers.add_parser(
        'scan',
        help='Compute checksums for the files of a directory',
        description='Steps through the files of a directory one at a time, computing a CRC32 for every file and '
                    'every member of zip archives. Optionally matches them against a database and writes a '
                    'playlist.')
    parser_scan.add_argument('directory', metavar='DIRECTORY', help='Directory to scan')
    parser_scan.add_argument(
        '--database',
        metavar='PATH',
        help='Metadata database used to label matches (default: database.path from settings)')
    parser_scan.add_argument('--playlist', metavar='PATH', help='Write scan results to this playlist file')
    parser_scan.add_argument(
        '--mode',
        choices=[m.value for m in ScanMode],
        default=ScanMode.WRITE_PLAYLIST.value,
        help='Per-file action (default: write-playlist)')
    parser_scan.add_argument(
        '--extensions',
        metavar='EXTS',
        help='Pipe-separated extensions to scan, e.g. "sfc|smc" (default: scan.extensions from settings, or all)')
    parser_scan.add_argument('--recursive', action='store_true', default=None, help='Descend into subdirectories')
    parser_scan.add_argument(
        '--skip-unreadable',
        action='store_true',
        default=None,
        help='Move past files that cannot be read instead of retrying them')
    parser_scan.add_argument(
        '--retries',
        metavar='N',
        type=int,
        help='Attempts at an unreadable or empty file before it is skipped '
             f'(default: scan.retries from settings, or {DEFAULT_RETRIES})')
    parser_scan.add_argument(
        '--exclude',
        metavar='NAME',
        action='append',
        help='File or directory name to leave out, e.g. "media"; may be repeated (default: scan.excluded from '
             'settings)')
    parser_scan.set_defaults(method=_scan)

    parser_identify = subparsers.add_parser(
        'identify',
        help='Match files against a database by CRC32, SHA-1 and MD5',
        description='Computes every digest the database stores for each file and prints the matching title.')
    parser_identify.add_argument('database', metavar='DATABASE', help='Path to the database directory')
    parser_identify.add_argument('files', metavar='FILE', nargs='+', help='Files to identify')
    parser_identify.set_defaults(method=_identify)

    parser_query = subparsers.add_parser(
        'query',
        help='List database records matching a query',
        description='Decodes every record of the database matching the query and prints its attributes.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              romdex query ~/db/snes
              romdex query ~/db/snes "{'name': glob('*Mario*')}"
              romdex query ~/db/snes "{'crc': b'B19ED489'}"
            ''').strip())
    parser_query.add_argument('database', metavar='DATABASE', help='Path to the database directory')
    parser_query.add_argument('query', metavar='QUERY', nargs='?', default=None, help='Filter expression')
    parser_query.set_defaults(method=_query)

    parser_lookup = subparsers.add_parser(
        'lookup',
        help='Find one record through a database index',
        description='Looks up a record by an indexed field such as crc or name.')
    parser_lookup.add_argument('database', metavar='DATABASE', help='Path to the database directory')
    parser_lookup.add_argument('index', metavar='INDEX', help='Indexed field name, e.g. crc')
    parser_lookup.add_argument('key', metavar='KEY', help='Key to look up')
    parser_lookup.add_argument('--hex', action='store_true', help='KEY is hexadecimal binary (e.g. a checksum)')
    parser_lookup.set_defaults(method=_lookup)

    parser_inspect = subparsers.add_parser(
        'inspect',
        help='Dump every entry of a database',
        description='Displays manifest properties, records and index entries in a human-readable form.')
    parser_inspect.add_argument('database', metavar='DATABASE', help='Path to the database directory')
    parser_inspect.set_defaults(method=_inspect)

    args = parser.parse_args()

    try:
        settings = Settings.load(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings, args.log_file, args.log_level)

    args.method(settings, args)


def configure_logging(settings: Settings, log_file: str | None, log_level: str | None) -> bool:
    """Configure logging from CLI arguments, falling back to settings.

    Args:
        settings: Source of logging.path and logging.level
        log_file: --log-file value, or None
        log_level: --log-level value, or None

    Returns:
        True if logging was configured, False otherwise
    """
    if log_file is None:
        log_file = settings.get(SETTING_LOGGING_PATH)
    if log_file is None:
        return False

    if log_level is None:
        log_level = str(settings.get(SETTING_LOGGING_LEVEL, 'INFO')).upper()

    logging.basicConfig(
        filename=str(log_file),
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT
    )
    return True


def _print_record(record):
    for attribute, value in record.to_dict().items():
        if value is not None:
            print(f'{attribute}: {value}')


@reports_database_errors
def _scan(settings: Settings, args):
    extensions = args.extensions if args.extensions is not None else settings.get(SETTING_SCAN_EXTENSIONS)
    recursive = args.recursive if args.recursive is not None else bool(settings.get(SETTING_SCAN_RECURSIVE, False))
    skip_unreadable = args.skip_unreadable if args.skip_unreadable is not None \
        else bool(settings.get(SETTING_SCAN_SKIP_UNREADABLE, False))
    database_path = args.database if args.database is not None else settings.get(SETTING_DATABASE_PATH)
    retries = args.retries if args.retries is not None else int(settings.get(SETTING_SCAN_RETRIES, DEFAULT_RETRIES))
    retries = max(1, retries)
    excluded = args.exclude if args.exclude is not None else settings.get(SETTING_SCAN_EXCLUDED, [])

    messages = MessageQueue()
    duration = int(settings.get(SETTING_MESSAGES_DURATION, DEFAULT_DURATION))
    handle = ScanHandle.create(
        args.directory, ScanMode(args.mode), extensions, recursive, excluded,
        messages=messages, skip_unreadable=skip_unreadable, message_duration=duration)

    metadata: MetadataList | None = None
    database_name = ''
    try:
        if database_path is not None:
            with DatabaseStore(database_path) as database:
                database_name = database.name
            metadata = build_metadata_list(database_path)

        attempts = 0
        while True:
            position = handle.cursor_index
            if handle.advance() is not AdvanceResult.CONTINUE:
                break

            text = messages.pull()
            if args.verbose and text is not None:
                print(text)

            if handle.cursor_index != position:
                attempts = 0
                continue

            # advance() retries an unreadable file forever; bound it here
            attempts += 1
            if attempts >= retries:
                print(f"Warning: skipping unreadable file {handle.skip()}", file=sys.stderr)
                attempts = 0

        if args.verbose:
            print(messages.pull())

        for entry in handle.entries:
            label = ''
            if metadata is not None:
                record = metadata.find_by_crc32(entry.crc32)
                label = record.name if record is not None and record.name else ''
            print(f'{entry.crc32_hex} {playlist_path_of(entry)} {label}'.rstrip())

        if args.playlist is not None:
            write_playlist(handle.entries, args.playlist, metadata, database_name)
    finally:
        handle.release()
        if metadata is not None:
            metadata.release()


@reports_database_errors
def _identify(settings: Settings, args):
    unreadable = False
    with build_metadata_list(args.database) as metadata:
        for file in args.files:
            try:
                with open(file, 'rb') as f:
                    fingerprint = identify(f.read())
            except OSError as e:
                print(f"Error: cannot read {file}: {e}", file=sys.stderr)
                unreadable = True
                continue

            record = metadata.find_by_fingerprint(fingerprint)
            name = record.name if record is not None and record.name else ''
            print(f'{fingerprint.crc32_hex} {fingerprint.sha1} {fingerprint.md5} {file} {name}'.rstrip())

    if unreadable:
        sys.exit(1)


@reports_database_errors
def _query(settings: Settings, args):
    with build_metadata_list(args.database, args.query) as metadata:
        for index, record in enumerate(metadata):
            if index:
                print()
            _print_record(record)


@reports_database_errors
def _lookup(settings: Settings, args):
    key = args.key
    if args.hex:
        try:
            key = bytes.fromhex(key)
        except ValueError:
            print(f"Error: {args.key} is not hexadecimal", file=sys.stderr)
            sys.exit(1)

    with DatabaseStore(args.database) as database:
        record = database.find_entry(args.index, key)

    if record is None:
        print(f"No record with {args.index} = {args.key}", file=sys.stderr)
        sys.exit(1)

    print(describe_value(record))


@reports_database_errors
def _inspect(settings: Settings, args):
    with DatabaseStore(args.database) as database:
        for line in database.inspect():
            print(line)


if __name__ == '__main__':
    romdex_main()
