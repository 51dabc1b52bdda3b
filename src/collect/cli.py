"""CLI for collecting a person's consumed content."""

import argparse
import sys
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from common.env import env
from common.logger import console, error, get_logger, setup_logging, success, warning

from .columns import COLUMN_SCHEMAS, metadata_summary, row_for
from .errors import CollectError
from .manual_search import ManualSearch, SearchHints
from .models import ContentType
from .parser import InputMode
from .prompts import structured_input_prompt
from .session import CollectSession

logger = get_logger(__name__)


def _items_table(session: CollectSession) -> Table:
    table = Table(title="Extracted items")
    for header in ("#", "Type", "Title", "Creator", "Rating", "Match"):
        table.add_column(header)

    state = session.state
    for index in session.display_order():
        item = state.items[index]
        processed = state.processed.get(index)
        match = processed.selected_match if processed else None
        if index in state.excluded:
            match_text = "[dim]excluded[/dim]"
        elif match is None:
            match_text = "[yellow]no match[/yellow]" if processed else "-"
        else:
            summary = metadata_summary(match, item.type)
            match_text = f"{escape(match.title)} ({processed.match_source.value})"
            if summary:
                match_text += f"\n[dim]{escape(summary)}[/dim]"

        table.add_row(
            str(index + 1),
            item.type.value,
            escape(item.display_title),
            escape(item.creator or "-"),
            "-" if item.rating is None else f"{item.rating:g}",
            match_text,
        )
    return table


def cmd_prompt(args):
    """Print the structured-input prompt."""
    console.print(structured_input_prompt(), markup=False, emoji=False, highlight=False)


def cmd_init_db(args):
    """Create the database tables."""
    from store.content_store import ContentStore

    store = ContentStore.from_env()
    store.init_schema()
    success(f"Database ready at {env.database_path()}")


def cmd_search(args):
    """Search providers by hand and show one page of results."""
    from search.service import ContentSearchService

    content_type = ContentType(args.type.upper())
    service = ContentSearchService.from_env()
    try:
        page = ManualSearch(service).ranked_page(
            content_type,
            args.query,
            args.page,
            SearchHints(prefer_provider=args.prefer, creator=args.creator),
        )
    finally:
        service.close()

    if not page.items:
        warning(f"No results for '{args.query}'")
        return

    schema = COLUMN_SCHEMAS[content_type]
    table = Table(title=f"{content_type.value} results for '{args.query}' (page {args.page})")
    for header in ("#", *schema.headers, "Id"):
        table.add_column(header)
    for position, candidate in enumerate(page.items, start=1):
        cells = [escape(value) for value in row_for(candidate, content_type)]
        table.add_row(str(position), *cells, candidate.external_id)

    console.print(table)
    more = ", more available" if page.has_more else ""
    logger.info(f"{len(page.items)} of {page.total} result(s){more}")


def _read_input(args) -> tuple[str, InputMode]:
    if args.json:
        return Path(args.json).read_text(encoding="utf-8"), InputMode.JSON
    if args.text:
        return Path(args.text).read_text(encoding="utf-8"), InputMode.TEXT
    return args.url, InputMode.URL


def cmd_run(args):
    """Load input, match it against providers and optionally commit."""
    from extraction.llm_extractor import OpenAIExtractionService
    from search.service import ContentSearchService
    from store.content_store import ContentStore

    raw, mode = _read_input(args)
    search = ContentSearchService.from_env()
    session = CollectSession(
        args.subject_id,
        subject_name=args.subject_name,
        extractor=OpenAIExtractionService.from_env() if mode != InputMode.JSON else None,
        search=search,
        store=ContentStore.from_env() if args.commit else None,
        prefer_provider=args.prefer,
        delay_seconds=env.search_delay_seconds(),
    )

    try:
        count = session.load(raw, mode)
        success(f"Loaded {count} item(s)")

        for position in args.exclude or []:
            session.toggle_exclude(position - 1)

        matched = session.run_matching()
        success(f"Matched {matched} item(s)")
    finally:
        search.close()

    console.print(_items_table(session))

    if args.commit:
        saved = session.commit()
        success(f"Saved {saved} item(s) for {args.subject_id}")
        if session.state.items:
            warning(f"{len(session.state.items)} item(s) were not saved")
    else:
        logger.info(f"{session.savable_count()} item(s) ready to save (use --commit)")


def main():
    """Main entry point for the collect CLI."""
    parser = argparse.ArgumentParser(
        description="Collect a person's consumed books, videos, games and music",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser(
        "prompt",
        help="Print the prompt for producing structured JSON input",
        description="Print instructions to paste into an assistant to get JSON input.",
    )

    subparsers.add_parser(
        "init-db",
        help="Create the database tables",
        description="Create the contents tables in DATABASE_PATH if they do not exist.",
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search content providers by hand",
        description=(
            "Search the providers for one content type.\n\n"
            "Examples:\n"
            "  collect search book 'Demian' --creator 'Hermann Hesse'\n"
            "  collect search book 'Demian' --prefer openlibrary\n"
            "  collect search video 'Parasite' --page 2\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    search_parser.add_argument(
        "type",
        choices=[t.value.lower() for t in ContentType],
        help="Content type to search",
    )
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--creator", default=None, help="Rank rows by this creator")
    search_parser.add_argument("--prefer", default=None, help="Provider to ask first")
    search_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")

    run_parser = subparsers.add_parser(
        "run",
        help="Extract, match and optionally save content for a person",
        description=(
            "Load items, match them against content providers and show the results.\n\n"
            "Examples:\n"
            "  # Structured JSON produced with `collect prompt`\n"
            "  collect run --json items.json --subject-id ada\n\n"
            "  # Free text through the extraction service, skip item 3, then save\n"
            "  collect run --text notes.txt --subject-id ada --exclude 3 --commit\n\n"
            "  # A web page\n"
            "  collect run --url https://example.com/reading-list --subject-id ada\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--json", metavar="FILE", help="Structured JSON input file")
    source.add_argument("--text", metavar="FILE", help="Free-text input file")
    source.add_argument("--url", help="Web page to extract from")
    run_parser.add_argument("--subject-id", required=True, help="Person the content belongs to")
    run_parser.add_argument("--subject-name", default=None, help="Person's name (extraction hint)")
    run_parser.add_argument(
        "--exclude",
        type=int,
        nargs="+",
        metavar="N",
        help="Item numbers (1-based) to leave out of matching",
    )
    run_parser.add_argument("--prefer", default=None, help="Book provider to ask first")
    run_parser.add_argument(
        "--commit",
        action="store_true",
        help="Save the selected, matched items after matching",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(log_file=args.log_file)

    commands = {
        "prompt": cmd_prompt,
        "init-db": cmd_init_db,
        "search": cmd_search,
        "run": cmd_run,
    }
    try:
        commands[args.command](args)
    except (CollectError, IndexError, OSError) as e:
        error(escape(str(e)))
        sys.exit(1)


if __name__ == "__main__":
    main()
