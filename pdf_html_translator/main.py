"""
CLI entry point for PDF → HTML translation.

Usage:
    # Translate with the stored configuration (vision provider by default)
    pdf-html-translator document.pdf

    # Pick an OpenAI-compatible endpoint and model
    pdf-html-translator document.pdf --base-url https://api.example.com --model gpt-4o

    # Use a local DeepLX server (text only, no layout)
    pdf-html-translator document.pdf --provider text-endpoint

    # Remember the settings for next time
    pdf-html-translator document.pdf --api-key sk-... --save-config
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from pdf_html_translator import __version__
from pdf_html_translator.config import ConfigStore, ProviderType
from pdf_html_translator.endpoints import resolve_endpoint
from pdf_html_translator.errors import ConfigurationError, DocumentLoadError
from pdf_html_translator.export import save_html
from pdf_html_translator.pipeline import PagePipeline
from pdf_html_translator.session import AppState, DocumentSession, PageStatus
from pdf_html_translator.utils import DEFAULT_MAX_ATTEMPTS, setup_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pdf-html-translator",
        description=(
            "Translate a PDF page by page into layout-preserving HTML using a "
            "vision chat-completions API or a DeepLX text endpoint."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s document.pdf
  %(prog)s document.pdf -o translated.html --include-originals
  %(prog)s document.pdf --provider text-endpoint --base-url http://localhost:1188/translate
  %(prog)s document.pdf --target-lang EN --model gpt-4o-mini

Environment variables for API keys:
  PDF_TRANSLATOR_API_KEY  - API key for the configured provider
  OPENAI_API_KEY          - fallback key for the vision provider
        """,
    )

    parser.add_argument("pdf_path", type=str, help="Path to the PDF document")
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output HTML file. Default: <pdf name>.translated.html",
    )
    parser.add_argument(
        "--include-originals",
        action="store_true",
        help="Show the original page image next to each translation",
    )

    # Provider options; unset values come from the config file
    parser.add_argument(
        "--provider",
        type=str,
        choices=[p.value for p in ProviderType],
        default=None,
        help="Translation provider (default: vision)",
    )
    parser.add_argument("--base-url", type=str, help="API base URL or full endpoint")
    parser.add_argument("--api-key", type=str, help="API key")
    parser.add_argument("--model", type=str, help="Vision model name (e.g. gpt-4o)")
    parser.add_argument(
        "--target-lang",
        type=str,
        help="Target language code (default: ZH, Simplified Chinese)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Attempts per page before giving up (default: {DEFAULT_MAX_ATTEMPTS})",
    )

    # Config persistence
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config file (default: ~/.config/pdf-html-translator/config.json)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the effective provider settings to the config file",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def _print_progress(session: DocumentSession) -> None:
    for page in session.pages:
        if page.status is PageStatus.TRANSLATING:
            print(f"  Translating page {page.page_number} of {session.total_pages}...")
            return


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    store = ConfigStore(args.config)
    try:
        config = store.load()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    overrides = {
        "provider": ProviderType.parse(args.provider) if args.provider else None,
        "base_url": args.base_url,
        "api_key": args.api_key,
        "model": args.model,
        "target_lang": args.target_lang,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    if args.save_config:
        store.save(config)
        print(f"Configuration saved to: {store.path}")

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"Error: PDF file not found: {pdf_path}", file=sys.stderr)
        return 1

    if not pdf_path.suffix.lower() == ".pdf":
        print(f"Warning: File does not have .pdf extension: {pdf_path}", file=sys.stderr)

    output_path = args.output or str(pdf_path.with_suffix(".translated.html"))

    print(f"PDF HTML Translator v{__version__}")
    print(f"PDF: {pdf_path}")
    print(f"Provider: {config.provider.value} @ {resolve_endpoint(config)}")
    if config.provider is ProviderType.VISION:
        print(f"Model: {config.model}")
    print(f"Target language: {config.target_language_name}")
    print()

    pipeline = PagePipeline(
        config,
        max_attempts=args.max_attempts,
        on_update=_print_progress,
    )
    try:
        session = pipeline.process_document(pdf_path)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except DocumentLoadError as e:
        print(
            f"Error: {e}\nSomething went wrong. Please check the file and try again.",
            file=sys.stderr,
        )
        return 1
    finally:
        pipeline.translator.close()

    if pipeline.state is not AppState.COMPLETED:
        return 1

    saved = save_html(
        session,
        output_path,
        title=f"{pdf_path.stem} (translated)",
        include_originals=args.include_originals,
    )

    print()
    print("=" * 70)
    print("PROCESSING SUMMARY")
    print("=" * 70)
    print(f"  Pages:            {session.total_pages}")
    print(f"  Completed:        {len(session.completed_pages)}")
    print(f"  Failed:           {len(session.failed_pages)}")
    print(f"  Total time:       {session.total_time_seconds:.1f}s")
    print(f"  Output:           {saved}")

    for page in session.failed_pages:
        print(f"\n  Page {page.page_number} failed: {page.error}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
