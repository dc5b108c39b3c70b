#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Document Formatter CLI - Format a text or Markdown file

Usage:
    python format_document.py notes.txt
    python format_document.py notes.txt -o notes.md --preset minimal
    python format_document.py book.txt --chunk-size 5000 --paragraph-chunks
    python format_document.py report.md --stats
    python format_document.py charter.md --merge plan.md risks.md --merge-strategy dedupe
"""

import sys
import argparse
import dataclasses
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv

from config.settings import settings
from core.errors import FormatterError, FormattingCancelledError
from core.formatting.document_stats import analyze_text_stats, get_recommendations
from core.formatting.merger import DocumentMerger, SourceDocument
from core.formatting.rules import FormattingRuleSet
from core.pipeline import ChunkedPipeline, FormatOptions, create_logging_callback

# Load environment variables
load_dotenv()


def print_stats(text: str, result, threshold: int):
    """Print input statistics and result metadata"""
    stats = analyze_text_stats(text, large_threshold=threshold)

    print("\n" + "=" * 60)
    print("📊 DOCUMENT STATISTICS")
    print("=" * 60)
    print(f"   Characters:   {stats.characters:,}")
    print(f"   Words:        {stats.words:,}")
    print(f"   Paragraphs:   {stats.paragraphs:,}")
    print(f"   Lines:        {stats.lines:,}")
    print(f"   Mode:         {'chunked' if result.chunked else 'single pass'} "
          f"({result.chunk_count} chunk(s))")

    meta = result.metadata
    print("\n📄 Result")
    print(f"   Headers:      {meta.header_count}")
    print(f"   Code blocks:  {meta.code_block_count}")
    print(f"   Tables:       {meta.table_count}")
    print(f"   Reading time: ~{meta.estimated_reading_minutes} min")
    if result.fallback_chunks:
        print(f"   ⚠️  Fallback chunks: {result.fallback_chunks}")

    if result.timings:
        print("\n⏱️  Timings")
        for stage, seconds in result.timings.items():
            print(f"   {stage:<12} {seconds:.3f}s")

    recommendations = get_recommendations(stats)
    if recommendations:
        print("\n💡 Recommendations")
        for item in recommendations:
            print(f"   - {item}")
    print("=" * 60)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Structure-aware document formatter",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', help='Input file path')
    parser.add_argument('--output', '-o', help='Output file path (default: stdout)')
    parser.add_argument('--preset', default=settings.rule_preset,
                        choices=['default', 'minimal', 'academic'], help='Rule preset')
    parser.add_argument('--chunk-size', type=int, default=settings.chunk_size,
                        help=f'Characters per chunk (default: {settings.chunk_size:,})')
    parser.add_argument('--threshold', type=int, default=settings.large_document_threshold,
                        help='Chunk documents longer than this many characters')
    parser.add_argument('--paragraph-chunks', action='store_true',
                        help='Cut chunks at paragraph breaks instead of fixed offsets')
    parser.add_argument('--stats', action='store_true', help='Print statistics after formatting')
    parser.add_argument('--merge', nargs='+', metavar='FILE',
                        help='Merge these documents with the input by section type before formatting')
    parser.add_argument('--merge-strategy', default=settings.merge_strategy,
                        choices=['combine', 'separate', 'priority', 'dedupe'], help='Merge strategy')

    args = parser.parse_args(argv)

    input_file = Path(args.input)
    if not input_file.exists():
        print(f"❌ Input file not found: {input_file}", file=sys.stderr)
        return 1

    text = input_file.read_text(encoding="utf-8")
    if args.merge:
        sources = [input_file] + [Path(p) for p in args.merge]
        missing = [p for p in sources if not p.exists()]
        if missing:
            print(f"❌ Input file not found: {missing[0]}", file=sys.stderr)
            return 1
        try:
            merged = DocumentMerger.from_settings(settings).merge(
                [SourceDocument(p.name, p.read_text(encoding="utf-8")) for p in sources],
                strategy=args.merge_strategy,
            )
        except FormatterError as e:
            print(f"❌ Merge failed: {e}", file=sys.stderr)
            return 1
        print(f"🔗 Merged {merged.document_count} document(s) into {len(merged.sections)} section(s)",
              file=sys.stderr)
        # The pipeline adds its own table of contents
        text = merged.to_markdown(toc=False)

    options = dataclasses.replace(
        FormatOptions.from_settings(settings),
        chunk_size=args.chunk_size,
        large_document_threshold=args.threshold,
        chunking_strategy="paragraph" if args.paragraph_chunks else settings.chunking_strategy,
    )

    pipeline = ChunkedPipeline.from_settings(settings)
    try:
        result = pipeline.format_sync(
            text,
            rules=FormattingRuleSet.preset(args.preset),
            options=options,
            on_progress=create_logging_callback(log_interval=5),
        )
    except FormattingCancelledError as e:
        print(f"⚠️  {e}", file=sys.stderr)
        return 130
    except (FormatterError, ValueError) as e:
        print(f"❌ Formatting failed: {e}", file=sys.stderr)
        return 1

    if args.output:
        output_file = Path(args.output)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(result.formatted_text + "\n", encoding="utf-8")
        print(f"✅ Formatted document written to {output_file}")
    else:
        print(result.formatted_text)

    if args.stats:
        print_stats(text, result, args.threshold)

    return 0


if __name__ == "__main__":
    sys.exit(main())
