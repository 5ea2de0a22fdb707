"""Command-line interface for the Subtitle Aligner.

WHY: Users need a simple way to turn recognizer output into subtitle files
and to send subtitles through translation. The CLI wires together file
reading, the pipeline stages, the service clients, and file saving.

HOW: argparse with three subcommands:
  captions   recognition results JSON → one caption per utterance (.srt)
             plus the persisted speech events ({stem}-events.json)
  segment    speech events JSON → sentence-segmented subtitles (.srt)
  translate  .srt → upload strings to a translation bundle, or download
             a translation into {stem}_{target}.srt
Async work runs via asyncio.run(). Status messages go to stderr; library
logging is configured by --verbose.

RULES:
- All file I/O happens here, never in the core
- Output files are saved next to the input (or in --output-dir)
- Existing files are never overwritten: a numeric suffix is added
- Errors print "Error: ..." to stderr and exit with status 1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from subtitle_aligner.api.segmentation import SegmentationClient, SegmentationServiceError
from subtitle_aligner.api.translation import TranslationClient, TranslationServiceError
from subtitle_aligner.config import (
    DEFAULT_CASING,
    DEFAULT_SEGMENTATION_SERVICE,
    DEFAULT_SOURCE_LANGUAGE,
    SEGMENTATION_SERVICES,
    load_translation_credentials,
)
from subtitle_aligner.core.errors import FormatError, SubtitleError
from subtitle_aligner.core.ir import CasingMode
from subtitle_aligner.core.sentences import split_sentences
from subtitle_aligner.core.timeline import (
    dump_speech_events,
    filter_confident,
    load_speech_events,
    speech_events_from_results,
)
from subtitle_aligner.formatters import srt
from subtitle_aligner.formatters.captions import captions_from_speech_events
from subtitle_aligner.pipeline import (
    align_speech_events,
    download_translation,
    segment_speech_events,
    upload_for_translation,
)


def _status(msg: str) -> None:
    """Print a status message to stderr, so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users re-run segmentation with different settings. Overwriting the
    previous .srt would lose work.

    HOW: Try {stem}{suffix}; on conflict insert -2, -3, ... before the
    extension (e.g. talk-2.srt).
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_text(content: str, stem: str, suffix: str, output_dir: Path) -> Path:
    """Write UTF-8 text to a conflict-free path and return the path."""
    path = _resolve_output_path(stem, suffix, output_dir)
    path.write_text(content, encoding="utf-8")
    _status("  Saved: {}".format(path.name))
    return path


def _input_path(raw: str) -> Path:
    path = Path(raw).resolve()
    if not path.is_file():
        raise FileNotFoundError("File not found: {}".format(path))
    return path


def _output_dir(args: argparse.Namespace, input_path: Path) -> Path:
    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise FileNotFoundError("Output directory does not exist: {}".format(output_dir))
    return output_dir


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _run_captions(args: argparse.Namespace) -> None:
    """Recognition results → per-utterance .srt and persisted speech events."""
    input_path = _input_path(args.input_file)
    output_dir = _output_dir(args, input_path)

    _status("Reading recognition results...")
    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise FormatError("Recognition results are not valid JSON: {}".format(e)) from e
    if isinstance(data, dict):
        data = [data]

    events = speech_events_from_results(data)
    kept = filter_confident(events)
    _status("  {} utterances ({} kept)".format(len(events), len(kept)))

    document = captions_from_speech_events(kept, CasingMode(args.casing))
    content = srt.serialize(document)

    stem = input_path.stem
    _save_text(dump_speech_events(events), stem, "-events.json", output_dir)
    _save_text(content, stem, ".srt", output_dir)
    _status("Done! {} captions".format(len(document)))


async def _run_segment(args: argparse.Namespace) -> None:
    """Speech events → sentence-segmented .srt."""
    input_path = _input_path(args.input_file)
    output_dir = _output_dir(args, input_path)
    casing = CasingMode(args.casing)

    _status("Reading speech events...")
    events = load_speech_events(input_path.read_text(encoding="utf-8"))
    _status("  {} utterances".format(len(events)))

    if args.sentences:
        _status("Reading sentences from {}...".format(args.sentences))
        text = _input_path(args.sentences).read_text(encoding="utf-8")
        document = align_speech_events(events, split_sentences(text), casing)
    else:
        client = SegmentationClient(language=args.language, service=args.service)
        _status("Segmenting with {}...".format(client.url))
        async with client:
            document = await segment_speech_events(events, client, casing)

    stem = input_path.stem
    if stem.endswith("-events"):
        stem = stem[: -len("-events")]
    _save_text(srt.serialize(document), stem, ".srt", output_dir)
    _status("Done! {} captions".format(len(document)))


async def _run_translate(args: argparse.Namespace) -> None:
    """Upload captions for translation, or download a translated .srt."""
    input_path = _input_path(args.input_file)
    output_dir = _output_dir(args, input_path)

    document = srt.parse(input_path.read_text(encoding="utf-8"))
    bundle_id = args.bundle or input_path.name
    credentials = load_translation_credentials(args.credentials)

    async with TranslationClient(credentials) as client:
        if args.direction == "upload":
            _status("Uploading {} captions to bundle {}...".format(len(document), bundle_id))
            count = await upload_for_translation(
                document, client, bundle_id, args.source, args.target
            )
            _status("Done! {} subtitles uploaded for translation".format(count))
        else:
            _status("Downloading {} translation of bundle {}...".format(args.target, bundle_id))
            translated = await download_translation(document, client, bundle_id, args.target)
            _save_text(
                srt.serialize(translated),
                input_path.stem,
                "_{}{}".format(args.target, input_path.suffix or ".srt"),
                output_dir,
            )
            _status("Done! Translated subtitles file created")


_COMMANDS = {
    "captions": _run_captions,
    "segment": _run_segment,
    "translate": _run_translate,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separated from main() so tests can inspect the parser without running
    a command.
    """
    parser = argparse.ArgumentParser(
        prog="subtitle_aligner",
        description="Build sentence-level SubRip subtitles from timestamped "
                    "speech recognition output.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show library log messages.",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    casing = argparse.ArgumentParser(add_help=False)
    casing.add_argument(
        "--casing",
        choices=[mode.value for mode in CasingMode],
        default=DEFAULT_CASING,
        help="Caption text casing (default: %(default)s).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    captions = subparsers.add_parser(
        "captions",
        parents=[common, casing],
        help="One caption per recognized utterance; also saves the speech events.",
    )
    captions.add_argument("input_file", help="Recognition results JSON file.")

    segment = subparsers.add_parser(
        "segment",
        parents=[common, casing],
        help="Sentence-segmented captions from a speech events file.",
    )
    segment.add_argument("input_file", help="Speech events JSON file.")
    segment.add_argument(
        "--language",
        default=DEFAULT_SOURCE_LANGUAGE,
        help="Source language ISO 639-1 code (default: %(default)s).",
    )
    segment.add_argument(
        "--service",
        default=DEFAULT_SEGMENTATION_SERVICE,
        help="Segmentation service: {} or a URL (default: %(default)s).".format(
            ", ".join(sorted(SEGMENTATION_SERVICES))
        ),
    )
    segment.add_argument(
        "--sentences",
        default=None,
        help="Punctuated transcript file to use instead of calling the service.",
    )

    translate = subparsers.add_parser(
        "translate",
        parents=[common],
        help="Upload subtitles for translation or download a translation.",
    )
    translate.add_argument("input_file", help="SubRip (.srt) file.")
    translate.add_argument(
        "--source",
        default=DEFAULT_SOURCE_LANGUAGE,
        help="Source language code (default: %(default)s).",
    )
    translate.add_argument("--target", required=True, help="Target language code.")
    translate.add_argument(
        "--direction",
        choices=["upload", "download"],
        default="upload",
        help="upload source strings or download a translation (default: %(default)s).",
    )
    translate.add_argument(
        "--bundle",
        default=None,
        help="Bundle id (default: the subtitle file name).",
    )
    translate.add_argument(
        "--credentials",
        default=None,
        help="Translation service credentials JSON file.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        asyncio.run(_COMMANDS[args.command](args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (
        SubtitleError,
        SegmentationServiceError,
        TranslationServiceError,
        httpx.HTTPError,
        FileNotFoundError,
        ValueError,
    ) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
