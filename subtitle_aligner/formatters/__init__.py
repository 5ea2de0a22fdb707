"""Caption formatting and SubRip output.

WHY: The aligner produces time ranges; users need finished caption text
and .srt files. This package holds both steps so the CLI and the
translation workflow share one implementation.

HOW: captions.py turns aligned sentences (or raw utterances) into Caption
records; srt.py renders and parses SubRip text.

RULES:
- Every function here is pure: records in, records or text out
- srt.serialize / srt.parse are the only SubRip reader and writer
"""
