"""Core alignment modules and intermediate representation.

WHY: The core package is the stable heart of the aligner: the value
records, the word timeline normalizer, the sentence aligner, and the
timestamp codec. Formatters, clients, and the CLI all build on it.

HOW: ir.py defines the records, errors.py the error kinds, timeline.py
builds word timelines from speech events, aligner.py maps sentences onto
them, timecode.py renders SubRip timestamps, sentences.py splits punctuated
text, bundle.py maps captions to translation strings.

RULES:
- Everything here is a pure function of its inputs
- No network or file access in this package
"""
