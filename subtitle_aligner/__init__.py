"""Subtitle Aligner: sentence-level SubRip subtitles from timestamped speech.

WHY: Speech recognizers return utterances with per-word (sometimes
per-phrase) timestamps, but no sentence structure. Readable subtitles need
one caption per sentence, timed from the words that sentence contains. This
package reconciles a punctuated sentence segmentation with the flat word
timeline and writes the result as SubRip (.srt).

HOW: Three-stage pipeline. Normalize (speech events into a word timeline),
align (sentences onto the timeline, producing captions), serialize (SubRip
text). Network collaborators (punctuation service, translation bundles) are
async clients that callers pass in explicitly.

RULES:
- The core (core/, formatters/) is pure: no I/O, no shared state
- Errors are raised, never swallowed; the CLI decides how to report them
- Caption ids are 1-based output positions
"""

__version__ = "0.1.0"
