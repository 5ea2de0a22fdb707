"""Package entry point for ``python -m subtitle_aligner``.

WHY: Users run the tool as ``python -m subtitle_aligner segment events.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from subtitle_aligner.cli import main

if __name__ == "__main__":
    main()
