"""Package entry point for ``python -m md2html_converter``.

WHY: Users can run the converter as ``python -m md2html_converter file.md``
without the console script being on PATH.

HOW: Delegates to the CLI's main() function.
"""

from md2html_converter.cli import main

if __name__ == "__main__":
    main()
