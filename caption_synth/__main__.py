"""Package entry point for ``python -m caption_synth``.

Delegates straight to the CLI's main().
"""

from caption_synth.cli import main

if __name__ == "__main__":
    main()
