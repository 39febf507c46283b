"""Allow ``python -m helpdoc``."""

from helpdoc.cli import main

if __name__ == "__main__":
    main()
