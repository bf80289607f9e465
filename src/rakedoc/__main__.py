"""Allow ``python -m rakedoc``."""

from rakedoc.cli import main

if __name__ == "__main__":
    main()
