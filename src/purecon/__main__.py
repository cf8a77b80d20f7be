"""Allow ``python -m purecon`` to start the loader directly."""

from purecon.loader import main

if __name__ == "__main__":
    main()
