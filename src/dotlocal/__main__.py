"""Allow `python -m dotlocal`."""

from .cli import main

if __name__ == "__main__":
    main()
