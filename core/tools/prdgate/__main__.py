"""Allow `python -m prdgate`."""

from .cli import main

if __name__ == "__main__":
    main()
