"""Allow ``python -m anigiffy``."""

from .cli import main

if __name__ == "__main__":
    main()
