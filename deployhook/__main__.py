"""Allow running the service with ``python -m deployhook``."""

from deployhook.main import main

if __name__ == "__main__":
    main()
