"""Entry point for ``python -m face_frame``."""

from .cli import main

if __name__ == "__main__":
    main()
