"""Allow ``python -m moviehub.cli``."""

from .main import main

main()
