"""Allow ``python -m furniture_ar``."""

from .cli import main

main()
