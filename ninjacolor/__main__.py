"""``python -m ninjacolor``."""

from ninjacolor.cli.app import main

main()
