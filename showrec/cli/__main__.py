"""Allow ``python -m showrec.cli`` execution."""

from showrec.cli.recommend import main

main()
