import sys

from locapp.cli import main


sys.exit(main())
