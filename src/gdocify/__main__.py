import sys

from gdocify.cli import main

sys.exit(main())
