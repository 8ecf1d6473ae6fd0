import sys

from moddetective.cli import main

sys.exit(main())
