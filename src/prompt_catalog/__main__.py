import sys

from prompt_catalog.cli import main

sys.exit(main())
