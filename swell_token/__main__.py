import sys

from swell_token.cli import main

sys.exit(main())
