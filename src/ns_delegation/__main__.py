import sys

from ns_delegation.cli import main

sys.exit(main())
