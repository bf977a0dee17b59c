import sys

from drawledger.cli import main

sys.exit(main())
