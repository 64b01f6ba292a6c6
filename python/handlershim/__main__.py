import sys

from handlershim.cli.__main__ import main

sys.exit(main())
