import sys

from ibiblio.cli._dispatcher import main

sys.exit(main())
