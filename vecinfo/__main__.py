import sys

from vecinfo.cli import main

sys.exit(main())
