import sys

from multirun.main import main

sys.exit(main())
