import sys

from .tern import main

sys.exit(main())
