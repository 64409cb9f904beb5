import sys

from monkey.repl import main

sys.exit(main())
