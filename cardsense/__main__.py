import sys

from cardsense.main import main

sys.exit(main())
