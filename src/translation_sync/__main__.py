import sys

from translation_sync.main import main

sys.exit(main())
