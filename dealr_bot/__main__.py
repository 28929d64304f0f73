import sys

from dealr_bot.main import main

sys.exit(main())
