import sys

from hots_replay_analyzer.main import main

sys.exit(main())
