import sys

from qf_round.cli import main

sys.exit(main())
