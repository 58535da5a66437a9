import sys

from zkapp_cli.cli.main import main

sys.exit(main())
