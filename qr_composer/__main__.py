import sys

from qr_composer.cli import main

sys.exit(main())
