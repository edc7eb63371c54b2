import sys

from .table_formatter import main

sys.exit(main())
