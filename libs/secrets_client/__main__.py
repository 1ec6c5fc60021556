import sys

from libs.secrets_client.cli import main

sys.exit(main())
