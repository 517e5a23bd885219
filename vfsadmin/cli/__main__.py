"""Allow ``python -m vfsadmin.cli``."""

from vfsadmin.cli.main import main

if __name__ == "__main__":
    main()
