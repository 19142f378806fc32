"""Allow ``python -m mdb_data_api``."""

from .cli.main import main

if __name__ == "__main__":
    main()
