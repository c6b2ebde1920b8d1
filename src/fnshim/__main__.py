"""Run the bundled ``hello`` function under the configured host: ``python -m fnshim``."""

from fnshim.functions.hello import main

if __name__ == "__main__":
    main()
