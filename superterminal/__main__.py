"""
This allows the CLI to be run as a module with `python -m superterminal`.
"""
from .main import main

if __name__ == "__main__":
    main()
