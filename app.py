#!/usr/bin/env python3
from servemap.cli import main

if __name__ == "__main__":
    main()
