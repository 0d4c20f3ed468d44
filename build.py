#!/usr/bin/env python3
from pagegen.cli import main

if __name__ == "__main__":
    main()
