#!/usr/bin/env python3
from zdemangle.main import main

if __name__ == "__main__":
    main()
