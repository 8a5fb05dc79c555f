#!/usr/bin/env python3
"""
SKYFLAP Launcher
=================
Run this script to start the game.
"""

from skyflap.main import main

if __name__ == "__main__":
    main()
