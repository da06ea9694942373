#!/usr/bin/env python3
"""
Security Scanner GUI Entry Point
"""
import sys

from secscan.cli import cli

if __name__ == '__main__':
    if len(sys.argv) == 1:
        sys.argv.append('gui')
    cli()
