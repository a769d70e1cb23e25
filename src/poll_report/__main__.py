"""Allow running with: python -m poll_report"""

from .cli import main

main()
