"""Allow running as: python -m ir_engine"""

from .cli import main

main()
