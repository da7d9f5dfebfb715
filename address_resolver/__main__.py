"""
Consente l'esecuzione con: python -m address_resolver
"""

from .main import main

if __name__ == "__main__":
    main()
