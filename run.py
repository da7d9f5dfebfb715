#!/usr/bin/env python3
"""
Script di avvio rapido per il risolutore di indirizzi.

Uso:
    python run.py validate --country Georgia --city Tbilisi --street "Rustaveli Ave" --number 12
    python run.py reverse 41.6938 44.8015      # Indirizzo da coordinate
    python run.py file indirizzi.xlsx          # Valida un file Excel
    python run.py serve                        # Avvia l'API HTTP
    python run.py --help                       # Mostra aiuto
"""

from address_resolver.main import main

if __name__ == "__main__":
    main()
