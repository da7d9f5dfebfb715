"""
Rilevamento colonne indirizzo nei file Excel.
"""

import pandas as pd

from .config import ADDRESS_FIELDS

# Intestazioni riconosciute per ogni campo logico (confronto case insensitive)
COLUMN_ALIASES = {
    "country": ["country", "paese", "nazione", "stato", "ქვეყანა"],
    "city": ["city", "città", "citta", "comune", "località", "ქალაქი"],
    "street": ["street", "via", "indirizzo", "address", "ქუჩა"],
    "number": ["number", "civico", "n. civico", "house number", "ნომერი"],
}

# Righe di intestazione provate, in ordine
HEADER_ROWS = (0, 1)


def detect_header(file_path: str) -> tuple[int, dict]:
    """
    Rileva la riga di intestazione e il mapping colonne.

    Args:
        file_path: Percorso del file Excel

    Returns:
        Tupla con (header_row, mapping_colonne); mapping vuoto se non riconosciuto
    """
    for header_row in HEADER_ROWS:
        df = pd.read_excel(file_path, header=header_row, nrows=5)
        mapping = find_column_mapping(df.columns.tolist())
        if mapping:
            return header_row, mapping
    return 0, {}


def find_column_mapping(columns: list) -> dict:
    """
    Trova il mapping tra campi logici e colonne reali.

    Args:
        columns: Lista colonne del DataFrame

    Returns:
        Dizionario {campo_logico: colonna_reale}, vuoto se manca un campo
    """
    columns_lower = {str(c).strip().lower(): c for c in columns}
    mapping = {}

    for logical_name in ADDRESS_FIELDS:
        # Prima corrispondenza esatta, poi parziale
        for alias in COLUMN_ALIASES[logical_name]:
            if alias in columns_lower:
                mapping[logical_name] = columns_lower[alias]
                break
        else:
            for col_lower, col_real in columns_lower.items():
                if col_real in mapping.values():
                    continue
                if any(alias in col_lower for alias in COLUMN_ALIASES[logical_name]):
                    mapping[logical_name] = col_real
                    break

    if set(mapping.keys()) == set(ADDRESS_FIELDS):
        return mapping

    return {}


def get_column_mapping(df: pd.DataFrame) -> dict:
    """Ottiene il mapping colonne per un DataFrame già caricato."""
    return find_column_mapping(df.columns.tolist())
