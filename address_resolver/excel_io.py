"""
Lettura e scrittura file Excel.
"""

from pathlib import Path

import pandas as pd

from .formats import detect_header, get_column_mapping
from .models import ValidationVerdict

VALIDATED_SUFFIX = "_VALIDATO"
ERRORS_SUFFIX = "_NON_VALIDATI"


def read_excel(file_path: str) -> tuple[pd.DataFrame, int, dict]:
    """
    Legge un file Excel con rilevamento automatico delle colonne.

    Args:
        file_path: Percorso del file Excel

    Returns:
        Tupla con (DataFrame, riga_intestazione, mapping_colonne)
    """
    header_row, column_mapping = detect_header(file_path)

    df = pd.read_excel(file_path, header=header_row, dtype=str)

    # Se mapping non trovato durante detect, prova di nuovo
    if not column_mapping:
        column_mapping = get_column_mapping(df)

    return df, header_row, column_mapping


def write_validated(df: pd.DataFrame, verdicts: dict[int, ValidationVerdict], output_path: str):
    """
    Scrive il file validato.

    Le colonne originali restano invariate; vengono aggiunte le colonne
    con esito, indirizzo formattato ed errori.

    Args:
        df: DataFrame originale
        verdicts: Verdetti per indice riga del DataFrame
        output_path: Percorso file output
    """
    df_output = df.copy()
    df_output["Valido"] = ""
    df_output["Indirizzo formattato"] = ""
    df_output["Errori"] = ""

    for idx, verdict in verdicts.items():
        df_output.at[idx, "Valido"] = "SI" if verdict.valid else "NO"
        df_output.at[idx, "Indirizzo formattato"] = verdict.formatted_address or ""
        df_output.at[idx, "Errori"] = _describe(verdict)

    df_output.to_excel(output_path, index=False)


def write_errors(rows: list[tuple[int, dict, ValidationVerdict]], output_path: str):
    """
    Scrive il file degli errori.

    Colonne:
    - Riga: numero riga nel file originale
    - Paese, Città, Via, Civico: valori inseriti
    - Esito: tipo di errore
    - Dettaglio: errori per campo o messaggio
    - Indirizzo Google: indirizzo formattato trovato

    Args:
        rows: Tuple (numero riga, valori inseriti, verdetto) dei soli errori
        output_path: Percorso file output
    """
    error_data = []

    for row_number, values, verdict in rows:
        error_data.append(
            {
                "Riga": row_number,
                "Paese": values.get("country", ""),
                "Città": values.get("city", ""),
                "Via": values.get("street", ""),
                "Civico": values.get("number", ""),
                "Esito": verdict.outcome.name,
                "Dettaglio": _describe(verdict),
                "Indirizzo Google": verdict.formatted_address or "",
            }
        )

    df_errors = pd.DataFrame(error_data)

    if not df_errors.empty:
        df_errors = df_errors.sort_values("Riga")

    # Scrivi con formattazione
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df_errors.to_excel(writer, index=False, sheet_name="Errori")

        # Adatta larghezza colonne
        worksheet = writer.sheets["Errori"]
        for column in worksheet.columns:
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)


def find_excel_files(directory: str, exclude_processed: bool = True) -> list[Path]:
    """
    Trova tutti i file Excel in una directory.

    Args:
        directory: Directory da cercare
        exclude_processed: Se True, esclude file già elaborati

    Returns:
        Lista di percorsi file
    """
    files = list(Path(directory).glob("*.xlsx"))

    if exclude_processed:
        files = [
            f
            for f in files
            if not f.stem.endswith(VALIDATED_SUFFIX) and not f.stem.endswith(ERRORS_SUFFIX)
        ]

    return sorted(files)


def _describe(verdict: ValidationVerdict) -> str:
    """Testo leggibile per errori e messaggi del verdetto."""
    parts = [f"{name}: {text}" for name, text in verdict.field_errors.items()]
    if verdict.message:
        parts.append(verdict.message)
    return "; ".join(parts)
