"""
Orchestratore validazione file Excel.
"""

from pathlib import Path
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .config import ADDRESS_FIELDS, DEFAULT_LANGUAGE
from .excel_io import ERRORS_SUFFIX, VALIDATED_SUFFIX, find_excel_files, read_excel, write_errors, write_validated
from .geocoding import GeocodingService
from .models import AddressInput, ValidationVerdict
from .validator import AddressValidator


class AddressProcessor:
    """Processore per la validazione di indirizzi da file Excel."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        language: str = DEFAULT_LANGUAGE,
        verbose: bool = False,
        validator: Optional[AddressValidator] = None,
    ):
        """
        Inizializza il processore.

        Args:
            api_key: API key Google Maps (opzionale, usa env var se non fornita)
            language: Lingua di messaggi e risultati
            verbose: Se True, stampa informazioni dettagliate
            validator: Validatore già configurato (opzionale)
        """
        self._api_key = api_key
        self._validator = validator
        self.language = language
        self.verbose = verbose

    @property
    def validator(self) -> AddressValidator:
        """Lazy initialization del validatore."""
        if self._validator is None:
            self._validator = AddressValidator(GeocodingService(self._api_key))
        return self._validator

    def process_file(
        self, file_path: str, output_dir: Optional[str] = None, dry_run: bool = False
    ) -> dict:
        """
        Elabora un file Excel completo.

        Args:
            file_path: Percorso del file da elaborare
            output_dir: Directory per i file di output (default: stessa del file)
            dry_run: Se True, non chiama Google e non scrive file

        Returns:
            Dizionario con statistiche elaborazione
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File non trovato: {file_path}")

        output_dir = Path(output_dir) if output_dir else file_path.parent

        print(f"\n{'='*60}")
        print(f"Elaborazione: {file_path.name}")
        print(f"{'='*60}")

        df, header_row, column_mapping = read_excel(str(file_path))

        if not column_mapping:
            raise ValueError(f"Colonne indirizzo non riconosciute: {file_path.name}")

        print(f"Righe da elaborare: {len(df)}")
        print(f"Mapping colonne: {column_mapping}")

        rows = extract_rows(df, column_mapping, header_row)
        print(f"Indirizzi estratti: {len(rows)}")

        if dry_run:
            print("\n[DRY RUN] Nessun file scritto")
            return {
                "file": str(file_path),
                "total_rows": len(df),
                "addresses_extracted": len(rows),
                "dry_run": True,
            }

        verdicts = self._validate_rows(rows)

        stats = compute_stats(list(verdicts.values()))
        stats["file"] = str(file_path)
        self._print_stats(stats)

        validated_path = output_dir / f"{file_path.stem}{VALIDATED_SUFFIX}.xlsx"
        errors_path = output_dir / f"{file_path.stem}{ERRORS_SUFFIX}.xlsx"

        write_validated(df, verdicts, str(validated_path))
        print(f"\nFile validato: {validated_path.name}")

        error_rows = [
            (row_number, values, verdicts[idx])
            for idx, row_number, values in rows
            if not verdicts[idx].valid
        ]
        if error_rows:
            write_errors(error_rows, str(errors_path))
            print(f"File errori: {errors_path.name}")

        stats["output_validated"] = str(validated_path)
        stats["output_errors"] = str(errors_path) if error_rows else None

        return stats

    def _validate_rows(self, rows: list[tuple[int, int, dict]]) -> dict[int, ValidationVerdict]:
        """Valida tutte le righe con progress bar."""
        verdicts = {}

        with tqdm(total=len(rows), desc="Validazione", unit="ind") as pbar:
            for idx, row_number, values in rows:
                verdict = self.validator.validate(AddressInput(**values), self.language)
                verdicts[idx] = verdict
                pbar.update(1)

                if self.verbose:
                    status_icon = "✓" if verdict.valid else "✗"
                    tqdm.write(f"  {status_icon} Riga {row_number}: {verdict.outcome.name}")

        return verdicts

    def _print_stats(self, stats: dict):
        """Stampa statistiche a console."""
        print(f"\n{'─'*40}")
        print("RIEPILOGO")
        print(f"{'─'*40}")
        print(f"Totale indirizzi:  {stats['total']}")
        print(f"Validati:          {stats['valid']} ({stats['valid_percent']:.1f}%)")
        print(f"Non validati:      {stats['invalid']}")

        if stats["errors_by_outcome"]:
            print("\nErrori per tipo:")
            for outcome, count in sorted(stats["errors_by_outcome"].items(), key=lambda x: -x[1]):
                print(f"  {outcome}: {count}")


def extract_rows(df: pd.DataFrame, column_mapping: dict, header_row: int = 0) -> list[tuple[int, int, dict]]:
    """
    Estrae i valori indirizzo dal DataFrame.

    Returns:
        Lista di tuple (indice DataFrame, numero riga nel file, valori campi).
        Le righe completamente vuote vengono saltate.
    """
    rows = []

    for idx, row in df.iterrows():
        values = {}
        for name in ADDRESS_FIELDS:
            raw = row.get(column_mapping[name])
            values[name] = "" if pd.isna(raw) else str(raw).strip()

        if not any(values.values()):
            continue

        # Numero civico letto come float ("12.0")
        if values["number"].endswith(".0") and values["number"][:-2].isdigit():
            values["number"] = values["number"][:-2]

        # Numero riga 1-based nel foglio, intestazione inclusa
        rows.append((idx, idx + header_row + 2, values))

    return rows


def compute_stats(verdicts: list[ValidationVerdict]) -> dict:
    """Calcola statistiche elaborazione."""
    total = len(verdicts)
    valid = sum(1 for v in verdicts if v.valid)

    errors_by_outcome = {}
    for v in verdicts:
        if not v.valid:
            name = v.outcome.name
            errors_by_outcome[name] = errors_by_outcome.get(name, 0) + 1

    return {
        "total": total,
        "valid": valid,
        "invalid": total - valid,
        "valid_percent": (valid / total * 100) if total > 0 else 0,
        "errors_by_outcome": errors_by_outcome,
    }


def process_directory(
    directory: str,
    output_dir: Optional[str] = None,
    api_key: Optional[str] = None,
    language: str = DEFAULT_LANGUAGE,
    verbose: bool = False,
    dry_run: bool = False,
) -> list[dict]:
    """
    Elabora tutti i file Excel in una directory.

    Returns:
        Lista di statistiche per ogni file elaborato
    """
    files = find_excel_files(directory)

    if not files:
        print(f"Nessun file Excel trovato in {directory}")
        return []

    print(f"Trovati {len(files)} file da elaborare")

    processor = AddressProcessor(api_key=api_key, language=language, verbose=verbose)
    all_stats = []

    for file_path in files:
        try:
            all_stats.append(processor.process_file(str(file_path), output_dir, dry_run=dry_run))
        except (OSError, ValueError) as e:
            print(f"\nERRORE elaborando {file_path.name}: {e}")
            all_stats.append({"file": str(file_path), "error": str(e)})

    return all_stats
