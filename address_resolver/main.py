"""
Entry point CLI per il risolutore di indirizzi.
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .cache import MemoryCache
from .config import API_HOST, API_KEY, API_PORT, DEFAULT_LANGUAGE
from .geocoding import GeocodingService
from .models import AddressInput
from .processor import AddressProcessor, process_directory
from .resolver import ReverseResolver
from .validator import AddressValidator


def build_parser() -> argparse.ArgumentParser:
    """Costruisce il parser degli argomenti."""
    parser = argparse.ArgumentParser(
        description="Validazione indirizzi e geocodifica inversa con Google Maps API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Esempi:
  %(prog)s validate --country Georgia --city Tbilisi --street "Rustaveli Ave" --number 12
  %(prog)s reverse 41.6938 44.8015 --lang en
  %(prog)s file indirizzi.xlsx          Valida un file Excel
  %(prog)s file .                       Valida tutti i .xlsx nella directory
  %(prog)s serve --port 4000            Avvia l'API HTTP

Output (file):
  - {nome}_VALIDATO.xlsx      File originale con colonne esito
  - {nome}_NON_VALIDATI.xlsx  Dettaglio errori
        """,
    )

    parser.add_argument(
        "--api-key",
        help="API key Google Maps (default: variabile GOOGLE_MAPS_API_KEY)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Mostra informazioni dettagliate durante l'elaborazione",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Valida un singolo indirizzo")
    p_validate.add_argument("--country", default="")
    p_validate.add_argument("--city", default="")
    p_validate.add_argument("--street", default="")
    p_validate.add_argument("--number", default="")
    p_validate.add_argument("--lang", default=DEFAULT_LANGUAGE)

    p_reverse = sub.add_parser("reverse", help="Indirizzo da coordinate")
    p_reverse.add_argument("latitude", type=float)
    p_reverse.add_argument("longitude", type=float)
    p_reverse.add_argument("--lang", default=DEFAULT_LANGUAGE)

    p_file = sub.add_parser("file", help="Valida un file Excel o una directory")
    p_file.add_argument("path", help="File .xlsx o directory")
    p_file.add_argument(
        "--output-dir", "-o",
        help="Directory per i file di output (default: stessa del file input)",
    )
    p_file.add_argument(
        "--dry-run",
        action="store_true",
        help="Simula elaborazione senza chiamare Google né scrivere file",
    )
    p_file.add_argument("--lang", default=DEFAULT_LANGUAGE)

    p_serve = sub.add_parser("serve", help="Avvia l'API HTTP")
    p_serve.add_argument("--host", default=API_HOST)
    p_serve.add_argument("--port", type=int, default=API_PORT)

    return parser


def main(argv=None):
    """Entry point principale."""
    args = build_parser().parse_args(argv)

    # Verifica API key
    api_key = args.api_key or API_KEY
    dry_run = getattr(args, "dry_run", False)
    if not api_key and not dry_run:
        print("ERRORE: API key Google Maps richiesta.")
        print("Imposta la variabile d'ambiente GOOGLE_MAPS_API_KEY oppure usa --api-key")
        sys.exit(1)

    if args.command == "validate":
        validator = AddressValidator(GeocodingService(api_key))
        address = AddressInput(
            country=args.country, city=args.city, street=args.street, number=args.number
        )
        verdict = validator.validate(address, args.lang)
        print(verdict)
        if args.verbose:
            print(verdict.to_dict())
        sys.exit(0 if verdict.valid else 2)

    elif args.command == "reverse":
        resolver = ReverseResolver(GeocodingService(api_key))
        lookup = resolver.reverse(args.latitude, args.longitude, args.lang)
        if not lookup.found:
            print(f"ERRORE: {lookup.message}")
            sys.exit(1)
        result = lookup.result
        print(f"Paese:  {result.country}")
        print(f"Città:  {result.city}")
        print(f"Via:    {result.street}")
        print(f"Civico: {result.number}")
        print(f"Indirizzo: {result.formatted_address}")
        if args.verbose and result.geometry_precision:
            print(f"Precisione: {result.geometry_precision.value}")

    elif args.command == "file":
        _run_file(args, api_key)

    elif args.command == "serve":
        import uvicorn

        from .api import create_app

        geocoder = GeocodingService(api_key)
        app = create_app(AddressValidator(geocoder), ReverseResolver(geocoder, cache=MemoryCache()))
        uvicorn.run(app, host=args.host, port=args.port)


def _run_file(args, api_key: str):
    """Elaborazione file singolo o directory."""
    path = Path(args.path)
    if not path.exists():
        print(f"ERRORE: File non trovato: {args.path}")
        sys.exit(1)

    try:
        if path.is_dir():
            all_stats = process_directory(
                str(path),
                output_dir=args.output_dir,
                api_key=api_key,
                language=args.lang,
                verbose=args.verbose,
                dry_run=args.dry_run,
            )

            print(f"\n{'='*60}")
            print("RIEPILOGO FINALE")
            print(f"{'='*60}")

            total_valid = 0
            total_invalid = 0
            for stats in all_stats:
                if "error" not in stats:
                    total_valid += stats.get("valid", 0)
                    total_invalid += stats.get("invalid", 0)
                    print(f"  {Path(stats['file']).name}: {stats.get('valid', 0)} OK, {stats.get('invalid', 0)} errori")
                else:
                    print(f"  {Path(stats['file']).name}: ERRORE - {stats['error']}")

            print(f"\nTotale: {total_valid} validati, {total_invalid} errori")
        else:
            processor = AddressProcessor(api_key=api_key, language=args.lang, verbose=args.verbose)
            stats = processor.process_file(str(path), output_dir=args.output_dir, dry_run=args.dry_run)

            if not args.dry_run:
                print("\nElaborazione completata!")
                if stats.get("output_validated"):
                    print(f"  Output: {Path(stats['output_validated']).name}")
                if stats.get("output_errors"):
                    print(f"  Errori: {Path(stats['output_errors']).name}")

    except (OSError, ValueError) as e:
        print(f"ERRORE: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
