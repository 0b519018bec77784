import json
import logging
import os
import sys

from core.comparison import compare_files
from core.utils import format_file_size

USAGE = "Usage: python main.py <file1> <file2> [--json]"

# Offsets listed in the plain-text summary
SHOWN_DIFFERENCES = 16


def print_summary(result) -> None:
    for label, name, size, ftype, digest in (
        ("File 1", result.file1_name, result.file1_size, result.file1_type, result.hash1),
        ("File 2", result.file2_name, result.file2_size, result.file2_type, result.hash2),
    ):
        print(f"{label}: {name} ({format_file_size(size)})")
        print(f"  Type: {ftype.description}")
        print(f"  Hash: {digest}")

    print(f"\nSize match: {'yes' if result.size_match else 'no'}")
    print(f"Similarity: {result.similarity:.2f}%")
    print(f"Differences: {result.difference_count}")

    for diff in result.byte_values[:SHOWN_DIFFERENCES]:
        b1 = f"0x{diff.byte1:02x}" if diff.byte1 is not None else "N/A"
        b2 = f"0x{diff.byte2:02x}" if diff.byte2 is not None else "N/A"
        print(f"  0x{diff.position:08x}: {b1} ({diff.char1 or 'N/A'}) | {b2} ({diff.char2 or 'N/A'})")
    if result.difference_count > SHOWN_DIFFERENCES:
        print(f"  ... {result.difference_count - SHOWN_DIFFERENCES} more")


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    as_json = "--json" in args
    paths = [a for a in args if a != "--json"]

    if len(paths) != 2:
        print(USAGE)
        sys.exit(1)

    # Debug flag: set DEBUG=1 to see classification and parser details
    debug = os.getenv("DEBUG", "0") == "1"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        result = compare_files(paths[0], paths[1])
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"--- Comparing {paths[0]} and {paths[1]} ---\n")
        print_summary(result)


if __name__ == "__main__":
    main()
