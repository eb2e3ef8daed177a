"""Main CLI entry point for Blocks2Rego"""

import sys
import argparse
import traceback
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from blocks2rego.core.block import load_workspace
from blocks2rego.core.errors import GenerationError
from blocks2rego.generators.code_generator import CodeGenerator


def generate_file(input_file: Path, zero_based: bool = False,
                  verbose: bool = False) -> str:
    """Generate Rego code for a JSON workspace file

    Args:
        input_file: Path to the workspace JSON
        zero_based: Force zero-based indexing regardless of workspace options
        verbose: Print the generation summary to stderr

    Returns:
        Generated Rego code

    Raises:
        FileNotFoundError: If the input file does not exist
        GenerationError: If the workspace cannot be translated
    """
    workspace = load_workspace(input_file)
    options = workspace.options
    if zero_based:
        options = replace(options, one_based_index=False)

    generator = CodeGenerator(options)
    code = generator.workspace_to_code(workspace)
    if verbose and generator.last_logger is not None:
        print(generator.last_logger.print_summary(), file=sys.stderr)
    return code


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(
        prog='blocks2rego',
        description='Generate Rego code from a block workspace (JSON)',
    )
    parser.add_argument('input', type=Path, help='Workspace JSON file')
    parser.add_argument('-o', '--output', type=Path, default=None,
                        help='Output file (default: stdout)')
    parser.add_argument('--zero-based', action='store_true',
                        help='Treat user-facing indices as zero-based')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print generation summary to stderr')
    args = parser.parse_args(argv)

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        code = generate_file(args.input, args.zero_based, args.verbose)
    except GenerationError as e:
        print(f"Error generating Rego from {args.input}: {e}", file=sys.stderr)
        return 1
    except Exception:
        print(f"Error generating Rego from {args.input}:", file=sys.stderr)
        traceback.print_exc()
        return 1

    if args.output is None:
        sys.stdout.write(code)
    else:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(code, encoding='utf-8')
        except OSError as e:
            print(f"Error: Cannot write output file {args.output}: {e}", file=sys.stderr)
            return 1
        if args.verbose:
            print(f"Generated: {args.output}", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
