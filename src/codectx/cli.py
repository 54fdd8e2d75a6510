# src/codectx/cli.py
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

# Module imports
from codectx.config import DEFAULT_INCLUDE_PATTERN
from codectx.core.context import build_context, large_files
from codectx.core.ignore import build_exclude_matcher, build_include_matcher
from codectx.core.scanner import gather_files
from codectx.core.tree import generate_file_tree
from codectx.errors import CodeCtxError
from codectx.models import File, FileGatherOptions
from codectx.utils.tokenizer import Tokenizer


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Gather files into a single, LLM-friendly context file, "
                    "selected by regex patterns, .gitignore and ignore files."
    )
    parser.add_argument(
        "-i", "--include",
        type=str,
        default=DEFAULT_INCLUDE_PATTERN,
        help="Regex for files to include, e.g. '\\.md$' for Markdown only",
    )
    parser.add_argument(
        "-x", "--exclude",
        type=str,
        default="",
        help="Regex for paths to exclude, e.g. '_test\\.go$'",
    )
    parser.add_argument(
        "-p", "--paths",
        type=str,
        default=".",
        help="Comma-separated paths to search, e.g. 'cmd,pkg'",
    )
    parser.add_argument("--no-gitignore", action="store_true", help="Do not exclude files listed in .gitignore")
    parser.add_argument("--no-git-dir", action="store_true", help="Do not exclude the .git directory")
    parser.add_argument("--ignore-file", type=str, default=None, help="Extra file of gitignore-style patterns to exclude")
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output filename (default: {folder_name}_context.txt)",
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pruned paths and other details")
    return parser


def get_default_output_name(root_dir: Path) -> str:
    """Generates a dynamic filename based on the directory name."""
    folder_name = root_dir.name

    # Filesystem root has no name
    if not folder_name:
        folder_name = "project"

    safe_name = folder_name.replace(" ", "_")

    return f"{safe_name}_context.txt"


def parse_paths(raw: str) -> List[str]:
    paths = [p.strip() for p in raw.split(",") if p.strip()]
    return paths or ["."]


def print_token_table(files: List[File]) -> None:
    counts = sorted(((Tokenizer.count(f.text), f.path) for f in files), reverse=True)
    total_tokens = sum(c for c, _ in counts)

    print("\n--- Top 10 Largest Files (Est. Tokens) ---")
    print(f"{'Rank':<5} | {'Tokens':<10} | {'File Path'}")
    print("-" * 60)
    for i, (count, path) in enumerate(counts[:10]):
        print(f"{i+1:<5} | {count:<10} | {path}")
    print("-" * 60)
    print(f"Total files: {len(files)}")
    print(f"Total tokens: {total_tokens}")
    print("-" * 60)


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="  > [%(levelname)s] %(message)s",
            stream=sys.stderr,
        )

        root_dir = Path(os.getcwd())
        output_file_name = args.output or get_default_output_name(root_dir)
        output_file = root_dir / output_file_name

        # 2. Matchers
        # The output file is excluded so a rerun never feeds on its own output
        try:
            include_matcher = build_include_matcher(args.include)
            exclude_matcher = build_exclude_matcher(
                exclude_pattern=args.exclude,
                exclude_from_gitignore=not args.no_gitignore,
                exclude_git_dir=not args.no_git_dir,
                ignore_file=args.ignore_file,
                extra_patterns=[output_file_name],
            )

            # 3. Gathering
            files, root_node = gather_files(FileGatherOptions(
                include_matcher=include_matcher,
                exclude_matcher=exclude_matcher,
                path_scopes=parse_paths(args.paths),
            ))
        except CodeCtxError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        if not files:
            print("No files found matching the given criteria.")
            return

        # 4. Review & Stats
        file_tree = generate_file_tree(root_node)
        print("The following files will be used as context:\n")
        print(file_tree)

        for f in large_files(files):
            print(
                f"Warning: {f.path} is very large ({len(f.data)} bytes) and will degrade performance.",
                file=sys.stderr,
            )

        print_token_table(files)

        if not args.yes:
            choice = input("> Do you wish to proceed? (Y/n): ").strip().lower()
            if choice == "n":
                print("See ya later!")
                return

        # 5. Output Generation
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(build_context(files, file_tree))
            print(f"\nSuccess! Context written to: {output_file.name}")

        except OSError as e:
            print(f"Error writing file: {e}", file=sys.stderr)
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)


if __name__ == "__main__":
    main()
