import argparse
import sys

from typing import List, Optional

import codec
from errors import HuffmanError
from frequency import FrequencyTable
from huffman import HuffmanTree, symbol_label

DEFAULT_ENCODED_FILENAME = "compressed_output.huff"  #: ``decode`` input default
DEFAULT_DECODED_FILENAME = "decompressed_output.txt"  #: ``decode`` output default


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman prefix-code compressor for single files"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    encode = subparsers.add_parser(
        "encode", aliases=["e"], help="Compress a file"
    )
    encode.add_argument("input", help="File to compress")
    encode.add_argument(
        "-o", "--output", required=True, help="Output compressed file"
    )

    decode = subparsers.add_parser(
        "decode", aliases=["d"], help="Decompress a file"
    )
    decode.add_argument(
        "input",
        nargs="?",
        default=DEFAULT_ENCODED_FILENAME,
        help=f"Compressed file (default: {DEFAULT_ENCODED_FILENAME})",
    )
    decode.add_argument(
        "-o",
        "--output",
        default=DEFAULT_DECODED_FILENAME,
        help=f"Decompressed file (default: {DEFAULT_DECODED_FILENAME})",
    )

    for sub in (encode, decode):
        sub.add_argument(
            "-P",
            "--no-progress",
            action="store_true",
            help="Hide the progress line",
        )
        sub.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Print the frequency table, code table and tree",
        )

    inspect = subparsers.add_parser(
        "inspect", aliases=["i"], help="Show the header of a compressed file"
    )
    inspect.add_argument("input", help="Compressed file")

    return parser


def _print_progress(line: str) -> None:
    """Render and flush a single progress line in-place (carriage return).

    :param line: The textual progress line to display.
    :type line: str
    :returns: None
    :rtype: None
    """
    sys.stdout.write("\r" + line)
    sys.stdout.flush()


def _fmt_pct(done: int, total: int) -> str:
    """Format a completion percentage string like ``12.34%``.

    :param done: Units completed.
    :type done: int
    :param total: Total units to complete.
    :type total: int
    :returns: Percentage.
    :rtype: str
    """
    if total <= 0:
        return "0%"
    pct = 100.0 * (done / float(total))
    return f"{pct:6.2f}%"


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


class Progress:
    """Callable progress reporter for one encode or decode run.

    Redraws the line only when the whole-percent value changes.

    :ivar label: Action label (e.g., "Encoding" or "Decoding").
    :type label: str
    :ivar path: File name displayed next to the label.
    :type path: str
    """

    def __init__(self, label: str, path: str) -> None:
        self.label = label
        self.path = path
        self._last_reported = -1

    def __call__(self, done: int, total: int) -> None:
        """Update the progress display.

        :param done: Units processed so far.
        :type done: int
        :param total: Total units for the run.
        :type total: int
        :returns: None
        :rtype: None
        """
        if total <= 0:
            return
        percent_bucket = int((done * 100) / total)
        if percent_bucket == self._last_reported:
            return
        self._last_reported = percent_bucket
        _print_progress(f"{self.label} {self.path}  {_fmt_pct(done, total)}")


def _print_tables(frequencies: FrequencyTable, codes) -> None:
    print("Symbol : Frequency : Code")
    for symbol, freq in frequencies.items():
        print(f"{symbol_label(symbol)} : {freq} : {codes[symbol]}")


def _print_tree(tree: HuffmanTree) -> None:
    print("Huffman tree:")
    for line in tree.format_tree():
        print(line)


def encode_command(
    input_path: str, output_path: str, hide_progress: bool, verbose: bool
) -> None:
    """Compress ``input_path`` and report the achieved ratio.

    :param input_path: File to compress.
    :type input_path: str
    :param output_path: Output compressed file.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :param verbose: Whether to print the tables and the tree.
    :type verbose: bool
    :returns: None
    :rtype: None
    :raises HuffmanError: On any validation or I/O failure.
    """
    on_prog = None if hide_progress else Progress("Encoding", input_path)
    result = codec.encode_file(input_path, output_path, on_progress=on_prog)
    if not hide_progress:
        sys.stdout.write("\n")
        sys.stdout.flush()
    if verbose:
        _print_tables(result.frequencies, result.tree.codes)
        _print_tree(result.tree)
    print("Size before compression: ", _fmt_bytes(result.input_size))
    print("Size after compression: ", _fmt_bytes(result.output_size))
    print(f"Compression ratio: {result.input_size / result.output_size:.2f}")
    print(f"File compressed and saved as {output_path}")


def decode_command(
    input_path: str, output_path: str, hide_progress: bool, verbose: bool
) -> None:
    """Decompress ``input_path`` into ``output_path``.

    :param input_path: Compressed file.
    :type input_path: str
    :param output_path: Destination for the decoded bytes.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :param verbose: Whether to print the tables and the tree.
    :type verbose: bool
    :returns: None
    :rtype: None
    :raises HuffmanError: On any validation or I/O failure.
    """
    on_prog = None if hide_progress else Progress("Decoding", input_path)
    result = codec.decode_file(input_path, output_path, on_progress=on_prog)
    if not hide_progress:
        sys.stdout.write("\n")
        sys.stdout.flush()
    if verbose:
        _print_tables(result.frequencies, result.tree.codes)
        _print_tree(result.tree)
    print(f"File decoded and saved as {output_path}")


def inspect_command(input_path: str) -> None:
    """Print the header contents of a compressed file.

    :param input_path: Compressed file.
    :type input_path: str
    :returns: None
    :rtype: None
    :raises HuffmanError: If the file is missing or its header is invalid.
    """
    info = codec.inspect(codec.read_input(input_path))
    print(f"Distinct symbols: {len(info.frequencies)}")
    print(f"Header size: {_fmt_bytes(info.header_size)}")
    print(f"Payload size: {_fmt_bytes(info.payload_size)}")
    print(f"Padding bits: {info.padding}")
    _print_tables(info.frequencies, info.codes)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit code, 0 on success and 1 on failure.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["encode", "e"]:
            encode_command(
                args.input, args.output, args.no_progress, args.verbose
            )
        elif args.cmd in ["decode", "d"]:
            decode_command(
                args.input, args.output, args.no_progress, args.verbose
            )
        elif args.cmd in ["inspect", "i"]:
            inspect_command(args.input)
    except HuffmanError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
