import pytest


def test_fmt_pct_and_bytes(m):
    assert m._fmt_pct(0, 0) == "0%"
    assert m._fmt_pct(50, 100).strip().endswith("%")
    assert m._fmt_pct(10, 10).strip().startswith("100")

    assert m._fmt_bytes(0) == "0.00 B"
    assert m._fmt_bytes(1024).endswith("KiB")


def test_progress_calls_bucketed(no_progress, m):
    p = m.Progress("Encoding", "x.txt")
    p(0, 100)
    p(0, 100)
    p(10, 100)
    p(10, 100)
    p(19, 100)
    p(19, 100)
    p(5, 0)
    assert len(no_progress) == 3
    assert all(line.startswith("Encoding x.txt") for line in no_progress)


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["encode", "file1", "-o", "out.huff"])
    assert ns.cmd in ("encode", "e")
    assert not ns.no_progress and not ns.verbose
    ns2 = parser.parse_args(["d"])
    assert ns2.cmd in ("decode", "d")
    assert ns2.input == m.DEFAULT_ENCODED_FILENAME
    assert ns2.output == m.DEFAULT_DECODED_FILENAME
    ns3 = parser.parse_args(["i", "in.huff"])
    assert ns3.cmd in ("inspect", "i")


def test_cli_encode_requires_output(m):
    parser = m.get_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["encode", "file1"])
