def test_encode_and_decode_roundtrip(sample_file, tmp_path, no_progress, m, capsys):
    encoded = tmp_path / "out.huff"
    decoded = tmp_path / "out.txt"

    assert m.main([
        "encode", str(sample_file), "-o", str(encoded), "-P"
    ]) == 0
    assert encoded.exists() and encoded.stat().st_size > 0
    out = capsys.readouterr().out
    assert "Compression ratio:" in out
    assert f"File compressed and saved as {encoded}" in out

    assert m.main(["d", str(encoded), "-o", str(decoded)]) == 0
    assert decoded.read_bytes() == sample_file.read_bytes()
    assert no_progress and "Decoding" in no_progress[-1]


def test_decode_uses_default_filenames(sample_file, tmp_path, monkeypatch, m):
    monkeypatch.chdir(tmp_path)
    assert m.main([
        "encode", str(sample_file), "-o", m.DEFAULT_ENCODED_FILENAME, "-P"
    ]) == 0
    assert m.main(["decode", "-P"]) == 0
    decoded = tmp_path / m.DEFAULT_DECODED_FILENAME
    assert decoded.read_bytes() == sample_file.read_bytes()


def test_verbose_prints_tables_and_tree(tmp_path, m, capsys):
    src = tmp_path / "abb.txt"
    src.write_bytes(b"abb")
    assert m.main([
        "encode", str(src), "-o", str(tmp_path / "abb.huff"), "-P", "-v"
    ]) == 0
    out = capsys.readouterr().out
    assert "'a' : 1 : 0" in out
    assert "'b' : 2 : 1" in out
    assert "Node: 3" in out


def test_inspect_prints_header(tmp_path, m, capsys):
    src = tmp_path / "abb.txt"
    src.write_bytes(b"abb")
    encoded = tmp_path / "abb.huff"
    assert m.main(["encode", str(src), "-o", str(encoded), "-P"]) == 0
    capsys.readouterr()

    assert m.main(["inspect", str(encoded)]) == 0
    out = capsys.readouterr().out
    assert "Distinct symbols: 2" in out
    assert "Padding bits: 5" in out


def test_empty_input_fails_without_output(tmp_path, m, capsys):
    src = tmp_path / "empty.txt"
    src.write_bytes(b"")
    out_path = tmp_path / "out.huff"
    assert m.main(["encode", str(src), "-o", str(out_path), "-P"]) == 1
    assert not out_path.exists()
    assert "[!]" in capsys.readouterr().err


def test_missing_input_fails(tmp_path, m, capsys):
    assert m.main([
        "decode", str(tmp_path / "nope.huff"), "-o", str(tmp_path / "x")
    ]) == 1
    assert "not found" in capsys.readouterr().err


def test_truncated_file_fails(sample_file, tmp_path, m):
    encoded = tmp_path / "out.huff"
    assert m.main(["encode", str(sample_file), "-o", str(encoded), "-P"]) == 0
    encoded.write_bytes(encoded.read_bytes()[:-1])
    decoded = tmp_path / "out.txt"
    assert m.main(["decode", str(encoded), "-o", str(decoded), "-P"]) == 1
    assert not decoded.exists()
