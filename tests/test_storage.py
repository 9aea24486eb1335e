import storage


def test_local_fallback_round_trip(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "S3_BUCKET", None)
    monkeypatch.setattr(storage, "RECEIPTS_DIR", str(tmp_path))

    assert storage.save_file("factura.pdf", b"%PDF-1.4")
    assert (tmp_path / "receipts" / "factura.pdf").read_bytes() == b"%PDF-1.4"
    assert storage.load_file("factura.pdf") == b"%PDF-1.4"
    assert storage.load_file("missing.pdf") is None


def test_local_fallback_strips_directories_from_names(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "S3_BUCKET", None)
    monkeypatch.setattr(storage, "RECEIPTS_DIR", str(tmp_path))

    assert storage.save_file("../../etc/recibo.png", b"img")
    assert (tmp_path / "receipts" / "recibo.png").exists()


def test_s3_upload_uses_bucket_and_folder(monkeypatch):
    uploaded = {}

    class _FakeS3:
        def put_object(self, **kwargs):
            uploaded.update(kwargs)

    monkeypatch.setattr(storage, "S3_BUCKET", "receipts-bucket")
    monkeypatch.setattr(storage, "get_s3_client", lambda: _FakeS3())

    assert storage.save_file("factura.pdf", b"data")
    assert uploaded == {"Bucket": "receipts-bucket", "Key": "receipts/factura.pdf", "Body": b"data"}


def test_same_upload_name_keeps_both_receipts(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "S3_BUCKET", None)
    monkeypatch.setattr(storage, "RECEIPTS_DIR", str(tmp_path))

    first = storage.unique_name("image.jpg")
    second = storage.unique_name("image.jpg")
    assert first != second
    assert storage.save_file(first, b"receipt-A")
    assert storage.save_file(second, b"receipt-B")

    assert storage.load_file(first) == b"receipt-A"
    assert storage.load_file(second) == b"receipt-B"
    assert storage.original_name(first) == "image.jpg"


def test_unique_name_drops_directories():
    name = storage.unique_name("../fotos/image.jpg")
    assert "/" not in name
    assert storage.original_name(name) == "image.jpg"


def test_local_write_failure_is_reported(tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    monkeypatch.setattr(storage, "S3_BUCKET", None)
    monkeypatch.setattr(storage, "RECEIPTS_DIR", str(blocker))

    assert storage.save_file("factura.pdf", b"%PDF-1.4") is False
