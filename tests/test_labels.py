from app.labels import (
    DEFAULT_LABELS,
    UNKNOWN_CONDITION,
    UNKNOWN_PLANT,
    load_labels,
    split_label,
)


def test_default_labels_cover_plantvillage_classes():
    assert len(DEFAULT_LABELS) == 38
    assert DEFAULT_LABELS[0] == "Apple___Apple_scab"
    assert DEFAULT_LABELS[-1] == "Tomato___healthy"
    assert len(set(DEFAULT_LABELS)) == 38


def test_default_labels_stable_across_loads(tmp_path):
    missing = tmp_path / "nope.txt"
    first = load_labels(missing)
    second = load_labels(missing)
    assert first == second == DEFAULT_LABELS


def test_load_labels_skips_blank_lines(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("Apple___healthy\n\n  Fig___Leaf_curl_virus  \n\n\nTomato___healthy\n", encoding="utf-8")
    assert load_labels(path) == ("Apple___healthy", "Fig___Leaf_curl_virus", "Tomato___healthy")


def test_empty_label_file_falls_back(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("\n   \n", encoding="utf-8")
    assert load_labels(path) == DEFAULT_LABELS


def test_undecodable_label_file_falls_back(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_bytes(b"\xff\xfe\xfa\x00garbage")
    assert load_labels(path) == DEFAULT_LABELS


def test_directory_as_label_source_falls_back(tmp_path):
    assert load_labels(tmp_path) == DEFAULT_LABELS


def test_split_label():
    assert split_label("Corn_(maize)___Common_rust_") == ("Corn_(maize)", "Common_rust_")
    assert split_label("Tomato___healthy") == ("Tomato", "healthy")


def test_split_label_without_separator():
    assert split_label("mystery leaf") == (UNKNOWN_PLANT, UNKNOWN_CONDITION)
