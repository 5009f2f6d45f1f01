from study_tracker.names import ALGEBRA, CALCULO, POO, canonicalize, subject_key


def test_canonical_names_unchanged():
    assert canonicalize("Álgebra") == ALGEBRA
    assert canonicalize("Cálculo") == CALCULO
    assert canonicalize("Poo") == POO


def test_unaccented_and_uppercase_variants():
    assert canonicalize("algebra") == ALGEBRA
    assert canonicalize("ÁLGEBRA LINEAL") == ALGEBRA
    assert canonicalize("calculo") == CALCULO
    assert canonicalize("POO II") == POO


def test_garbled_encodings():
    assert canonicalize("�?lgebra") == ALGEBRA
    assert canonicalize("Cǭlculo") == CALCULO


def test_unknown_names_pass_through():
    assert canonicalize("Historia") == "Historia"
    assert canonicalize("") == ""


def test_subject_key():
    assert subject_key("Cálculo") == "calculo"
    assert subject_key("�?lgebra") == "algebra"
