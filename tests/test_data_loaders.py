"""
Tests for freelancer loaders, cell parsing and skill encoding.
"""

import numpy as np
import pandas as pd
import pytest

from src.agnes import cluster
from src.data_loaders import (
    RecordsLoader,
    SkillEncoder,
    SpreadsheetLoader,
    SpreadsheetMapping,
    normalize_vector,
    parse_skills,
    parse_vector,
)


@pytest.fixture
def freelancer_frame():
    return pd.DataFrame({
        "name": ["Ana", "Ben", "Cal", "Dee", ""],
        "vector": ["1, 0, 0", "0,1,0", "1, 1", None, "0, 0, 1"],
        "skills": ["Logo, Web Design", "web design", "Writing", "Branding", "logo"],
    })


@pytest.fixture
def csv_path(tmp_path, freelancer_frame):
    path = tmp_path / "freelancers.csv"
    freelancer_frame.to_csv(path, index=False)
    return path


# ============================================================================
# Cell parsing
# ============================================================================


def test_parse_vector():
    assert parse_vector("1, 0.5,2") == [1.0, 0.5, 2.0]
    assert parse_vector([1, 2]) == [1.0, 2.0]
    assert parse_vector(3) == [3.0]
    assert parse_vector("1; 2", separator=";") == [1.0, 2.0]


@pytest.mark.parametrize("value", [None, "", "   ", float("nan"), "1, x, 3", "1, inf"])
def test_parse_vector_invalid(value):
    assert parse_vector(value) is None


def test_parse_skills():
    assert parse_skills("Web Design, logo, Logo") == ["web design", "logo"]
    assert parse_skills(["SEO", " seo "]) == ["seo"]
    assert parse_skills(None) == []
    assert parse_skills(float("nan")) == []
    assert parse_skills([{"name": "Logo"}, {"name": "logo "}, {"id": 3}]) == ["logo"]


def test_normalize_vector():
    assert normalize_vector([3, 4]) == [0.6, 0.8]
    assert normalize_vector([0, 0]) == [0, 0]


# ============================================================================
# Spreadsheet loader
# ============================================================================


def test_csv_load_vectors(csv_path):
    dataset = SpreadsheetLoader(csv_path).load_vectors()

    assert dataset.ids == ["Ana", "Ben"]
    assert dataset.vectors.tolist() == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
    assert dataset.stats.total_rows == 5
    assert dataset.stats.loaded == 2
    assert dataset.stats.dimension == 3
    assert dataset.stats.skipped_reasons == {
        "wrong_dimension": 1,
        "missing_or_invalid_vector": 1,
        "missing_name": 1,
    }
    assert "Rows loaded: 2" in dataset.stats.print_report()


def test_expected_dimension(csv_path):
    dataset = SpreadsheetLoader(csv_path, expected_dimension=2).load_vectors()
    assert dataset.ids == ["Cal"]


def test_normalize(tmp_path):
    path = tmp_path / "freelancers.csv"
    pd.DataFrame({"name": ["Ana"], "vector": ["3, 4"]}).to_csv(path, index=False)

    dataset = SpreadsheetLoader(path, normalize=True).load_vectors()
    assert dataset.vectors[0] == pytest.approx([0.6, 0.8])


def test_named_columns(tmp_path):
    path = tmp_path / "freelancers.csv"
    pd.DataFrame({
        "Skills": ["logo"],
        "PreferedName": ["Ana"],
        "Scores": ["1, 2"],
    }).to_csv(path, index=False)

    mapping = SpreadsheetMapping(name="PreferedName", vector="Scores", skills="Skills")
    records = SpreadsheetLoader(path, mapping=mapping).load()

    assert records[0].name == "Ana"
    assert records[0].vector == [1.0, 2.0]
    assert records[0].skills == ["logo"]


def test_excel(tmp_path, freelancer_frame):
    path = tmp_path / "Freelancers.xlsx"
    freelancer_frame.to_excel(path, index=False)

    dataset = SpreadsheetLoader(path).load_vectors()
    assert dataset.ids == ["Ana", "Ben"]


def test_load_skills(csv_path):
    skills = SpreadsheetLoader(csv_path).load_skills()
    assert skills["Ana"] == ["logo", "web design"]
    assert "" not in skills
    assert len(skills) == 4


def test_sample_and_count(csv_path):
    loader = SpreadsheetLoader(csv_path)
    assert loader.count_records() == 5
    assert [r.name for r in loader.sample(2)] == ["Ana", "Ben"]
    assert loader.get_file_stats()["n_rows"] == 5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SpreadsheetLoader(tmp_path / "missing.xlsx")


def test_unsupported_file(tmp_path):
    path = tmp_path / "freelancers.json"
    path.write_text("[]")
    with pytest.raises(ValueError, match="Unsupported file type"):
        SpreadsheetLoader(path)


# ============================================================================
# Records loader and skill encoder
# ============================================================================


def test_records_loader():
    loader = RecordsLoader(
        records=[
            {"preferredName": "Ana", "skillSets": ["Logo", "Web"]},
            {"preferredName": "Ben", "skillSets": None},
            {"preferredName": "Cal", "skillSets": ["web"]},
        ],
        mapping=SpreadsheetMapping(name="preferredName", vector=None, skills="skillSets"),
    )
    assert loader.load_skills() == {"Ana": ["logo", "web"], "Cal": ["web"]}


def test_records_loader_object_skills_and_row_filter():
    loader = RecordsLoader(
        records=[
            {"preferredName": "Ana", "skillSets": [{"name": "Logo"}, {"name": "web"}], "isFromClient": False},
            {"preferredName": "Zed", "skillSets": [{"name": "seo"}], "isFromClient": True},
            {"preferredName": "Cal", "skillSets": [{"name": "Web"}, {}], "isFromClient": False},
        ],
        mapping=SpreadsheetMapping(name="preferredName", vector=None, skills="skillSets"),
        row_filter=lambda record: not record.get("isFromClient"),
    )
    assert loader.load_skills() == {"Ana": ["logo", "web"], "Cal": ["web"]}
    assert loader.count_records() == 2


def test_skill_encoder():
    dataset = SkillEncoder().encode({
        "Ana": ["Logo", "Web"],
        "Ben": ["web"],
        "Cal": [],
    })

    assert dataset.ids == ["Ana", "Ben"]
    assert dataset.vectors.tolist() == [[1.0, 1.0], [0.0, 1.0]]


def test_skill_encoder_fixed_vocabulary():
    encoder = SkillEncoder(vocabulary=["Writing", "logo"])
    assert encoder.vocabulary == ["logo", "writing"]

    vectors = encoder.transform([["logo", "video"], ["WRITING"]])
    assert vectors.tolist() == [[1.0, 0.0], [0.0, 1.0]]


def test_skill_encoder_not_fitted():
    with pytest.raises(ValueError, match="not fitted"):
        SkillEncoder().transform([["logo"]])


def test_skill_vectors_cluster_by_overlap():
    dataset = SkillEncoder().encode({
        "Ana": ["logo", "branding"],
        "Ben": ["logo", "branding", "illustration"],
        "Cal": ["copywriting", "blog"],
        "Dee": ["copywriting", "blog", "seo"],
    })
    result = cluster(dataset.vectors, "cosine", "average", 2, ids=dataset.ids)

    groups = {frozenset(result.get_cluster_ids(label)) for label in range(result.n_clusters)}
    assert groups == {frozenset({"Ana", "Ben"}), frozenset({"Cal", "Dee"})}
