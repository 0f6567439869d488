"""
Tests for project configuration.
"""

from config import AGNES_SETTINGS, AgnesSettings, FREELANCER_MAPPING, get_output_path


def test_default_settings_valid():
    report = AGNES_SETTINGS.validate()
    assert report["errors"] == []


def test_invalid_settings():
    settings = AgnesSettings(linkage="ward", metric="manhattan", k=0, k_values=[0, 2])
    errors = settings.validate()["errors"]
    assert len(errors) == 4


def test_warnings():
    settings = AgnesSettings(metric="cosine", normalize=True)
    assert settings.validate()["warnings"]


def test_to_clustering_config():
    config = AgnesSettings(k=4).to_clustering_config(linkage="average")
    assert config.linkage == "average"
    assert config.n_clusters == 4
    assert config.stop_criterion().k == 4


def test_mapping_and_paths():
    assert FREELANCER_MAPPING.to_dict() == {"name": 0, "vector": 1, "skills": 2}
    assert get_output_path("agnes").parts[-1] == "agnes"
