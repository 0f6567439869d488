"""
One-hot encoding of freelancer skill sets.

Turns {"Ana": ["logo", "web design"], ...} into binary vectors over the
vocabulary of every skill seen, so skill lists can be clustered directly.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from .base_loader import FreelancerDataset, FreelancerRecord


class SkillEncoder:
    """
    Binary skill vectors built with scikit-learn's MultiLabelBinarizer.

    Skills are matched case-insensitively; the vocabulary is sorted.
    """

    def __init__(self, vocabulary: Optional[Sequence[str]] = None):
        """
        Args:
            vocabulary: Fixed skill vocabulary. If None, learned by `fit`.
        """
        try:
            from sklearn.preprocessing import MultiLabelBinarizer
        except ImportError:
            raise ImportError("scikit-learn required. Install with: pip install scikit-learn")

        classes = sorted({s.lower() for s in vocabulary}) if vocabulary else None
        self._binarizer = MultiLabelBinarizer(classes=classes)
        self._fitted = False

        if classes is not None:
            self._binarizer.fit([classes])
            self._fitted = True

    @property
    def vocabulary(self) -> List[str]:
        if not self._fitted:
            return []
        return [str(c) for c in self._binarizer.classes_]

    @staticmethod
    def _clean(skill_lists: Sequence[Sequence[str]]) -> List[List[str]]:
        return [[s.strip().lower() for s in skills if s.strip()] for skills in skill_lists]

    def fit(self, skill_lists: Sequence[Sequence[str]]) -> "SkillEncoder":
        self._binarizer.fit(self._clean(skill_lists))
        self._fitted = True
        return self

    def transform(self, skill_lists: Sequence[Sequence[str]]) -> np.ndarray:
        """
        Encode skill lists. Skills outside the vocabulary are ignored.

        Returns:
            Array of shape (n_freelancers, vocabulary_size)
        """
        if not self._fitted:
            raise ValueError("SkillEncoder is not fitted. Call fit() first.")

        vocabulary = set(self.vocabulary)
        known = [[s for s in skills if s in vocabulary] for skills in self._clean(skill_lists)]
        return self._binarizer.transform(known).astype(float)

    def fit_transform(self, skill_lists: Sequence[Sequence[str]]) -> np.ndarray:
        return self.fit(skill_lists).transform(skill_lists)

    def encode(self, skills_by_name: Dict[str, List[str]]) -> FreelancerDataset:
        """
        Encode a name -> skills mapping into a clusterable dataset.

        Freelancers with no skills are left out.
        """
        named = [(name, skills) for name, skills in skills_by_name.items() if skills]
        names = [name for name, _ in named]
        skill_lists = [skills for _, skills in named]

        if not self._fitted:
            self.fit(skill_lists)

        vectors = self.transform(skill_lists) if named else np.zeros((0, len(self.vocabulary)))

        return FreelancerDataset(
            ids=names,
            vectors=vectors,
            records=[
                FreelancerRecord(name=name, vector=list(vector), skills=list(skills), row=i)
                for i, (name, skills, vector) in enumerate(zip(names, skill_lists, vectors))
            ],
        )
