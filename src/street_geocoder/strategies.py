from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

from .components import Candidate

if TYPE_CHECKING:
    from .retriever import CandidateRetriever


class RetrievalStage(ABC):
    """One layer of candidate retrieval; later stages are wider fallbacks."""

    name: str

    @abstractmethod
    def generate(
        self,
        retriever: CandidateRetriever,
        name_key: str,
        number: int,
        zips: Sequence[str],
    ) -> List[Candidate]:
        raise NotImplementedError


class ZipScopedStage(RetrievalStage):
    name = "zip_scoped"

    def generate(
        self,
        retriever: CandidateRetriever,
        name_key: str,
        number: int,
        zips: Sequence[str],
    ) -> List[Candidate]:
        if not zips:
            return []
        return retriever.candidates_by_name_zip_number(name_key, zips, number)


class NameOnlyStage(RetrievalStage):
    name = "name_only"

    def generate(
        self,
        retriever: CandidateRetriever,
        name_key: str,
        number: int,
        zips: Sequence[str],
    ) -> List[Candidate]:
        return retriever.candidates_by_name_number(name_key, number)


DEFAULT_STAGES = (ZipScopedStage(), NameOnlyStage())
