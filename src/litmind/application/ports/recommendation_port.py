"""RecommendationStorePort: persistence of per-user recommendation batches."""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from litmind.domain.recommendation import Recommendation


@runtime_checkable
class RecommendationStorePort(Protocol):
    def delete_all_for_user(self, user_id: int) -> int: ...

    def replace_for_user(
        self, user_id: int, recommendations: Sequence[Recommendation]
    ) -> List[Recommendation]:
        """Atomically swap the user's stored batch for ``recommendations``."""
        ...

    def list_for_user(self, user_id: int) -> List[Recommendation]:
        """Recommendations of one user, highest score first."""
        ...

    def get(self, recommendation_id: int) -> Optional[Recommendation]: ...

    def update_feedback(self, recommendation_id: int, feedback: str) -> Optional[Recommendation]: ...
