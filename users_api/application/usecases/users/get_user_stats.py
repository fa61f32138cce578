"""
CRC — application/usecases/users/get_user_stats.py

Name
- GetUserStatsUseCase (Stats Aggregator)

Responsibilities
- Return {total, active, inactive, averageAge} from a single aggregate read.
- Users without age are excluded from the mean; no ages at all => 0.

Collaborators
- UserRepository.aggregate_stats
"""

from __future__ import annotations

from ....domain.repositories import RepoStatus, UserRepository
from .user_results import UserStatsResult, internal_error


class GetUserStatsUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self) -> UserStatsResult:
        result = self._repository.aggregate_stats()
        if result.status is RepoStatus.OK:
            return UserStatsResult(stats=result.value)
        return UserStatsResult(error=internal_error(result.detail))
